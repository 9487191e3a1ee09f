"""Model-call contract."""

from __future__ import annotations

from collections.abc import AsyncIterator
from dataclasses import dataclass, field, replace
from typing import Any, Protocol, runtime_checkable

from .messages import Message, ToolCall


@dataclass
class CallOptions:
    temperature: float = 0.7
    max_tokens: int = 1024
    top_p: float = 1.0
    presence_penalty: float = 0.0
    frequency_penalty: float = 0.0
    timeout: float | None = 30.0  # seconds
    stop: list[str] = field(default_factory=list)

    def merged(self, **overrides: Any) -> CallOptions:
        return replace(self, **overrides)


@dataclass
class CompletionParams:
    messages: list[Message]
    tools: list[dict[str, Any]] = field(default_factory=list)
    options: CallOptions = field(default_factory=CallOptions)


@dataclass
class ModelResponse:
    content: str = ""
    tool_calls: list[ToolCall] = field(default_factory=list)
    usage: dict[str, float] = field(default_factory=dict)
    error: str | None = None

    @property
    def failed(self) -> bool:
        return self.error is not None


@runtime_checkable
class ModelProvider(Protocol):
    async def complete(self, params: CompletionParams) -> ModelResponse: ...
    def stream(self, params: CompletionParams) -> AsyncIterator[str]: ...
