"""Scripted provider replaying canned replies, for tests and offline demos."""

from __future__ import annotations

import asyncio
import inspect
import re
from collections.abc import AsyncIterator
from dataclasses import replace
from typing import Any

from ..types import CompletionParams, ModelResponse
from .base import BaseModelProvider, CircuitBreakerConfig, RetryConfig

_CHUNK = re.compile(r"\S+\s*")


class ScriptedProvider(BaseModelProvider):
    """Replays *responses* in order.

    An entry may be a string, a :class:`ModelResponse`, an exception instance
    (raised) or a callable ``(params) -> str | ModelResponse`` which may be
    async. Once the script is exhausted ``default`` is returned, or the last
    entry repeats.

    Usage::

        provider = ScriptedProvider(["first reply", "second reply"])
        ctx = ModelContext(provider)
    """

    name = "scripted"

    def __init__(
        self,
        responses: list[Any] | None = None,
        default: Any = None,
        delay: float = 0.0,
        retry: RetryConfig | None = None,
        circuit_breaker: CircuitBreakerConfig | None = None,
    ) -> None:
        super().__init__(retry or RetryConfig(max_retries=0), circuit_breaker)
        self._responses = list(responses or [])
        self._default = default
        self._index = 0
        self.delay = delay
        self.calls: list[CompletionParams] = []

    @property
    def call_count(self) -> int:
        return len(self.calls)

    def prompts(self) -> list[str]:
        """Content of the last message of every recorded call."""
        return [p.messages[-1].content if p.messages else "" for p in self.calls]

    async def _next(self, params: CompletionParams) -> ModelResponse:
        self.calls.append(params)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self._index < len(self._responses):
            entry = self._responses[self._index]
            self._index += 1
        elif self._default is not None:
            entry = self._default
        elif self._responses:
            entry = self._responses[-1]
        else:
            entry = ""
        if isinstance(entry, BaseException):
            raise entry
        if callable(entry):
            entry = entry(params)
            if inspect.isawaitable(entry):
                entry = await entry
        if isinstance(entry, ModelResponse):
            return replace(entry, tool_calls=list(entry.tool_calls), usage=dict(entry.usage))
        content = str(entry)
        prompt_words = sum(len(str(m.content).split()) for m in params.messages)
        return ModelResponse(
            content=content,
            usage={
                "prompt_tokens": float(prompt_words),
                "completion_tokens": float(len(content.split())),
            },
        )

    async def _do_complete(self, params: CompletionParams) -> ModelResponse:
        return await self._next(params)

    async def _do_stream(self, params: CompletionParams) -> AsyncIterator[str]:
        response = await self._next(params)
        for chunk in _CHUNK.findall(response.content):
            yield chunk
