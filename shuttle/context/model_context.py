"""ModelContext: one provider, one tool registry, one memory and a system prompt."""

from __future__ import annotations

import inspect
import logging
from collections.abc import AsyncIterator, Mapping
from typing import Any

from ..errors import ConfigurationError, ProviderError, StreamInterruptedError, ToolNotFoundError
from ..memory import Memory
from ..tools import Tool, ToolRegistry
from ..types import (
    AssistantMessage,
    CallOptions,
    CompletionParams,
    Message,
    ModelProvider,
    ModelResponse,
    SystemMessage,
    ToolResult,
    UserMessage,
)

logger = logging.getLogger(__name__)


class ModelContext:
    """Session binder for model calls.

    The provider, registry, memory and system prompt are only mutated
    through this object's methods. ``chat``/``chat_with_tools``/``stream_chat``
    read and extend the conversation history; ``complete`` is a stateless
    one-shot call that leaves memory alone.
    """

    def __init__(
        self,
        provider: ModelProvider | None = None,
        tools: ToolRegistry | None = None,
        memory: Memory | None = None,
        system_prompt: str = "",
        options: CallOptions | None = None,
    ) -> None:
        self._provider = provider
        self._tools = tools if tools is not None else ToolRegistry()
        self._memory = memory if memory is not None else Memory()
        self._system_prompt = system_prompt
        self._options = options or CallOptions()

    # -- configuration --

    @property
    def provider(self) -> ModelProvider | None:
        return self._provider

    def set_provider(self, provider: ModelProvider) -> None:
        self._provider = provider

    @property
    def system_prompt(self) -> str:
        return self._system_prompt

    def set_system_prompt(self, prompt: str) -> None:
        self._system_prompt = prompt

    @property
    def options(self) -> CallOptions:
        return self._options

    def set_options(self, options: CallOptions) -> None:
        self._options = options

    @property
    def memory(self) -> Memory:
        return self._memory

    # -- tools --

    def register_tool(self, tool: Tool) -> None:
        self._tools.register(tool)

    def get_tool(self, name: str) -> Tool | None:
        return self._tools.get(name)

    @property
    def tools(self) -> list[Tool]:
        return self._tools.list()

    def tool_schemas(self) -> list[dict[str, Any]]:
        return self._tools.schemas()

    async def execute_tool(self, name: str, params: Mapping[str, Any] | None = None) -> ToolResult:
        tool = self._tools.get(name)
        if tool is None:
            raise ToolNotFoundError(name)
        result = tool.execute(params or {})
        if inspect.isawaitable(result):
            result = await result
        return result

    # -- history --

    def add_message(self, message: Message) -> None:
        self._memory.add_message(message)

    def messages(self) -> list[Message]:
        return self._memory.messages()

    def _build_messages(self, extra: list[Message] | None = None) -> list[Message]:
        msgs: list[Message] = []
        if self._system_prompt:
            msgs.append(SystemMessage(content=self._system_prompt))
        msgs.extend(self._memory.messages())
        msgs.extend(extra or [])
        return msgs

    def _require_provider(self) -> ModelProvider:
        if self._provider is None:
            raise ConfigurationError("No model provider bound to this context")
        return self._provider

    @property
    def provider_name(self) -> str:
        return getattr(self._provider, "name", type(self._provider).__name__)

    async def _invoke(self, params: CompletionParams) -> ModelResponse:
        provider = self._require_provider()
        try:
            return await provider.complete(params)
        except Exception as e:
            err = ProviderError.from_exception(self.provider_name, e)
            logger.warning("Model call failed: %s", err.message)
            return ModelResponse(content=f"Error: {err.message}", error=err.message)

    # -- calls --

    async def chat(self, text: str, options: CallOptions | None = None) -> ModelResponse:
        return await self._chat(text, options, with_tools=False)

    async def chat_with_tools(self, text: str, options: CallOptions | None = None) -> ModelResponse:
        return await self._chat(text, options, with_tools=True)

    async def _chat(self, text: str, options: CallOptions | None, with_tools: bool) -> ModelResponse:
        self._require_provider()
        self._memory.add_message(UserMessage(content=text))
        params = CompletionParams(
            messages=self._build_messages(),
            tools=self._tools.schemas() if with_tools else [],
            options=options or self._options,
        )
        response = await self._invoke(params)
        if not response.failed:
            self._memory.add_message(
                AssistantMessage(content=response.content, tool_calls=list(response.tool_calls))
            )
        return response

    async def complete(
        self,
        prompt: str,
        system_prompt: str | None = None,
        options: CallOptions | None = None,
    ) -> ModelResponse:
        system = self._system_prompt if system_prompt is None else system_prompt
        msgs: list[Message] = [SystemMessage(content=system)] if system else []
        msgs.append(UserMessage(content=prompt))
        return await self._invoke(CompletionParams(messages=msgs, options=options or self._options))

    async def stream_chat(
        self, text: str, options: CallOptions | None = None
    ) -> AsyncIterator[str]:
        provider = self._require_provider()
        user = UserMessage(content=text)
        params = CompletionParams(
            messages=self._build_messages([user]), options=options or self._options
        )
        parts: list[str] = []
        try:
            async for chunk in provider.stream(params):
                parts.append(chunk)
                yield chunk
        except Exception as e:
            logger.warning("Stream from %s interrupted: %s", self.provider_name, e)
            raise StreamInterruptedError(self.provider_name, "".join(parts), e) from e
        self._memory.add_message(user)
        self._memory.add_message(AssistantMessage(content="".join(parts)))

    def fork(self, system_prompt: str | None = None, share_tools: bool = True) -> ModelContext:
        """Independent context: same provider and options, fresh memory."""
        return ModelContext(
            provider=self._provider,
            tools=self._tools if share_tools else self._tools.copy(),
            memory=Memory(),
            system_prompt=self._system_prompt if system_prompt is None else system_prompt,
            options=self._options,
        )
