"""Handler adapters.

Route and worker handlers share the tool capability shape: one
``execute(params)`` method. Params carry ``input`` (the text to act on) and
``info`` (routing or planning details).
"""

from __future__ import annotations

from typing import Any, Callable

from ..context import ModelContext
from ..types import CallOptions, Executable
from .base import Workflow, resolve


class FunctionHandler:
    """Wraps ``fn(input, info)``; sync or async."""

    def __init__(self, fn: Callable[[str, dict[str, Any]], Any]) -> None:
        self._fn = fn

    async def execute(self, params: dict[str, Any]) -> Any:
        return await resolve(self._fn(params.get("input", ""), params.get("info", {})))


class ChatHandler:
    """Answers with one chat call on a fork carrying its own system prompt."""

    def __init__(
        self, context: ModelContext, system_prompt: str, options: CallOptions | None = None
    ) -> None:
        self._context = context
        self.system_prompt = system_prompt
        self._options = options

    async def execute(self, params: dict[str, Any]) -> dict[str, Any]:
        session = self._context.fork(system_prompt=self.system_prompt)
        response = await session.chat(params.get("input", ""), self._options)
        result: dict[str, Any] = {"answer": response.content}
        if response.failed:
            result["error"] = response.error
        return result


class WorkflowHandler:
    """Delegates to a nested workflow."""

    def __init__(self, workflow: Workflow) -> None:
        self._workflow = workflow

    async def execute(self, params: dict[str, Any]) -> dict[str, Any]:
        return await self._workflow.run(params.get("input", ""))


def as_handler(obj: Any) -> Executable:
    if isinstance(obj, Workflow):
        return WorkflowHandler(obj)
    if isinstance(obj, Executable):
        return obj
    if callable(obj):
        return FunctionHandler(obj)
    raise TypeError(f"Cannot use {type(obj).__name__} as a handler")


async def invoke(handler: Executable, input: str, info: dict[str, Any]) -> Any:
    return await resolve(handler.execute({"input": input, "info": info}))
