"""Workflow base class."""

from __future__ import annotations

import asyncio
import inspect
import logging
from abc import ABC, abstractmethod
from typing import Any, Callable

from ..context import ModelContext

logger = logging.getLogger(__name__)

StepCallback = Callable[[str, dict[str, Any]], None]
ResultCallback = Callable[[dict[str, Any]], None]


async def resolve(value: Any) -> Any:
    """Await *value* if it is awaitable."""
    if inspect.isawaitable(value):
        return await value
    return value


class Workflow(ABC):
    """Fixed-topology composition of model calls over a borrowed :class:`ModelContext`.

    Subclasses keep no per-run state on the instance, so one workflow can be
    run repeatedly (or concurrently) against the same configuration.
    """

    def __init__(self, context: ModelContext, max_steps: int = 10) -> None:
        self._context = context
        self._max_steps = max_steps
        self._step_callback: StepCallback | None = None

    @property
    def context(self) -> ModelContext:
        return self._context

    @property
    def max_steps(self) -> int:
        return self._max_steps

    def set_max_steps(self, max_steps: int) -> None:
        self._max_steps = max_steps

    def set_step_callback(self, callback: StepCallback | None) -> None:
        self._step_callback = callback

    def log_step(self, description: str, result: dict[str, Any] | None = None) -> None:
        logger.info("%s: %s", type(self).__name__, description)
        if self._step_callback is not None:
            self._step_callback(description, result or {})

    @abstractmethod
    async def run(self, input: str) -> dict[str, Any]: ...

    def spawn(self, input: str, callback: ResultCallback | None = None) -> asyncio.Task:
        """Run in the background; errors become ``{"error": msg}``."""

        async def runner() -> dict[str, Any]:
            try:
                result = await self.run(input)
            except Exception as e:
                logger.exception("%s failed", type(self).__name__)
                result = {"error": str(e)}
            if callback is not None:
                callback(result)
            return result

        return asyncio.create_task(runner())
