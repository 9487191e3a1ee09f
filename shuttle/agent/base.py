"""Agent base: state machine, options, stop flag and the human-feedback channel."""

from __future__ import annotations

import asyncio
import logging
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Callable

from ..context import ModelContext

logger = logging.getLogger(__name__)

ApprovalCallback = Callable[[str, dict[str, Any]], bool]
StatusCallback = Callable[[str], None]


class AgentState(StrEnum):
    READY = "ready"
    RUNNING = "running"
    WAITING = "waiting"
    COMPLETED = "completed"
    FAILED = "failed"
    STOPPED = "stopped"


@dataclass
class AgentOptions:
    max_iterations: int = 10
    max_consecutive_errors: int = 0  # 0 keeps running to max_iterations
    human_feedback_enabled: bool = True
    human_in_the_loop: ApprovalCallback | None = None


def _resolve(future: asyncio.Future[str], text: str) -> None:
    if not future.done():
        future.set_result(text)


class Agent(ABC):
    """Stateful driver over a borrowed :class:`ModelContext`.

    READY -> RUNNING -> (WAITING <-> RUNNING) -> COMPLETED | FAILED | STOPPED.
    A new ``run`` re-enters RUNNING from any terminal state.
    """

    def __init__(
        self,
        context: ModelContext,
        options: AgentOptions | None = None,
        name: str = "agent",
    ) -> None:
        self.id = uuid.uuid4().hex
        self.name = name
        self._context = context
        self._options = options or AgentOptions()
        self._state = AgentState.READY
        self._status_callback: StatusCallback | None = None
        self._stop_requested = False
        self._feedback: asyncio.Future[str] | None = None

    @property
    def context(self) -> ModelContext:
        return self._context

    @property
    def state(self) -> AgentState:
        return self._state

    @property
    def options(self) -> AgentOptions:
        return self._options

    def set_options(self, options: AgentOptions) -> None:
        self._options = options

    def set_status_callback(self, callback: StatusCallback | None) -> None:
        self._status_callback = callback

    @abstractmethod
    def init(self) -> None: ...

    @abstractmethod
    async def run(self, task: str) -> dict[str, Any]: ...

    def stop(self) -> None:
        """Request a cooperative stop, honoured at the next loop check."""
        self._stop_requested = True
        if self._state in (AgentState.RUNNING, AgentState.WAITING):
            self.log_status("Stop requested")

    @property
    def stop_requested(self) -> bool:
        return self._stop_requested

    # -- human in the loop --

    @property
    def waiting_for_feedback(self) -> bool:
        return self._feedback is not None and not self._feedback.done()

    def provide_feedback(self, text: str) -> bool:
        """Resolve a pending feedback wait. Safe to call from another thread."""
        future = self._feedback
        if future is None or future.done():
            logger.warning("Agent %s: feedback provided but nothing is waiting", self.name)
            return False
        loop = future.get_loop()
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None
        if running is loop:
            _resolve(future, text)
        else:
            loop.call_soon_threadsafe(_resolve, future, text)
        return True

    async def wait_for_feedback(self, message: str, context: dict[str, Any]) -> str:
        """Gate on the approval callback; park until feedback arrives if it rejects.

        Returns the feedback text, or ``""`` when approved. There is no
        timeout; cancel the running task to abandon the wait.
        """
        approve = self._options.human_in_the_loop
        if approve is None:
            return ""
        self._set_state(AgentState.WAITING)
        self._feedback = asyncio.get_running_loop().create_future()
        try:
            if approve(message, context):
                return ""
            self.log_status(f"Waiting for human feedback on: {message}")
            return await self._feedback
        finally:
            self._feedback = None
            if self._state is AgentState.WAITING:
                self._set_state(AgentState.RUNNING)

    # -- internals --

    def _set_state(self, state: AgentState) -> None:
        if state is not self._state:
            logger.debug("Agent %s: %s -> %s", self.name, self._state, state)
        self._state = state

    def log_status(self, status: str) -> None:
        if self._status_callback is not None:
            self._status_callback(status)
        else:
            logger.info("[%s] %s", self.name, status)
