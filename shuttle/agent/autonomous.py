"""Autonomous agent: strategy dispatch, step execution and recovery."""

from __future__ import annotations

import asyncio
import logging
import re
from typing import Any, Callable

from ..context import ModelContext
from ..errors import ProviderError
from ..types import ToolMessage
from .base import Agent, AgentOptions, AgentState
from .step import Step
from .strategy import PlanningStrategy, dump_context, planner_for

logger = logging.getLogger(__name__)

_ANSWER = re.compile(r"final answer\s*:\s*(.*)", re.IGNORECASE | re.DOTALL)


StepCallback = Callable[[Step], None]


def extract_answer(text: str) -> str | None:
    """Text after a ``Final Answer:`` marker, if the model emitted one."""
    match = _ANSWER.search(text)
    return match.group(1).strip() if match else None


class AutonomousAgent(Agent):
    """Agent driving one of the :class:`PlanningStrategy` loops.

    Usage::

        agent = AutonomousAgent(ctx, PlanningStrategy.REACT, AgentOptions(max_iterations=5))
        agent.init()
        result = await agent.run("Summarise the latest release notes")
    """

    def __init__(
        self,
        context: ModelContext,
        strategy: PlanningStrategy | str = PlanningStrategy.REACT,
        options: AgentOptions | None = None,
        name: str = "autonomous",
    ) -> None:
        super().__init__(context, options, name)
        self._strategy = PlanningStrategy(strategy)
        self._steps: list[Step] = []
        self._step_callback: StepCallback | None = None

    def init(self) -> None:
        self._steps = []
        self._stop_requested = False
        self._set_state(AgentState.READY)
        logger.debug(
            "Agent %s ready (%s, %d tools)", self.name, self._strategy, len(self._context.tools)
        )

    @property
    def planning_strategy(self) -> PlanningStrategy:
        return self._strategy

    def set_planning_strategy(self, strategy: PlanningStrategy | str) -> None:
        self._strategy = PlanningStrategy(strategy)

    def set_step_callback(self, callback: StepCallback | None) -> None:
        self._step_callback = callback

    @property
    def steps(self) -> tuple[Step, ...]:
        return tuple(self._steps)

    @property
    def provider_name(self) -> str:
        return self._context.provider_name

    def record_step(self, step: Step) -> Step:
        self._steps.append(step)
        if self._step_callback is not None:
            self._step_callback(step)
        return step

    async def run(self, task: str) -> dict[str, Any]:
        self._steps = []
        self._stop_requested = False
        self._set_state(AgentState.RUNNING)
        planner = planner_for(self._strategy)
        self.log_status(f"Running task with {planner.name} planner")
        try:
            result = await planner.plan(self, task)
        except asyncio.CancelledError:
            self._set_state(AgentState.STOPPED)
            raise
        except Exception as e:
            logger.exception("Agent %s failed", self.name)
            self._set_state(AgentState.FAILED)
            self.log_status(f"Task failed: {e}")
            return {"error": str(e), "steps": [s.to_dict() for s in self._steps]}
        if self._stop_requested:
            self._set_state(AgentState.STOPPED)
            self.log_status("Task stopped")
        else:
            self._set_state(AgentState.COMPLETED)
            self.log_status("Task completed")
        return result

    async def execute_step(self, description: str, context: dict[str, Any]) -> Step:
        """Run one step: approval gate, model call, tool dispatch.

        Failures are captured in the returned step rather than raised.
        """
        self.log_status(f"Executing step: {description}")
        try:
            feedback = ""
            if self._options.human_feedback_enabled and self._options.human_in_the_loop:
                feedback = await self.wait_for_feedback(f"Step: {description}", context)

            prompt = f"Execute the following step: {description}\n\nContext: {dump_context(context)}"
            if feedback:
                prompt += f"\n\nHuman feedback: {feedback}"
            response = await self._context.chat_with_tools(prompt)
            if response.failed:
                raise ProviderError("PROVIDER_ERROR", self.provider_name, response.error or "")

            result: dict[str, Any] = {"output": response.content}
            answer = extract_answer(response.content)
            if answer is not None:
                result["answer"] = answer
            if feedback:
                result["feedback"] = feedback
            if response.tool_calls:
                tool_results = []
                for call in response.tool_calls:
                    outcome = await self._context.execute_tool(call.name, call.arguments)
                    self._context.add_message(
                        ToolMessage(content=outcome.content, tool_call_id=call.id, name=call.name)
                    )
                    tool_results.append({"id": call.id, "name": call.name, **outcome.to_dict()})
                result["tool_results"] = tool_results
            step = Step(description, "Completed", result, True)
        except Exception as e:
            logger.warning("Step failed: %s (%s)", description, e)
            step = Step(description, f"Failed: {e}", {"error": str(e)}, False)
        return self.record_step(step)
