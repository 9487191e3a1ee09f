"""Planning strategies for AutonomousAgent."""

from __future__ import annotations

import json
import logging
from enum import StrEnum
from typing import TYPE_CHECKING, Any, Protocol

from ..errors import ProviderError
from ..types import ModelResponse
from .step import Step

if TYPE_CHECKING:
    from .autonomous import AutonomousAgent

logger = logging.getLogger(__name__)

THINK_PROMPT = "Task: {task}\n\nThink about what to do next. Current status:\n{status}"
RECOVERY_PROMPT = (
    "The previous step failed. Let's try to recover.\n\n"
    "Task: {task}\n\n"
    "Failed step: {step}\n\n"
    "Error: {error}\n\n"
    "What should we do next to recover and continue the task?"
)
FINAL_PROMPT = (
    "Task: {task}\n\n"
    "Based on all the steps taken so far, provide a final answer or solution to the task."
)


class PlanningStrategy(StrEnum):
    ZERO_SHOT = "zero_shot"
    REACT = "react"
    TREE_OF_THOUGHT = "tree_of_thought"
    PLAN_AND_EXECUTE = "plan_and_execute"
    REFLEXION = "reflexion"


def dump_context(context: dict[str, Any]) -> str:
    return json.dumps(context, indent=2, default=str)


class Planner(Protocol):
    name: str

    async def plan(self, agent: AutonomousAgent, task: str) -> dict[str, Any]: ...


class ZeroShotPlanner:
    """Single model call on the raw task."""

    name = "zero_shot"

    async def plan(self, agent: AutonomousAgent, task: str) -> dict[str, Any]:
        response = await agent.context.chat(task)
        if response.failed:
            raise ProviderError("PROVIDER_ERROR", agent.provider_name, response.error or "")
        return {"answer": response.content, "steps": []}


class ReactPlanner:
    """Think / act loop with one recovery step per failure and a closing synthesis.

    The loop is bounded by ``max_iterations``; a failed recovery is recorded
    like any other step. ``max_consecutive_errors`` (off by default) can opt
    into an earlier exit.
    """

    name = "react"

    async def _act(
        self, agent: AutonomousAgent, plan: ModelResponse, what: str, context: dict[str, Any]
    ) -> Step:
        # A failed planning call leaves only error text; there is nothing to execute.
        if plan.failed:
            return agent.record_step(Step(what, f"Failed: {plan.error}", {"error": plan.error}, False))
        return await agent.execute_step(plan.content, context)

    async def plan(self, agent: AutonomousAgent, task: str) -> dict[str, Any]:
        opts = agent.options
        context: dict[str, Any] = {"task": task}
        answer: str | None = None
        errors = 0

        for iteration in range(opts.max_iterations):
            if agent.stop_requested:
                agent.log_status(f"Stopping before iteration {iteration + 1}")
                break

            thinking = await agent.context.chat(
                THINK_PROMPT.format(task=task, status=dump_context({"context": context}))
            )
            step = await self._act(agent, thinking, "Decide the next step", context)
            context["last_step"] = step.to_dict()
            if "answer" in step.result:
                answer = step.result["answer"]
                break
            if step.success:
                errors = 0
                continue

            errors += 1
            recovery = await agent.context.chat(
                RECOVERY_PROMPT.format(
                    task=task, step=step.description, error=step.result.get("error", "")
                )
            )
            recovered = await self._act(agent, recovery, "Recover from the failed step", context)
            context["last_step"] = recovered.to_dict()
            if "answer" in recovered.result:
                answer = recovered.result["answer"]
                break
            errors = 0 if recovered.success else errors + 1
            if opts.max_consecutive_errors and errors >= opts.max_consecutive_errors:
                agent.log_status(f"Giving up after {errors} consecutive failed steps")
                break

        if answer is None:
            final = await agent.context.chat(FINAL_PROMPT.format(task=task))
            answer = final.content
        return {"answer": answer, "steps": [s.to_dict() for s in agent.steps]}


_PLANNERS: dict[PlanningStrategy, Planner] = {
    PlanningStrategy.ZERO_SHOT: ZeroShotPlanner(),
    PlanningStrategy.REACT: ReactPlanner(),
}

# No distinct algorithm for these yet; they run the ReAct loop.
_ALIASES = {
    PlanningStrategy.TREE_OF_THOUGHT: PlanningStrategy.REACT,
    PlanningStrategy.PLAN_AND_EXECUTE: PlanningStrategy.REACT,
    PlanningStrategy.REFLEXION: PlanningStrategy.REACT,
}


def planner_for(strategy: PlanningStrategy | str) -> Planner:
    strategy = PlanningStrategy(strategy)
    if strategy in _ALIASES:
        logger.debug("%s has no dedicated planner, using %s", strategy, _ALIASES[strategy])
        strategy = _ALIASES[strategy]
    return _PLANNERS[strategy]
