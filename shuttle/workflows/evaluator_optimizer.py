"""Generate, critique, refine until good enough."""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Any, Callable

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from ..context import ModelContext
from ._parsing import extract_json
from .base import Workflow, resolve

logger = logging.getLogger(__name__)

Optimizer = Callable[[str, dict[str, Any] | None], Any]
Evaluator = Callable[[str, str], Any]

DEFAULT_OPTIMIZER_PROMPT = "You write high quality responses and improve them using reviewer feedback."
DEFAULT_EVALUATOR_PROMPT = "You are a strict reviewer. Score the response against the criteria."


@dataclass
class Evaluation:
    iteration: int
    score: float
    feedback: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


class Verdict(BaseModel):
    score: float
    feedback: str = ""


def _clamp(score: float) -> float:
    return min(max(float(score), 0.0), 1.0)


class EvaluatorOptimizerWorkflow(Workflow):
    """Iterates optimizer -> evaluator until the score reaches ``min_acceptable_score``.

    Custom ``optimizer(input, feedback)`` and ``evaluator(input, output)``
    callables (sync or async) replace the model calls. An evaluator may
    return an :class:`Evaluation`, a ``{"score", "feedback"}`` dict or a bare
    number.
    """

    def __init__(
        self,
        context: ModelContext,
        optimizer_prompt: str = DEFAULT_OPTIMIZER_PROMPT,
        evaluator_prompt: str = DEFAULT_EVALUATOR_PROMPT,
        criteria: list[str] | None = None,
        max_iterations: int = 5,
        min_acceptable_score: float = 0.8,
    ) -> None:
        super().__init__(context)
        self.optimizer_prompt = optimizer_prompt
        self.evaluator_prompt = evaluator_prompt
        self.criteria = list(criteria or [])
        self.max_iterations = max_iterations
        self.min_acceptable_score = min_acceptable_score
        self._optimizer: Optimizer | None = None
        self._evaluator: Evaluator | None = None

    def set_optimizer(self, optimizer: Optimizer | None) -> None:
        self._optimizer = optimizer

    def set_evaluator(self, evaluator: Evaluator | None) -> None:
        self._evaluator = evaluator

    async def _optimize(self, input: str, previous: str | None, feedback: dict[str, Any] | None) -> str:
        if self._optimizer is not None:
            return str(await resolve(self._optimizer(input, feedback)))
        prompt = input
        if previous is not None and feedback is not None:
            prompt = (
                f"Task: {input}\n\nPrevious response:\n{previous}\n\n"
                f"Reviewer feedback (score {feedback['score']:.2f}):\n{feedback['feedback']}\n\n"
                "Write an improved response that addresses the feedback."
            )
        response = await self._context.complete(prompt, system_prompt=self.optimizer_prompt)
        return response.content

    def _evaluator_system_prompt(self) -> str:
        lines = "\n".join(f"- {c}" for c in self.criteria) or "- Overall quality"
        return (
            f"{self.evaluator_prompt}\n\nCriteria:\n{lines}\n\n"
            'Reply with JSON: {"score": <0.0-1.0>, "feedback": "<what to improve>"}'
        )

    async def _evaluate(self, input: str, output: str, iteration: int) -> Evaluation:
        if self._evaluator is not None:
            raw = await resolve(self._evaluator(input, output))
        else:
            response = await self._context.complete(
                f"Task: {input}\n\nResponse to evaluate:\n{output}",
                system_prompt=self._evaluator_system_prompt(),
            )
            try:
                raw = Verdict.model_validate(extract_json(response.content)).model_dump()
            except (ValueError, PydanticValidationError) as e:
                logger.warning("Unparseable evaluation (%s), scoring 0", e)
                raw = {"score": 0.0, "feedback": response.content}

        if isinstance(raw, Evaluation):
            return Evaluation(iteration, _clamp(raw.score), raw.feedback)
        if isinstance(raw, dict):
            return Evaluation(iteration, _clamp(raw.get("score", 0.0)), str(raw.get("feedback", "")))
        return Evaluation(iteration, _clamp(raw), "")

    async def run(self, input: str) -> dict[str, Any]:
        evaluations: list[Evaluation] = []
        response: str | None = None
        feedback: dict[str, Any] | None = None

        for iteration in range(1, self.max_iterations + 1):
            response = await self._optimize(input, response, feedback)
            evaluation = await self._evaluate(input, response, iteration)
            evaluations.append(evaluation)
            feedback = {"score": evaluation.score, "feedback": evaluation.feedback}
            self.log_step(f"Iteration {iteration} scored {evaluation.score:.2f}", evaluation.to_dict())
            if evaluation.score >= self.min_acceptable_score:
                break

        final_score = evaluations[-1].score if evaluations else 0.0
        return {
            "final_response": response or "",
            "iterations": len(evaluations),
            "final_score": final_score,
            "accepted": final_score >= self.min_acceptable_score,
            "evaluations": [e.to_dict() for e in evaluations],
        }
