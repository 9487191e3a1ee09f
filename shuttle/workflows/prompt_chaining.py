"""Sequential prompt chain with per-step gates."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable

from ..context import ModelContext
from ..errors import StepValidationError
from .base import Workflow

logger = logging.getLogger(__name__)

Validator = Callable[[dict[str, Any]], bool]
Transformer = Callable[[dict[str, Any]], dict[str, Any]]


class _Placeholders(dict):
    def __missing__(self, key: str) -> str:
        return "{" + key + "}"


def render(template: str, values: dict[str, Any]) -> str:
    """``str.format_map`` that leaves unknown placeholders in place."""
    return template.format_map(_Placeholders(values))


@dataclass
class ChainStep:
    name: str
    prompt_template: str
    validator: Validator | None = None
    transformer: Transformer | None = None
    system_prompt: str | None = None
    use_tools: bool = False


class PromptChainingWorkflow(Workflow):
    """Runs steps in order; each step's output (optionally transformed) feeds the next.

    Templates see ``{input}`` (the chain input) plus every key of the current
    context. Without a transformer the context for the next step is the raw
    step result: ``name``, ``prompt`` and ``response``.

    A validator returning False ends the chain: later steps are never called
    and the result carries ``error`` and ``failed_step``.
    """

    def __init__(self, context: ModelContext, max_steps: int = 10) -> None:
        super().__init__(context, max_steps)
        self._steps: list[ChainStep] = []

    def add_step(
        self,
        name: str,
        prompt_template: str,
        validator: Validator | None = None,
        transformer: Transformer | None = None,
        system_prompt: str | None = None,
        use_tools: bool = False,
    ) -> ChainStep:
        step = ChainStep(name, prompt_template, validator, transformer, system_prompt, use_tools)
        self._steps.append(step)
        return step

    @property
    def steps(self) -> list[ChainStep]:
        return list(self._steps)

    async def run(self, input: str) -> dict[str, Any]:
        if len(self._steps) > self.max_steps:
            return {
                "error": f"Chain has {len(self._steps)} steps, more than max_steps={self.max_steps}",
                "steps": [],
            }

        session = self._context.fork()
        current: dict[str, Any] = {"input": input}
        records: list[dict[str, Any]] = []

        for step in self._steps:
            prompt = render(step.prompt_template, {"input": input, **current})
            session.set_system_prompt(
                self._context.system_prompt if step.system_prompt is None else step.system_prompt
            )
            if step.use_tools:
                response = await session.chat_with_tools(prompt)
            else:
                response = await session.chat(prompt)

            result: dict[str, Any] = {"name": step.name, "prompt": prompt, "response": response.content}
            if response.tool_calls:
                result["tool_calls"] = [tc.to_dict() for tc in response.tool_calls]
            if response.failed:
                result["error"] = response.error
            records.append(result)
            self.log_step(f"Step '{step.name}' completed", result)

            if step.validator is not None and not step.validator(result):
                err = StepValidationError(step.name)
                logger.warning(err.message)
                return {"error": err.message, "failed_step": step.name, "steps": records}

            current = step.transformer(result) if step.transformer else result

        return {
            "output": current,
            "final_output": records[-1]["response"] if records else input,
            "steps": records,
        }
