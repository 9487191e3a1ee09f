"""Orchestrator plans, workers execute, synthesizer combines."""

from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass
from typing import Any, Callable

from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from ..context import ModelContext
from ..errors import ProviderError
from ..types import Executable
from ._parsing import extract_json
from .base import Workflow, resolve
from .handlers import as_handler, invoke

logger = logging.getLogger(__name__)

Synthesizer = Callable[[str, list[dict[str, Any]]], Any]

DEFAULT_ORCHESTRATOR_PROMPT = (
    "You coordinate a team of specialist workers. Break the request into "
    "subtasks and assign each to the most suitable worker."
)


class Assignment(BaseModel):
    worker: str
    task: str


class OrchestratorPlan(BaseModel):
    plan: str = ""
    assignments: list[Assignment] = Field(default_factory=list)


@dataclass
class Worker:
    name: str
    description: str
    system_prompt: str | None = None
    handler: Executable | None = None


def default_synthesizer(input: str, results: list[dict[str, Any]]) -> dict[str, Any]:
    """Concatenate worker outputs under one header per worker."""
    parts = ["# Results"]
    for record in results:
        body = record.get("output") if "error" not in record else f"Error: {record['error']}"
        parts.append(f"## {record['worker']}\n\n{body}")
    return {"answer": "\n\n".join(parts)}


class OrchestratorWorkersWorkflow(Workflow):
    def __init__(
        self,
        context: ModelContext,
        orchestrator_prompt: str = DEFAULT_ORCHESTRATOR_PROMPT,
        max_concurrency: int | None = None,
    ) -> None:
        super().__init__(context)
        self.orchestrator_prompt = orchestrator_prompt
        self.max_concurrency = max_concurrency
        self._workers: dict[str, Worker] = {}
        self._synthesizer: Synthesizer | None = None

    def add_worker(
        self,
        name: str,
        description: str,
        system_prompt: str | None = None,
        handler: Any = None,
    ) -> Worker:
        worker = Worker(
            name, description, system_prompt, as_handler(handler) if handler is not None else None
        )
        self._workers[name] = worker
        return worker

    @property
    def workers(self) -> list[Worker]:
        return list(self._workers.values())

    def set_synthesizer(self, synthesizer: Synthesizer | None) -> None:
        self._synthesizer = synthesizer

    def workers_schema(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "plan": {"type": "string"},
                "assignments": {
                    "type": "array",
                    "items": {
                        "type": "object",
                        "properties": {
                            "worker": {"type": "string", "enum": list(self._workers)},
                            "task": {"type": "string"},
                        },
                        "required": ["worker", "task"],
                    },
                },
            },
            "required": ["assignments"],
        }

    def _orchestrator_system_prompt(self) -> str:
        roster = "\n".join(f"- {w.name}: {w.description}" for w in self._workers.values())
        return (
            f"{self.orchestrator_prompt}\n\nAvailable workers:\n{roster}\n\n"
            "Reply with JSON matching this schema:\n"
            f"{json.dumps(self.workers_schema(), indent=2)}"
        )

    def _parse_plan(self, input: str, reply: str) -> OrchestratorPlan:
        try:
            plan = OrchestratorPlan.model_validate(extract_json(reply))
        except (ValueError, PydanticValidationError) as e:
            logger.warning("Unparseable orchestrator plan (%s); assigning input to every worker", e)
            return OrchestratorPlan(
                plan=reply,
                assignments=[Assignment(worker=name, task=input) for name in self._workers],
            )
        kept = []
        for a in plan.assignments:
            if a.worker in self._workers:
                kept.append(a)
            else:
                logger.warning("Orchestrator assigned unknown worker %r, skipping", a.worker)
        plan.assignments = kept
        return plan

    async def _run_worker(
        self, assignment: Assignment, plan: str, limiter: asyncio.Semaphore | None
    ) -> dict[str, Any]:
        worker = self._workers[assignment.worker]
        record: dict[str, Any] = {"worker": worker.name, "task": assignment.task}
        try:
            if limiter is not None:
                async with limiter:
                    output = await self._execute(worker, assignment.task, plan)
            else:
                output = await self._execute(worker, assignment.task, plan)
        except Exception as e:
            logger.warning("Worker %s failed: %s", worker.name, e)
            record["error"] = str(e)
            if isinstance(e, ProviderError):
                record["provider"] = e.provider
            return record
        record["output"] = output
        return record

    async def _execute(self, worker: Worker, task: str, plan: str) -> Any:
        if worker.handler is not None:
            output = await invoke(worker.handler, task, {"worker": worker.name, "plan": plan})
            if isinstance(output, dict) and "answer" in output:
                return output["answer"]
            return output
        response = await self._context.complete(task, system_prompt=worker.system_prompt)
        if response.failed:
            raise ProviderError(
                "PROVIDER_ERROR", self._context.provider_name, response.error or ""
            )
        return response.content

    async def run(self, input: str) -> dict[str, Any]:
        if not self._workers:
            return {"error": "No workers registered"}
        response = await self._context.complete(
            input, system_prompt=self._orchestrator_system_prompt()
        )
        plan = self._parse_plan(input, response.content)
        self.log_step(
            f"Planned {len(plan.assignments)} assignments",
            {"plan": plan.plan, "assignments": [a.model_dump() for a in plan.assignments]},
        )

        limiter = asyncio.Semaphore(self.max_concurrency) if self.max_concurrency else None
        results = list(
            await asyncio.gather(
                *(self._run_worker(a, plan.plan, limiter) for a in plan.assignments)
            )
        )
        for record in results:
            self.log_step(f"Worker '{record['worker']}' finished", record)

        synthesize = self._synthesizer or default_synthesizer
        synthesized = await resolve(synthesize(input, results))
        output = dict(synthesized) if isinstance(synthesized, dict) else {"answer": synthesized}
        output.setdefault("plan", plan.plan)
        output.setdefault("workers", results)
        return output
