"""Fan-out/fan-in: sectioning and voting."""

from __future__ import annotations

import asyncio
import logging
from collections import Counter
from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Callable

from ..context import ModelContext
from ..types import CallOptions
from .base import Workflow, resolve

logger = logging.getLogger(__name__)

Aggregator = Callable[[list[dict[str, Any]]], Any]


class ParallelizationMode(StrEnum):
    SECTIONING = "sectioning"
    VOTING = "voting"


@dataclass
class ParallelTask:
    name: str
    system_prompt: str = ""
    prompt_fn: Callable[[str], str] | None = None
    parser: Callable[[str], Any] | None = None
    options: CallOptions | None = None


def default_section_aggregator(results: list[dict[str, Any]]) -> dict[str, Any]:
    """Labelled sections in registration order; failed branches listed separately."""
    sections: dict[str, str] = {}
    errors: dict[str, str] = {}
    for record in results:
        if "error" in record:
            errors[record["name"]] = record["error"]
        else:
            sections[record["name"]] = record["output"]
    answer = "\n\n".join(f"## {name}\n\n{text}" for name, text in sections.items())
    return {"answer": answer, "sections": sections, "errors": errors}


def _vote_value(record: dict[str, Any]) -> Any:
    parsed = record.get("parsed")
    if isinstance(parsed, dict):
        for key in ("vote", "answer", "response"):
            if key in parsed:
                return parsed[key]
    if parsed is not None:
        return parsed
    return record["output"].strip()


def default_voting_aggregator(
    results: list[dict[str, Any]], threshold: float = 0.5
) -> dict[str, Any]:
    """Majority value over the branches that completed. Ties go to the first seen."""
    votes = [_vote_value(r) for r in results if "error" not in r]
    if not votes:
        return {"answer": None, "votes": {}, "agreement": 0.0, "consensus": False}
    counts = Counter(str(v) for v in votes)
    winner, top = counts.most_common(1)[0]
    agreement = top / len(votes)
    return {
        "answer": next(v for v in votes if str(v) == winner),
        "votes": dict(counts),
        "agreement": agreement,
        "consensus": agreement > threshold,
    }


class ParallelizationWorkflow(Workflow):
    """Runs independent model calls concurrently and aggregates the results.

    Every branch is a stateless ``complete`` call, so branches share only the
    read-only input. A branch that raises or exceeds ``branch_timeout`` shows
    up as ``{"name": ..., "error": ...}`` in the aggregator input; the join
    always completes.
    """

    def __init__(
        self,
        context: ModelContext,
        mode: ParallelizationMode | str = ParallelizationMode.SECTIONING,
        voting_threshold: float = 0.5,
        max_concurrency: int | None = None,
        branch_timeout: float | None = None,
    ) -> None:
        super().__init__(context)
        self.mode = ParallelizationMode(mode)
        self.voting_threshold = voting_threshold
        self.max_concurrency = max_concurrency
        self.branch_timeout = branch_timeout
        self._tasks: list[ParallelTask] = []
        self._aggregator: Aggregator | None = None

    def add_task(
        self,
        name: str,
        system_prompt: str = "",
        prompt_fn: Callable[[str], str] | None = None,
        parser: Callable[[str], Any] | None = None,
        options: CallOptions | None = None,
    ) -> ParallelTask:
        task = ParallelTask(name, system_prompt, prompt_fn, parser, options)
        self._tasks.append(task)
        return task

    def add_voting_replicas(
        self,
        name: str,
        system_prompt: str,
        n: int,
        prompt_fn: Callable[[str], str] | None = None,
        parser: Callable[[str], Any] | None = None,
        temperature_spread: float = 0.2,
    ) -> list[ParallelTask]:
        """Replicate one task *n* times with temperatures spread around the context default."""
        base = self._context.options
        added = []
        for i in range(n):
            offset = temperature_spread * (i - (n - 1) / 2) / max(n - 1, 1) * 2
            temperature = min(max(base.temperature + offset, 0.0), 2.0)
            added.append(
                self.add_task(
                    f"{name}_{i + 1}",
                    system_prompt,
                    prompt_fn,
                    parser,
                    base.merged(temperature=round(temperature, 3)),
                )
            )
        return added

    @property
    def tasks(self) -> list[ParallelTask]:
        return list(self._tasks)

    def set_aggregator(self, aggregator: Aggregator | None) -> None:
        self._aggregator = aggregator

    async def _run_task(
        self, task: ParallelTask, input: str, limiter: asyncio.Semaphore | None
    ) -> dict[str, Any]:
        prompt = task.prompt_fn(input) if task.prompt_fn else input
        try:
            if limiter is not None:
                async with limiter:
                    response = await self._call(task, prompt)
            else:
                response = await self._call(task, prompt)
        except asyncio.TimeoutError:
            logger.warning("Parallel task %s timed out", task.name)
            return {"name": task.name, "error": f"timed out after {self.branch_timeout}s"}
        except Exception as e:
            logger.warning("Parallel task %s failed: %s", task.name, e)
            return {"name": task.name, "error": str(e)}
        if response.failed:
            return {"name": task.name, "error": response.error}
        record: dict[str, Any] = {"name": task.name, "output": response.content}
        if task.parser is not None:
            try:
                record["parsed"] = task.parser(response.content)
            except Exception as e:
                logger.warning("Parser for %s failed: %s", task.name, e)
                record["error"] = f"parse error: {e}"
        return record

    async def _call(self, task: ParallelTask, prompt: str):
        call = self._context.complete(prompt, system_prompt=task.system_prompt, options=task.options)
        if self.branch_timeout:
            return await asyncio.wait_for(call, self.branch_timeout)
        return await call

    async def run(self, input: str) -> dict[str, Any]:
        if not self._tasks:
            return {"error": "No tasks registered", "results": []}
        limiter = asyncio.Semaphore(self.max_concurrency) if self.max_concurrency else None
        self.log_step(f"Running {len(self._tasks)} tasks ({self.mode})")
        results = list(
            await asyncio.gather(*(self._run_task(t, input, limiter) for t in self._tasks))
        )
        for record in results:
            self.log_step(f"Task '{record['name']}' finished", record)

        if self._aggregator is not None:
            aggregated = await resolve(self._aggregator(results))
        elif self.mode is ParallelizationMode.VOTING:
            aggregated = default_voting_aggregator(results, self.voting_threshold)
        else:
            aggregated = default_section_aggregator(results)
        output = dict(aggregated) if isinstance(aggregated, dict) else {"answer": aggregated}
        output.setdefault("results", results)
        return output
