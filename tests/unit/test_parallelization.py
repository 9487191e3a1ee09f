"""Unit tests for ParallelizationWorkflow."""

import asyncio

from shuttle import ModelContext, ParallelizationMode, ParallelizationWorkflow, ScriptedProvider
from shuttle.workflows import default_section_aggregator, default_voting_aggregator

DELAYS = {"research": 0.03, "analysis": 0.01, "recommendations": 0.0}


def by_system_prompt(params):
    """Reply after a per-task delay so completion order differs from registration order."""
    system = params.messages[0].content

    async def reply():
        await asyncio.sleep(DELAYS.get(system, 0))
        if system == "explode":
            raise RuntimeError("branch failed")
        return f"{system} output"

    return reply()


class TestSectioning:
    async def test_sections_in_registration_order(self):
        llm = ScriptedProvider(default=by_system_prompt)
        wf = ParallelizationWorkflow(ModelContext(llm), ParallelizationMode.SECTIONING)
        for name in ("research", "analysis", "recommendations"):
            wf.add_task(name, system_prompt=name)
        result = await wf.run("Evaluate the market")
        answer = result["answer"]
        positions = [answer.index(f"## {n}") for n in ("research", "analysis", "recommendations")]
        assert positions == sorted(positions)
        assert "research output" in answer
        assert list(result["sections"]) == ["research", "analysis", "recommendations"]

    async def test_failed_branch_does_not_abort_join(self):
        llm = ScriptedProvider(default=by_system_prompt)
        wf = ParallelizationWorkflow(ModelContext(llm))
        wf.add_task("good", system_prompt="research")
        wf.add_task("bad", system_prompt="explode")
        result = await wf.run("x")
        assert result["sections"] == {"good": "research output"}
        assert "branch failed" in result["errors"]["bad"]
        assert [r["name"] for r in result["results"]] == ["good", "bad"]

    async def test_branch_timeout(self):
        async def slow(params):
            await asyncio.sleep(1)
            return "late"

        llm = ScriptedProvider(default=slow)
        wf = ParallelizationWorkflow(ModelContext(llm), branch_timeout=0.01)
        wf.add_task("slow")
        result = await wf.run("x")
        assert "timed out" in result["errors"]["slow"]

    async def test_prompt_fn_and_parser(self):
        llm = ScriptedProvider(default=lambda p: p.messages[-1].content)
        wf = ParallelizationWorkflow(ModelContext(llm))
        wf.add_task("shout", prompt_fn=lambda text: text.upper(), parser=len)
        result = await wf.run("abc")
        assert result["results"][0] == {"name": "shout", "output": "ABC", "parsed": 3}

    async def test_custom_aggregator(self):
        llm = ScriptedProvider(default="x")
        wf = ParallelizationWorkflow(ModelContext(llm))
        wf.add_task("a")
        wf.add_task("b")
        wf.set_aggregator(lambda results: {"answer": len(results)})
        assert (await wf.run("q"))["answer"] == 2

    async def test_branches_share_no_memory(self):
        llm = ScriptedProvider(default="x")
        ctx = ModelContext(llm)
        wf = ParallelizationWorkflow(ctx, max_concurrency=1)
        wf.add_task("a")
        wf.add_task("b")
        await wf.run("q")
        assert ctx.messages() == []
        assert all(len(call.messages) == 1 for call in llm.calls)

    async def test_no_tasks(self):
        wf = ParallelizationWorkflow(ModelContext(ScriptedProvider()))
        assert "error" in await wf.run("x")


class TestVoting:
    def test_majority(self):
        results = [{"name": f"v{i}", "output": o} for i, o in enumerate("AAABB")]
        out = default_voting_aggregator(results)
        assert out["answer"] == "A"
        assert out["votes"] == {"A": 3, "B": 2}
        assert out["agreement"] == 0.6
        assert out["consensus"] is True

    def test_errors_excluded_and_parsed_votes(self):
        results = [
            {"name": "1", "output": "x", "parsed": {"vote": "yes"}},
            {"name": "2", "output": "y", "parsed": {"vote": "no"}},
            {"name": "3", "error": "boom"},
        ]
        out = default_voting_aggregator(results)
        assert out["answer"] == "yes"
        assert out["consensus"] is False

    def test_no_votes(self):
        assert default_voting_aggregator([{"name": "1", "error": "x"}])["answer"] is None

    async def test_voting_run(self):
        llm = ScriptedProvider(["A", "A", "A", "B", "B"])
        wf = ParallelizationWorkflow(ModelContext(llm), ParallelizationMode.VOTING)
        replicas = wf.add_voting_replicas("judge", "Answer A or B", 5)
        result = await wf.run("Pick one")
        assert result["answer"] == "A"
        temps = [t.options.temperature for t in replicas]
        assert temps == sorted(temps) and temps[0] < temps[-1]

    def test_default_section_aggregator_direct(self):
        out = default_section_aggregator([{"name": "a", "output": "1"}, {"name": "b", "output": "2"}])
        assert out["answer"] == "## a\n\n1\n\n## b\n\n2"
