"""Unit tests for RoutingWorkflow and handler adapters."""

import pytest

from shuttle import ChatHandler, ModelContext, RouteNotFoundError, RoutingWorkflow, ScriptedProvider
from shuttle.workflows import PromptChainingWorkflow


def counting(name, hits):
    def handler(input, info):
        hits.append(name)
        return {"answer": f"{name} handled {input}"}

    return handler


def routing_with(router_reply, hits):
    llm = ScriptedProvider([router_reply])
    wf = RoutingWorkflow(ModelContext(llm), router_prompt="Classify the query.")
    wf.add_route("factual_query", "Questions about facts", counting("factual_query", hits))
    wf.add_route("creative", "Creative writing", counting("creative", hits))
    wf.set_default_route(counting("default", hits))
    return wf, llm


class TestRouting:
    async def test_exact_match_dispatch(self):
        hits = []
        wf, llm = routing_with("factual_query", hits)
        result = await wf.run("How tall is Everest?")
        assert hits == ["factual_query"]
        assert result["route"] == "factual_query"
        assert result["answer"] == "factual_query handled How tall is Everest?"
        system = llm.calls[0].messages[0].content
        assert "- factual_query: Questions about facts" in system

    async def test_unknown_falls_to_default(self):
        hits = []
        wf, _ = routing_with("unknown_category", hits)
        result = await wf.run("???")
        assert hits == ["default"]
        assert result["route"] == "default"
        assert result["classification"] == "unknown_category"

    async def test_surrounding_whitespace_ignored(self):
        hits = []
        wf, _ = routing_with("  creative\n", hits)
        await wf.run("write a poem")
        assert hits == ["creative"]

    async def test_no_default_raises(self):
        wf = RoutingWorkflow(ModelContext(ScriptedProvider(["nope"])))
        wf.add_route("a", "A", lambda i, info: "x")
        with pytest.raises(RouteNotFoundError):
            await wf.run("q")

    async def test_async_handler_and_plain_value(self):
        async def handler(input, info):
            return f"route={info['route']}"

        wf = RoutingWorkflow(ModelContext(ScriptedProvider(["a"])))
        wf.add_route("a", "A", handler)
        result = await wf.run("q")
        assert result["answer"] == "route=a"

    async def test_chat_handler_uses_route_system_prompt(self):
        llm = ScriptedProvider(["support", "Try restarting."])
        ctx = ModelContext(llm)
        wf = RoutingWorkflow(ctx)
        wf.add_route("support", "Tech support", ChatHandler(ctx, "You are a support engineer."))
        result = await wf.run("My laptop froze")
        assert result["answer"] == "Try restarting."
        assert llm.calls[1].messages[0].content == "You are a support engineer."
        assert ctx.messages() == []

    async def test_nested_workflow_handler(self):
        llm = ScriptedProvider(["nested", "chain output"])
        ctx = ModelContext(llm)
        chain = PromptChainingWorkflow(ctx)
        chain.add_step("only", "Handle: {input}")
        wf = RoutingWorkflow(ctx)
        wf.add_route("nested", "Nested chain", chain)
        result = await wf.run("q")
        assert result["final_output"] == "chain output"
        assert result["route"] == "nested"

    def test_routes_schema(self):
        hits = []
        wf, _ = routing_with("x", hits)
        schema = wf.routes_schema()
        assert schema["properties"]["route"]["enum"] == ["factual_query", "creative"]
