"""Unit tests for ModelContext."""

import pytest

from shuttle import (
    ConfigurationError,
    ModelContext,
    ModelResponse,
    ScriptedProvider,
    StreamInterruptedError,
    ToolCall,
    ToolNotFoundError,
)
from shuttle.providers import BaseModelProvider
from shuttle.types import AssistantMessage, SystemMessage, UserMessage


class TestChat:
    async def test_chat_appends_user_and_assistant(self):
        llm = ScriptedProvider(["hello"])
        ctx = ModelContext(llm, system_prompt="sys")
        response = await ctx.chat("hi")
        assert response.content == "hello"
        msgs = ctx.messages()
        assert [type(m) for m in msgs] == [UserMessage, AssistantMessage]
        sent = llm.calls[0].messages
        assert isinstance(sent[0], SystemMessage) and sent[0].content == "sys"
        assert sent[-1].content == "hi"
        assert llm.calls[0].tools == []

    async def test_history_grows_across_calls(self):
        llm = ScriptedProvider(["a", "b"])
        ctx = ModelContext(llm)
        await ctx.chat("one")
        await ctx.chat("two")
        assert [m.content for m in llm.calls[1].messages] == ["one", "a", "two"]

    async def test_no_provider(self):
        ctx = ModelContext()
        with pytest.raises(ConfigurationError):
            await ctx.chat("hi")
        assert ctx.messages() == []

    async def test_chat_with_tools_passes_schemas_and_does_not_execute(self, calculator, calls):
        reply = ModelResponse(
            content="", tool_calls=[ToolCall("calculator", {"expression": "1+1"})]
        )
        llm = ScriptedProvider([reply])
        ctx = ModelContext(llm)
        ctx.register_tool(calculator)
        response = await ctx.chat_with_tools("compute")
        assert response.tool_calls[0].name == "calculator"
        assert llm.calls[0].tools[0]["name"] == "calculator"
        assert calls == []
        assert ctx.messages()[-1].tool_calls[0].name == "calculator"

    async def test_provider_failure_becomes_error_response(self):
        llm = ScriptedProvider([RuntimeError("boom")])
        ctx = ModelContext(llm)
        response = await ctx.chat("hi")
        assert response.failed
        assert response.content == "Error: boom"
        assert [type(m) for m in ctx.messages()] == [UserMessage]

    async def test_options_forwarded(self):
        llm = ScriptedProvider(["x"])
        ctx = ModelContext(llm)
        opts = ctx.options.merged(temperature=0.1, stop=["END"])
        await ctx.chat("hi", opts)
        assert llm.calls[0].options.temperature == 0.1
        assert llm.calls[0].options.stop == ["END"]


class TestTools:
    async def test_execute_tool(self, context, calculator):
        context.register_tool(calculator)
        result = await context.execute_tool("calculator", {"expression": "6*7"})
        assert result.success and result.content == "42"

    async def test_unknown_tool(self, context):
        with pytest.raises(ToolNotFoundError) as exc:
            await context.execute_tool("missing", {})
        assert exc.value.tool_name == "missing"
        assert isinstance(exc.value, LookupError)

    def test_tool_accessors(self, context, calculator):
        context.register_tool(calculator)
        assert context.get_tool("calculator") is calculator
        assert context.tools == [calculator]
        assert context.tool_schemas()[0]["name"] == "calculator"


class TestStreamChat:
    async def test_memory_updated_after_exhaustion(self):
        llm = ScriptedProvider(["streamed reply here"])
        ctx = ModelContext(llm)
        chunks = []
        async for chunk in ctx.stream_chat("hi"):
            chunks.append(chunk)
            assert ctx.messages() == []
        assert "".join(chunks) == "streamed reply here"
        assert [m.content for m in ctx.messages()] == ["hi", "streamed reply here"]

    async def test_abandoned_stream_leaves_memory(self):
        llm = ScriptedProvider(["one two three"])
        ctx = ModelContext(llm)
        stream = ctx.stream_chat("hi")
        async for _ in stream:
            break
        await stream.aclose()
        assert ctx.messages() == []

    async def test_interrupted_stream(self):
        class Flaky(BaseModelProvider):
            name = "flaky"

            async def _do_stream(self, params):
                yield "partial "
                raise ConnectionError("dropped")

        ctx = ModelContext(Flaky())
        received = []
        with pytest.raises(StreamInterruptedError) as exc:
            async for chunk in ctx.stream_chat("hi"):
                received.append(chunk)
        assert received == ["partial "]
        assert exc.value.partial_content == "partial "
        assert ctx.messages() == []


class TestCompleteAndFork:
    async def test_complete_is_stateless(self):
        llm = ScriptedProvider(["x"])
        ctx = ModelContext(llm, system_prompt="default")
        await ctx.complete("q", system_prompt="override")
        sent = llm.calls[0].messages
        assert [m.content for m in sent] == ["override", "q"]
        assert ctx.messages() == []

    async def test_fork_has_fresh_memory(self, context, calculator):
        context.register_tool(calculator)
        await context.chat("hi")
        child = context.fork(system_prompt="child")
        assert child.messages() == []
        assert child.system_prompt == "child"
        assert child.provider is context.provider
        assert child.get_tool("calculator") is calculator

    def test_fork_with_separate_tools(self, context, calculator):
        child = context.fork(share_tools=False)
        child.register_tool(calculator)
        assert context.get_tool("calculator") is None
