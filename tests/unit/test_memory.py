"""Unit tests for Memory."""

from shuttle import Memory, MemoryType
from shuttle.types import AssistantMessage, SystemMessage, ToolMessage, UserMessage


class TestKeyedStore:
    def test_partitions_are_independent(self):
        mem = Memory()
        mem.add("k", {"v": 1})
        mem.add("k", {"v": 2}, MemoryType.LONG_TERM)
        assert mem.get("k") == {"v": 1}
        assert mem.get("k", MemoryType.LONG_TERM) == {"v": 2}
        assert mem.get("k", MemoryType.WORKING) is None

    def test_has_remove(self):
        mem = Memory()
        mem.add("k", 1, MemoryType.WORKING)
        assert mem.has("k", MemoryType.WORKING)
        mem.remove("k", MemoryType.WORKING)
        assert not mem.has("k", MemoryType.WORKING)
        mem.remove("missing")

    def test_clear_one_partition(self):
        mem = Memory()
        mem.add("a", 1)
        mem.add("b", 2, MemoryType.LONG_TERM)
        mem.clear(MemoryType.SHORT_TERM)
        assert not mem.has("a")
        assert mem.has("b", MemoryType.LONG_TERM)

    def test_clear_all_keeps_history(self):
        mem = Memory()
        mem.add("a", 1)
        mem.add_message(UserMessage(content="hi"))
        mem.clear()
        assert not mem.has("a")
        assert len(mem.messages()) == 1

    def test_search_ranks_by_overlap(self):
        mem = Memory()
        mem.add("p1", {"text": "python asyncio tutorial"}, MemoryType.LONG_TERM)
        mem.add("p2", {"text": "python packaging"}, MemoryType.LONG_TERM)
        mem.add("p3", {"text": "gardening"}, MemoryType.LONG_TERM)
        results = mem.search("python asyncio")
        assert [v["text"] for v, _ in results] == ["python asyncio tutorial", "python packaging"]
        assert results[0][1] == 1.0
        assert results[1][1] == 0.5

    def test_search_limit_and_blank_query(self):
        mem = Memory()
        for i in range(4):
            mem.add(f"k{i}", i, MemoryType.LONG_TERM)
        assert len(mem.search("", max_results=2)) == 2


class TestHistory:
    def test_order_preserved_and_copied(self):
        mem = Memory()
        mem.add_message(UserMessage(content="one"))
        mem.add_message(AssistantMessage(content="two"))
        msgs = mem.messages()
        msgs.clear()
        assert [m.content for m in mem.messages()] == ["one", "two"]

    def test_conversation_summary(self):
        mem = Memory()
        mem.add_message(SystemMessage(content="be nice"))
        mem.add_message(UserMessage(content="hi"))
        mem.add_message(ToolMessage(content="42", tool_call_id="c1", name="calc"))
        summary = mem.conversation_summary()
        assert summary == "System: be nice\n\nUser: hi\n\nTool (calc): 42\n\n"

    def test_summary_truncated(self):
        mem = Memory()
        mem.add_message(UserMessage(content="x" * 50))
        summary = mem.conversation_summary(max_length=10)
        assert summary.endswith("...")
        assert len(summary) == 13

    def test_clear_messages(self):
        mem = Memory()
        mem.add_message(UserMessage(content="hi"))
        mem.clear_messages()
        assert mem.messages() == []
