"""In-process memory: conversation history plus a keyed scratch store."""

from __future__ import annotations

import json
import re
from enum import StrEnum
from typing import Any

from ..types import Message, ToolMessage

_TOKEN = re.compile(r"\w+")


class MemoryType(StrEnum):
    SHORT_TERM = "short_term"
    LONG_TERM = "long_term"
    WORKING = "working"


def _tokens(text: str) -> set[str]:
    return {t.lower() for t in _TOKEN.findall(text)}


class Memory:
    """Ordered message history and a store partitioned by :class:`MemoryType`.

    The two halves are independent: clearing the store never touches the
    history and vice versa. Not safe for concurrent writers; give each
    concurrent branch its own instance.
    """

    def __init__(self) -> None:
        self._messages: list[Message] = []
        self._store: dict[MemoryType, dict[str, Any]] = {t: {} for t in MemoryType}

    # -- keyed store --

    def add(self, key: str, value: Any, type: MemoryType = MemoryType.SHORT_TERM) -> None:
        self._store[MemoryType(type)][key] = value

    def get(self, key: str, type: MemoryType = MemoryType.SHORT_TERM) -> Any | None:
        return self._store[MemoryType(type)].get(key)

    def has(self, key: str, type: MemoryType = MemoryType.SHORT_TERM) -> bool:
        return key in self._store[MemoryType(type)]

    def remove(self, key: str, type: MemoryType = MemoryType.SHORT_TERM) -> None:
        self._store[MemoryType(type)].pop(key, None)

    def clear(self, type: MemoryType | None = None) -> None:
        if type is None:
            for bucket in self._store.values():
                bucket.clear()
        else:
            self._store[MemoryType(type)].clear()

    def search(
        self, query: str, type: MemoryType = MemoryType.LONG_TERM, max_results: int = 5
    ) -> list[tuple[Any, float]]:
        """Keyword-overlap search over one partition, best match first."""
        bucket = self._store[MemoryType(type)]
        terms = _tokens(query)
        if not terms:
            return [(v, 0.0) for v in list(bucket.values())[:max_results]]
        scored = []
        for key, value in bucket.items():
            text = f"{key} {json.dumps(value, default=str)}"
            hits = len(terms & _tokens(text))
            if hits:
                scored.append((value, hits / len(terms)))
        scored.sort(key=lambda pair: pair[1], reverse=True)
        return scored[:max_results]

    # -- conversation history --

    def add_message(self, message: Message) -> None:
        self._messages.append(message)

    def messages(self) -> list[Message]:
        return list(self._messages)

    def clear_messages(self) -> None:
        self._messages.clear()

    def conversation_summary(self, max_length: int = 0) -> str:
        parts = []
        for msg in self._messages:
            if isinstance(msg, ToolMessage):
                label = f"Tool ({msg.name or 'unknown'})"
            else:
                label = msg.role.capitalize()
            parts.append(f"{label}: {msg.content}\n\n")
        summary = "".join(parts)
        if max_length > 0 and len(summary) > max_length:
            summary = summary[:max_length] + "..."
        return summary
