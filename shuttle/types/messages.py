"""Message types."""

from __future__ import annotations

import json
import uuid
from dataclasses import dataclass, field
from typing import Any


def _call_id() -> str:
    return f"call_{uuid.uuid4().hex[:12]}"


@dataclass
class ToolCall:
    name: str
    arguments: dict[str, Any] = field(default_factory=dict)
    id: str = field(default_factory=_call_id)

    def __post_init__(self) -> None:
        if isinstance(self.arguments, str):
            self.arguments = json.loads(self.arguments) if self.arguments.strip() else {}

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name, "arguments": self.arguments}


@dataclass
class SystemMessage:
    content: str
    name: str | None = None
    role: str = "system"


@dataclass
class UserMessage:
    content: str = ""
    name: str | None = None
    role: str = "user"


@dataclass
class AssistantMessage:
    content: str
    tool_calls: list[ToolCall] = field(default_factory=list)
    name: str | None = None
    role: str = "assistant"


@dataclass
class ToolMessage:
    content: str
    tool_call_id: str
    name: str | None = None
    role: str = "tool"


Message = SystemMessage | UserMessage | AssistantMessage | ToolMessage


def message_to_dict(msg: Message) -> dict[str, Any]:
    """Plain-dict form, the shape most chat APIs accept."""
    out: dict[str, Any] = {"role": msg.role, "content": msg.content}
    if msg.name:
        out["name"] = msg.name
    if isinstance(msg, AssistantMessage) and msg.tool_calls:
        out["tool_calls"] = [tc.to_dict() for tc in msg.tool_calls]
    if isinstance(msg, ToolMessage):
        out["tool_call_id"] = msg.tool_call_id
    return out
