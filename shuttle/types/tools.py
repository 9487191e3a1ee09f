"""Tool types."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class Executable(Protocol):
    """Single-method capability shared by tools, route handlers and worker handlers.

    ``execute`` may return a value or an awaitable; callers await when needed.
    """

    def execute(self, params: dict[str, Any]) -> Any: ...


@dataclass
class Parameter:
    name: str
    description: str = ""
    type: str = "string"
    required: bool = True
    default: Any = None

    def to_json_schema(self) -> dict[str, Any]:
        schema: dict[str, Any] = {"type": self.type, "description": self.description}
        if self.default is not None:
            schema["default"] = self.default
        return schema


@dataclass
class ToolResult:
    success: bool
    content: str = ""
    data: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def ok(cls, content: str, **data: Any) -> ToolResult:
        return cls(True, content, data)

    @classmethod
    def fail(cls, content: str, **data: Any) -> ToolResult:
        return cls(False, content, data)

    def to_dict(self) -> dict[str, Any]:
        return {"success": self.success, "result": self.content, "data": self.data}
