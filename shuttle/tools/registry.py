"""Tool registry."""

from __future__ import annotations

import logging
from typing import Any

from ..errors import DuplicateNameError
from .tool import Tool

logger = logging.getLogger(__name__)


class ToolRegistry:
    def __init__(self, tools: list[Tool] | None = None) -> None:
        self._tools: dict[str, Tool] = {}
        for tool in tools or []:
            self.register(tool)

    def register(self, tool: Tool, replace: bool = True) -> None:
        if tool.name in self._tools:
            if not replace:
                raise DuplicateNameError("Tool", tool.name)
            logger.debug("Replacing registered tool %s", tool.name)
        self._tools[tool.name] = tool

    def get(self, name: str) -> Tool | None:
        return self._tools.get(name)

    def has(self, name: str) -> bool:
        return name in self._tools

    def remove(self, name: str) -> Tool | None:
        return self._tools.pop(name, None)

    def clear(self) -> None:
        self._tools.clear()

    def names(self) -> list[str]:
        return list(self._tools)

    def list(self) -> list[Tool]:
        return list(self._tools.values())

    def schemas(self) -> list[dict[str, Any]]:
        return [t.schema for t in self._tools.values()]

    def copy(self) -> ToolRegistry:
        return ToolRegistry(self.list())

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)
