"""Tool definition and parameter validation."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any, Callable

from ..types import Parameter, ToolResult

logger = logging.getLogger(__name__)

ToolCallback = Callable[[dict[str, Any]], ToolResult]


class Tool:
    """Named capability with a parameter schema and a synchronous callback."""

    def __init__(
        self,
        name: str,
        description: str,
        parameters: Iterable[Parameter] | Mapping[str, Parameter] | None = None,
        callback: ToolCallback | None = None,
    ) -> None:
        self.name = name
        self.description = description
        self._parameters: dict[str, Parameter] = {}
        self._callback = callback
        if isinstance(parameters, Mapping):
            parameters = parameters.values()
        for param in parameters or ():
            self.add_parameter(param)

    def add_parameter(self, param: Parameter) -> None:
        self._parameters[param.name] = param

    @property
    def parameters(self) -> dict[str, Parameter]:
        return dict(self._parameters)

    def set_callback(self, callback: ToolCallback) -> None:
        self._callback = callback

    @property
    def schema(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "parameters": {
                "type": "object",
                "properties": {n: p.to_json_schema() for n, p in self._parameters.items()},
                "required": [n for n, p in self._parameters.items() if p.required],
            },
        }

    def validate_parameters(self, params: Mapping[str, Any]) -> list[str]:
        """Names of required parameters missing from *params*."""
        return [n for n, p in self._parameters.items() if p.required and n not in params]

    def execute(self, params: Mapping[str, Any] | None = None) -> ToolResult:
        params = dict(params or {})
        missing = self.validate_parameters(params)
        if missing:
            return ToolResult.fail(
                f"Missing required parameter(s): {', '.join(missing)}", missing=missing
            )
        if self._callback is None:
            return ToolResult.fail(f"Tool '{self.name}' has no callback bound")
        for name, param in self._parameters.items():
            if name not in params and param.default is not None:
                params[name] = param.default
        logger.debug("Executing tool %s", self.name)
        return self._callback(params)

    def __repr__(self) -> str:
        return f"Tool(name={self.name!r}, parameters={list(self._parameters)})"


def create_tool(
    name: str,
    description: str,
    parameters: Iterable[Parameter] | Mapping[str, Parameter] | None = None,
    callback: ToolCallback | None = None,
) -> Tool:
    return Tool(name, description, parameters, callback)
