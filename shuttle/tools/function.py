"""Build tools from annotated Python functions.

Parameters are derived from the function signature through a generated
pydantic model, so arguments coming back from the model are coerced and
validated before the function runs::

    @function_tool(description="Add two integers")
    def add(a: int, b: int = 0) -> int:
        return a + b
"""

from __future__ import annotations

import inspect
from typing import Any, Callable

import pydantic
from pydantic import BaseModel, create_model

from ..types import Parameter, ToolResult
from .tool import Tool

_JSON_TYPES = {
    "string": "string",
    "integer": "integer",
    "number": "number",
    "boolean": "boolean",
    "array": "array",
    "object": "object",
}


def _signature_model(func: Callable[..., Any]) -> type[BaseModel]:
    fields: dict[str, Any] = {}
    for pname, p in inspect.signature(func).parameters.items():
        if p.kind in (p.VAR_POSITIONAL, p.VAR_KEYWORD):
            continue
        annotation = Any if p.annotation is inspect.Parameter.empty else p.annotation
        default = ... if p.default is inspect.Parameter.empty else p.default
        fields[pname] = (annotation, default)
    return create_model(f"{func.__name__}_params", **fields)


def parameters_from_model(model: type[BaseModel]) -> list[Parameter]:
    schema = model.model_json_schema()
    required = set(schema.get("required", []))
    params = []
    for pname, prop in schema.get("properties", {}).items():
        params.append(
            Parameter(
                name=pname,
                description=prop.get("description", prop.get("title", "")),
                type=_JSON_TYPES.get(prop.get("type", "string"), "string"),
                required=pname in required,
                default=prop.get("default"),
            )
        )
    return params


def _to_result(value: Any) -> ToolResult:
    if isinstance(value, ToolResult):
        return value
    return ToolResult.ok(str(value), result=value)


def function_tool(
    func: Callable[..., Any] | None = None,
    *,
    name: str | None = None,
    description: str | None = None,
) -> Any:
    """Decorator turning *func* into a :class:`Tool`."""

    def wrap(fn: Callable[..., Any]) -> Tool:
        model = _signature_model(fn)

        def callback(params: dict[str, Any]) -> ToolResult:
            try:
                parsed = model.model_validate(params)
            except pydantic.ValidationError as e:
                return ToolResult.fail(f"Invalid arguments: {e}", errors=e.errors())
            return _to_result(fn(**parsed.model_dump()))

        doc = inspect.getdoc(fn) or ""
        return Tool(
            name or fn.__name__,
            description or doc.split("\n\n")[0],
            parameters_from_model(model),
            callback,
        )

    if func is not None:
        return wrap(func)
    return wrap
