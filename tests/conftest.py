"""Pytest configuration and fixtures."""

import pytest

from shuttle import ModelContext, Parameter, ScriptedProvider, Tool, ToolResult


@pytest.fixture
def provider() -> ScriptedProvider:
    """Provider answering "ok" to everything."""
    return ScriptedProvider(default="ok")


@pytest.fixture
def context(provider: ScriptedProvider) -> ModelContext:
    return ModelContext(provider=provider, system_prompt="You are a test assistant.")


@pytest.fixture
def calls() -> list:
    return []


@pytest.fixture
def calculator(calls: list) -> Tool:
    """Tool with one required parameter; records every callback invocation."""

    def evaluate(params):
        calls.append(params)
        expr = params["expression"]
        if not all(c in "0123456789+-*/ ()." for c in expr):
            return ToolResult(False, f"Unsupported expression: {expr}")
        value = eval(expr, {"__builtins__": {}})  # noqa: S307
        return ToolResult(True, str(value), {"value": value})

    return Tool(
        "calculator",
        "Evaluate an arithmetic expression",
        [Parameter("expression", "Arithmetic expression", "string", required=True)],
        evaluate,
    )
