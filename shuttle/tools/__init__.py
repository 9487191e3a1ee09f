"""Tools: definitions, the function decorator and the registry."""

from ..types import Executable, Parameter, ToolResult
from .function import function_tool, parameters_from_model
from .registry import ToolRegistry
from .tool import Tool, create_tool

__all__ = [
    "Executable",
    "Parameter",
    "Tool",
    "ToolRegistry",
    "ToolResult",
    "create_tool",
    "function_tool",
    "parameters_from_model",
]
