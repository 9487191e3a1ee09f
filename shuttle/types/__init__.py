"""Shared data types."""

from .messages import (
    AssistantMessage,
    Message,
    SystemMessage,
    ToolCall,
    ToolMessage,
    UserMessage,
    message_to_dict,
)
from .llm import CallOptions, CompletionParams, ModelProvider, ModelResponse
from .tools import Executable, Parameter, ToolResult

__all__ = [
    "AssistantMessage",
    "CallOptions",
    "CompletionParams",
    "Executable",
    "Message",
    "ModelProvider",
    "ModelResponse",
    "Parameter",
    "SystemMessage",
    "ToolCall",
    "ToolMessage",
    "ToolResult",
    "UserMessage",
    "message_to_dict",
]
