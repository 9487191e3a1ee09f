"""shuttle: an agent engine and workflow primitives over language-model calls."""

from .agent import (
    Agent,
    AgentOptions,
    AgentState,
    AutonomousAgent,
    PlanningStrategy,
    Step,
)
from .config import ConfigLoader, Settings, get_settings
from .context import ModelContext
from .errors import (
    ConfigurationError,
    DuplicateNameError,
    NotFoundError,
    ProviderError,
    RouteNotFoundError,
    ShuttleError,
    StepValidationError,
    StreamInterruptedError,
    ToolNotFoundError,
    ValidationError,
)
from .log import setup_logging
from .memory import Memory, MemoryType
from .providers import BaseModelProvider, ScriptedProvider
from .tools import Parameter, Tool, ToolRegistry, ToolResult, create_tool, function_tool
from .types import CallOptions, ModelResponse, ToolCall
from .workflows import (
    ChatHandler,
    EvaluatorOptimizerWorkflow,
    OrchestratorWorkersWorkflow,
    ParallelizationMode,
    ParallelizationWorkflow,
    PromptChainingWorkflow,
    RoutingWorkflow,
    Workflow,
)

__version__ = "0.1.0"

__all__ = [
    "Agent",
    "AgentOptions",
    "AgentState",
    "AutonomousAgent",
    "BaseModelProvider",
    "CallOptions",
    "ChatHandler",
    "ConfigLoader",
    "ConfigurationError",
    "DuplicateNameError",
    "EvaluatorOptimizerWorkflow",
    "Memory",
    "MemoryType",
    "ModelContext",
    "ModelResponse",
    "NotFoundError",
    "OrchestratorWorkersWorkflow",
    "Parameter",
    "ParallelizationMode",
    "ParallelizationWorkflow",
    "PlanningStrategy",
    "PromptChainingWorkflow",
    "ProviderError",
    "RouteNotFoundError",
    "RoutingWorkflow",
    "ScriptedProvider",
    "Settings",
    "ShuttleError",
    "Step",
    "StepValidationError",
    "StreamInterruptedError",
    "Tool",
    "ToolCall",
    "ToolNotFoundError",
    "ToolRegistry",
    "ToolResult",
    "ValidationError",
    "Workflow",
    "create_tool",
    "function_tool",
    "get_settings",
    "setup_logging",
]
