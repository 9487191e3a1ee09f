"""Workflow composition primitives."""

from .base import Workflow
from .evaluator_optimizer import Evaluation, EvaluatorOptimizerWorkflow
from .handlers import ChatHandler, FunctionHandler, WorkflowHandler, as_handler
from .orchestrator_workers import OrchestratorWorkersWorkflow, Worker, default_synthesizer
from .parallelization import (
    ParallelizationMode,
    ParallelizationWorkflow,
    ParallelTask,
    default_section_aggregator,
    default_voting_aggregator,
)
from .prompt_chaining import ChainStep, PromptChainingWorkflow
from .routing import Route, RoutingWorkflow

__all__ = [
    "ChainStep",
    "ChatHandler",
    "Evaluation",
    "EvaluatorOptimizerWorkflow",
    "FunctionHandler",
    "OrchestratorWorkersWorkflow",
    "ParallelTask",
    "ParallelizationMode",
    "ParallelizationWorkflow",
    "PromptChainingWorkflow",
    "Route",
    "RoutingWorkflow",
    "Worker",
    "Workflow",
    "WorkflowHandler",
    "as_handler",
    "default_section_aggregator",
    "default_synthesizer",
    "default_voting_aggregator",
]
