"""Agents: the abstract state machine and the autonomous planner-driven agent."""

from .autonomous import AutonomousAgent, Step, extract_answer
from .base import Agent, AgentOptions, AgentState
from .strategy import PlanningStrategy, ReactPlanner, ZeroShotPlanner, planner_for

__all__ = [
    "Agent",
    "AgentOptions",
    "AgentState",
    "AutonomousAgent",
    "PlanningStrategy",
    "ReactPlanner",
    "Step",
    "ZeroShotPlanner",
    "extract_answer",
    "planner_for",
]
