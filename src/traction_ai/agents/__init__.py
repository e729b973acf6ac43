"""Agent status model."""

from .registry import (
    BRAKE_CONTROL,
    DEFAULT_AGENT_SEEDS,
    SLIP_DETECTION,
    SURFACE_ANALYSIS,
    THROTTLE_MANAGER,
    Agent,
    AgentRegistry,
    AgentStatus,
    AgentUpdate,
    agent_from_mapping,
)

__all__ = [
    "Agent",
    "AgentRegistry",
    "AgentStatus",
    "AgentUpdate",
    "BRAKE_CONTROL",
    "DEFAULT_AGENT_SEEDS",
    "SLIP_DETECTION",
    "SURFACE_ANALYSIS",
    "THROTTLE_MANAGER",
    "agent_from_mapping",
]
