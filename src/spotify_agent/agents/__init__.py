"""Agents exposed by the service."""

from spotify_agent.agents.base import AgentInfo, BaseAgentHandler, ToolDescriptor
from spotify_agent.agents.registry import AgentRegistry, create_default_registry

__all__ = [
    "AgentInfo",
    "AgentRegistry",
    "BaseAgentHandler",
    "ToolDescriptor",
    "create_default_registry",
]
