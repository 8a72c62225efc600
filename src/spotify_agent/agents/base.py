"""Agent handler contract and tool descriptors."""

from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from spotify_agent.core.outcome import ApiCallOutcome
from spotify_agent.credentials.gate import CredentialBundle


class ToolDescriptor(BaseModel):
    """Name, description and JSON-schema parameters of one tool."""

    model_config = ConfigDict(frozen=True)

    name: str
    description: str
    parameters: dict[str, Any] = Field(
        default_factory=lambda: {"type": "object", "properties": {}, "required": []}
    )


class AgentInfo(BaseModel):
    """What an agent offers and which credentials it needs."""

    model_config = ConfigDict(frozen=True)

    tools: tuple[ToolDescriptor, ...]
    oauth: tuple[str, ...] = ()
    variables: tuple[str, ...] = ()


class BaseAgentHandler(ABC):
    """Base class for agents served under ``/{agent}``."""

    def __init__(
        self,
        tools: list[ToolDescriptor],
        oauth: list[str] | None = None,
        variables: list[str] | None = None,
    ):
        names = [tool.name for tool in tools]
        if len(names) != len(set(names)):
            raise ValueError("Tool names must be unique within an agent")

        self._info = AgentInfo(
            tools=tuple(tools),
            oauth=tuple(oauth or ()),
            variables=tuple(variables or ()),
        )

    def get_tools(self) -> list[ToolDescriptor]:
        return list(self._info.tools)

    def get_agent_info(self) -> AgentInfo:
        return self._info

    @abstractmethod
    async def execute_tool(
        self,
        tool_name: str,
        parameters: dict[str, Any],
        credentials: CredentialBundle,
    ) -> ApiCallOutcome:
        """Run one tool and return its normalized outcome."""
