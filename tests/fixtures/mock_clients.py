"""Shared fake agents and mock collaborators for testing."""

from typing import Any
from unittest.mock import AsyncMock

import pytest

from spotify_agent.agents.base import BaseAgentHandler, ToolDescriptor
from spotify_agent.agents.registry import AgentRegistry
from spotify_agent.core.outcome import ApiCallOutcome, ApiSuccess, create_error_response
from spotify_agent.credentials.gate import CredentialBundle


class EchoAgent(BaseAgentHandler):
    """Agent that echoes its inputs and records every execution."""

    def __init__(
        self, oauth: list[str] | None = None, variables: list[str] | None = None
    ):
        super().__init__(
            [
                ToolDescriptor(
                    name="echo",
                    description="Echo the parameters back",
                    parameters={
                        "type": "object",
                        "properties": {"text": {"type": "string"}},
                        "required": ["text"],
                    },
                ),
                ToolDescriptor(name="fail", description="Always fails"),
            ],
            oauth,
            variables,
        )
        self.calls: list[tuple[str, dict[str, Any], CredentialBundle]] = []

    async def execute_tool(
        self,
        tool_name: str,
        parameters: dict[str, Any],
        credentials: CredentialBundle,
    ) -> ApiCallOutcome:
        self.calls.append((tool_name, parameters, credentials))
        if tool_name == "echo":
            return ApiSuccess(
                data={
                    "parameters": parameters,
                    "oauth": dict(credentials.oauth_tokens),
                    "variables": dict(credentials.variables),
                }
            )
        if tool_name == "fail":
            return create_error_response("Upstream exploded", 502)
        return create_error_response(f"Tool {tool_name} not implemented", 404)


@pytest.fixture
def echo_agent() -> EchoAgent:
    return EchoAgent(oauth=["x"], variables=["y"])


@pytest.fixture
def open_agent() -> EchoAgent:
    """Agent without OAuth or variable requirements."""
    return EchoAgent()


@pytest.fixture
def fake_registry(echo_agent: EchoAgent, open_agent: EchoAgent) -> AgentRegistry:
    return AgentRegistry({"echo": echo_agent, "open": open_agent})


@pytest.fixture
def mock_refresher() -> AsyncMock:
    """Token refresher that always yields a new access token."""
    return AsyncMock(return_value="new-access-token")
