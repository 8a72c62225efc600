"""HTTP server package for OAuth login and agent tool execution."""

from spotify_agent.api_server.models import (
    HealthResponse,
    RefreshTokenRequest,
    RefreshTokenResponse,
)
from spotify_agent.api_server.server import AgentServer, main

__all__ = [
    # Server
    "AgentServer",
    "main",
    # Models
    "HealthResponse",
    "RefreshTokenRequest",
    "RefreshTokenResponse",
]
