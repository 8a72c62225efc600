"""Pydantic models for API server requests and responses."""

from pydantic import BaseModel


class RefreshTokenRequest(BaseModel):
    """Request to exchange a refresh token for a new access token."""

    refresh_token: str


class RefreshTokenResponse(BaseModel):
    """New access token and its lifetime in seconds."""

    access_token: str
    expires_in: int


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    service: str
    version: str
    mode: str
    agents: list[str] = []


class AgentStatusResponse(BaseModel):
    status: str = "ok"
