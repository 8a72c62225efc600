"""Core mechanisms: signed state, resilient calls and the OAuth flow."""

from spotify_agent.core.oauth import OAuthFlowController, TokenGrant
from spotify_agent.core.outcome import (
    ApiCallOutcome,
    ApiFailure,
    ApiSuccess,
    FailureKind,
)
from spotify_agent.core.resilient_caller import ResilientCaller
from spotify_agent.core.state import InMemoryStateStore, SignedStateManager

__all__ = [
    "ApiCallOutcome",
    "ApiFailure",
    "ApiSuccess",
    "FailureKind",
    "InMemoryStateStore",
    "OAuthFlowController",
    "ResilientCaller",
    "SignedStateManager",
    "TokenGrant",
]
