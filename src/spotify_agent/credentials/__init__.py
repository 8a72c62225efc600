"""Request credential extraction and validation."""

from spotify_agent.credentials.gate import (
    CredentialBundle,
    CredentialGate,
    GateResult,
)
from spotify_agent.credentials.validation import mask_secret

__all__ = ["CredentialBundle", "CredentialGate", "GateResult", "mask_secret"]
