"""Normalized outcome of an upstream call or a tool execution."""

from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel


class FailureKind(Enum):
    """Why a call or a tool execution did not succeed."""

    UPSTREAM_REJECTED = "upstream_rejected"
    REFRESH_FAILED = "refresh_failed"
    TRANSPORT_ERROR = "transport_error"
    MISSING_CREDENTIAL = "missing_credential"
    INVALID_PARAMETERS = "invalid_parameters"
    UNKNOWN_TOOL = "unknown_tool"
    UNKNOWN_AGENT = "unknown_agent"
    INTERNAL_ERROR = "internal_error"


class ApiSuccess(BaseModel):
    """A 2xx response with its decoded body."""

    success: Literal[True] = True
    data: Any = None
    status_code: int = 200

    def to_response(self) -> dict[str, Any]:
        return {"success": True, "responseType": "text", "data": self.data}


class ApiFailure(BaseModel):
    """A failed call carrying the HTTP status to surface."""

    success: Literal[False] = False
    code: int
    message: str
    kind: FailureKind = FailureKind.UPSTREAM_REJECTED

    def to_response(self) -> dict[str, Any]:
        return {
            "success": False,
            "error": {"code": self.code, "message": self.message},
        }


ApiCallOutcome = ApiSuccess | ApiFailure


def create_error_response(
    message: str,
    code: int = 500,
    kind: FailureKind = FailureKind.INTERNAL_ERROR,
) -> ApiFailure:
    """Shortcut for failures produced locally rather than by the provider."""
    return ApiFailure(code=code, message=message, kind=kind)
