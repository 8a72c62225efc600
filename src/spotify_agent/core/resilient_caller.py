"""HTTP calls against a provider API with response normalization.

``ResilientCaller.call`` never raises: every response, including network
failures, becomes an ``ApiSuccess`` or ``ApiFailure``.
``call_with_refresh`` adds the bounded recovery used by every tool: on a
401 the refresh token is exchanged once and the request is retried once.
"""

import logging
from collections.abc import Awaitable, Callable, Mapping
from typing import Any

import httpx

from spotify_agent.core.outcome import (
    ApiCallOutcome,
    ApiFailure,
    ApiSuccess,
    FailureKind,
)
from spotify_agent.utils.constants import DEFAULT_TIMEOUT, USER_AGENT

logger = logging.getLogger(__name__)

TokenRefresher = Callable[[str], Awaitable[str | None]]
AuthHeaderBuilder = Callable[[str], dict[str, str]]

REFRESH_FAILED_MESSAGE = "Failed to refresh token"


def bearer_header(access_token: str) -> dict[str, str]:
    """Build the Authorization header for a user access token."""
    return {"Authorization": f"Bearer {access_token}"}


def decode_body(response: httpx.Response) -> Any:
    """Decode a response body as JSON, falling back to raw text.

    Returns None for an empty body.
    """
    raw = response.text
    if not raw:
        return None
    try:
        return response.json()
    except ValueError:
        return raw


def error_message(response: httpx.Response, body: Any) -> str:
    """Pick the most useful message for a non-2xx response.

    Provider error payloads come in two shapes: the Web API's
    ``{"error": {"status": ..., "message": ...}}`` and the accounts
    service's ``{"error": "...", "error_description": "..."}``.
    """
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if body.get("error_description"):
            return str(body["error_description"])
        if isinstance(error, str) and error:
            return error
    return response.reason_phrase or f"HTTP {response.status_code}"


class ResilientCaller:
    """Caller bound to one provider base URL."""

    def __init__(
        self,
        base_url: str,
        refresher: TokenRefresher | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self.base_url = base_url.rstrip("/")
        self.refresher = refresher
        self.timeout = timeout

    async def call(
        self,
        method: str,
        path: str,
        headers: Mapping[str, str] | None = None,
        params: Mapping[str, Any] | None = None,
        json: Any = None,
        data: Mapping[str, Any] | None = None,
        content: str | bytes | None = None,
    ) -> ApiCallOutcome:
        """Issue one request and normalize the response.

        Args:
            method: HTTP method
            path: Path relative to the base URL (leading slash)
            headers: Extra request headers
            params: Query string values
            json: JSON request body
            data: Form-encoded request body
            content: Raw request body

        Returns:
            ApiSuccess with the decoded body, or ApiFailure with the status
            code (500 for transport errors) and a best-effort message
        """
        request_headers = {"User-Agent": USER_AGENT, "Accept": "application/json"}
        if headers:
            request_headers.update(headers)

        url = f"{self.base_url}{path}"

        try:
            async with httpx.AsyncClient() as client:
                response = await client.request(
                    method,
                    url,
                    headers=request_headers,
                    params=params,
                    json=json,
                    data=data,
                    content=content,
                    timeout=self.timeout,
                )
        except (httpx.HTTPError, httpx.InvalidURL, UnicodeEncodeError) as e:
            # covers requests httpx refuses to build, e.g. non-ASCII headers
            logger.error(f"{method} {path} failed: {type(e).__name__}: {e}")
            return ApiFailure(
                code=500,
                message=str(e) or "Network error",
                kind=FailureKind.TRANSPORT_ERROR,
            )

        body = decode_body(response)

        if not response.is_success:
            message = error_message(response, body)
            logger.info(f"{method} {path} -> {response.status_code}: {message}")
            return ApiFailure(
                code=response.status_code,
                message=message,
                kind=FailureKind.UPSTREAM_REJECTED,
            )

        logger.debug(f"{method} {path} -> {response.status_code}")
        return ApiSuccess(data=body, status_code=response.status_code)

    async def call_with_refresh(
        self,
        method: str,
        path: str,
        access_token: str,
        refresh_token: str,
        headers: Mapping[str, str] | None = None,
        rebuild_auth_header: AuthHeaderBuilder = bearer_header,
        **request_kwargs: Any,
    ) -> ApiCallOutcome:
        """Call once, and on a 401 refresh the access token and retry once.

        A failed refresh returns a 401 failure without retrying. The retry's
        outcome is returned as-is, even when it is another 401.
        """
        base_headers = dict(headers or {})

        outcome = await self.call(
            method,
            path,
            headers={**base_headers, **rebuild_auth_header(access_token)},
            **request_kwargs,
        )
        if not (isinstance(outcome, ApiFailure) and outcome.code == 401):
            return outcome

        logger.info(f"{method} {path} unauthorized, refreshing access token")
        new_access_token = None
        if self.refresher is not None:
            new_access_token = await self.refresher(refresh_token)

        if not new_access_token:
            return ApiFailure(
                code=401,
                message=REFRESH_FAILED_MESSAGE,
                kind=FailureKind.REFRESH_FAILED,
            )

        return await self.call(
            method,
            path,
            headers={**base_headers, **rebuild_auth_header(new_access_token)},
            **request_kwargs,
        )
