"""OAuth2 authorization-code flow against the Spotify accounts service."""

import base64
import logging
from collections.abc import Iterable
from urllib.parse import urlencode

from pydantic import BaseModel

from spotify_agent.config import Settings
from spotify_agent.core.outcome import ApiFailure
from spotify_agent.core.resilient_caller import ResilientCaller
from spotify_agent.core.state import SignedStateManager
from spotify_agent.errors import TokenExchangeError
from spotify_agent.utils.constants import (
    DEFAULT_SCOPES,
    SPOTIFY_ACCOUNTS_BASE,
    SPOTIFY_AUTHORIZE_URL,
    SPOTIFY_TOKEN_PATH,
)

logger = logging.getLogger(__name__)


class TokenGrant(BaseModel):
    """Tokens returned by the token endpoint."""

    access_token: str
    refresh_token: str | None = None
    expires_in: int = 3600


class OAuthFlowController:
    """Builds login redirects, handles callbacks and exchanges tokens.

    Token-endpoint requests go through ``ResilientCaller.call`` only: an
    authorization code is single-use, so nothing here is retried.
    """

    def __init__(
        self,
        settings: Settings,
        state_manager: SignedStateManager | None = None,
        accounts_caller: ResilientCaller | None = None,
    ):
        self.settings = settings
        self.state_manager = state_manager or SignedStateManager(
            settings.state_secret
        )
        self.accounts_caller = accounts_caller or ResilientCaller(
            SPOTIFY_ACCOUNTS_BASE
        )

    def _client_auth_header(self) -> dict[str, str]:
        credentials = (
            f"{self.settings.spotify_client_id}:{self.settings.spotify_client_secret}"
        )
        encoded = base64.b64encode(credentials.encode()).decode()
        return {
            "Authorization": f"Basic {encoded}",
            "Content-Type": "application/x-www-form-urlencoded",
        }

    def _client_redirect(self, path: str, params: dict[str, str]) -> str:
        return f"{self.settings.client_url}{path}?{urlencode(params)}"

    def build_login_redirect(self, scopes: Iterable[str] | str | None = None) -> str:
        """Return the provider authorization URL for a new login attempt."""
        if scopes is None:
            scopes = DEFAULT_SCOPES
        scope = scopes if isinstance(scopes, str) else " ".join(scopes)

        query = urlencode(
            {
                "response_type": "code",
                "client_id": self.settings.spotify_client_id,
                "scope": scope,
                "redirect_uri": self.settings.redirect_uri,
                "state": self.state_manager.issue(),
                "show_dialog": "true",
            }
        )
        return f"{SPOTIFY_AUTHORIZE_URL}?{query}"

    async def handle_callback(
        self,
        code: str | None,
        state: str | None,
        error: str | None = None,
    ) -> str:
        """Resolve a provider callback into the client redirect URL.

        Returns:
            The URL the end user should be redirected to
        """
        if error:
            # the login attempt is over either way
            self.state_manager.verify_and_consume(state)
            logger.info(f"Provider returned error on callback: {error}")
            return self._client_redirect("/login", {"error": error})

        if not self.state_manager.verify_and_consume(state):
            return self._client_redirect("/login", {"error": "invalid_state"})

        if not code:
            logger.warning("Callback with valid state but no code")
            return self._client_redirect("/login", {"error": "auth_failed"})

        try:
            grant = await self.exchange_code(code)
        except TokenExchangeError as e:
            logger.error(f"Callback error: {e}")
            return self._client_redirect("/login", {"error": "auth_failed"})

        return self._client_redirect(
            "/",
            {
                "access_token": grant.access_token,
                "refresh_token": grant.refresh_token or "",
                "expires_in": str(grant.expires_in),
            },
        )

    async def exchange_code(self, code: str) -> TokenGrant:
        """Exchange an authorization code for tokens.

        Raises:
            TokenExchangeError: If the provider rejects the code or the
                request cannot be made
        """
        outcome = await self.accounts_caller.call(
            "POST",
            SPOTIFY_TOKEN_PATH,
            headers=self._client_auth_header(),
            data={
                "code": code,
                "redirect_uri": self.settings.redirect_uri,
                "grant_type": "authorization_code",
            },
        )
        if isinstance(outcome, ApiFailure):
            raise TokenExchangeError(outcome.message, outcome.code)

        try:
            return TokenGrant(**outcome.data)
        except (TypeError, ValueError) as e:
            raise TokenExchangeError(f"Malformed token response: {e}") from e

    async def refresh_access_token(self, refresh_token: str) -> TokenGrant | None:
        """Exchange a refresh token; None on any failure."""
        if not refresh_token:
            return None

        outcome = await self.accounts_caller.call(
            "POST",
            SPOTIFY_TOKEN_PATH,
            headers=self._client_auth_header(),
            data={"grant_type": "refresh_token", "refresh_token": refresh_token},
        )
        if isinstance(outcome, ApiFailure):
            logger.error(f"Refresh error: {outcome.code} {outcome.message}")
            return None

        try:
            return TokenGrant(**outcome.data)
        except (TypeError, ValueError) as e:
            logger.error(f"Refresh error: malformed token response: {e}")
            return None

    async def exchange_refresh_token(self, refresh_token: str) -> str | None:
        """Return a new access token, or None if the refresh failed."""
        grant = await self.refresh_access_token(refresh_token)
        return grant.access_token if grant else None
