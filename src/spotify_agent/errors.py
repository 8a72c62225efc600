"""Exceptions raised across the service."""


class SpotifyAgentError(Exception):
    """Base class for service errors."""


class ConfigurationError(SpotifyAgentError):
    """Required configuration is missing or malformed."""

    def __init__(self, missing: list[str], message: str | None = None):
        self.missing = missing
        super().__init__(
            message
            or f"Missing required environment variables: {', '.join(missing)}"
        )


class TokenExchangeError(SpotifyAgentError):
    """The provider did not return tokens for an authorization code."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)
