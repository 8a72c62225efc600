"""
Configuration for the Spotify tool agent.

Values are read from the process environment (after optional .env loading)
once at startup. Host and port keep their defaults so the server can start
for local work; the OAuth client settings are required.
"""

import os
import secrets
from dataclasses import dataclass, field

from spotify_agent.errors import ConfigurationError

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8080

REQUIRED_VARIABLES = (
    "CLIENT_URL",
    "SPOTIFY_CLIENT_ID",
    "SPOTIFY_CLIENT_SECRET",
    "REDIRECT_URI",
)


@dataclass(frozen=True)
class Settings:
    """Process configuration consumed by the OAuth flow and the gate."""

    client_url: str
    spotify_client_id: str
    spotify_client_secret: str = field(repr=False)
    redirect_uri: str
    state_secret: str = field(
        default_factory=lambda: secrets.token_hex(32), repr=False
    )
    server_api_key: str | None = field(default=None, repr=False)
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    mode: str = "development"

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> "Settings":
        """Build settings from environment variables.

        Raises:
            ConfigurationError: If any required variable is missing or
                SERVER_PORT is not a valid port number
        """
        env = os.environ if environ is None else environ

        missing = [name for name in REQUIRED_VARIABLES if not env.get(name)]
        if missing:
            raise ConfigurationError(missing)

        raw_port = env.get("SERVER_PORT") or str(DEFAULT_PORT)
        try:
            port = int(raw_port)
        except ValueError:
            port = 0
        if not 0 < port < 65536:
            raise ConfigurationError(
                [], f"Invalid SERVER_PORT: {raw_port!r} is not a port number"
            )

        return cls(
            client_url=env["CLIENT_URL"].rstrip("/"),
            spotify_client_id=env["SPOTIFY_CLIENT_ID"],
            spotify_client_secret=env["SPOTIFY_CLIENT_SECRET"],
            redirect_uri=env["REDIRECT_URI"],
            state_secret=env.get("STATE_SECRET") or secrets.token_hex(32),
            server_api_key=env.get("SERVER_API_KEY") or None,
            host=env.get("SERVER_HOST") or DEFAULT_HOST,
            port=port,
            mode=env.get("NODE_ENV") or env.get("APP_ENV") or "development",
        )
