"""Constants for API endpoints and configuration."""

# API endpoints
SPOTIFY_API_BASE = "https://api.spotify.com/v1"
SPOTIFY_ACCOUNTS_BASE = "https://accounts.spotify.com"
SPOTIFY_AUTHORIZE_URL = f"{SPOTIFY_ACCOUNTS_BASE}/authorize"
SPOTIFY_TOKEN_PATH = "/api/token"

# OAuth configuration
DEFAULT_SCOPES = (
    "user-read-recently-played",
    "user-read-private",
    "user-read-email",
    "user-top-read",
    "playlist-modify-private",
    "playlist-read-private",
    "user-read-playback-state",
    "playlist-modify-public",
)
STATE_TTL_SECONDS = 600
STATE_NONCE_BYTES = 16

# HTTP configuration
USER_AGENT = "spotify-tool-agent/1.0"
DEFAULT_TIMEOUT = 30.0

# Credential headers
API_KEY_HEADER = "x-api-key"
OAUTH_HEADER_PREFIX = "x-oauth-"
VARIABLE_HEADER_PREFIX = "x-variable-"
