"""Environment variable loading utilities."""

import logging
import os
from pathlib import Path

from dotenv import load_dotenv

logger = logging.getLogger(__name__)


def load_env(env_file: str | Path | None = None) -> bool:
    """Load environment variables from a .env file.

    An explicit ``env_file`` wins; otherwise ``SPOTIFY_AGENT_ENV_FILE`` is
    honoured, then the standard dotenv search from the working directory.
    Variables already present in the process environment are never
    overridden.

    Returns:
        True if a .env file was found and loaded
    """
    path = env_file or os.environ.get("SPOTIFY_AGENT_ENV_FILE")
    if path:
        path = Path(path)
        if not path.exists():
            logger.warning(f"Env file not found: {path}")
            return False
        loaded = load_dotenv(path)
        logger.debug(f"Loaded environment from: {path}")
        return loaded

    return load_dotenv()
