"""Signed, single-use, time-limited OAuth state tokens.

A token has the transport form ``nonce.expires_at.signature`` where
``expires_at`` is a millisecond Unix timestamp and ``signature`` is the hex
HMAC-SHA256 of ``nonce|expires_at`` under the process state secret. Pending
nonces live in a ``StateStore`` so the in-memory set can be replaced by a
shared store without touching the signing logic.
"""

import hashlib
import hmac
import logging
import secrets
import threading
import time
from collections.abc import Callable
from typing import Protocol

from spotify_agent.utils.constants import STATE_NONCE_BYTES, STATE_TTL_SECONDS

logger = logging.getLogger(__name__)


class StateStore(Protocol):
    """Pending-nonce storage used by ``SignedStateManager``."""

    def insert(self, nonce: str, expires_at: int) -> None: ...

    def lookup(self, nonce: str) -> int | None: ...

    def remove(self, nonce: str) -> bool: ...


class InMemoryStateStore:
    """Thread-safe pending-nonce map (nonce -> expires_at in ms).

    Expired entries are dropped lazily whenever a new nonce is inserted.
    """

    def __init__(self, clock: Callable[[], float] = time.time):
        self._entries: dict[str, int] = {}
        self._lock = threading.Lock()
        self._clock = clock

    def insert(self, nonce: str, expires_at: int) -> None:
        now_ms = int(self._clock() * 1000)
        with self._lock:
            expired = [n for n, exp in self._entries.items() if exp <= now_ms]
            for n in expired:
                del self._entries[n]
            self._entries[nonce] = expires_at

    def lookup(self, nonce: str) -> int | None:
        with self._lock:
            return self._entries.get(nonce)

    def remove(self, nonce: str) -> bool:
        with self._lock:
            return self._entries.pop(nonce, None) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


class SignedStateManager:
    """Issues and verifies OAuth ``state`` values."""

    def __init__(
        self,
        secret: str,
        store: StateStore | None = None,
        ttl_seconds: int = STATE_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
    ):
        self._secret = secret.encode()
        self._clock = clock
        self.store = store if store is not None else InMemoryStateStore(clock)
        self.ttl_seconds = ttl_seconds

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)

    def _sign(self, nonce: str, expires_at: str) -> str:
        return hmac.new(
            self._secret, f"{nonce}|{expires_at}".encode(), hashlib.sha256
        ).hexdigest()

    def issue(self) -> str:
        """Create a new state token and record its nonce as pending."""
        nonce = secrets.token_hex(STATE_NONCE_BYTES)
        expires_at = self._now_ms() + self.ttl_seconds * 1000
        signature = self._sign(nonce, str(expires_at))

        self.store.insert(nonce, expires_at)
        return f"{nonce}.{expires_at}.{signature}"

    def verify_and_consume(self, token: str | None) -> bool:
        """Check a state token and consume its nonce.

        Nothing is removed until the signature checks out, so a forged
        token cannot burn a pending nonce. A genuine but expired token is
        removed and rejected.
        """
        if not token or not isinstance(token, str):
            return False

        parts = token.split(".")
        if len(parts) != 3 or not all(parts):
            logger.debug("Rejected state: malformed")
            return False

        nonce, expires_raw, signature = parts
        if not (expires_raw.isascii() and expires_raw.isdigit()):
            logger.debug("Rejected state: malformed expiry")
            return False

        expected = self._sign(nonce, expires_raw)
        if not hmac.compare_digest(expected.encode(), signature.encode()):
            logger.warning("Rejected state: signature mismatch")
            return False

        expires_at = int(expires_raw)
        if self._now_ms() >= expires_at:
            # genuine but late: the login attempt is over
            self.store.remove(nonce)
            logger.info("Rejected state: expired")
            return False

        pending_expiry = self.store.lookup(nonce)
        if pending_expiry is None or pending_expiry != expires_at:
            logger.warning("Rejected state: nonce not pending")
            return False

        # remove() is the atomic claim; a concurrent consumer loses here
        return self.store.remove(nonce)
