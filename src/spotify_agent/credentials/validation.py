"""Helpers for comparing and displaying secrets."""

import hmac


def mask_secret(secret: str | None, show_chars: int = 4) -> str:
    """Mask a secret for safe display.

    Args:
        secret: The value to mask
        show_chars: Number of characters to show at start and end

    Returns:
        Masked string of fixed shape, e.g. ``abcd****wxyz``; the secret's
        length is not revealed
    """
    if not secret:
        return "***missing***"

    if len(secret) <= show_chars * 2:
        return "********"

    start = secret[:show_chars]
    end = secret[-show_chars:]
    return f"{start}****{end}"


def secrets_match(supplied: str | None, expected: str | None) -> bool:
    """Constant-time comparison; an unset expected value never matches."""
    if not supplied or not expected:
        return False
    return hmac.compare_digest(supplied.encode(), expected.encode())
