"""Cryptographically secure random tokens for sessions and remember-me cookies."""
from __future__ import annotations

import base64
import secrets

from .errors import InvalidArgumentError, RandomSourceError

# Byte length of remember tokens (256 bits). Not configurable by call sites.
REMEMBER_TOKEN_BYTES = 32


def random_bytes(n: int) -> bytes:
    """Return ``n`` bytes from the operating system CSPRNG."""

    if n < 0:
        raise InvalidArgumentError(f"Byte count must not be negative: {n}")
    try:
        data = secrets.token_bytes(n)
    except (OSError, NotImplementedError) as exc:
        raise RandomSourceError(f"Entropy source failed to supply {n} bytes") from exc
    if len(data) != n:
        raise RandomSourceError(f"Entropy source returned {len(data)} of {n} bytes")
    return data


def random_token(n: int) -> str:
    """Return a URL-safe base64 encoding of ``n`` random bytes."""

    return base64.urlsafe_b64encode(random_bytes(n)).decode("ascii")


def remember_token() -> str:
    return random_token(REMEMBER_TOKEN_BYTES)


__all__ = ["REMEMBER_TOKEN_BYTES", "random_bytes", "random_token", "remember_token"]
