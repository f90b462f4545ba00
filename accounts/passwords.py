"""bcrypt password hashing built on passlib."""
from __future__ import annotations

from passlib.context import CryptContext

from .errors import BackendError, HashingError, InvalidCredentialsError

# bcrypt only looks at the first 72 bytes.
BCRYPT_MAX_PASSWORD_BYTES = 72

# Refuse to hash longer secrets instead of silently truncating them.
_pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__truncate_error=True,
)


def hash_password(password: str) -> str:
    """Return a salted bcrypt hash of ``password``."""

    try:
        return _pwd_context.hash(password)
    except (ValueError, TypeError) as exc:
        raise HashingError(f"Password could not be hashed: {exc}") from exc


def verify_password(password: str, hashed: str) -> None:
    """Check ``password`` against ``hashed`` in constant time.

    Raises :class:`InvalidCredentialsError` on a mismatch and
    :class:`BackendError` when the stored hash cannot be interpreted.
    """

    # passlib truncates on verify; a stored hash never covers more than
    # BCRYPT_MAX_PASSWORD_BYTES, so a longer secret is always wrong.
    if len(password.encode("utf-8")) > BCRYPT_MAX_PASSWORD_BYTES:
        raise InvalidCredentialsError()

    try:
        matched = _pwd_context.verify(password, hashed)
    except (ValueError, TypeError) as exc:
        raise BackendError(f"Stored password hash could not be verified: {exc}") from exc

    if not matched:
        raise InvalidCredentialsError()


__all__ = ["BCRYPT_MAX_PASSWORD_BYTES", "hash_password", "verify_password"]
