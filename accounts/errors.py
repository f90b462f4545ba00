"""Error taxonomy shared by the account stores and the account service."""
from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Closed set of failure categories surfaced by the account layer."""

    INVALID_ARGUMENT = "invalid_argument"
    NOT_FOUND = "not_found"
    CONSTRAINT_VIOLATION = "constraint_violation"
    INVALID_CREDENTIALS = "invalid_credentials"
    HASHING = "hashing"
    RANDOM_SOURCE = "random_source"
    BACKEND = "backend"


class AccountError(Exception):
    """Base class for every error raised by the account layer."""

    kind: ErrorKind = ErrorKind.BACKEND
    default_message = "account operation failed"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidArgumentError(AccountError, ValueError):
    """Raised when a caller supplies structurally invalid input."""

    kind = ErrorKind.INVALID_ARGUMENT
    default_message = "invalid argument"


class NotFoundError(AccountError):
    """Raised when a lookup finds no matching record."""

    kind = ErrorKind.NOT_FOUND
    default_message = "resource not found"


class ConstraintViolationError(AccountError):
    """Raised when the store rejects a write, e.g. a duplicate email address."""

    kind = ErrorKind.CONSTRAINT_VIOLATION
    default_message = "constraint violated"


class InvalidCredentialsError(AccountError):
    kind = ErrorKind.INVALID_CREDENTIALS
    default_message = "incorrect password provided"


class HashingError(AccountError):
    kind = ErrorKind.HASHING
    default_message = "password could not be hashed"


class RandomSourceError(AccountError):
    kind = ErrorKind.RANDOM_SOURCE
    default_message = "random source unavailable"


class BackendError(AccountError):
    """Any other persistence failure. The underlying cause is chained."""

    kind = ErrorKind.BACKEND
    default_message = "persistence backend failure"


_EXPECTED_KINDS = frozenset(
    {ErrorKind.INVALID_ARGUMENT, ErrorKind.NOT_FOUND, ErrorKind.INVALID_CREDENTIALS}
)


def is_expected(exc: BaseException) -> bool:
    """Return ``True`` for errors the caller can recover from (4xx rather than 5xx)."""

    return isinstance(exc, AccountError) and exc.kind in _EXPECTED_KINDS


def require_positive_id(user_id: object) -> int:
    """Validate an identifier used for lookup, update or delete."""

    if isinstance(user_id, bool) or not isinstance(user_id, int) or user_id <= 0:
        raise InvalidArgumentError(f"ID provided was invalid: {user_id!r}")
    return user_id


__all__ = [
    "AccountError",
    "BackendError",
    "ConstraintViolationError",
    "ErrorKind",
    "HashingError",
    "InvalidArgumentError",
    "InvalidCredentialsError",
    "NotFoundError",
    "RandomSourceError",
    "is_expected",
    "require_positive_id",
]
