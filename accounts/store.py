"""Persistence contract every account backend must satisfy."""
from __future__ import annotations

from typing import Protocol

from .models import User


class AccountStore(Protocol):
    """
    Storage interface for user accounts.

    Implementations classify their own failures into :mod:`accounts.errors`
    before raising: duplicate emails become ``ConstraintViolationError``,
    missing records ``NotFoundError``, non-positive identifiers
    ``InvalidArgumentError`` and anything else ``BackendError``. Every
    implementation must be safe for concurrent use.
    """

    def create(self, user: User) -> None:
        """Insert ``user`` and backfill its id, email and timestamps."""
        ...

    def by_id(self, user_id: int) -> User:
        ...

    def by_email(self, email: str) -> User:
        ...

    def update(self, user: User) -> None:
        """Persist every mutable field of ``user``, keyed by ``user.id``."""
        ...

    def delete(self, user_id: int) -> None:
        """Remove the record. Deleting an absent record is not an error."""
        ...

    def close(self) -> None:
        ...

    def auto_migrate(self) -> None:
        ...

    def destructive_reset(self) -> None:
        """Drop the user storage and rebuild it. Never run against live data."""
        ...


def normalize_email(email: str) -> str:
    """Email policy shared by the bundled backends: trimmed and lower-cased."""

    return email.strip().lower()


__all__ = ["AccountStore", "normalize_email"]
