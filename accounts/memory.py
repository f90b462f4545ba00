"""In-process account store for tests and throwaway environments."""
from __future__ import annotations

import threading
from dataclasses import replace
from datetime import datetime, timezone
from typing import Dict

from .errors import BackendError, ConstraintViolationError, NotFoundError, require_positive_id
from .models import User
from .store import normalize_email


class MemoryAccountStore:
    """Dictionary-backed store with the same semantics as the SQLite backend."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._users: Dict[int, User] = {}
        self._ids_by_email: Dict[str, int] = {}
        self._next_id = 1
        self._migrated = False
        self._closed = False

    def _check_open(self) -> None:
        if self._closed:
            raise BackendError("Account store is closed")
        if not self._migrated:
            raise BackendError("Account store has not been migrated")

    @staticmethod
    def _copy(user: User) -> User:
        return replace(user, password="")

    def auto_migrate(self) -> None:
        with self._lock:
            if self._closed:
                raise BackendError("Account store is closed")
            self._migrated = True

    def destructive_reset(self) -> None:
        with self._lock:
            if self._closed:
                raise BackendError("Account store is closed")
            self._users.clear()
            self._ids_by_email.clear()
            self._next_id = 1
        self.auto_migrate()

    def close(self) -> None:
        with self._lock:
            self._closed = True

    def create(self, user: User) -> None:
        email = normalize_email(user.email)
        created_at = datetime.now(timezone.utc)
        with self._lock:
            self._check_open()
            if email in self._ids_by_email:
                raise ConstraintViolationError("A user with that email already exists")
            user_id = self._next_id
            self._next_id += 1
            user.id = user_id
            user.email = email
            user.created_at = created_at
            user.updated_at = created_at
            self._users[user_id] = self._copy(user)
            self._ids_by_email[email] = user_id

    def by_id(self, user_id: int) -> User:
        require_positive_id(user_id)
        with self._lock:
            self._check_open()
            stored = self._users.get(user_id)
            if stored is None:
                raise NotFoundError(f"No user with id {user_id}")
            return self._copy(stored)

    def by_email(self, email: str) -> User:
        with self._lock:
            self._check_open()
            user_id = self._ids_by_email.get(normalize_email(email))
            if user_id is None:
                raise NotFoundError("No user with that email address")
            return self._copy(self._users[user_id])

    def update(self, user: User) -> None:
        user_id = require_positive_id(user.id)
        email = normalize_email(user.email)
        with self._lock:
            self._check_open()
            stored = self._users.get(user_id)
            if stored is None:
                raise NotFoundError(f"No user with id {user_id}")
            owner = self._ids_by_email.get(email)
            if owner is not None and owner != user_id:
                raise ConstraintViolationError("A user with that email already exists")

            self._ids_by_email.pop(stored.email, None)
            self._ids_by_email[email] = user_id
            user.email = email
            user.updated_at = datetime.now(timezone.utc)
            self._users[user_id] = replace(
                self._copy(user), id=user_id, created_at=stored.created_at
            )

    def delete(self, user_id: int) -> None:
        require_positive_id(user_id)
        with self._lock:
            self._check_open()
            stored = self._users.pop(user_id, None)
            if stored is not None:
                self._ids_by_email.pop(stored.email, None)


__all__ = ["MemoryAccountStore"]
