"""Business logic for user accounts layered on top of an :class:`AccountStore`."""
from __future__ import annotations

import logging

from .errors import InvalidArgumentError, InvalidCredentialsError, NotFoundError
from .models import User
from .passwords import hash_password, verify_password
from .store import AccountStore

logger = logging.getLogger("accountstore.service")


class AccountService:
    """Hashes credentials and authenticates users; all state lives in the store.

    The store never sees plaintext passwords. Store errors are already
    classified and pass through unchanged.
    """

    def __init__(self, store: AccountStore) -> None:
        self._store = store

    def create(self, user: User) -> None:
        """Hash ``user.password``, clear it, and insert the user.

        The store backfills ``id``, ``created_at`` and ``updated_at`` on the
        passed-in record.
        """

        self._hash_into(user)
        self._store.create(user)
        logger.info("Created user %s <%s>", user.id, user.email)

    def update(self, user: User) -> None:
        """Persist ``user``; a non-empty ``password`` is rehashed first."""

        if user.password:
            self._hash_into(user)
        self._store.update(user)

    def authenticate(self, email: str, password: str) -> User:
        """Return the user matching ``email`` when ``password`` is correct.

        Missing users raise :class:`NotFoundError` and wrong passwords raise
        :class:`InvalidCredentialsError`, leaving the caller to decide whether
        to tell them apart.
        """

        try:
            user = self._store.by_email(email)
        except NotFoundError:
            logger.warning("Authentication attempt for unknown email %s", email)
            raise

        try:
            verify_password(password, user.password_hash)
        except InvalidCredentialsError:
            logger.warning("Failed authentication attempt for user %s", user.id)
            raise
        return user

    def by_id(self, user_id: int) -> User:
        return self._store.by_id(user_id)

    def by_email(self, email: str) -> User:
        return self._store.by_email(email)

    def delete(self, user_id: int) -> None:
        self._store.delete(user_id)
        logger.info("Deleted user %s", user_id)

    def close(self) -> None:
        self._store.close()

    def auto_migrate(self) -> None:
        self._store.auto_migrate()

    def destructive_reset(self) -> None:
        self._store.destructive_reset()

    @staticmethod
    def _hash_into(user: User) -> None:
        if not user.password:
            raise InvalidArgumentError("Password must not be empty")
        user.password_hash = hash_password(user.password)
        user.password = ""


__all__ = ["AccountService"]
