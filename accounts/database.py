"""SQLite-backed persistence for user accounts."""
from __future__ import annotations

import logging
import sqlite3
import threading
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator, Optional, Union

from .errors import BackendError, ConstraintViolationError, NotFoundError, require_positive_id
from .models import User
from .store import normalize_email

logger = logging.getLogger("accountstore.database")

MEMORY_DATABASE = ":memory:"

# Largest rowid SQLite can bind; larger ids cannot name a stored user.
_MAX_ROWID = 2**63 - 1


def _ensure_directory(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)


def resolve_database_path(env_value: Optional[str]) -> Union[Path, str]:
    """Resolve the on-disk path for the account database."""

    if env_value == MEMORY_DATABASE:
        return MEMORY_DATABASE
    if env_value:
        return Path(env_value).expanduser().resolve(strict=False)
    base_dir = Path(__file__).resolve().parent.parent / "data"
    return (base_dir / "accounts.sqlite3").resolve(strict=False)


def _current_timestamp() -> datetime:
    return datetime.now(timezone.utc)


def _serialize_datetime(value: datetime) -> str:
    return value.isoformat()


def _parse_datetime(value: str) -> datetime:
    return datetime.fromisoformat(value)


class SQLiteAccountStore:
    """Account store backed by a single SQLite connection.

    The connection is shared between threads and every statement runs under
    ``self._lock`` inside its own transaction. Email uniqueness is enforced by
    a unique index so concurrent creates cannot both succeed.
    """

    def __init__(self, path: Union[Path, str]) -> None:
        if str(path) != MEMORY_DATABASE:
            path = Path(path)
            _ensure_directory(path)
        self._path = path
        self._lock = threading.Lock()
        try:
            self._conn = sqlite3.connect(str(path), check_same_thread=False)
        except sqlite3.Error as exc:
            raise BackendError(f"Could not open account database at {path}") from exc
        self._conn.row_factory = sqlite3.Row

    @property
    def path(self) -> Union[Path, str]:
        return self._path

    @contextmanager
    def _transaction(self) -> Iterator[sqlite3.Connection]:
        with self._lock:
            try:
                with self._conn:
                    yield self._conn
            except sqlite3.IntegrityError as exc:
                raise ConstraintViolationError(f"User record violates a storage constraint: {exc}") from exc
            except sqlite3.Error as exc:
                raise BackendError(f"Account database error: {exc}") from exc

    # ------------------------------------------------------------------
    # Schema lifecycle
    # ------------------------------------------------------------------
    def auto_migrate(self) -> None:
        """Create the users table if needed and bring older layouts up to date."""

        with self._transaction() as conn:
            conn.executescript(
                """
                CREATE TABLE IF NOT EXISTS users (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    name TEXT NOT NULL DEFAULT '',
                    email TEXT NOT NULL,
                    password_hash TEXT NOT NULL,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                );
                """
            )

            columns = {
                row["name"]
                for row in conn.execute("PRAGMA table_info(users)").fetchall()
            }
            if "updated_at" not in columns:
                conn.execute("ALTER TABLE users ADD COLUMN updated_at TEXT NOT NULL DEFAULT ''")
                conn.execute("UPDATE users SET updated_at = created_at WHERE updated_at = ''")
                logger.info("Added updated_at column to users table")

            conn.execute("CREATE UNIQUE INDEX IF NOT EXISTS idx_users_email ON users(email)")
        logger.info("Account schema migrated at %s", self._path)

    def destructive_reset(self) -> None:
        with self._transaction() as conn:
            conn.execute("DROP TABLE IF EXISTS users")
        logger.info("Dropped users table at %s", self._path)
        self.auto_migrate()

    def close(self) -> None:
        with self._lock:
            try:
                self._conn.close()
            except sqlite3.Error as exc:
                raise BackendError(f"Failed to close account database: {exc}") from exc

    # ------------------------------------------------------------------
    # User management
    # ------------------------------------------------------------------
    def create(self, user: User) -> None:
        created_at = _current_timestamp()
        email = normalize_email(user.email)

        with self._transaction() as conn:
            cursor = conn.execute(
                """
                INSERT INTO users (name, email, password_hash, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?)
                """,
                (
                    user.name,
                    email,
                    user.password_hash,
                    _serialize_datetime(created_at),
                    _serialize_datetime(created_at),
                ),
            )
            user_id = cursor.lastrowid

        user.id = int(user_id)
        user.email = email
        user.created_at = created_at
        user.updated_at = created_at

    def by_id(self, user_id: int) -> User:
        require_positive_id(user_id)
        if user_id > _MAX_ROWID:
            raise NotFoundError(f"No user with id {user_id}")
        with self._transaction() as conn:
            row = conn.execute("SELECT * FROM users WHERE id = ?", (user_id,)).fetchone()
        if row is None:
            raise NotFoundError(f"No user with id {user_id}")
        return self._row_to_user(row)

    def by_email(self, email: str) -> User:
        with self._transaction() as conn:
            row = conn.execute(
                "SELECT * FROM users WHERE email = ?",
                (normalize_email(email),),
            ).fetchone()
        if row is None:
            raise NotFoundError("No user with that email address")
        return self._row_to_user(row)

    def update(self, user: User) -> None:
        user_id = require_positive_id(user.id)
        if user_id > _MAX_ROWID:
            raise NotFoundError(f"No user with id {user_id}")
        updated_at = _current_timestamp()
        email = normalize_email(user.email)

        with self._transaction() as conn:
            cursor = conn.execute(
                """
                UPDATE users
                   SET name = ?, email = ?, password_hash = ?, updated_at = ?
                 WHERE id = ?
                """,
                (user.name, email, user.password_hash, _serialize_datetime(updated_at), user_id),
            )
            if cursor.rowcount == 0:
                raise NotFoundError(f"No user with id {user_id}")

        user.email = email
        user.updated_at = updated_at

    def delete(self, user_id: int) -> None:
        require_positive_id(user_id)
        if user_id > _MAX_ROWID:
            return
        with self._transaction() as conn:
            conn.execute("DELETE FROM users WHERE id = ?", (user_id,))

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _row_to_user(self, row: sqlite3.Row) -> User:
        return User(
            id=int(row["id"]),
            name=str(row["name"]),
            email=str(row["email"]),
            password_hash=str(row["password_hash"]),
            created_at=_parse_datetime(str(row["created_at"])),
            updated_at=_parse_datetime(str(row["updated_at"])),
        )


__all__ = ["MEMORY_DATABASE", "SQLiteAccountStore", "resolve_database_path"]
