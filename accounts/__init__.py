"""Account storage, credential checking and token generation."""

from __future__ import annotations

from .application import create_account_service
from .database import SQLiteAccountStore, resolve_database_path
from .errors import (
    AccountError,
    BackendError,
    ConstraintViolationError,
    ErrorKind,
    HashingError,
    InvalidArgumentError,
    InvalidCredentialsError,
    NotFoundError,
    RandomSourceError,
    is_expected,
)
from .memory import MemoryAccountStore
from .models import User
from .service import AccountService
from .store import AccountStore
from .tokens import REMEMBER_TOKEN_BYTES, random_bytes, random_token, remember_token

__all__ = [
    "AccountError",
    "AccountService",
    "AccountStore",
    "BackendError",
    "ConstraintViolationError",
    "ErrorKind",
    "HashingError",
    "InvalidArgumentError",
    "InvalidCredentialsError",
    "MemoryAccountStore",
    "NotFoundError",
    "REMEMBER_TOKEN_BYTES",
    "RandomSourceError",
    "SQLiteAccountStore",
    "User",
    "create_account_service",
    "is_expected",
    "random_bytes",
    "random_token",
    "remember_token",
    "resolve_database_path",
]
