"""Domain models for the account store."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass
class User:
    """Represents a user account.

    ``password`` only ever carries plaintext on its way into the service; it
    is cleared once the hash has been computed and is never persisted.
    """

    name: str = ""
    email: str = ""
    password: str = field(default="", repr=False)
    password_hash: str = field(default="", repr=False)
    id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


__all__ = ["User"]
