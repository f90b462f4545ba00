from __future__ import annotations

from pathlib import Path
from typing import Iterator

import pytest

from accounts.database import SQLiteAccountStore
from accounts.memory import MemoryAccountStore
from accounts.service import AccountService
from accounts.store import AccountStore


@pytest.fixture(params=["sqlite", "memory"])
def store(request: pytest.FixtureRequest, tmp_path: Path) -> Iterator[AccountStore]:
    if request.param == "sqlite":
        backend: AccountStore = SQLiteAccountStore(tmp_path / "accounts.sqlite3")
    else:
        backend = MemoryAccountStore()
    backend.auto_migrate()
    yield backend
    backend.close()


@pytest.fixture()
def service(store: AccountStore) -> AccountService:
    return AccountService(store)
