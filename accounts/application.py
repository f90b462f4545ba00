"""Wire a configured store into an :class:`AccountService`."""
from __future__ import annotations

import logging
from typing import Optional

from .config import AccountsConfig, resolve_config
from .database import SQLiteAccountStore
from .service import AccountService
from .store import AccountStore

logger = logging.getLogger("accountstore.application")


def create_account_service(
    config: Optional[AccountsConfig] = None,
    *,
    store: Optional[AccountStore] = None,
) -> AccountService:
    """Build the account service and make sure its schema exists.

    ``store`` overrides the SQLite backend selected by ``config``.
    """

    if store is None:
        if config is None:
            config = resolve_config()
        store = SQLiteAccountStore(config.database_path)
        logger.info("Using SQLite account store at %s", config.database_path)

    service = AccountService(store)
    service.auto_migrate()
    return service


__all__ = ["create_account_service"]
