"""Configuration loading for the account store."""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Dict, Mapping, Optional, Union

import yaml

from .database import resolve_database_path

_VALID_ENVS = {"dev", "test", "prod"}


@dataclass(frozen=True)
class AccountsConfig:
    """Settings consumed when wiring the account service."""

    database_path: Union[Path, str]
    env: str = "dev"
    log_level: str = "INFO"

    def is_prod(self) -> bool:
        return self.env == "prod"

    @property
    def log_level_number(self) -> int:
        return logging.getLevelName(self.log_level)

    @staticmethod
    def from_dict(data: Dict[str, object], base_path: Path | None = None) -> "AccountsConfig":
        """Create an :class:`AccountsConfig` from raw dictionary data."""

        raw_path = data.get("database_path")
        if raw_path is not None and str(raw_path) != ":memory:":
            candidate = Path(str(raw_path)).expanduser()
            if not candidate.is_absolute() and base_path is not None:
                candidate = base_path / candidate
            raw_path = str(candidate)

        return _validated(
            AccountsConfig(
                database_path=resolve_database_path(str(raw_path) if raw_path else None),
                env=str(data.get("env", "dev")).strip().lower(),
                log_level=str(data.get("log_level", "INFO")).strip().upper(),
            )
        )


def _validated(config: AccountsConfig) -> AccountsConfig:
    if config.env not in _VALID_ENVS:
        raise ValueError(
            f"Invalid env {config.env!r}; expected one of {', '.join(sorted(_VALID_ENVS))}"
        )
    if not isinstance(logging.getLevelName(config.log_level), int):
        raise ValueError(f"Invalid log_level {config.log_level!r}")
    return config


def load_config(config_path: Path) -> AccountsConfig:
    """Load settings from the ``accounts`` section of a YAML file."""

    with config_path.open("r", encoding="utf-8") as handle:
        try:
            raw = yaml.safe_load(handle) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Could not parse {config_path}: {exc}") from exc

    section = raw.get("accounts", {}) if isinstance(raw, dict) else None
    if not isinstance(section, dict):
        raise ValueError("Configuration file must define a mapping under the 'accounts' key")
    return AccountsConfig.from_dict(section, base_path=config_path.parent)


def resolve_config(
    config_path: Optional[str] = None,
    *,
    database_path: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> AccountsConfig:
    """Layer explicit arguments over environment variables over the YAML file.

    The YAML file is optional; ``ACCOUNTS_CONFIG`` names it when
    ``config_path`` is not given.
    """

    env = os.environ if environ is None else environ

    path_value = config_path or env.get("ACCOUNTS_CONFIG")
    if path_value:
        config = load_config(Path(path_value).expanduser())
    else:
        config = AccountsConfig.from_dict({})

    db_value = database_path or env.get("ACCOUNTS_DB_PATH")
    if db_value:
        config = replace(config, database_path=resolve_database_path(db_value))
    if env.get("ACCOUNTS_ENV"):
        config = replace(config, env=env["ACCOUNTS_ENV"].strip().lower())
    if env.get("ACCOUNTS_LOG_LEVEL"):
        config = replace(config, log_level=env["ACCOUNTS_LOG_LEVEL"].strip().upper())
    return _validated(config)


__all__ = ["AccountsConfig", "load_config", "resolve_config"]
