from __future__ import annotations

import base64
from pathlib import Path

import pytest

import main
from main import _parse_args
from accounts.config import AccountsConfig
from accounts.database import SQLiteAccountStore


def test_default_command_is_migrate() -> None:
    args = _parse_args([])
    assert args.command == "migrate"


def test_global_options_precede_subcommand() -> None:
    args = _parse_args(["--db", "/tmp/x.sqlite3", "create-user", "Alice", "alice@example.com"])
    assert args.command == "create-user"
    assert args.db_path == "/tmp/x.sqlite3"
    assert args.name == "Alice"
    assert args.email == "alice@example.com"


def test_token_command_prints_remember_token(capsys: pytest.CaptureFixture[str]) -> None:
    assert main.main(["token"]) == 0
    token = capsys.readouterr().out.strip()
    assert len(base64.urlsafe_b64decode(token)) == 32


def test_migrate_and_create_user(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    db_path = tmp_path / "cli.sqlite3"
    monkeypatch.setattr(main, "prompt_for_password", lambda: "correct horse battery staple")

    assert main.main(["--db", str(db_path), "migrate"]) == 0
    assert main.main(["--db", str(db_path), "create-user", "Alice", "Alice@Example.com"]) == 0
    assert "Created user #1: Alice <alice@example.com>" in capsys.readouterr().out

    assert main.main(["--db", str(db_path), "create-user", "Again", "alice@example.com"]) == 1
    assert "already exists" in capsys.readouterr().err

    store = SQLiteAccountStore(db_path)
    assert store.by_email("alice@example.com").password_hash.startswith("$2b$")
    store.close()


def test_reset_refused_in_prod_without_force(tmp_path: Path) -> None:
    config = AccountsConfig(database_path=tmp_path / "prod.sqlite3", env="prod")
    assert main._reset(config, force=False) == 1
    assert main._reset(config, force=True) == 0


def test_prompt_for_password_retries_until_valid() -> None:
    answers = iter(["short", "short", "mismatch-one-aaaa", "mismatch-two-bbbb", "long-enough-pass", "long-enough-pass"])
    assert main.prompt_for_password(lambda _prompt: next(answers)) == "long-enough-pass"


def test_prompt_for_password_gives_up() -> None:
    with pytest.raises(SystemExit):
        main.prompt_for_password(lambda _prompt: "short")


def test_malformed_config_exits_with_usage_error(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    config_file = tmp_path / "accounts.yaml"
    config_file.write_text("accounts: [unclosed\n", encoding="utf-8")

    assert main.main(["--config", str(config_file), "migrate"]) == 2
    assert "Invalid configuration" in capsys.readouterr().err
