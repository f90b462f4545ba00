"""Command-line utilities for the account store."""

from __future__ import annotations
import argparse
import logging
import sys
from getpass import getpass
from typing import Callable, Sequence

from accounts.application import create_account_service
from accounts.config import AccountsConfig, resolve_config
from accounts.errors import AccountError, ConstraintViolationError
from accounts.models import User
from accounts.tokens import remember_token

logger = logging.getLogger("accountstore.main")

_MIN_PASSWORD_LENGTH = 12


def _parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Account store utilities")
    parser.add_argument(
        "--db",
        dest="db_path",
        default=None,
        help="Path to the SQLite database (defaults to ACCOUNTS_DB_PATH or data/accounts.sqlite3)",
    )
    parser.add_argument(
        "--config",
        dest="config_path",
        default=None,
        help="YAML configuration file (defaults to ACCOUNTS_CONFIG when set)",
    )
    subparsers = parser.add_subparsers(dest="command")

    parser.set_defaults(command="migrate")

    subparsers.add_parser("migrate", help="Create or upgrade the users table")

    reset_parser = subparsers.add_parser("reset", help="Drop and recreate the users table")
    reset_parser.add_argument(
        "--force",
        action="store_true",
        help="Allow the reset even when the configured environment is prod",
    )

    create_parser = subparsers.add_parser("create-user", help="Create a user account")
    create_parser.add_argument("name", help="Display name for the user")
    create_parser.add_argument("email", help="Unique email address for login")

    subparsers.add_parser("token", help="Print a new remember token")

    return parser.parse_args(list(argv) if argv is not None else sys.argv[1:])


def prompt_for_password(read: Callable[[str], str] = getpass) -> str:
    for _ in range(3):
        password = read("Password: ")
        confirm = read("Confirm password: ")
        if password != confirm:
            print("Passwords do not match. Try again.", file=sys.stderr)
            continue
        if len(password) < _MIN_PASSWORD_LENGTH:
            print(f"Password must be at least {_MIN_PASSWORD_LENGTH} characters long.", file=sys.stderr)
            continue
        return password
    raise SystemExit("Failed to set password after three attempts.")


def _migrate(config: AccountsConfig) -> int:
    service = create_account_service(config)
    service.close()
    print(f"Account database ready at {config.database_path}")
    return 0


def _reset(config: AccountsConfig, *, force: bool) -> int:
    if config.is_prod() and not force:
        print("Refusing to reset the users table in prod without --force.", file=sys.stderr)
        return 1

    service = create_account_service(config)
    try:
        service.destructive_reset()
    finally:
        service.close()
    logger.warning("Users table reset at %s", config.database_path)
    print("Users table dropped and recreated.")
    return 0


def _create_user(config: AccountsConfig, name: str, email: str, password: str) -> int:
    service = create_account_service(config)
    user = User(name=name.strip(), email=email, password=password)
    try:
        service.create(user)
    except ConstraintViolationError:
        print(f"Error: a user with email {email.strip().lower()} already exists", file=sys.stderr)
        return 1
    finally:
        service.close()

    print(f"Created user #{user.id}: {user.name} <{user.email}>")
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)

    if args.command == "token":
        print(remember_token())
        return 0

    try:
        config = resolve_config(args.config_path, database_path=args.db_path)
    except (OSError, ValueError) as exc:
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        return 2

    logging.basicConfig(
        level=config.log_level_number,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        if args.command == "reset":
            return _reset(config, force=args.force)
        if args.command == "create-user":
            return _create_user(config, args.name, args.email, prompt_for_password())
        return _migrate(config)
    except AccountError as exc:
        logger.error("%s failed: %s", args.command, exc)
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
