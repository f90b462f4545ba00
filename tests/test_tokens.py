from __future__ import annotations

import base64
import re

import pytest

from accounts import tokens
from accounts.errors import InvalidArgumentError, RandomSourceError


def test_random_bytes_returns_requested_length() -> None:
    assert len(tokens.random_bytes(0)) == 0
    assert len(tokens.random_bytes(16)) == 16
    assert len(tokens.random_bytes(64)) == 64


def test_random_bytes_rejects_negative_length() -> None:
    with pytest.raises(InvalidArgumentError):
        tokens.random_bytes(-1)


def test_random_token_is_url_safe_and_decodes_to_requested_length() -> None:
    token = tokens.random_token(32)
    assert re.fullmatch(r"[A-Za-z0-9_\-=]+", token)
    assert len(base64.urlsafe_b64decode(token)) == 32


def test_random_tokens_do_not_collide() -> None:
    seen = {tokens.random_token(32) for _ in range(10_000)}
    assert len(seen) == 10_000


def test_remember_token_uses_fixed_length() -> None:
    assert tokens.REMEMBER_TOKEN_BYTES == 32
    token = tokens.remember_token()
    assert len(base64.urlsafe_b64decode(token)) == tokens.REMEMBER_TOKEN_BYTES
    assert token != tokens.remember_token()


def test_entropy_failure_raises_random_source_error(monkeypatch: pytest.MonkeyPatch) -> None:
    def broken(n: int) -> bytes:
        raise OSError("getrandom unavailable")

    monkeypatch.setattr(tokens.secrets, "token_bytes", broken)

    with pytest.raises(RandomSourceError) as excinfo:
        tokens.remember_token()
    assert isinstance(excinfo.value.__cause__, OSError)


def test_short_read_is_not_returned(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(tokens.secrets, "token_bytes", lambda n: b"\x00")

    with pytest.raises(RandomSourceError):
        tokens.random_bytes(32)
