# mypy: ignore-errors
# tests/test_security.py
"""Tests for admin key checks and session tokens."""

import pytest

from thought_dump.core.errors import UnauthorizedError
from thought_dump.core.security import create_admin_token, decode_admin_token, verify_admin_key
from thought_dump.core.settings import settings


def test_verify_admin_key() -> None:
    assert verify_admin_key(settings.admin_secret) is True
    assert verify_admin_key("wrong") is False


def test_verify_admin_key_without_secret(monkeypatch) -> None:
    monkeypatch.setattr(settings, "admin_secret", None)
    assert verify_admin_key("") is False


def test_token_round_trip() -> None:
    assert decode_admin_token(create_admin_token("moderator-1")) == "moderator-1"


def test_tampered_token_is_rejected() -> None:
    token = create_admin_token()
    with pytest.raises(UnauthorizedError):
        decode_admin_token(token[:-2] + "xx")
