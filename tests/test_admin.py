"""Tests for the admin session gate."""

import pytest

from personal_library_mcp.catalog.admin import AdminGate
from personal_library_mcp.exceptions import NotAuthorizedError


def test_starts_locked():
    assert AdminGate("secret").is_admin is False


def test_correct_secret_unlocks():
    gate = AdminGate("secret")
    assert gate.attempt_login("secret") is True
    assert gate.is_admin is True


def test_wrong_secret_is_rejected():
    gate = AdminGate("secret")
    assert gate.attempt_login("Secret") is False
    assert gate.is_admin is False


def test_failed_attempt_locks_existing_session():
    gate = AdminGate("secret")
    gate.attempt_login("secret")
    assert gate.attempt_login("wrong") is False
    assert gate.is_admin is False


def test_logout_locks():
    gate = AdminGate("secret")
    gate.attempt_login("secret")
    gate.logout()
    assert gate.is_admin is False


def test_require_admin():
    gate = AdminGate("secret")
    with pytest.raises(NotAuthorizedError, match="Admin session required to delete a book"):
        gate.require_admin("delete a book")
    gate.attempt_login("secret")
    gate.require_admin("delete a book")


def test_non_ascii_secret():
    gate = AdminGate("contraseña")
    assert gate.attempt_login("contraseña") is True
