"""Tests for the ``flask tokens`` administration commands."""

from __future__ import annotations

import pytest

from todo_auth.core.extensions import db
from todo_auth.services.account.dto import RegisterIn


@pytest.fixture()
def runner(app, session):
    return app.test_cli_runner()


@pytest.fixture()
def registered(app, session):
    """Register a user through the account service and return its first pair."""
    with app.app_context():
        result = app.extensions["account_service"].register(
            RegisterIn(username="cli-user", email="cli@example.com", password="hunter22")
        )
        user = app.extensions["account_service"].identity.find_by_username("cli-user")
    assert result.success
    return user, result


def test_init_db_creates_schema(runner, monkeypatch):
    calls = []
    monkeypatch.setattr(db, "create_all", lambda: calls.append("create_all"))

    result = runner.invoke(args=["tokens", "init-db"])

    assert result.exit_code == 0
    assert calls == ["create_all"]
    assert "Database schema ready." in result.output


def test_list_without_tokens(runner):
    result = runner.invoke(args=["tokens", "list", "nobody"])

    assert result.exit_code == 0
    assert "(no tokens)" in result.output


def test_list_masks_tokens(runner, registered):
    user, pair = registered

    result = runner.invoke(args=["tokens", "list", user.id])

    assert result.exit_code == 0
    assert "state=active" in result.output
    assert pair.refresh_token[:6] in result.output
    assert pair.refresh_token not in result.output


def test_revoke_single_token(app, runner, registered):
    user, pair = registered

    result = runner.invoke(args=["tokens", "revoke", pair.refresh_token])

    assert result.exit_code == 0
    assert result.output.startswith(f"Revoked {pair.refresh_token[:6]}")
    listing = runner.invoke(args=["tokens", "list", user.id])
    assert "state=revoked" in listing.output


def test_revoke_unknown_token(runner):
    result = runner.invoke(args=["tokens", "revoke", "missing-token"])

    assert result.exit_code != 0
    assert "Refresh token not found." in result.output


def test_revoke_user(app, runner, registered):
    user, _ = registered
    with app.app_context():
        second = app.extensions["token_service"].issue(user)
    assert second.refresh_token

    result = runner.invoke(args=["tokens", "revoke-user", user.id])

    assert result.exit_code == 0
    assert f"Revoked 2 refresh token(s) for {user.id}" in result.output

    again = runner.invoke(args=["tokens", "revoke-user", user.id])
    assert f"Revoked 0 refresh token(s) for {user.id}" in again.output
