# tests/unit/services/test_account_service.py
from __future__ import annotations

import pytest

from tests.helpers.utils import age_access_token
from todo_auth.services._shared.errors import InvalidPayloadError
from todo_auth.services.account.dto import AuthResult, LoginIn, RegisterIn
from todo_auth.services.account.service import AccountService
from todo_auth.services.auth.dto import RefreshIn


@pytest.fixture()
def service(token_service, identity) -> AccountService:
    """AccountService on top of the in-memory token pipeline."""
    return AccountService(tokens=token_service, identity=identity)


# ------------------------------- Register ---------------------------------- #
def test_register_issues_pair(service, memory_store, identity):
    result = service.register(RegisterIn(username="bob", email="Bob@X.com", password="hunter2"))

    assert isinstance(result, AuthResult)
    assert result.success is True
    assert result.errors == []
    assert result.token and result.refresh_token

    user = identity.find_by_username("bob")
    assert user is not None and user.email == "bob@x.com"
    record = memory_store.find_by_token(result.refresh_token)
    assert record is not None and record.user_id == user.id


def test_register_duplicate_username_and_email(service):
    result = service.register(RegisterIn(username="alice", email="a@x.com", password="hunter2"))

    assert result.success is False
    assert result.token is None and result.refresh_token is None
    assert result.errors == [
        "Username 'alice' is already taken.",
        "Email 'a@x.com' is already taken.",
    ]


def test_register_short_password(service):
    result = service.register(RegisterIn(username="bob", email="b@x.com", password="abc"))

    assert result.success is False
    assert result.errors == ["Passwords must be at least 6 characters."]


@pytest.mark.parametrize(
    "payload",
    [
        RegisterIn(username="", email="b@x.com", password="hunter2"),
        RegisterIn(username="bob", email="   ", password="hunter2"),
        RegisterIn(username="bob", email="b@x.com", password=None),  # type: ignore[arg-type]
    ],
)
def test_register_missing_fields(service, payload):
    with pytest.raises(InvalidPayloadError):
        service.register(payload)


# -------------------------------- Login ------------------------------------ #
def test_login_issues_pair(service, codec):
    result = service.login(LoginIn(username="alice", password="s3cret!"))

    assert result.success is True
    assert codec.parse(result.token).subject == "a@x.com"


@pytest.mark.parametrize(
    "username,password",
    [("alice", "wrong-password"), ("nobody", "s3cret!")],
)
def test_login_refusal_does_not_reveal_cause(service, username, password):
    result = service.login(LoginIn(username=username, password=password))

    assert result.success is False
    assert result.errors == ["Invalid Username or Password"]
    assert result.token is None


def test_login_missing_password(service):
    with pytest.raises(InvalidPayloadError):
        service.login(LoginIn(username="alice", password=""))


# ------------------------------- Refresh ----------------------------------- #
def test_refresh_rotates(service, clock):
    first = service.login(LoginIn(username="alice", password="s3cret!"))
    age_access_token(clock)

    result = service.refresh(RefreshIn(access_token=first.token, refresh_token=first.refresh_token))

    assert result.success is True
    assert result.refresh_token != first.refresh_token


@pytest.mark.parametrize("replay", [False, True])
def test_refresh_failures_collapse_to_invalid_token(service, clock, replay):
    first = service.login(LoginIn(username="alice", password="s3cret!"))
    age_access_token(clock)
    dto = RefreshIn(access_token=first.token, refresh_token=first.refresh_token)
    if replay:
        assert service.refresh(dto).success is True
    else:
        dto = RefreshIn(access_token=first.token, refresh_token="unknown")

    result = service.refresh(dto)

    assert result.success is False
    assert result.errors == ["Invalid token"]
    assert result.token is None and result.refresh_token is None


def test_refresh_requires_both_tokens(service):
    with pytest.raises(InvalidPayloadError):
        service.refresh(RefreshIn(access_token="abc", refresh_token=""))
