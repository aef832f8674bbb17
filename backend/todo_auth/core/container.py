"""Per-application wiring of the token lifecycle services."""

from __future__ import annotations

import logging
from typing import cast

from flask import Flask, current_app

from todo_auth.core.extensions import get_redis
from todo_auth.infra.jwt.access_token_codec import JWTAccessTokenCodec
from todo_auth.infra.jwt.signing_key import SigningKeyProvider
from todo_auth.infra.redis.redis_refresh_token_store import RedisRefreshTokenStore
from todo_auth.infra.sqlalchemy.refresh_token_store import SQLAlchemyRefreshTokenStore
from todo_auth.services._shared.ports import (
    Clock,
    InMemoryRefreshTokenStore,
    RefreshTokenStore,
    SecretsRandomSource,
    SystemClock,
)
from todo_auth.services.account.service import AccountService
from todo_auth.services.auth.dto import AuthTokenConfig
from todo_auth.services.auth.service import TokenService
from todo_auth.services.identity.service import IdentityService

log = logging.getLogger(__name__)


def build_refresh_store(app: Flask, *, clock: Clock) -> RefreshTokenStore:
    """Instantiate the refresh-token store selected by ``REFRESH_TOKEN_BACKEND``."""
    backend = str(app.config.get("REFRESH_TOKEN_BACKEND", "sqlalchemy")).lower()
    lifetime = app.config["REFRESH_TOKEN_EXPIRES"]
    random = SecretsRandomSource()
    if backend == "memory":
        return InMemoryRefreshTokenStore(clock=clock, random=random, lifetime=lifetime)
    if backend == "redis":
        return RedisRefreshTokenStore(get_redis(), clock=clock, random=random, lifetime=lifetime)
    return SQLAlchemyRefreshTokenStore(clock=clock, random=random, lifetime=lifetime)


def init_app(app: Flask, *, clock: Clock | None = None) -> None:
    """Build the codec, store and services once and park them on ``app.extensions``.

    Parameters
    ----------
    app: flask.Flask
        Configured application.
    clock: Clock, optional
        Time source shared by every component. Defaults to wall-clock time.
    """
    clock = clock or SystemClock()
    key = SigningKeyProvider(app.config["JWT_SECRET_KEY"])
    codec = JWTAccessTokenCodec(key=key, clock=clock, lifetime=app.config["ACCESS_TOKEN_EXPIRES"])
    store = build_refresh_store(app, clock=clock)
    identity = IdentityService()

    tokens = TokenService(
        codec=codec,
        store=store,
        identity=identity,
        clock=clock,
        token_cfg=AuthTokenConfig(refresh_window=app.config["ACCESS_TOKEN_REFRESH_WINDOW"]),
    )
    app.extensions["token_service"] = tokens
    app.extensions["account_service"] = AccountService(tokens=tokens, identity=identity)
    log.info(
        "Token services configured",
        extra={"backend": type(store).__name__},
    )


def get_token_service() -> TokenService:
    return cast(TokenService, current_app.extensions["token_service"])


def get_account_service() -> AccountService:
    return cast(AccountService, current_app.extensions["account_service"])
