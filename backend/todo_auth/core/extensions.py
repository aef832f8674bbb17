"""Extension singletons, bound to the app in :func:`init_app`."""

from __future__ import annotations

import redis  # type: ignore[import-untyped]
from flask import Flask
from flask_jwt_extended import JWTManager
from flask_sqlalchemy import SQLAlchemy
from redis.exceptions import RedisError  # type: ignore[import-untyped]
from sqlalchemy import MetaData

# Deterministic constraint names keep DDL stable across dialects
metadata = MetaData(
    naming_convention={
        "pk": "pk_%(table_name)s",
        "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
        "ix": "ix_%(table_name)s_%(column_0_name)s",
        "uq": "uq_%(table_name)s_%(column_0_name)s",
        "ck": "ck_%(table_name)s_%(constraint_name)s",
    }
)

db: SQLAlchemy = SQLAlchemy(metadata=metadata, session_options={"autoflush": False})
jwt = JWTManager()
redis_client: redis.Redis | None = None


def _connect_redis(app: Flask) -> redis.Redis | None:
    """Open the Redis client when refresh tokens live in Redis, else ``None``."""
    url = app.config.get("REDIS_URL")
    if str(app.config.get("REFRESH_TOKEN_BACKEND", "sqlalchemy")).lower() != "redis" or not url:
        return None
    timeout = app.config.get("REDIS_SOCKET_TIMEOUT")
    client = redis.Redis.from_url(url, socket_timeout=timeout, socket_connect_timeout=timeout)
    try:
        client.ping()
    except RedisError as exc:
        raise RuntimeError(f"Failed to connect to Redis at {url!r}") from exc
    return client


def init_app(app: Flask) -> None:
    """
    Bind the database, bearer-token verification and Redis.

    Importing :mod:`todo_auth.models` here registers every table on
    :data:`metadata` before anyone calls ``create_all``.
    """
    global redis_client

    db.init_app(app)
    from todo_auth import models as _models  # noqa: F401

    jwt.init_app(app)

    redis_client = _connect_redis(app)
    if redis_client is None:
        app.extensions.pop("redis_client", None)
    else:
        app.extensions["redis_client"] = redis_client


def get_redis() -> redis.Redis:
    """The client opened by :func:`init_app`; raises when Redis is not configured."""
    if redis_client is None:
        raise RuntimeError("Redis client is not initialized. Call init_app() first.")
    return redis_client
