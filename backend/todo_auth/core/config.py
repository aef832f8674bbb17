"""Environment-driven configuration classes.

``APP_ENV`` picks one of :data:`CONFIG_MAP`; every tunable can be overridden
through an environment variable of the same (or a documented) name.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from datetime import timedelta
from typing import Any, Final

from dotenv import load_dotenv

#: Selects the configuration class: development, testing or production.
ENV_VAR: Final[str] = "APP_ENV"

#: Placeholder signing secret; production refuses to boot with it.
PLACEHOLDER_JWT_SECRET: Final[str] = "CHANGE_ME_JWT"

_TRUTHY: Final = frozenset({"1", "true", "yes", "y", "on"})

# A local .env is honoured when present
load_dotenv()


def env_bool(name: str, default: bool = False) -> bool:
    """
    Read a boolean flag.

    :param name: Environment variable.
    :param default: Returned when the variable is unset.
    :returns: ``True`` for ``1/true/yes/y/on`` in any case, else ``False``.
    """
    raw = os.getenv(name)
    return default if raw is None else raw.strip().lower() in _TRUTHY


def env_seconds(name: str, default: int) -> timedelta:
    """Read a duration given in whole seconds; blank means ``default``."""
    raw = (os.getenv(name) or "").strip()
    return timedelta(seconds=int(raw) if raw else default)


class BaseConfig:
    """
    Settings shared by every environment.

    ``JWT_SECRET_KEY`` signs access tokens and is never logged. The three
    token durations are read from ``*_SECONDS`` variables:
    ``ACCESS_TOKEN_EXPIRES`` (7 days), ``REFRESH_TOKEN_EXPIRES`` (180 days)
    and ``ACCESS_TOKEN_REFRESH_WINDOW`` (5 minutes before access expiry).
    """

    API_BASE_PREFIX = "/api"

    SECRET_KEY = os.getenv("SECRET_KEY", "CHANGE_ME")
    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", PLACEHOLDER_JWT_SECRET)
    JWT_ALGORITHM = "HS256"
    JWT_IDENTITY_CLAIM = "sub"
    JWT_TOKEN_LOCATION = ["headers"]

    ACCESS_TOKEN_EXPIRES = env_seconds("ACCESS_TOKEN_EXPIRES_SECONDS", 7 * 24 * 3600)
    REFRESH_TOKEN_EXPIRES = env_seconds("REFRESH_TOKEN_EXPIRES_SECONDS", 180 * 24 * 3600)
    ACCESS_TOKEN_REFRESH_WINDOW = env_seconds("ACCESS_TOKEN_REFRESH_WINDOW_SECONDS", 300)
    # Bearer verification in flask-jwt-extended uses the same lifetime
    JWT_ACCESS_TOKEN_EXPIRES = ACCESS_TOKEN_EXPIRES

    # sqlalchemy | redis | memory
    REFRESH_TOKEN_BACKEND = os.getenv("REFRESH_TOKEN_BACKEND", "sqlalchemy")
    REDIS_URL = os.getenv("REDIS_URL")
    REDIS_SOCKET_TIMEOUT = float(os.getenv("REDIS_SOCKET_TIMEOUT", "2.0"))

    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///./dev.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)
    SQLALCHEMY_ENGINE_OPTIONS: dict[str, Any] = {"pool_pre_ping": True}

    JSON_SORT_KEYS = False
    PROPAGATE_EXCEPTIONS = False

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:5173")

    DEBUG = False
    TESTING = False


class DevelopmentConfig(BaseConfig):
    DEBUG = env_bool("FLASK_DEBUG", True)
    CORS_MAX_AGE = 600


class TestingConfig(BaseConfig):
    """In-memory SQLite (or ``TEST_DATABASE_URL``) and propagated errors."""

    TESTING = True
    SQLALCHEMY_DATABASE_URI = os.getenv("TEST_DATABASE_URL", "sqlite:///:memory:")
    SQLALCHEMY_ENGINE_OPTIONS: dict[str, Any] = {}
    JWT_SECRET_KEY = "testing-secret-key-with-enough-entropy-0123456789"
    REFRESH_TOKEN_BACKEND = "sqlalchemy"
    PROPAGATE_EXCEPTIONS = True


class ProductionConfig(BaseConfig):
    """Bounded pool waits so a saturated database surfaces as ``503``."""

    SQLALCHEMY_ECHO = False
    SQLALCHEMY_ENGINE_OPTIONS: dict[str, Any] = {
        "pool_pre_ping": True,
        "pool_timeout": int(os.getenv("DB_POOL_TIMEOUT", "10")),
    }


CONFIG_MAP: Mapping[str, type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
}


def get_config() -> type[BaseConfig]:
    """Configuration class named by ``APP_ENV``; unknown names mean development."""
    return CONFIG_MAP.get(os.getenv(ENV_VAR, "development").strip().lower(), DevelopmentConfig)


def validate_config(config: Mapping[str, Any]) -> None:
    """Refuse unsafe settings before the app starts serving.

    :param config: Loaded Flask configuration mapping.
    :raises RuntimeError: When production runs with the placeholder secret or
        an unknown refresh-token backend is selected.
    """
    backend = str(config.get("REFRESH_TOKEN_BACKEND", "sqlalchemy")).lower()
    if backend not in {"sqlalchemy", "redis", "memory"}:
        raise RuntimeError(f"Unknown REFRESH_TOKEN_BACKEND {backend!r}")
    if backend == "redis" and not config.get("REDIS_URL"):
        raise RuntimeError("REFRESH_TOKEN_BACKEND=redis requires REDIS_URL")

    is_prod = not config.get("DEBUG") and not config.get("TESTING")
    if is_prod and config.get("JWT_SECRET_KEY") in (None, "", PLACEHOLDER_JWT_SECRET):
        raise RuntimeError("JWT_SECRET_KEY must be set in production")
