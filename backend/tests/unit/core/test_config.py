"""Tests for configuration selection and start-up validation."""

from __future__ import annotations

from datetime import timedelta

import pytest

from todo_auth.core.config import (
    PLACEHOLDER_JWT_SECRET,
    BaseConfig,
    DevelopmentConfig,
    ProductionConfig,
    TestingConfig,
    env_bool,
    env_seconds,
    get_config,
    validate_config,
)
from todo_auth.factory import create_app


@pytest.mark.parametrize(
    "env,expected",
    [
        ("testing", TestingConfig),
        (" Production ", ProductionConfig),
        ("development", DevelopmentConfig),
        ("unknown", DevelopmentConfig),
    ],
)
def test_get_config_reads_app_env(monkeypatch, env, expected):
    monkeypatch.setenv("APP_ENV", env)
    assert get_config() is expected


def test_env_bool(monkeypatch):
    monkeypatch.setenv("FLAG", "Yes")
    assert env_bool("FLAG") is True
    monkeypatch.setenv("FLAG", "off")
    assert env_bool("FLAG", default=True) is False
    monkeypatch.delenv("FLAG")
    assert env_bool("FLAG", default=True) is True


def test_env_seconds(monkeypatch):
    monkeypatch.setenv("WINDOW_SECONDS", "90")
    assert env_seconds("WINDOW_SECONDS", 300) == timedelta(seconds=90)
    monkeypatch.setenv("WINDOW_SECONDS", " ")
    assert env_seconds("WINDOW_SECONDS", 300) == timedelta(minutes=5)


def test_default_token_lifetimes():
    assert BaseConfig.JWT_ALGORITHM == "HS256"
    assert BaseConfig.ACCESS_TOKEN_EXPIRES == timedelta(days=7)
    assert BaseConfig.REFRESH_TOKEN_EXPIRES == timedelta(days=180)
    assert BaseConfig.ACCESS_TOKEN_REFRESH_WINDOW == timedelta(minutes=5)


class TestValidateConfig:
    def test_production_refuses_placeholder_secret(self):
        with pytest.raises(RuntimeError, match="JWT_SECRET_KEY"):
            validate_config({"JWT_SECRET_KEY": PLACEHOLDER_JWT_SECRET})

    def test_production_accepts_real_secret(self):
        validate_config({"JWT_SECRET_KEY": "a-real-secret"})

    def test_development_tolerates_placeholder(self):
        validate_config({"DEBUG": True, "JWT_SECRET_KEY": PLACEHOLDER_JWT_SECRET})

    def test_unknown_backend(self):
        with pytest.raises(RuntimeError, match="REFRESH_TOKEN_BACKEND"):
            validate_config({"TESTING": True, "REFRESH_TOKEN_BACKEND": "mongo"})

    def test_redis_backend_requires_url(self):
        with pytest.raises(RuntimeError, match="REDIS_URL"):
            validate_config({"TESTING": True, "REFRESH_TOKEN_BACKEND": "redis"})

    def test_create_app_validates_before_wiring(self):
        class Unsafe(ProductionConfig):
            JWT_SECRET_KEY = PLACEHOLDER_JWT_SECRET

        with pytest.raises(RuntimeError):
            create_app(Unsafe)
