"""Liveness probe."""

from __future__ import annotations

import logging

from flask import Blueprint, current_app
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from todo_auth.api.deps import json_response, timing
from todo_auth.core.extensions import db

bp = Blueprint("health", __name__)

log = logging.getLogger(__name__)


def _database_ok() -> bool:
    try:
        db.session.execute(text("SELECT 1"))
    except SQLAlchemyError:  # pragma: no cover - depends on DB backend
        log.exception("Health probe could not reach the database")
        return False
    return True


@bp.get("/health")
@timing
def healthcheck():
    """Report process, database and refresh-token backend status."""
    cfg = current_app.config
    return json_response(
        {
            "status": "ok",
            "db": "ok" if _database_ok() else "fail",
            "refresh_token_backend": cfg.get("REFRESH_TOKEN_BACKEND", "sqlalchemy"),
            "version": cfg.get("APP_VERSION", "dev"),
        }
    )
