"""Request helpers shared by the v1 handlers."""

from __future__ import annotations

import functools
import logging
import time
from collections.abc import Callable
from typing import Any, TypeVar

from flask import Response, jsonify, request
from flask_jwt_extended import verify_jwt_in_request
from flask_jwt_extended.exceptions import JWTExtendedException
from jwt import PyJWTError

from todo_auth.core.errors import Unauthorized

F = TypeVar("F", bound=Callable[..., Any])

log = logging.getLogger(__name__)


def json_body() -> dict[str, Any]:
    """The request's JSON object; anything else (including no body) is ``{}``."""
    payload = request.get_json(silent=True)
    return payload if isinstance(payload, dict) else {}


def json_response(payload: Any, *, status: int = 200) -> Response:
    resp = jsonify(payload)
    resp.status_code = status
    return resp


def require_auth(func: F) -> F:
    """
    Reject the request with :class:`Unauthorized` unless it carries a valid
    bearer access token.

    Signature, algorithm and expiry are checked by ``flask-jwt-extended``
    against the same secret the token codec signs with.
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        try:
            verify_jwt_in_request()
        except (JWTExtendedException, PyJWTError) as exc:
            raise Unauthorized() from exc
        return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def timing(func: F) -> F:
    """Log the handler's wall time at DEBUG as ``elapsed_ms``."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        started = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            log.debug(
                "Handled %s",
                request.endpoint,
                extra={
                    "endpoint": request.endpoint,
                    "elapsed_ms": round((time.perf_counter() - started) * 1000, 2),
                },
            )

    return wrapper  # type: ignore[return-value]
