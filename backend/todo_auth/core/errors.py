"""Application-wide RFC 7807 error responses.

The account blueprint answers with its own ``{success, errors}`` envelope
(see :mod:`todo_auth.api.errors`); everything else that fails, including
unknown routes, gets ``application/problem+json``.
"""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Any

from flask import Flask, Response, jsonify, request
from redis.exceptions import RedisError  # type: ignore[import-untyped]
from sqlalchemy.exc import OperationalError
from werkzeug.exceptions import HTTPException

from todo_auth.core.logger import ensure_request_id

log = logging.getLogger(__name__)


def _code_for(status: int) -> str:
    """``404`` -> ``"not_found"``; unknown statuses map to ``"error"``."""
    try:
        return HTTPStatus(status).name.lower()
    except ValueError:
        return "error"


def problem_response(
    status: int,
    detail: str,
    *,
    code: str | None = None,
) -> tuple[Response, int]:
    """
    Build a Problem Details response.

    :param status: HTTP status code.
    :param detail: Client-safe explanation.
    :param code: Stable machine-readable code; derived from ``status`` if omitted.
    :returns: ``(response, status)`` ready to return from a handler.
    """
    status = int(status)
    body: dict[str, Any] = {
        "type": "about:blank",
        "title": HTTPStatus(status).phrase,
        "status": status,
        "detail": detail,
        "instance": request.path,
        "code": code or _code_for(status),
        "request_id": ensure_request_id(),
    }
    resp = jsonify(body)
    resp.mimetype = "application/problem+json"
    return resp, status


class APIError(Exception):
    """
    An error the API layer turns into a client response.

    Parameters
    ----------
    message : str
        Client-safe description.
    status_code : int, optional
        HTTP status, ``400`` by default.
    code : str, optional
        Machine-readable identifier, derived from the status when omitted.
    """

    def __init__(self, message: str, status_code: int = 400, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = int(status_code)
        self.code = code or _code_for(self.status_code)


class Unauthorized(APIError):
    """Missing, malformed or expired bearer access token."""

    def __init__(self, message: str = "Unauthorized") -> None:
        super().__init__(message, status_code=HTTPStatus.UNAUTHORIZED)


def init_app(app: Flask) -> None:
    """
    Register the problem+json handlers.

    Notes
    -----
    - 4xx are logged as warnings, 5xx as errors with ``exc_info``.
    - Storage outages (database or Redis) become ``503``; internals never
      reach the client.
    """

    @app.errorhandler(APIError)
    def _api_error(err: APIError):
        log.warning("APIError", extra={"reason": err.code})
        return problem_response(err.status_code, err.message, code=err.code)

    @app.errorhandler(HTTPException)
    def _http_error(err: HTTPException):
        status = int(err.code or HTTPStatus.INTERNAL_SERVER_ERROR)
        if status == HTTPStatus.NOT_FOUND:
            detail = f"Route '{request.path}' not found"
        else:
            detail = (err.description or HTTPStatus(status).phrase).strip()
        (log.error if status >= 500 else log.warning)(
            "HTTPException", extra={"reason": _code_for(status)}
        )
        return problem_response(status, detail)

    @app.errorhandler(OperationalError)
    @app.errorhandler(RedisError)
    def _storage_unavailable(err: Exception):
        log.error("Token storage unavailable", exc_info=err, extra={"reason": "storage_unavailable"})
        return problem_response(
            HTTPStatus.SERVICE_UNAVAILABLE,
            "Service temporarily unavailable",
        )

    @app.errorhandler(Exception)
    def _unexpected(err: Exception):
        log.error("Unhandled exception", exc_info=err, extra={"reason": "internal_fault"})
        return problem_response(HTTPStatus.INTERNAL_SERVER_ERROR, "Unexpected error")
