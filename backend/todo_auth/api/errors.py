"""``{success, errors}`` envelope handlers for the account endpoints."""

from __future__ import annotations

import logging
from http import HTTPStatus

from flask import Blueprint, Response, jsonify
from marshmallow import ValidationError
from werkzeug.exceptions import HTTPException

from todo_auth.core.errors import APIError
from todo_auth.services._shared.errors import InvalidPayloadError, ServiceError

log = logging.getLogger(__name__)


def envelope(errors: list[str], *, status: int = HTTPStatus.BAD_REQUEST) -> Response:
    """
    Build a failed result envelope.

    :param errors: Client-safe messages.
    :param status: HTTP status code to emit.
    :returns: JSON response ``{"success": false, "errors": [...]}``.
    """
    response = jsonify({"success": False, "errors": list(errors)})
    response.status_code = int(status)
    return response


def register_envelope_handlers(bp: Blueprint) -> None:
    """
    Attach envelope error handlers to ``bp``.

    Missing or malformed fields become ``400 "Invalid payload"``; service
    refusals keep their client-safe message; anything unexpected is logged
    and answered with a generic 500 so no exception escapes the blueprint.
    """

    @bp.errorhandler(ValidationError)
    def _validation_error_handler(err: ValidationError) -> Response:
        log.info("Rejected payload", extra={"reason": "invalid_payload"})
        return envelope([str(InvalidPayloadError())])

    @bp.errorhandler(ServiceError)
    def _service_error_handler(err: ServiceError) -> Response:
        return envelope([str(err)])

    @bp.errorhandler(APIError)
    def _api_error_handler(err: APIError) -> Response:
        return envelope([err.message], status=err.status_code)

    @bp.errorhandler(HTTPException)
    def _http_exception_handler(err: HTTPException) -> Response:
        status = int(err.code or HTTPStatus.INTERNAL_SERVER_ERROR)
        message = (err.name or HTTPStatus(status).phrase).strip()
        return envelope([message], status=status)

    @bp.errorhandler(Exception)
    def _unhandled_error_handler(err: Exception) -> Response:
        log.error("Unhandled account error", exc_info=err)
        return envelope(["Unexpected error"], status=HTTPStatus.INTERNAL_SERVER_ERROR)
