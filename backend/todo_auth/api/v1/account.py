"""Account endpoints: register, login, token rotation, logout and whoami."""

from __future__ import annotations

from http import HTTPStatus

from flask import Blueprint, Response
from flask_jwt_extended import get_jwt

from todo_auth.api.deps import json_body, json_response, require_auth, timing
from todo_auth.api.errors import register_envelope_handlers
from todo_auth.core.container import get_account_service, get_token_service
from todo_auth.core.errors import Unauthorized
from todo_auth.schemas import (
    AuthResultSchema,
    LoginSchema,
    LogoutSchema,
    RegisterSchema,
    TokenRequestSchema,
    WhoAmISchema,
)
from todo_auth.services._shared.ports import IdentityUser
from todo_auth.services.account.dto import AuthResult

bp = Blueprint("account", __name__)
register_envelope_handlers(bp)

register_schema = RegisterSchema()
login_schema = LoginSchema()
token_request_schema = TokenRequestSchema()
logout_schema = LogoutSchema()
result_schema = AuthResultSchema()
whoami_schema = WhoAmISchema()


def _result_response(result: AuthResult) -> Response:
    status = HTTPStatus.OK if result.success else HTTPStatus.BAD_REQUEST
    return json_response(result_schema.dump(result), status=status)


def _current_user() -> IdentityUser:
    user_id = get_jwt().get("userId")
    user = get_account_service().identity.find_by_id(str(user_id)) if user_id else None
    if user is None:
        raise Unauthorized()
    return user


@bp.post("/register")
@timing
def register():
    """Create an account and return its first token pair."""

    dto = register_schema.load(json_body())
    return _result_response(get_account_service().register(dto))


@bp.post("/login")
@timing
def login():
    """Authenticate credentials and issue a token pair."""

    dto = login_schema.load(json_body())
    return _result_response(get_account_service().login(dto))


@bp.post("/refresh-token")
@timing
def refresh_token():
    """Exchange an access token and its refresh token for a new pair."""

    dto = token_request_schema.load(json_body())
    return _result_response(get_account_service().refresh(dto))


@bp.post("/logout")
@require_auth
@timing
def logout():
    """Revoke the caller's refresh token."""

    data = logout_schema.load(json_body())
    user = _current_user()
    get_token_service().revoke(data["refresh_token"], user_id=user.id)
    return Response(status=HTTPStatus.NO_CONTENT)


@bp.get("/me")
@require_auth
@timing
def whoami():
    """Return the authenticated user profile."""

    return json_response(whoami_schema.dump(_current_user()))
