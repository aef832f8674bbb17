"""Account-related Marshmallow schemas."""

from __future__ import annotations

from typing import Any

from marshmallow import EXCLUDE, Schema, fields, post_load, validate

from todo_auth.services.account.dto import LoginIn, RegisterIn
from todo_auth.services.auth.dto import RefreshIn

_required_text = validate.Length(min=1)


class _InputSchema(Schema):
    class Meta:
        unknown = EXCLUDE


class RegisterSchema(_InputSchema):
    """Input payload for account registration."""

    username = fields.String(required=True, validate=_required_text)
    email = fields.Email(required=True, validate=validate.Length(max=254))
    password = fields.String(required=True, validate=_required_text)

    @post_load
    def make_dto(self, data: dict[str, Any], **_: Any) -> RegisterIn:
        return RegisterIn(**data)


class LoginSchema(_InputSchema):
    """Input payload for authenticating a user."""

    username = fields.String(required=True, validate=_required_text)
    password = fields.String(required=True, validate=_required_text)

    @post_load
    def make_dto(self, data: dict[str, Any], **_: Any) -> LoginIn:
        return LoginIn(**data)


class TokenRequestSchema(_InputSchema):
    """Input payload for rotating a token pair (``{token, refreshToken}``)."""

    access_token = fields.String(required=True, data_key="token", validate=_required_text)
    refresh_token = fields.String(required=True, data_key="refreshToken", validate=_required_text)

    @post_load
    def make_dto(self, data: dict[str, Any], **_: Any) -> RefreshIn:
        return RefreshIn(**data)


class LogoutSchema(_InputSchema):
    """Input payload for revoking the caller's refresh token."""

    refresh_token = fields.String(required=True, data_key="refreshToken", validate=_required_text)


class AuthResultSchema(Schema):
    """
    Response envelope shared by register, login and refresh.

    The access token is sent as ``accessToken`` and, for clients of the
    rotation endpoint (which takes ``{token, refreshToken}``), also as ``token``.
    """

    access_token = fields.String(attribute="token", data_key="accessToken", allow_none=True, dump_only=True)
    token = fields.String(allow_none=True, dump_only=True)
    refresh_token = fields.String(allow_none=True, data_key="refreshToken")
    success = fields.Boolean(required=True)
    errors = fields.List(fields.String(), required=True)


class WhoAmISchema(Schema):
    """Response payload exposing identity details for the authenticated user."""

    id = fields.String(required=True)
    email = fields.Email(required=True)
    username = fields.String(required=True)
