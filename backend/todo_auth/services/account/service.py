"""
AccountService
==============

Client-facing orchestration of the token lifecycle:

- ``register``: create an identity, then issue a pair
- ``login``: verify credentials, then issue a pair
- ``refresh``: rotate a pair

Refusals are returned as :class:`AuthResult` envelopes. Only a malformed
request raises (:class:`InvalidPayloadError`).
"""

from __future__ import annotations

import logging

from todo_auth.services._shared.base import BaseService
from todo_auth.services._shared.errors import (
    InvalidCredentialsError,
    InvalidPayloadError,
    RegistrationError,
    TokenError,
)
from todo_auth.services._shared.ports import UserIdentity
from todo_auth.services.account.dto import AuthResult, LoginIn, RegisterIn
from todo_auth.services.auth.dto import RefreshIn
from todo_auth.services.auth.service import TokenService

log = logging.getLogger(__name__)


def _require(*values: object) -> None:
    """Reject missing, non-string or blank fields."""
    for value in values:
        if not isinstance(value, str) or not value.strip():
            raise InvalidPayloadError()


class AccountService(BaseService):
    """Register, login and refresh on top of :class:`TokenService`."""

    def __init__(self, *, tokens: TokenService, identity: UserIdentity) -> None:
        super().__init__()
        self.tokens = tokens
        self.identity = identity

    def register(self, dto: RegisterIn) -> AuthResult:
        """
        Create an account and issue its first token pair.

        :raises InvalidPayloadError: If a field is missing or blank.
        """
        _require(dto.username, dto.email, dto.password)
        try:
            user = self.identity.create_user(dto.username, dto.email, dto.password)
        except RegistrationError as exc:
            log.info("Registration refused", extra={"reason": "registration_refused"})
            return AuthResult.failed(*exc.errors)
        return AuthResult.ok(self.tokens.issue(user))

    def login(self, dto: LoginIn) -> AuthResult:
        """
        Verify credentials and issue a token pair.

        Unknown users and wrong passwords produce the same message.

        :raises InvalidPayloadError: If a field is missing or blank.
        """
        _require(dto.username, dto.password)
        user = self.identity.verify_credentials(dto.username, dto.password)
        if user is None:
            log.info("Login refused", extra={"reason": "invalid_credentials"})
            return AuthResult.failed(str(InvalidCredentialsError()))
        return AuthResult.ok(self.tokens.issue(user))

    def refresh(self, dto: RefreshIn) -> AuthResult:
        """
        Rotate a token pair.

        Every rotation failure collapses into ``"Invalid token"``; the precise
        reason is only logged by :class:`TokenService`.

        :raises InvalidPayloadError: If a field is missing or blank.
        """
        _require(dto.access_token, dto.refresh_token)
        try:
            pair = self.tokens.rotate(dto.access_token, dto.refresh_token)
        except TokenError as exc:
            return AuthResult.failed(str(exc))
        return AuthResult.ok(pair)
