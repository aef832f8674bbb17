# todo_auth/infra/jwt/access_token_codec.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt

from todo_auth.infra.jwt.signing_key import HS256, SigningKeyProvider
from todo_auth.services._shared.errors import InvalidTokenError
from todo_auth.services._shared.ports import (
    AccessTokenClaims,
    AccessTokenCodec,
    Clock,
    MintedAccessToken,
    RandomSource,
    SecretsRandomSource,
    SystemClock,
)

log = logging.getLogger(__name__)

REQUIRED_CLAIMS = ("sub", "jti", "iat", "exp", "userId")
DEFAULT_ACCESS_LIFETIME = timedelta(days=7)


@dataclass(slots=True)
class JWTAccessTokenCodec(AccessTokenCodec):
    """
    PyJWT adapter minting and parsing HS256 access tokens.

    Claims written: ``userId``, ``email``, ``sub`` (the email), ``jti``,
    ``iat``, ``exp`` and ``type="access"``. The ``type`` and ``sub`` claims
    let Flask-JWT-Extended accept the same token on protected routes.

    .. note::
       ``parse`` deliberately ignores ``exp``: rotation is the one place
       where an expired access token is still meaningful.
    """

    key: SigningKeyProvider
    clock: Clock = field(default_factory=SystemClock)
    lifetime: timedelta = DEFAULT_ACCESS_LIFETIME
    random: RandomSource = field(default_factory=SecretsRandomSource)

    def mint(self, user_id: str, email: str) -> MintedAccessToken:
        # JWT timestamps have second resolution; keep the returned values
        # identical to what a later ``parse`` will report.
        issued_at = self.clock.now().replace(microsecond=0)
        expires_at = issued_at + self.lifetime
        jti = self.random.uuid()
        claims: dict[str, Any] = {
            "userId": str(user_id),
            "email": email,
            "sub": email,
            "jti": jti,
            "iat": int(issued_at.timestamp()),
            "exp": int(expires_at.timestamp()),
            "type": "access",
        }
        return MintedAccessToken(
            token=self.key.sign(claims),
            jti=jti,
            issued_at=issued_at,
            expires_at=expires_at,
        )

    def parse(self, token: str) -> AccessTokenClaims:
        if not isinstance(token, str) or not token:
            raise InvalidTokenError()

        try:
            header = self.key.header(token)
        except jwt.PyJWTError as exc:
            raise InvalidTokenError() from exc

        alg = header.get("alg")
        if not isinstance(alg, str) or alg.upper() != HS256:
            log.warning("Access token rejected", extra={"reason": "unexpected_algorithm"})
            raise InvalidTokenError()

        try:
            payload = self.key.verify(token, require=REQUIRED_CLAIMS)
        except jwt.PyJWTError as exc:
            raise InvalidTokenError() from exc

        try:
            subject = str(payload["sub"])
            return AccessTokenClaims(
                user_id=str(payload["userId"]),
                email=str(payload.get("email") or subject),
                subject=subject,
                jti=str(payload["jti"]),
                issued_at=datetime.fromtimestamp(int(payload["iat"]), tz=UTC),
                expires_at=datetime.fromtimestamp(int(payload["exp"]), tz=UTC),
            )
        except (TypeError, ValueError, OverflowError) as exc:
            raise InvalidTokenError() from exc
