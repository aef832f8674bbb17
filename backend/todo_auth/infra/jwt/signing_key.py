# todo_auth/infra/jwt/signing_key.py
from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, cast

import jwt

#: The only algorithm tokens are ever signed or verified with.
HS256 = "HS256"


@dataclass(frozen=True, slots=True)
class SigningKeyProvider:
    """
    Immutable HMAC-SHA-256 signing key shared by every token operation.

    The secret never appears in ``repr`` so it cannot leak through logs.

    :param secret: Shared HMAC secret (``JWT_SECRET_KEY``).
    :raises ValueError: If the secret is empty.
    """

    secret: str = field(repr=False)
    algorithm: str = field(default=HS256, init=False)

    def __post_init__(self) -> None:
        if not isinstance(self.secret, str) or not self.secret:
            raise ValueError("Signing secret must be a non-empty string.")

    def sign(self, claims: Mapping[str, Any]) -> str:
        """Encode and sign ``claims`` as a compact JWS."""
        return jwt.encode(dict(claims), self.secret, algorithm=self.algorithm)

    def header(self, token: str) -> dict[str, Any]:
        """
        Read the JOSE header without verifying the signature.

        :raises jwt.PyJWTError: If the token is structurally malformed.
        """
        return cast(dict[str, Any], jwt.get_unverified_header(token))

    def verify(self, token: str, *, require: Iterable[str] = ()) -> dict[str, Any]:
        """
        Verify the signature and return the payload.

        Time-based claims are not enforced here; callers evaluate ``exp``
        against their own clock.

        :param token: Compact JWS.
        :param require: Claims that must be present.
        :raises jwt.PyJWTError: On a bad signature, a foreign algorithm or a
            missing required claim.
        """
        return cast(
            dict[str, Any],
            jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                options={
                    "verify_exp": False,
                    "verify_iat": False,
                    "verify_nbf": False,
                    "require": list(require),
                },
            ),
        )
