from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol


@dataclass(frozen=True, slots=True)
class MintedAccessToken:
    """
    Result of minting an access token.

    :ivar token: Encoded, signed JWT.
    :ivar jti: Unique identifier embedded in the token.
    :ivar issued_at: ``iat`` claim (UTC).
    :ivar expires_at: ``exp`` claim (UTC).
    """

    token: str
    jti: str
    issued_at: datetime
    expires_at: datetime


@dataclass(frozen=True, slots=True)
class AccessTokenClaims:
    """
    Verified claims of an access token.

    Expiry is carried but not enforced by the codec; rotation decides what
    an expired token means.
    """

    user_id: str
    email: str
    subject: str
    jti: str
    issued_at: datetime
    expires_at: datetime


class AccessTokenCodec(Protocol):
    """Port for minting and verifying signed, self-contained access tokens."""

    def mint(self, user_id: str, email: str) -> MintedAccessToken:
        """Sign a new access token with a fresh ``jti``."""

    def parse(self, token: str) -> AccessTokenClaims:
        """
        Verify structure, signature and declared algorithm.

        :raises InvalidTokenError: On any verification failure.
        """
