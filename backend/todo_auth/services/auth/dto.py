# todo_auth/services/auth/dto.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

# ---------------------------- Input DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class RefreshIn:
    """
    Input DTO for token rotation.

    :param access_token: Access token issued alongside the refresh token.
    :type access_token: str
    :param refresh_token: Opaque refresh-token string.
    :type refresh_token: str
    """

    access_token: str
    refresh_token: str


# ---------------------------- Output DTOs --------------------------------- #


@dataclass(frozen=True, slots=True)
class TokenPair:
    """
    Access/refresh pair handed back to the client.

    :param access_token: Signed access token.
    :type access_token: str
    :param refresh_token: Opaque refresh token bound to the access token's ``jti``.
    :type refresh_token: str
    """

    access_token: str
    refresh_token: str


# ---------------------------- Config DTO ---------------------------------- #


@dataclass(frozen=True, slots=True)
class AuthTokenConfig:
    """
    Token lifecycle knobs.

    :param refresh_window: How close to its ``exp`` an access token must be
        before it may be exchanged.
    :type refresh_window: timedelta
    """

    refresh_window: timedelta = timedelta(minutes=5)
