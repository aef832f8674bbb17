"""
DTOs for AccountService.

Inputs mirror the JSON bodies of the account endpoints; the output is the
client-facing result envelope.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from todo_auth.services.auth.dto import TokenPair

# --------------------------------------------------------------------------- #
# Input DTOs
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class RegisterIn:
    """
    Input DTO for account registration.

    :param username: Login name.
    :type username: str
    :param email: Login email.
    :type email: str
    :param password: Raw password.
    :type password: str
    """

    username: str
    email: str
    password: str


@dataclass(frozen=True, slots=True)
class LoginIn:
    """
    Input DTO for login.

    :param username: Login name.
    :type username: str
    :param password: Raw password.
    :type password: str
    """

    username: str
    password: str


# --------------------------------------------------------------------------- #
# Output DTOs
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class AuthResult:
    """
    Outcome of register / login / refresh.

    :param success: Whether a token pair was issued.
    :type success: bool
    :param errors: Client-safe failure messages (empty on success).
    :type errors: list[str]
    :param token: Access token on success.
    :type token: str | None
    :param refresh_token: Refresh token on success.
    :type refresh_token: str | None
    """

    success: bool
    errors: list[str] = field(default_factory=list)
    token: str | None = None
    refresh_token: str | None = None

    @classmethod
    def ok(cls, pair: TokenPair) -> AuthResult:
        return cls(success=True, token=pair.access_token, refresh_token=pair.refresh_token)

    @classmethod
    def failed(cls, *errors: str) -> AuthResult:
        return cls(success=False, errors=list(errors))
