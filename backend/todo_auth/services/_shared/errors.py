"""
Domain-level exceptions used within the service layer.

These exceptions are **framework-agnostic** and never import Flask or HTTP
helpers. They are stable contracts between stores, codecs and services; the
API layer decides what (little) of them a client gets to see.
"""

from __future__ import annotations

from dataclasses import dataclass, field

# --------------------------------------------------------------------------- #
# Base types
# --------------------------------------------------------------------------- #


class ServiceError(Exception):
    """
    Base class for all service-level errors.

    Notes
    -----
    - These are *not* HTTP errors.
    - They can be safely raised from stores, codecs or services.
    """

    pass


# --------------------------------------------------------------------------- #
# Account / identity errors
# --------------------------------------------------------------------------- #


class InvalidPayloadError(ServiceError):
    """Raised when required request fields are missing or empty."""

    def __init__(self, message: str = "Invalid payload") -> None:
        super().__init__(message)


class InvalidCredentialsError(ServiceError):
    """
    Raised when a username/password pair does not authenticate.

    The message is identical for unknown users and wrong passwords.
    """

    def __init__(self, message: str = "Invalid Username or Password") -> None:
        super().__init__(message)


@dataclass(slots=True, eq=False)
class RegistrationError(ServiceError):
    """
    Raised when the identity collaborator refuses to create an account.

    :param errors: Human-readable reasons, safe to show to the client.
    :type errors: list[str]
    """

    errors: list[str] = field(default_factory=list)

    def __str__(self) -> str:  # pragma: no cover
        return "; ".join(self.errors) or "Registration failed"


# --------------------------------------------------------------------------- #
# Token lifecycle errors
# --------------------------------------------------------------------------- #


class TokenError(ServiceError):
    """
    Base class for every refusal raised by the token pipeline.

    Subclasses exist for observability and tests; callers outside the service
    layer only ever learn that the operation failed.
    """

    reason = "token_error"

    def __init__(self, message: str = "Invalid token") -> None:
        super().__init__(message)


class InvalidTokenError(TokenError):
    """Malformed access token, bad signature or unexpected algorithm."""

    reason = "invalid_token"


class TokenStillActiveError(TokenError):
    """The access token is not yet close enough to its expiry to be rotated."""

    reason = "token_still_active"


class TokenNotFoundError(TokenError):
    """No refresh-token record matches the presented string."""

    reason = "token_not_found"


class TokenAlreadyUsedError(TokenError):
    """The refresh token was already redeemed (replay)."""

    reason = "token_already_used"


class TokenRevokedError(TokenError):
    """The refresh token was administratively revoked."""

    reason = "token_revoked"


class TokenExpiredError(TokenError):
    """The refresh token's own expiry has passed."""

    reason = "token_expired"


class TokenMismatchError(TokenError):
    """The refresh token was issued alongside a different access token."""

    reason = "token_mismatch"


class InternalFaultError(TokenError):
    """Storage or unexpected fault while processing a token request."""

    reason = "internal_fault"
