"""
todo_auth.services._shared.ports
================================

Collection of *ports* (hexagonal interfaces) that define the contracts
for the token lifecycle and its collaborators.

Modules
-------
- :mod:`access_token_codec`:
    Defines :class:`~.AccessTokenCodec`: minting and parsing of signed access tokens.

- :mod:`refresh_token_store`:
    Defines :class:`~.RefreshTokenStore` and :class:`~.RefreshTokenRecord`:
    persistence of opaque refresh tokens with a compare-and-swap ``mark_used``.

- :mod:`user_identity`:
    Defines :class:`~.UserIdentity`, the account collaborator.

- :mod:`clock` / :mod:`random_source`:
    Injectable time and randomness so expiry and token strings are testable.

Concrete adapters (SQLAlchemy, Redis, PyJWT) live under ``todo_auth.infra``;
the in-memory variants here back unit tests and the ``memory`` backend.
"""

from __future__ import annotations

from .access_token_codec import AccessTokenClaims, AccessTokenCodec, MintedAccessToken
from .clock import Clock, FrozenClock, SystemClock
from .random_source import TOKEN_ALPHABET, RandomSource, SecretsRandomSource
from .refresh_token_store import (
    InMemoryRefreshTokenStore,
    RefreshTokenRecord,
    RefreshTokenStore,
    new_token_string,
)
from .user_identity import (
    IdentityUser,
    InMemoryUserIdentity,
    UserIdentity,
    password_policy_errors,
)

__all__ = [
    "AccessTokenClaims",
    "AccessTokenCodec",
    "MintedAccessToken",
    "Clock",
    "FrozenClock",
    "SystemClock",
    "TOKEN_ALPHABET",
    "RandomSource",
    "SecretsRandomSource",
    "RefreshTokenRecord",
    "RefreshTokenStore",
    "InMemoryRefreshTokenStore",
    "new_token_string",
    "IdentityUser",
    "InMemoryUserIdentity",
    "UserIdentity",
    "password_policy_errors",
]
