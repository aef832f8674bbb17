"""Service layer public API.

This package exposes the token lifecycle services so that callers can import
from :mod:`todo_auth.services` without knowing internal structure.

Re-exports
----------
- Base class (from ``todo_auth.services._shared.base``)
    * :class:`BaseService`

- Token lifecycle (from ``todo_auth.services.auth``)
    * :class:`TokenService`
    * DTOs: :class:`RefreshIn`, :class:`TokenPair`, :class:`AuthTokenConfig`

- Account orchestration (from ``todo_auth.services.account``)
    * :class:`AccountService`
    * DTOs: :class:`RegisterIn`, :class:`LoginIn`, :class:`AuthResult`

- Identity collaborator (from ``todo_auth.services.identity``)
    * :class:`IdentityService`
"""

from __future__ import annotations

# Base class
from ._shared.base import BaseService

# Account orchestration + DTOs
from .account.dto import AuthResult, LoginIn, RegisterIn
from .account.service import AccountService

# Token lifecycle + DTOs
from .auth.dto import AuthTokenConfig, RefreshIn, TokenPair
from .auth.service import TokenService

# Identity collaborator
from .identity.service import IdentityService

__all__ = [
    # Base
    "BaseService",
    # Tokens
    "TokenService",
    "RefreshIn",
    "TokenPair",
    "AuthTokenConfig",
    # Account
    "AccountService",
    "RegisterIn",
    "LoginIn",
    "AuthResult",
    # Identity
    "IdentityService",
]
