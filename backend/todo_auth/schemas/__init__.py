"""Convenience exports for application schemas."""

from __future__ import annotations

from .account import (
    AuthResultSchema,
    LoginSchema,
    LogoutSchema,
    RegisterSchema,
    TokenRequestSchema,
    WhoAmISchema,
)

__all__ = [
    "AuthResultSchema",
    "LoginSchema",
    "LogoutSchema",
    "RegisterSchema",
    "TokenRequestSchema",
    "WhoAmISchema",
]
