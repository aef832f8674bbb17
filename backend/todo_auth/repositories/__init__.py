"""Repository package exposing persistence-layer access for all models."""

from __future__ import annotations

from todo_auth.repositories.base import BaseRepository
from todo_auth.repositories.refresh_token import RefreshTokenRepository
from todo_auth.repositories.user import UserRepository

__all__ = [
    "BaseRepository",
    "RefreshTokenRepository",
    "UserRepository",
]
