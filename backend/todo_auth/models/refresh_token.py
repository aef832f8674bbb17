"""Refresh token model used for single-use rotation and revocation."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from todo_auth.core.extensions import db

from .base import ReprMixin, utcnow


class RefreshToken(ReprMixin, db.Model):
    """
    One outstanding rotation right, bound to the access token it was issued with.

    Fields
    ------
    token : str
        Opaque, unguessable string handed to the client. Unique.
    jwt_id : str
        ``jti`` of the paired access token.
    is_used / is_revoked : bool
        One-way flags; they only ever move from ``False`` to ``True``.
    exp : datetime
        Absolute expiry of the refresh right, independent of the access token.

    Rows are never deleted here; retention is handled outside the service.
    """

    __tablename__ = "refresh_tokens"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    token: Mapped[str] = mapped_column(String(128), nullable=False, unique=True, index=True)
    jwt_id: Mapped[str] = mapped_column(String(36), nullable=False)
    is_used: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_revoked: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    exp: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
