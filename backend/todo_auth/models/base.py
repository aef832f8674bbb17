"""Column mixins and time helpers for the mapped models."""

from __future__ import annotations

from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, mapped_column


def utcnow() -> datetime:
    """Aware ``datetime`` in UTC; every stored timestamp uses it."""
    return datetime.now(timezone.utc)


def new_uuid() -> str:
    return str(uuid4())


class UUIDPKMixin:
    """String primary key ``id`` holding a UUID4, assigned in Python.

    Identity ids end up in token records and log lines, so they are opaque
    strings rather than sequential integers.
    """

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)


class CreatedAtMixin:
    """``created_at`` stamped by the application clock on insert."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )


class ReprMixin:
    def __repr__(self) -> str:
        return f"<{type(self).__name__} id={getattr(self, 'id', None)}>"
