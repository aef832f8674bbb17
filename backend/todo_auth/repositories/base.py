"""Shared plumbing for the SQLAlchemy repositories.

Repositories read and write rows and nothing more: they do not commit, roll
back or apply token policy. Transactions belong to the Unit of Work that
hands them their session.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Generic, TypeVar, cast

from sqlalchemy import Select, select
from sqlalchemy.orm import InstrumentedAttribute, Session

from todo_auth.core.extensions import db

E = TypeVar("E")


class BaseRepository(Generic[E]):
    """Persistence helpers for one mapped model.

    Subclasses set :attr:`model` and may publish equality filters through
    :meth:`_filterable_fields`; keys outside that mapping are ignored.
    """

    model: type[E]

    def __init__(self, session: Session | None = None) -> None:
        self._session = session

    @property
    def session(self) -> Session:
        """The Unit of Work session, or the Flask-scoped one when none was given."""
        return self._session if self._session is not None else cast(Session, db.session)

    def _filterable_fields(self) -> Mapping[str, InstrumentedAttribute[Any]]:
        return {}

    def _filtered(self, filters: Mapping[str, Any]) -> Select[Any]:
        columns = self._filterable_fields()
        stmt = select(self.model)
        for key, value in filters.items():
            column = columns.get(key)
            if column is not None:
                stmt = stmt.where(column == value)
        return stmt

    def add(self, instance: E) -> E:
        """Stage ``instance`` and flush so its primary key is populated."""
        self.session.add(instance)
        self.session.flush()
        return instance

    def get(self, entity_id: Any) -> E | None:
        """Primary-key lookup; ``None`` when absent."""
        return self.session.get(self.model, entity_id)

    def list(self, **filters: Any) -> list[E]:
        """Rows matching the whitelisted ``filters``, ordered by ``id``."""
        stmt = self._filtered(filters).order_by(self.model.id.asc())  # type: ignore[attr-defined]
        return list(self.session.execute(stmt).scalars().all())
