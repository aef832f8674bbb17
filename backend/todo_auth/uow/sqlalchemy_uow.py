"""
Units of work over the Flask-SQLAlchemy scoped session.

Two flavours share one repository wiring:

- :class:`SQLAlchemyUnitOfWork` commits when the block exits cleanly.
- :class:`SQLAlchemyReadOnlyUnitOfWork` never commits and refuses writes
  at both the ORM and the cursor level.
"""

from __future__ import annotations

import logging
from contextlib import suppress

from sqlalchemy import event, text
from sqlalchemy.engine import Connection
from sqlalchemy.exc import InvalidRequestError, SQLAlchemyError
from sqlalchemy.orm import Session, SessionTransaction, scoped_session

from todo_auth.core.extensions import db
from todo_auth.repositories import RefreshTokenRepository, UserRepository
from todo_auth.uow.base import UnitOfWork

log = logging.getLogger(__name__)

#: Leading SQL keywords refused inside a read-only scope.
_WRITE_VERBS = frozenset(
    {"insert", "update", "delete", "merge", "replace", "create", "alter", "drop", "truncate"}
)

#: Dialects that understand ``SET TRANSACTION ... READ ONLY``.
_READ_ONLY_DIALECTS = frozenset({"postgresql", "mysql", "mariadb"})


def _refuse_flush(session: Session, flush_context, instances) -> None:
    if session.new or session.dirty or session.deleted:
        raise RuntimeError("Read-only UnitOfWork: ORM flush blocked.")


def _refuse_write_sql(conn, cursor, statement, parameters, context, executemany) -> None:
    verb = statement.lstrip().split(None, 1)[0].lower() if statement else ""
    if verb in _WRITE_VERBS:
        raise RuntimeError(f"Read-only UnitOfWork: SQL statement blocked: {verb.upper()}")


class _Repositories:
    """Bind every repository to one session."""

    def __init__(self, session: Session) -> None:
        self.session = session
        self.users = UserRepository(session=session)
        self.refresh_tokens = RefreshTokenRepository(session=session)


class SQLAlchemyUnitOfWork(_Repositories, UnitOfWork):
    """Read-write scope: commit on success, roll back when the block raises."""

    def __init__(self) -> None:
        super().__init__(db.session)

    def __enter__(self) -> SQLAlchemyUnitOfWork:
        # The session autobegins on its first statement.
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is not None:
            self.rollback()
            return
        try:
            self.commit()
        except Exception:
            self.rollback()
            raise

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()


class SQLAlchemyReadOnlyUnitOfWork(_Repositories, UnitOfWork):
    """
    Read-only scope over the same session.

    If no transaction is running the scope opens (and later rolls back) its
    own, issuing ``SET TRANSACTION`` on dialects that support it. If one is
    already running, as during a request that wrote earlier or under a test
    savepoint, it joins that transaction and only installs the guards.

    Parameters
    ----------
    isolation_level : str, optional
        Isolation for an owned transaction, e.g. ``"READ COMMITTED"``.
    enforce_db_readonly : bool
        Also ask the database for a read-only transaction.
    """

    def __init__(
        self,
        *,
        isolation_level: str | None = None,
        enforce_db_readonly: bool = True,
    ) -> None:
        super().__init__(db.session)
        self.isolation_level = isolation_level
        self.enforce_db_readonly = enforce_db_readonly
        self._owned: SessionTransaction | None = None
        self._flush_target: Session | None = None
        self._conn: Connection | None = None

    def __enter__(self) -> SQLAlchemyReadOnlyUnitOfWork:
        try:
            self._owned = self.session.begin()
        except InvalidRequestError:
            self._owned = None

        self._conn = self.session.connection()
        self._arm()
        if self._owned is not None and self._conn.dialect.name in _READ_ONLY_DIALECTS:
            self._set_transaction()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            if self._owned is not None:
                self.session.rollback()
        finally:
            self._owned = None
            self._disarm()

    def commit(self) -> None:
        """
        Refuse to commit.

        :raises RuntimeError: always.
        """
        raise RuntimeError("Read-only UnitOfWork does not allow commit().")

    def rollback(self) -> None:
        self.session.rollback()

    # ------------------------------- internals -------------------------------

    def _set_transaction(self) -> None:
        try:
            if self.isolation_level:
                level = self.isolation_level.strip().upper()
                self.session.execute(text(f"SET TRANSACTION ISOLATION LEVEL {level}"))
            if self.enforce_db_readonly:
                self.session.execute(text("SET TRANSACTION READ ONLY"))
        except SQLAlchemyError as exc:
            log.warning("SET TRANSACTION failed, relying on guards: %s", exc)

    def _arm(self) -> None:
        # Listen on the thread-local Session; the scoped proxy would register
        # on the sessionmaker and reach every thread.
        proxy = self.session
        self._flush_target = proxy() if isinstance(proxy, scoped_session) else proxy
        event.listen(self._flush_target, "before_flush", _refuse_flush)
        event.listen(self._conn, "before_cursor_execute", _refuse_write_sql)

    def _disarm(self) -> None:
        if self._flush_target is not None:
            with suppress(InvalidRequestError):
                event.remove(self._flush_target, "before_flush", _refuse_flush)
            self._flush_target = None
        if self._conn is not None:
            with suppress(InvalidRequestError):
                event.remove(self._conn, "before_cursor_execute", _refuse_write_sql)
            self._conn = None
