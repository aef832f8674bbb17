"""Common ancestor of the application services."""

from __future__ import annotations

from todo_auth.uow.sqlalchemy_uow import SQLAlchemyReadOnlyUnitOfWork, SQLAlchemyUnitOfWork


class BaseService:
    """
    Orchestration-only service.

    Services reach storage through a Unit of Work opened per operation and
    never through the global session. Subclasses that only talk to ports
    (the token service, for instance) simply never open one.
    """

    #: Isolation requested when a read-only scope owns its transaction.
    read_isolation: str | None = "READ COMMITTED"

    def rw_uow(self) -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork()

    def ro_uow(self, *, enforce_db_readonly: bool = True) -> SQLAlchemyReadOnlyUnitOfWork:
        """
        Open a read-only scope.

        :param enforce_db_readonly: Also issue ``SET TRANSACTION READ ONLY``
            where the dialect supports it.
        """
        return SQLAlchemyReadOnlyUnitOfWork(
            isolation_level=self.read_isolation,
            enforce_db_readonly=enforce_db_readonly,
        )
