# todo_auth/infra/sqlalchemy/refresh_token_store.py
from __future__ import annotations

from datetime import UTC, datetime, timedelta

from todo_auth.models.refresh_token import RefreshToken
from todo_auth.services._shared.ports import (
    Clock,
    RandomSource,
    RefreshTokenRecord,
    RefreshTokenStore,
    SecretsRandomSource,
    SystemClock,
    new_token_string,
)
from todo_auth.services._shared.ports.refresh_token_store import DEFAULT_REFRESH_LIFETIME
from todo_auth.uow.sqlalchemy_uow import SQLAlchemyReadOnlyUnitOfWork, SQLAlchemyUnitOfWork


def _as_utc(value: datetime) -> datetime:
    # SQLite drops tzinfo on the way back.
    return value.replace(tzinfo=UTC) if value.tzinfo is None else value.astimezone(UTC)


def to_record(row: RefreshToken) -> RefreshTokenRecord:
    """Detach an ORM row into the immutable read-model."""
    return RefreshTokenRecord(
        id=row.id,
        user_id=row.user_id,
        token=row.token,
        jwt_id=row.jwt_id,
        is_used=bool(row.is_used),
        is_revoked=bool(row.is_revoked),
        created_date=_as_utc(row.created_date),
        exp=_as_utc(row.exp),
    )


class SQLAlchemyRefreshTokenStore(RefreshTokenStore):
    """
    Relational refresh-token store running each call in its own Unit of Work.

    ``mark_used`` is a single conditional ``UPDATE``; the database row lock
    serialises racing transactions and the affected row count tells the
    winner apart.

    .. note::
       Requires an active Flask application context (``db.session``).
    """

    def __init__(
        self,
        *,
        clock: Clock | None = None,
        random: RandomSource | None = None,
        lifetime: timedelta = DEFAULT_REFRESH_LIFETIME,
    ) -> None:
        self.clock = clock or SystemClock()
        self.random = random or SecretsRandomSource()
        self.lifetime = lifetime

    # -------------------------- UoW helpers ---------------------------------

    def rw_uow(self) -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork()

    def ro_uow(self) -> SQLAlchemyReadOnlyUnitOfWork:
        return SQLAlchemyReadOnlyUnitOfWork()

    # ----------------------------- API ---------------------------------------

    def create(self, user_id: str, jti: str) -> RefreshTokenRecord:
        now = self.clock.now()
        with self.rw_uow() as uow:
            row = RefreshToken(
                user_id=user_id,
                token=new_token_string(self.random),
                jwt_id=jti,
                is_used=False,
                is_revoked=False,
                created_date=now,
                exp=now + self.lifetime,
            )
            uow.refresh_tokens.add(row)
            return to_record(row)

    def find_by_token(self, token: str) -> RefreshTokenRecord | None:
        with self.ro_uow() as uow:
            row = uow.refresh_tokens.get_by_token(token)
            return to_record(row) if row is not None else None

    def mark_used(self, record: RefreshTokenRecord) -> bool:
        with self.rw_uow() as uow:
            return uow.refresh_tokens.mark_used_if_live(record.id)

    def mark_revoked(self, token: str) -> bool:
        with self.rw_uow() as uow:
            return uow.refresh_tokens.revoke_by_token(token)

    def revoke_all_for_user(self, user_id: str) -> int:
        with self.rw_uow() as uow:
            return uow.refresh_tokens.revoke_all_for_user(user_id)

    def list_user_tokens(self, user_id: str) -> list[RefreshTokenRecord]:
        with self.ro_uow() as uow:
            return [to_record(row) for row in uow.refresh_tokens.list(user_id=user_id)]
