"""Refresh-token repository with conditional (compare-and-swap) updates."""

from __future__ import annotations

from typing import cast

from sqlalchemy import select, update
from sqlalchemy.engine import CursorResult

from todo_auth.models.refresh_token import RefreshToken
from todo_auth.repositories.base import BaseRepository


class RefreshTokenRepository(BaseRepository[RefreshToken]):
    """Persistence-only repository for :class:`RefreshToken`.

    State flags are only ever changed through single ``UPDATE`` statements
    guarded by their current value, so two transactions racing on the same
    row cannot both observe a successful transition.
    """

    model = RefreshToken

    def _filterable_fields(self):
        return {
            "user_id": RefreshToken.user_id,
            "token": RefreshToken.token,
            "jwt_id": RefreshToken.jwt_id,
        }

    def get_by_token(self, token: str) -> RefreshToken | None:
        """Fetch a record by its opaque token string."""
        stmt = select(RefreshToken).where(RefreshToken.token == token)
        return cast(RefreshToken | None, self.session.execute(stmt).scalars().first())

    def mark_used_if_live(self, record_id: int) -> bool:
        """Flip ``is_used`` only if the row is neither used nor revoked.

        :param record_id: Primary key of the record to consume.
        :returns: ``True`` when this statement performed the transition.
        """
        stmt = (
            update(RefreshToken)
            .where(
                RefreshToken.id == record_id,
                RefreshToken.is_used.is_(False),
                RefreshToken.is_revoked.is_(False),
            )
            .values(is_used=True)
            .execution_options(synchronize_session=False)
        )
        result = cast(CursorResult, self.session.execute(stmt))
        return result.rowcount == 1

    def revoke_by_token(self, token: str) -> bool:
        """Set ``is_revoked`` on a record. :returns: True if the record exists."""
        stmt = (
            update(RefreshToken)
            .where(RefreshToken.token == token)
            .values(is_revoked=True)
            .execution_options(synchronize_session=False)
        )
        result = cast(CursorResult, self.session.execute(stmt))
        return result.rowcount > 0

    def revoke_all_for_user(self, user_id: str) -> int:
        """Revoke every not-yet-revoked record of ``user_id``.

        :returns: Number of records affected.
        """
        stmt = (
            update(RefreshToken)
            .where(RefreshToken.user_id == user_id, RefreshToken.is_revoked.is_(False))
            .values(is_revoked=True)
            .execution_options(synchronize_session=False)
        )
        result = cast(CursorResult, self.session.execute(stmt))
        return int(result.rowcount or 0)
