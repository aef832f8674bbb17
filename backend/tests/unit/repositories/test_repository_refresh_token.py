"""Unit tests for RefreshTokenRepository conditional updates."""

import pytest

from tests.factories.refresh_token import RefreshTokenFactory
from tests.factories.user import UserFactory
from todo_auth.repositories.refresh_token import RefreshTokenRepository


class TestRefreshTokenRepository:
    @pytest.fixture()
    def repo(self, session):
        return RefreshTokenRepository(session=session)

    def test_get_by_token(self, repo):
        row = RefreshTokenFactory()

        assert repo.get_by_token(row.token) is row
        assert repo.get_by_token("missing") is None

    def test_mark_used_if_live_flips_once(self, repo, session):
        row = RefreshTokenFactory()

        assert repo.mark_used_if_live(row.id) is True
        assert repo.mark_used_if_live(row.id) is False

        session.refresh(row)
        assert row.is_used is True

    def test_mark_used_skips_revoked_rows(self, repo, session):
        row = RefreshTokenFactory(is_revoked=True)

        assert repo.mark_used_if_live(row.id) is False
        session.refresh(row)
        assert row.is_used is False

    def test_mark_used_unknown_id(self, repo):
        assert repo.mark_used_if_live(987654) is False

    def test_revoke_by_token(self, repo, session):
        row = RefreshTokenFactory(is_used=True)

        assert repo.revoke_by_token(row.token) is True
        assert repo.revoke_by_token("missing") is False

        session.refresh(row)
        assert row.is_revoked is True
        assert row.is_used is True

    def test_revoke_all_for_user_counts_only_live_flags(self, repo):
        user = UserFactory()
        RefreshTokenFactory(user_id=user.id)
        RefreshTokenFactory(user_id=user.id, is_used=True)
        RefreshTokenFactory(user_id=user.id, is_revoked=True)
        other = RefreshTokenFactory()

        assert repo.revoke_all_for_user(user.id) == 2
        assert repo.revoke_all_for_user(user.id) == 0
        assert repo.get_by_token(other.token).is_revoked is False

    def test_list_by_user_ordered_by_id(self, repo):
        user = UserFactory()
        rows = [RefreshTokenFactory(user_id=user.id) for _ in range(3)]
        RefreshTokenFactory()

        assert [r.id for r in repo.list(user_id=user.id)] == [r.id for r in rows]
