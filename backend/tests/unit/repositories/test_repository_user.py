"""Unit tests for UserRepository."""

import pytest

from tests.factories.user import UserFactory
from todo_auth.repositories.user import UserRepository


class TestUserRepository:
    """Ensure ``UserRepository`` performs core persistence operations."""

    @pytest.fixture()
    def repo(self, session):
        return UserRepository(session=session)

    def test_create_and_get_user(self, repo):
        """Create a user and fetch it by email to verify retrieval."""
        u = UserFactory(email="alice@example.com", username="alice")

        fetched = repo.get_by_email("  ALICE@example.com")
        assert fetched is not None
        assert fetched.id == u.id
        assert fetched.username == "alice"
        assert repo.get(u.id) is fetched

    def test_get_by_username(self, repo):
        u = UserFactory(username="carol")

        assert repo.get_by_username(" carol ") is u
        assert repo.get_by_username("Carol") is None

    def test_exists_flags(self, repo):
        """Return existence flags for known and unknown identities."""
        UserFactory(email="bob@example.com", username="bob")

        assert repo.exists_by_email("bob@example.com")
        assert not repo.exists_by_email("nonexistent@example.com")
        assert repo.exists_by_username("bob")
        assert not repo.exists_by_username("nobody")

    def test_authenticate_valid_and_invalid(self, repo):
        """Authenticate with correct credentials and reject invalid attempts."""
        UserFactory(username="authuser", password="strongpass")

        assert repo.authenticate("authuser", "strongpass") is not None
        assert repo.authenticate("authuser", "wrongpass") is None
        assert repo.authenticate("nope", "strongpass") is None

    def test_filters_are_whitelisted(self, repo):
        u = UserFactory(username="dave")

        assert repo.list(username="dave") == [u]
        # Unknown keys are ignored rather than raising
        assert u in repo.list(password_hash="whatever")
