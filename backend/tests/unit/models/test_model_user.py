"""Tests for the User model."""

from __future__ import annotations

import pytest
from sqlalchemy.exc import IntegrityError

from todo_auth.models.user import User


class TestUser:
    def test_password_hashing(self, session):
        u = User(email="Test@Example.com", username="tester")
        u.password = "secret123"
        session.add(u)
        session.flush()

        assert u.password_hash != "secret123"
        assert u.verify_password("secret123") is True
        assert u.verify_password("wrong") is False

    def test_password_is_write_only(self):
        u = User(email="a@example.com", username="u1")
        u.password = "x"
        with pytest.raises(AttributeError):
            _ = u.password

    def test_empty_password_rejected(self):
        u = User(email="a@example.com", username="u1")
        with pytest.raises(ValueError):
            u.password = ""

    def test_id_is_uuid_string(self, session):
        u = User(email="id@example.com", username="ided")
        u.password = "pw"
        session.add(u)
        session.flush()

        assert isinstance(u.id, str)
        assert len(u.id) == 36

    def test_email_normalized_and_unique(self, session):
        u1 = User(email="  Alice@Example.com ", username="alice")
        u1.password = "pw"
        session.add(u1)
        session.flush()
        assert u1.email == "alice@example.com"

        u2 = User(email="alice@example.com", username="alice2")
        u2.password = "pw"
        session.add(u2)
        with pytest.raises(IntegrityError):
            session.flush()

    def test_username_unique(self, session):
        u1 = User(email="b1@example.com", username="bob")
        u1.password = "pw"
        session.add(u1)
        session.flush()

        u2 = User(email="b2@example.com", username=" bob ")
        u2.password = "pw"
        session.add(u2)
        with pytest.raises(IntegrityError):
            session.flush()

    @pytest.mark.parametrize("email", ["", "no-at-sign", "user@localhost"])
    def test_email_validation(self, email):
        with pytest.raises(ValueError):
            User(email=email, username="u")

    def test_username_required(self):
        with pytest.raises(ValueError):
            User(email="x@example.com", username=" ")
