"""Factory for :class:`todo_auth.models.user.User`."""

from __future__ import annotations

import factory

from tests.factories import BaseFactory
from todo_auth.models.user import User

DEFAULT_PASSWORD = "Passw0rd!"


class UserFactory(BaseFactory):
    class Meta:
        model = User

    username = factory.Sequence(lambda n: f"user{n}")
    email = factory.LazyAttribute(lambda o: f"{o.username}@example.com")
    password_hash = ""

    @factory.post_generation
    def password(obj, create, extracted, **kwargs):
        # Goes through the model setter so the stored value is a real hash
        obj.password = extracted or DEFAULT_PASSWORD
