"""Factory Boy definition for :class:`todo_auth.models.refresh_token.RefreshToken`."""

from __future__ import annotations

from datetime import timedelta
from uuid import uuid4

import factory

from tests.factories import BaseFactory
from tests.factories.user import UserFactory
from todo_auth.models.base import utcnow
from todo_auth.models.refresh_token import RefreshToken


class RefreshTokenFactory(BaseFactory):
    """Build persisted, live refresh-token rows owned by a fresh user."""

    class Meta:
        model = RefreshToken

    user_id = factory.LazyFunction(lambda: UserFactory().id)
    token = factory.Sequence(lambda n: f"{n:035d}{uuid4()}")
    jwt_id = factory.LazyFunction(lambda: str(uuid4()))
    is_used = False
    is_revoked = False
    created_date = factory.LazyFunction(utcnow)
    exp = factory.LazyAttribute(lambda o: o.created_date + timedelta(days=180))

    class Params:
        expired = factory.Trait(
            created_date=factory.LazyFunction(lambda: utcnow() - timedelta(days=200)),
        )
