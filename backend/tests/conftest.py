"""Shared fixtures.

Database tests run against in-memory SQLite: tables are created once per
session and every test works inside a SAVEPOINT on one long-lived
connection, rolled back afterwards. Service tests that do not ask for
``session`` use the in-memory ports and a frozen clock instead.
"""

from __future__ import annotations

import os

import pytest
from sqlalchemy import event
from sqlalchemy.orm import scoped_session, sessionmaker

from tests.helpers.utils import ACCESS_LIFETIME, REFRESH_WINDOW, TEST_SECRET
from todo_auth.core.config import TestingConfig
from todo_auth.core.extensions import db as _db
from todo_auth.factory import create_app
from todo_auth.infra.jwt.access_token_codec import JWTAccessTokenCodec
from todo_auth.infra.jwt.signing_key import SigningKeyProvider
from todo_auth.services._shared.ports import (
    FrozenClock,
    IdentityUser,
    InMemoryRefreshTokenStore,
    InMemoryUserIdentity,
)
from todo_auth.services.auth.dto import AuthTokenConfig
from todo_auth.services.auth.service import TokenService


# ------------------------------ application --------------------------------- #
@pytest.fixture(scope="session")
def app():
    """Flask app built from :class:`TestingConfig`, quiet below WARNING."""
    os.environ.pop("DATABASE_URL", None)
    flask_app = create_app(TestingConfig)
    flask_app.logger.setLevel("WARNING")
    return flask_app


@pytest.fixture(scope="session")
def db(app):
    """Schema for the whole run; the app context stays pushed meanwhile."""
    with app.app_context():
        _db.create_all()
        yield _db
        _db.session.remove()
        _db.drop_all()


@pytest.fixture(scope="session")
def connection(db):
    conn = db.engine.connect()
    yield conn
    conn.close()


@pytest.fixture()
def session(db, connection):
    """
    Scoped session joined to an outer transaction that is always rolled back.

    Code under test commits freely: each commit only ends the current
    SAVEPOINT, and a new one is opened straight away. ``db.session`` points
    at this session for the duration of the test so Units of Work use it.
    """
    outer = connection.begin()
    scoped = scoped_session(sessionmaker(bind=connection, future=True))
    connection.begin_nested()

    @event.listens_for(scoped(), "after_transaction_end")
    def _reopen_savepoint(sess, trans):  # pragma: no cover
        if trans.nested and not trans._parent.nested:
            connection.begin_nested()

    flask_session = db.session
    db.session.remove()
    db.session = scoped
    try:
        yield scoped
    finally:
        scoped.remove()
        db.session = flask_session
        outer.rollback()


@pytest.fixture()
def client(app, session):
    return app.test_client()


@pytest.fixture(scope="session")
def faker():
    """Seeded :class:`faker.Faker` so generated values repeat between runs."""
    from faker import Faker

    Faker.seed(1337)
    return Faker()


@pytest.fixture(autouse=True)
def _factories_session(request):
    """Point Factory Boy at ``session``, but only for tests that use a database."""
    if "session" not in request.fixturenames:
        yield
        return
    from tests.factories import SQLAlchemySession

    SQLAlchemySession.set(request.getfixturevalue("session"))
    yield
    # The session is rolled back after the test; never hand it to the next one
    SQLAlchemySession.clear()


# --------------------------- in-memory pipeline ----------------------------- #
@pytest.fixture()
def clock() -> FrozenClock:
    return FrozenClock()


@pytest.fixture()
def signing_key() -> SigningKeyProvider:
    return SigningKeyProvider(TEST_SECRET)


@pytest.fixture()
def codec(signing_key, clock) -> JWTAccessTokenCodec:
    return JWTAccessTokenCodec(key=signing_key, clock=clock, lifetime=ACCESS_LIFETIME)


@pytest.fixture()
def memory_store(clock) -> InMemoryRefreshTokenStore:
    return InMemoryRefreshTokenStore(clock=clock)


@pytest.fixture()
def identity() -> InMemoryUserIdentity:
    """One known user, ``alice`` (id ``u1``)."""
    users = InMemoryUserIdentity()
    users.add(IdentityUser(id="u1", email="a@x.com", username="alice"), password="s3cret!")
    return users


@pytest.fixture()
def alice(identity) -> IdentityUser:
    user = identity.find_by_id("u1")
    assert user is not None
    return user


@pytest.fixture()
def token_service(codec, memory_store, identity, clock) -> TokenService:
    return TokenService(
        codec=codec,
        store=memory_store,
        identity=identity,
        clock=clock,
        token_cfg=AuthTokenConfig(refresh_window=REFRESH_WINDOW),
    )
