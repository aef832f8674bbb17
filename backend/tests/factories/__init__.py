"""Factory Boy base classes bound to the transactional test session.

Factories flush instead of committing: rows stay inside the per-test
SAVEPOINT and read-only Units of Work attach to the same transaction.
"""

from __future__ import annotations

import factory


class SQLAlchemySession:
    """Holder for the session handed over by the ``session`` fixture."""

    _session = None

    @classmethod
    def set(cls, session):
        cls._session = session

    @classmethod
    def clear(cls):
        cls._session = None

    @classmethod
    def get(cls):
        """Return the registered session.

        Raises
        ------
        RuntimeError
            If a factory is used in a test that did not request ``session``.
        """
        if cls._session is None:
            raise RuntimeError("Factories session not set. Did you pass the 'session' fixture?")
        return cls._session


class BaseFactory(factory.alchemy.SQLAlchemyModelFactory):
    """Persist through the test session with ``flush`` semantics."""

    class Meta:
        abstract = True
        sqlalchemy_session_factory = SQLAlchemySession.get
        sqlalchemy_session_persistence = "flush"

    @classmethod
    def _after_postgeneration(cls, instance, create, results=None):
        # Post-generation hooks (password hashing) dirty the instance; flush
        # them now so a read-only UoW never sees pending changes.
        if create and results:
            SQLAlchemySession.get().flush()
