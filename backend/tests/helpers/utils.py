"""Tiny helpers shared across test modules."""

from __future__ import annotations

from datetime import timedelta

from todo_auth.core.config import TestingConfig
from todo_auth.services._shared.ports import FrozenClock, RandomSource

TEST_SECRET = TestingConfig.JWT_SECRET_KEY
ACCESS_LIFETIME = timedelta(days=7)
REFRESH_WINDOW = timedelta(minutes=5)


def age_access_token(clock: FrozenClock) -> None:
    """Move ``clock`` just inside the rotation window of a token minted at its current time."""
    clock.advance(ACCESS_LIFETIME - REFRESH_WINDOW + timedelta(seconds=1))


class SequenceRandomSource(RandomSource):
    """Deterministic random source yielding predictable, distinct token strings."""

    def __init__(self) -> None:
        self._n = 0

    def alphanumeric(self, length: int) -> str:
        self._n += 1
        return str(self._n).rjust(length, "A")

    def uuid(self) -> str:
        return f"00000000-0000-4000-8000-{self._n:012d}"
