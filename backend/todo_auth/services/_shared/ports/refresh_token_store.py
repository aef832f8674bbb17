from __future__ import annotations

import threading
from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from typing import Protocol

from .clock import Clock, SystemClock
from .random_source import RandomSource, SecretsRandomSource

#: Random characters preceding the UUID in a refresh-token string.
RANDOM_PREFIX_LENGTH = 35
DEFAULT_REFRESH_LIFETIME = timedelta(days=180)


def new_token_string(random: RandomSource) -> str:
    """Build an opaque refresh-token string: 35 random chars + a UUID4."""
    return random.alphanumeric(RANDOM_PREFIX_LENGTH) + random.uuid()


@dataclass(frozen=True, slots=True)
class RefreshTokenRecord:
    """
    Read-model for a persisted refresh token.

    :ivar id: Record identifier (auto-increment in SQL, ``INCR`` in Redis).
    :ivar user_id: Owner user id.
    :ivar token: Opaque string handed to the client.
    :ivar jwt_id: ``jti`` of the access token issued alongside.
    :ivar is_used: Whether the token has been redeemed.
    :ivar is_revoked: Whether the token has been revoked.
    :ivar created_date: Creation instant (UTC).
    :ivar exp: Absolute expiration (UTC).
    """

    id: int
    user_id: str
    token: str
    jwt_id: str
    is_used: bool
    is_revoked: bool
    created_date: datetime
    exp: datetime

    def is_expired(self, now: datetime) -> bool:
        return self.exp <= now

    def is_live(self, now: datetime) -> bool:
        """Neither used, revoked nor expired at ``now``."""
        return not (self.is_used or self.is_revoked or self.is_expired(now))


class RefreshTokenStore(Protocol):
    """
    Stateful store for refresh-token records.

    ``mark_used`` MUST be a compare-and-swap: of any number of concurrent
    callers presenting the same live record, exactly one gets ``True``.
    """

    def create(self, user_id: str, jti: str) -> RefreshTokenRecord:
        """Persist a new live record bound to the access token ``jti``."""

    def find_by_token(self, token: str) -> RefreshTokenRecord | None:
        """Fetch a record by its opaque string (if present)."""

    def mark_used(self, record: RefreshTokenRecord) -> bool:
        """
        Atomically flip ``is_used`` on a live record.

        :returns: ``True`` if this call consumed the record, ``False`` if it
            was already used or revoked. Repeated calls are harmless.
        """

    def mark_revoked(self, token: str) -> bool:
        """Revoke a single record. :returns: True if it existed."""

    def revoke_all_for_user(self, user_id: str) -> int:
        """Revoke every record of a user. :returns: Number of records affected."""

    def list_user_tokens(self, user_id: str) -> list[RefreshTokenRecord]:
        """List all records of a user, oldest first."""


class InMemoryRefreshTokenStore(RefreshTokenStore):
    """
    In-memory refresh-token store with atomic state transitions.

    .. note::
       A single lock guards every read-modify-write, which is what makes
       ``mark_used`` a compare-and-swap. Data lives for the process lifetime.
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
        self._by_token: dict[str, RefreshTokenRecord] = {}
        self._by_user: dict[str, list[str]] = {}
        self._seq = 0
        self._lock = threading.Lock()

    def create(self, user_id: str, jti: str) -> RefreshTokenRecord:
        now = self.clock.now()
        token = new_token_string(self.random)
        with self._lock:
            if token in self._by_token:
                raise RuntimeError("Refresh token collision")
            self._seq += 1
            record = RefreshTokenRecord(
                id=self._seq,
                user_id=user_id,
                token=token,
                jwt_id=jti,
                is_used=False,
                is_revoked=False,
                created_date=now,
                exp=now + self.lifetime,
            )
            self._by_token[token] = record
            self._by_user.setdefault(user_id, []).append(token)
        return record

    def find_by_token(self, token: str) -> RefreshTokenRecord | None:
        with self._lock:
            return self._by_token.get(token)

    def mark_used(self, record: RefreshTokenRecord) -> bool:
        with self._lock:
            current = self._by_token.get(record.token)
            if current is None or current.is_used or current.is_revoked:
                return False
            self._by_token[record.token] = replace(current, is_used=True)
            return True

    def mark_revoked(self, token: str) -> bool:
        with self._lock:
            current = self._by_token.get(token)
            if current is None:
                return False
            self._by_token[token] = replace(current, is_revoked=True)
            return True

    def revoke_all_for_user(self, user_id: str) -> int:
        with self._lock:
            affected = 0
            for token in self._by_user.get(user_id, []):
                current = self._by_token[token]
                if not current.is_revoked:
                    self._by_token[token] = replace(current, is_revoked=True)
                    affected += 1
            return affected

    def list_user_tokens(self, user_id: str) -> list[RefreshTokenRecord]:
        with self._lock:
            return [self._by_token[t] for t in self._by_user.get(user_id, [])]
