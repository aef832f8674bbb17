# comments in English; reST docstrings
from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Any

import redis  # type: ignore[import-untyped]

from todo_auth.services._shared.ports import (
    Clock,
    RandomSource,
    RefreshTokenRecord,
    RefreshTokenStore,
    SecretsRandomSource,
    SystemClock,
    new_token_string,
)
from todo_auth.services._shared.ports.refresh_token_store import DEFAULT_REFRESH_LIFETIME


def _s(value: Any, default: str = "") -> str:
    """Decode a Redis reply that may be bytes or already a string."""
    if value is None:
        return default
    if isinstance(value, bytes | bytearray):
        return value.decode()
    return str(value)


class RedisRefreshTokenStore(RefreshTokenStore):
    """
    Redis-backed refresh-token store with optimistic compare-and-swap.

    Layout
    ------
    - ``rt:{token}``: hash holding one record.
    - ``rt:seq``: counter providing record ids.
    - ``rt:u:{user_id}``: sorted set of the user's tokens scored by id.

    Records carry no TTL; their expiry is evaluated by the caller so
    history survives for ``list_user_tokens``.

    :param r: A Redis client (already connected).
    """

    SEQ_KEY = "rt:seq"

    def __init__(
        self,
        r: redis.Redis,
        *,
        clock: Clock | None = None,
        random: RandomSource | None = None,
        lifetime: timedelta = DEFAULT_REFRESH_LIFETIME,
    ) -> None:
        self.r = r
        self.clock = clock or SystemClock()
        self.random = random or SecretsRandomSource()
        self.lifetime = lifetime

    # -------------------- helpers --------------------

    @staticmethod
    def _k(token: str) -> str:
        return f"rt:{token}"

    @staticmethod
    def _ku(user_id: str) -> str:
        return f"rt:u:{user_id}"

    @staticmethod
    def _flag(value: Any) -> bool:
        return _s(value, "0") == "1"

    def _to_record(self, h: dict[Any, Any]) -> RefreshTokenRecord:
        data = {_s(k): _s(v) for k, v in h.items()}
        return RefreshTokenRecord(
            id=int(data["id"]),
            user_id=data["user_id"],
            token=data["token"],
            jwt_id=data["jwt_id"],
            is_used=data.get("is_used") == "1",
            is_revoked=data.get("is_revoked") == "1",
            created_date=datetime.fromisoformat(data["created_date"]).astimezone(UTC),
            exp=datetime.fromisoformat(data["exp"]).astimezone(UTC),
        )

    # -------------------- API ------------------------

    def create(self, user_id: str, jti: str) -> RefreshTokenRecord:
        now = self.clock.now()
        token = new_token_string(self.random)
        key = self._k(token)

        # Claim the key first so a (theoretical) collision can never merge records.
        if not self.r.hsetnx(key, "token", token):
            raise RuntimeError("Refresh token collision")

        record = RefreshTokenRecord(
            id=int(self.r.incr(self.SEQ_KEY)),
            user_id=user_id,
            token=token,
            jwt_id=jti,
            is_used=False,
            is_revoked=False,
            created_date=now,
            exp=now + self.lifetime,
        )
        pipe = self.r.pipeline(transaction=True)
        pipe.hset(
            key,
            mapping={
                "id": str(record.id),
                "user_id": record.user_id,
                "jwt_id": record.jwt_id,
                "is_used": "0",
                "is_revoked": "0",
                "created_date": record.created_date.isoformat(),
                "exp": record.exp.isoformat(),
            },
        )
        pipe.zadd(self._ku(user_id), {token: record.id})
        pipe.execute()
        return record

    def find_by_token(self, token: str) -> RefreshTokenRecord | None:
        h = self.r.hgetall(self._k(token))
        if not h or len(h) < 2:
            return None
        return self._to_record(h)

    def mark_used(self, record: RefreshTokenRecord) -> bool:
        """
        Flip ``is_used`` using WATCH/MULTI/EXEC.

        A concurrent writer touching the hash between the read and ``EXEC``
        aborts the transaction; the loop then re-reads and observes the new
        state, so only one caller ever sees ``True``.
        """
        key = self._k(record.token)
        while True:
            try:
                with self.r.pipeline() as p:
                    p.watch(key)
                    used, revoked, exists = p.hmget(key, "is_used", "is_revoked", "id")
                    if exists is None or self._flag(used) or self._flag(revoked):
                        p.unwatch()
                        return False
                    p.multi()
                    p.hset(key, "is_used", "1")
                    p.execute()
                    return True
            except redis.WatchError:
                continue

    def mark_revoked(self, token: str) -> bool:
        """Set ``is_revoked`` under WATCH so it never interleaves with :meth:`mark_used`."""
        key = self._k(token)
        while True:
            try:
                with self.r.pipeline() as p:
                    p.watch(key)
                    if not p.hexists(key, "id"):
                        p.unwatch()
                        return False
                    p.multi()
                    p.hset(key, "is_revoked", "1")
                    p.execute()
                    return True
            except redis.WatchError:
                continue

    def revoke_all_for_user(self, user_id: str) -> int:
        """
        Revoke every not-yet-revoked record of ``user_id``.

        Flags are read and written inside one WATCH/MULTI/EXEC round, so
        concurrent callers never count the same record twice.
        """
        index = self._ku(user_id)
        while True:
            try:
                with self.r.pipeline() as p:
                    p.watch(index)
                    tokens = [_s(t) for t in p.zrange(index, 0, -1)]
                    keys = [self._k(t) for t in tokens]
                    if keys:
                        p.watch(*keys)
                    pending = [
                        key
                        for key in keys
                        if p.hexists(key, "id") and not self._flag(p.hget(key, "is_revoked"))
                    ]
                    if not pending:
                        p.unwatch()
                        return 0
                    p.multi()
                    for key in pending:
                        p.hset(key, "is_revoked", "1")
                    p.execute()
                    return len(pending)
            except redis.WatchError:
                continue

    def list_user_tokens(self, user_id: str) -> list[RefreshTokenRecord]:
        out: list[RefreshTokenRecord] = []
        for member in self.r.zrange(self._ku(user_id), 0, -1):
            record = self.find_by_token(_s(member))
            if record is not None:
                out.append(record)
        return out
