# todo_auth/services/auth/service.py
from __future__ import annotations

import logging
from datetime import datetime

from todo_auth.services._shared.base import BaseService
from todo_auth.services._shared.errors import (
    InternalFaultError,
    TokenAlreadyUsedError,
    TokenError,
    TokenExpiredError,
    TokenMismatchError,
    TokenNotFoundError,
    TokenRevokedError,
    TokenStillActiveError,
)
from todo_auth.services._shared.ports import (
    AccessTokenCodec,
    Clock,
    IdentityUser,
    RefreshTokenRecord,
    RefreshTokenStore,
    SystemClock,
    UserIdentity,
)
from todo_auth.services.auth.dto import AuthTokenConfig, TokenPair

log = logging.getLogger(__name__)


class TokenService(BaseService):
    """
    Token lifecycle service: issuance, rotation and revocation.

    Access tokens come from an :class:`AccessTokenCodec`; refresh tokens are
    opaque records in a :class:`RefreshTokenStore` bound to the access
    token's ``jti``. Rotation consumes a refresh record exactly once, relying
    on the store's compare-and-swap ``mark_used``.

    .. note::
       Token strings are never logged; log records carry the ``jti`` and a
       machine-readable ``reason`` only.
    """

    def __init__(
        self,
        *,
        codec: AccessTokenCodec,
        store: RefreshTokenStore,
        identity: UserIdentity,
        clock: Clock | None = None,
        token_cfg: AuthTokenConfig | None = None,
    ) -> None:
        """
        Initialize the service with its dependencies.

        :param codec: Mints and parses access tokens.
        :param store: Stateful refresh-token store.
        :param identity: User lookup for re-issuance.
        :param clock: Time source shared with the codec and the store.
        :param token_cfg: Rotation window configuration.
        """
        super().__init__()
        self.codec = codec
        self.store = store
        self.identity = identity
        self.clock = clock or SystemClock()
        self.cfg = token_cfg or AuthTokenConfig()

    # ------------------------------------------------------------------ #
    # Issuance
    # ------------------------------------------------------------------ #

    def issue(self, user: IdentityUser) -> TokenPair:
        """
        Mint an access token and persist its companion refresh token.

        Earlier records of the user are left untouched, so several sessions
        may coexist.

        :param user: Authenticated user.
        :returns: Access/refresh pair.
        """
        minted = self.codec.mint(user.id, user.email)
        record = self.store.create(user.id, minted.jti)
        log.info("Token pair issued", extra={"user_id": user.id, "jti": minted.jti})
        return TokenPair(access_token=minted.token, refresh_token=record.token)

    # ------------------------------------------------------------------ #
    # Rotation
    # ------------------------------------------------------------------ #

    def rotate(self, access_token: str, refresh_token: str) -> TokenPair:
        """
        Exchange a (nearly) expired access token and its refresh token for a
        new pair.

        Checks run in a fixed order and the first failure wins:

        1. access token signature, shape and algorithm
        2. access token within ``refresh_window`` of its expiry
        3. refresh record exists
        4. not revoked, 5. not used, 6. not expired
        7. record bound to the access token's ``jti``
        8. atomic consumption (``mark_used``)
        9. owner lookup and re-issuance

        :raises TokenError: A subclass naming the failed check. Unexpected
            faults surface as :class:`InternalFaultError`.
        """
        jti: str | None = None
        try:
            claims = self.codec.parse(access_token)
            jti = claims.jti
            now = self.clock.now()

            if claims.expires_at > now + self.cfg.refresh_window:
                raise TokenStillActiveError()

            record = self.store.find_by_token(refresh_token)
            if record is None:
                raise TokenNotFoundError()
            self._ensure_redeemable(record, claims.jti, now)

            if not self.store.mark_used(record):
                # Lost the race: report what the winner left behind.
                current = self.store.find_by_token(refresh_token)
                if current is not None and current.is_revoked:
                    raise TokenRevokedError()
                raise TokenAlreadyUsedError()

            user = self.identity.find_by_id(record.user_id)
            if user is None:
                log.error(
                    "Refresh token owner missing",
                    extra={"user_id": record.user_id, "jti": jti, "reason": "owner_missing"},
                )
                raise InternalFaultError()

            pair = self.issue(user)
        except TokenError as exc:
            log.warning("Token rotation rejected", extra={"reason": exc.reason, "jti": jti})
            raise
        except Exception as exc:
            log.exception("Token rotation failed", extra={"reason": "internal_fault", "jti": jti})
            raise InternalFaultError() from exc

        log.info("Token pair rotated", extra={"jti": jti, "user_id": user.id})
        return pair

    @staticmethod
    def _ensure_redeemable(record: RefreshTokenRecord, jti: str, now: datetime) -> None:
        if record.is_revoked:
            raise TokenRevokedError()
        if record.is_used:
            raise TokenAlreadyUsedError()
        if record.is_expired(now):
            raise TokenExpiredError()
        if record.jwt_id != jti:
            raise TokenMismatchError()

    # ------------------------------------------------------------------ #
    # Revocation
    # ------------------------------------------------------------------ #

    def revoke(self, refresh_token: str, *, user_id: str | None = None) -> None:
        """
        Revoke a single refresh token.

        :param refresh_token: Opaque refresh-token string.
        :param user_id: When given, the record must belong to this user.
        :raises TokenNotFoundError: Unknown token (or owned by someone else).
        """
        if user_id is not None:
            record = self.store.find_by_token(refresh_token)
            if record is None or record.user_id != user_id:
                raise TokenNotFoundError()
        if not self.store.mark_revoked(refresh_token):
            raise TokenNotFoundError()
        log.info("Refresh token revoked", extra={"user_id": user_id})

    def revoke_all_for_user(self, user_id: str) -> int:
        """Revoke every refresh token of ``user_id``. :returns: Records affected."""
        count = self.store.revoke_all_for_user(user_id)
        log.info("Refresh tokens revoked for user", extra={"user_id": user_id})
        return count

    def list_user_tokens(self, user_id: str) -> list[RefreshTokenRecord]:
        return self.store.list_user_tokens(user_id)
