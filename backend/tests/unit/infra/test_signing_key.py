"""Unit tests for the immutable HS256 signing key."""

from __future__ import annotations

import dataclasses

import jwt
import pytest

from tests.helpers.utils import TEST_SECRET
from todo_auth.infra.jwt.signing_key import HS256, SigningKeyProvider


class TestSigningKeyProvider:
    def test_sign_then_verify_returns_claims(self, signing_key):
        token = signing_key.sign({"sub": "a@x.com", "jti": "j-1"})

        assert signing_key.header(token)["alg"] == HS256
        assert signing_key.verify(token, require=["sub"]) == {"sub": "a@x.com", "jti": "j-1"}

    def test_verify_rejects_token_signed_with_other_secret(self, signing_key):
        foreign = jwt.encode({"sub": "a@x.com"}, "another-secret-of-a-decent-length-0000", algorithm=HS256)

        with pytest.raises(jwt.InvalidSignatureError):
            signing_key.verify(foreign)

    def test_verify_enforces_required_claims(self, signing_key):
        token = signing_key.sign({"sub": "a@x.com"})

        with pytest.raises(jwt.MissingRequiredClaimError):
            signing_key.verify(token, require=["jti"])

    def test_verify_ignores_expiry(self, signing_key):
        token = signing_key.sign({"sub": "a@x.com", "exp": 1})

        assert signing_key.verify(token)["exp"] == 1

    def test_secret_is_hidden_from_repr(self, signing_key):
        assert TEST_SECRET not in repr(signing_key)

    def test_is_immutable(self, signing_key):
        with pytest.raises(dataclasses.FrozenInstanceError):
            signing_key.secret = "changed"  # type: ignore[misc]

    @pytest.mark.parametrize("secret", ["", None])
    def test_rejects_empty_secret(self, secret):
        with pytest.raises(ValueError):
            SigningKeyProvider(secret)  # type: ignore[arg-type]
