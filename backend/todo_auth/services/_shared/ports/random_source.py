from __future__ import annotations

import secrets
import string
from typing import Protocol
from uuid import uuid4

#: Alphabet of the random prefix of refresh-token strings.
TOKEN_ALPHABET = string.ascii_uppercase + string.digits


class RandomSource(Protocol):
    """Port producing opaque random material for refresh tokens."""

    def alphanumeric(self, length: int) -> str: ...

    def uuid(self) -> str: ...


class SecretsRandomSource(RandomSource):
    """Random material drawn from :mod:`secrets` (OS CSPRNG)."""

    def alphanumeric(self, length: int) -> str:
        return "".join(secrets.choice(TOKEN_ALPHABET) for _ in range(length))

    def uuid(self) -> str:
        return str(uuid4())
