from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Protocol
from uuid import uuid4

from werkzeug.security import check_password_hash, generate_password_hash

from todo_auth.services._shared.errors import RegistrationError

MIN_PASSWORD_LENGTH = 6


def password_policy_errors(password: str) -> list[str]:
    """Return client-safe reasons why ``password`` is unacceptable (empty if fine)."""
    if not isinstance(password, str) or len(password) < MIN_PASSWORD_LENGTH:
        return [f"Passwords must be at least {MIN_PASSWORD_LENGTH} characters."]
    return []


@dataclass(frozen=True, slots=True)
class IdentityUser:
    """
    Minimal identity view the token pipeline needs.

    :ivar id: Opaque user id (becomes the ``userId`` claim).
    :ivar email: Login email (becomes ``email`` and ``sub``).
    :ivar username: Login name.
    """

    id: str
    email: str
    username: str


class UserIdentity(Protocol):
    """Port to the identity collaborator (user creation and lookup)."""

    def create_user(self, username: str, email: str, password: str) -> IdentityUser:
        """
        Create an account.

        :raises RegistrationError: With client-safe reasons when refused.
        """

    def verify_credentials(self, username: str, password: str) -> IdentityUser | None:
        """Return the user when the pair authenticates, otherwise ``None``."""

    def find_by_id(self, user_id: str) -> IdentityUser | None: ...

    def find_by_username(self, username: str) -> IdentityUser | None: ...


class InMemoryUserIdentity(UserIdentity):
    """Dictionary-backed identity used in unit tests."""

    def __init__(self) -> None:
        self._users: dict[str, IdentityUser] = {}
        self._hashes: dict[str, str] = {}
        self._lock = threading.Lock()

    def create_user(self, username: str, email: str, password: str) -> IdentityUser:
        username = username.strip()
        email = email.strip().lower()
        with self._lock:
            errors: list[str] = []
            if any(u.username == username for u in self._users.values()):
                errors.append(f"Username '{username}' is already taken.")
            if any(u.email == email for u in self._users.values()):
                errors.append(f"Email '{email}' is already taken.")
            errors.extend(password_policy_errors(password))
            if errors:
                raise RegistrationError(errors)
            user = IdentityUser(id=str(uuid4()), email=email, username=username)
            self._users[user.id] = user
            self._hashes[user.id] = generate_password_hash(password)
            return user

    def add(self, user: IdentityUser, password: str = "secret") -> IdentityUser:
        """Seed a user with a fixed id."""
        with self._lock:
            self._users[user.id] = user
            self._hashes[user.id] = generate_password_hash(password)
        return user

    def remove(self, user_id: str) -> None:
        with self._lock:
            self._users.pop(user_id, None)
            self._hashes.pop(user_id, None)

    def verify_credentials(self, username: str, password: str) -> IdentityUser | None:
        user = self.find_by_username(username)
        if user is None or not check_password_hash(self._hashes[user.id], password):
            return None
        return user

    def find_by_id(self, user_id: str) -> IdentityUser | None:
        return self._users.get(user_id)

    def find_by_username(self, username: str) -> IdentityUser | None:
        username = username.strip()
        return next((u for u in self._users.values() if u.username == username), None)
