"""
IdentityService
===============

SQLAlchemy-backed identity collaborator for the ``User`` aggregate:
- Account creation with uniqueness and password-policy checks
- Credential verification (no token issuance)
- Lookups by id and username

Every method returns :class:`IdentityUser` snapshots, never ORM instances.
"""

from __future__ import annotations

from sqlalchemy.exc import IntegrityError

from todo_auth.models.user import User
from todo_auth.repositories.user import UserRepository
from todo_auth.services._shared.base import BaseService
from todo_auth.services._shared.errors import RegistrationError
from todo_auth.services._shared.ports.user_identity import (
    IdentityUser,
    UserIdentity,
    password_policy_errors,
)


def _to_identity(user: User) -> IdentityUser:
    return IdentityUser(id=user.id, email=user.email, username=user.username)


class IdentityService(BaseService, UserIdentity):
    """
    Application service implementing the :class:`UserIdentity` port.

    Responsibilities
    ----------------
    - Register users ensuring username and email uniqueness.
    - Authenticate credentials with a uniform failure.
    - Retrieve users for token issuance.
    """

    # --------------------------------------------------------------------- #
    # Registration
    # --------------------------------------------------------------------- #

    def create_user(self, username: str, email: str, password: str) -> IdentityUser:
        """
        Register a new user.

        :param username: Login name.
        :type username: str
        :param email: Login email (normalized to lowercase).
        :type email: str
        :param password: Raw password, hashed by the model.
        :type password: str
        :returns: Snapshot of the created user.
        :rtype: IdentityUser
        :raises RegistrationError: With every reason the account was refused.
        """
        with self.rw_uow() as uow:
            repo: UserRepository = uow.users

            errors: list[str] = []
            if repo.exists_by_username(username):
                errors.append(f"Username '{username.strip()}' is already taken.")
            if repo.exists_by_email(email):
                errors.append(f"Email '{email.strip().lower()}' is already taken.")
            errors.extend(password_policy_errors(password))
            if errors:
                raise RegistrationError(errors)

            try:
                user = User(username=username, email=email)
                user.password = password
                repo.add(user)
            except ValueError as exc:
                raise RegistrationError([str(exc)]) from exc
            except IntegrityError as exc:
                # Lost a race against a concurrent registration.
                raise RegistrationError(["Username or email is already taken."]) from exc

            return _to_identity(user)

    # --------------------------------------------------------------------- #
    # Authentication
    # --------------------------------------------------------------------- #

    def verify_credentials(self, username: str, password: str) -> IdentityUser | None:
        """
        Authenticate a user by username and password.

        :returns: The user, or ``None`` for an unknown user or a wrong password.
        :rtype: IdentityUser | None
        """
        with self.ro_uow() as uow:
            user = uow.users.authenticate(username, password)
            return _to_identity(user) if user is not None else None

    # --------------------------------------------------------------------- #
    # Retrieval
    # --------------------------------------------------------------------- #

    def find_by_id(self, user_id: str) -> IdentityUser | None:
        with self.ro_uow() as uow:
            user = uow.users.get(user_id)
            return _to_identity(user) if user is not None else None

    def find_by_username(self, username: str) -> IdentityUser | None:
        with self.ro_uow() as uow:
            user = uow.users.get_by_username(username)
            return _to_identity(user) if user is not None else None
