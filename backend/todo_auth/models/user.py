"""Account rows owned by the identity collaborator."""

from __future__ import annotations

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, validates
from werkzeug.security import check_password_hash, generate_password_hash

from todo_auth.core.extensions import db

from .base import CreatedAtMixin, ReprMixin, UUIDPKMixin


class User(UUIDPKMixin, CreatedAtMixin, ReprMixin, db.Model):
    """
    A registered account.

    Fields
    ------
    email : str
        Lowercased and trimmed on assignment; issued as the ``sub`` claim.
    username : str
        Login name, unique.
    password_hash : str
        Werkzeug hash; set it through the write-only :attr:`password`.
    """

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(String(254), unique=True, index=True, nullable=False)
    username: Mapped[str] = mapped_column(String(50), unique=True, index=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(254), nullable=False)

    @property
    def password(self):
        raise AttributeError("Password is write-only.")

    @password.setter
    def password(self, raw: str) -> None:
        if not raw or not isinstance(raw, str):
            raise ValueError("Password must be a non-empty string.")
        self.password_hash = generate_password_hash(raw)

    def verify_password(self, raw: str) -> bool:
        """
        Check ``raw`` against the stored hash.

        :returns: ``False`` when no hash is stored or it does not match.
        """
        return bool(self.password_hash) and check_password_hash(self.password_hash, raw)

    @validates("email")
    def _clean_email(self, key: str, value: str) -> str:
        if not isinstance(value, str) or not value.strip():
            raise ValueError("Email is required.")
        email = value.strip().lower()
        local, _, domain = email.partition("@")
        if not local or "." not in domain:
            raise ValueError("Email format looks invalid.")
        return email

    @validates("username")
    def _clean_username(self, key: str, value: str) -> str:
        if not isinstance(value, str) or not value.strip():
            raise ValueError("Username is required.")
        return value.strip()
