"""Transaction boundary contract shared by services and token stores."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from todo_auth.repositories import RefreshTokenRepository, UserRepository


class UnitOfWork(ABC):
    """
    A ``with`` block whose repositories share one transaction.

    Implementations expose :attr:`users` and :attr:`refresh_tokens`; leaving
    the block either persists the work or discards it.
    """

    users: UserRepository
    refresh_tokens: RefreshTokenRepository

    @abstractmethod
    def __enter__(self) -> UnitOfWork: ...

    @abstractmethod
    def __exit__(self, exc_type, exc, tb) -> None: ...

    @abstractmethod
    def commit(self) -> None: ...

    @abstractmethod
    def rollback(self) -> None: ...
