"""Token lifecycle service: HS256 access tokens and single-use refresh tokens.

Provide convenient access to :func:`todo_auth.factory.create_app` so callers
can ``from todo_auth import create_app``.
"""

from __future__ import annotations

from .factory import create_app

__all__ = ["create_app"]
