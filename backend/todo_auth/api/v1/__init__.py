"""Version 1 of the HTTP API."""

from __future__ import annotations

from flask import Blueprint

from .account import bp as account_bp
from .health import bp as health_bp

API_VERSION = "v1"

#: ``(blueprint, prefix)`` pairs mounted under ``/api/v1``.
REGISTRY: list[tuple[Blueprint, str]] = [
    (health_bp, ""),
    (account_bp, "/account"),
]
