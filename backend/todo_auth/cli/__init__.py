"""Flask CLI commands."""

from __future__ import annotations

from flask import Flask

from .tokens import tokens_cli


def init_app(app: Flask) -> None:
    """Attach the ``flask tokens`` group (schema setup and token administration)."""
    app.cli.add_command(tokens_cli)
