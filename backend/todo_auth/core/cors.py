"""Cross-origin policy for ``/api/*``."""

from __future__ import annotations

from flask import Flask
from flask_cors import CORS

from todo_auth.core.logger import REQUEST_ID_HEADER


def init_app(app: Flask) -> None:
    """
    Apply ``CORS_ORIGINS`` (comma separated) and ``CORS_MAX_AGE``.

    An empty list or ``"*"`` admits any origin, in which case credentials are
    not supported. ``Authorization`` is always an allowed request header and
    the correlation id is exposed to scripts.
    """
    origins = [o.strip() for o in app.config.get("CORS_ORIGINS", "").split(",") if o.strip()]
    any_origin = origins in ([], ["*"])

    CORS(
        app,
        resources={r"/api/*": {"origins": "*" if any_origin else origins}},
        allow_headers=["Authorization", "Content-Type", REQUEST_ID_HEADER],
        expose_headers=[REQUEST_ID_HEADER],
        supports_credentials=not any_origin,
        max_age=app.config.get("CORS_MAX_AGE", 600),
    )
