"""Application factory wiring Flask extensions, token services and blueprints."""

from __future__ import annotations

from flask import Flask

from todo_auth.core.config import BaseConfig, get_config, validate_config
from todo_auth.core.logger import configure_logging, init_app as init_logging
from todo_auth.services._shared.ports import Clock


def create_app(
    config: str | type[BaseConfig] | object | None = None,
    *,
    clock: Clock | None = None,
    instance_relative_config: bool = True,
    instance_config_filename: str = "config.py",
) -> Flask:
    """Build and configure the Flask application.

    :param config: Config class/object, an import string, or ``None`` to
        select one from ``APP_ENV``.
    :param clock: Time source for the token services (tests inject a frozen one).
    :raises RuntimeError: When the configuration is unsafe to run.
    """

    app = Flask(__name__, instance_relative_config=instance_relative_config)

    app.config.from_object(get_config() if config is None else config)
    if instance_relative_config and instance_config_filename:
        app.config.from_pyfile(instance_config_filename, silent=True)

    validate_config(app.config)
    configure_logging(app.config.get("LOG_LEVEL", "INFO"))

    from todo_auth.core import extensions

    extensions.init_app(app)

    init_logging(app)

    from todo_auth.core import cors

    cors.init_app(app)

    from todo_auth.core import container

    container.init_app(app, clock=clock)

    from todo_auth.api import init_app as init_api

    init_api(app)

    from todo_auth.core import errors

    errors.init_app(app)

    from todo_auth import cli as app_cli

    app_cli.init_app(app)

    return app
