"""HabitCast application factory."""

from __future__ import annotations

from importlib import import_module
from typing import Iterable, Optional

from flask import Flask

from . import cli as _cli
from .config import BaseConfig, DevConfig, TestConfig
from .context import AppContext, create_app_context
from .errorhandlers import register_error_handlers
from .extensions import init_app_context
from .logging_config import setup_logging

_CONFIG_MAP = {
    "development": DevConfig,
    "testing": TestConfig,
    "default": BaseConfig,
}


def _resolve_config(name: str | None) -> type[BaseConfig]:
    """Return the config class for the provided environment name."""

    if not name:
        return BaseConfig
    return _CONFIG_MAP.get(name.lower(), BaseConfig)


def _blueprint_paths() -> Iterable[str]:
    """Yield blueprint import paths."""

    yield "habitcast.blueprints.identities"
    yield "habitcast.blueprints.habits"
    yield "habitcast.blueprints.scorecard"
    yield "habitcast.blueprints.review"
    yield "habitcast.blueprints.onboarding"
    yield "habitcast.blueprints.profile"


def create_app(config_name: str | None = None, app_context: Optional[AppContext] = None) -> Flask:
    """Create and configure the Flask application instance.

    Tests pass a prebuilt `app_context` to share one database with their
    fixtures.
    """

    app = Flask(__name__, instance_relative_config=True)
    if app_context is None:
        config_obj = _resolve_config(config_name)()
        app_context = create_app_context(config_obj)
    config_obj = app_context.config
    app.config.from_object(config_obj)
    app.config["HABITCAST_CONFIG"] = config_obj

    setup_logging(config_obj)
    init_app_context(app, app_context)
    _register_blueprints(app)
    register_error_handlers(app)
    _cli.init_app(app)
    return app


def _register_blueprints(app: Flask) -> None:
    """Import and register all blueprints declared in `_blueprint_paths`."""

    for dotted_path in _blueprint_paths():
        module = import_module(dotted_path)
        blueprint = getattr(module, "bp")
        app.register_blueprint(blueprint)


__all__ = ["BaseConfig", "DevConfig", "TestConfig", "create_app", "create_app_context"]
