"""Per-app context wiring and the request's authenticated user."""

from __future__ import annotations

from functools import wraps
from typing import Callable, TypeVar

from flask import Flask, current_app, g, request

from .context import AppContext, UserContext

F = TypeVar("F", bound=Callable)

_EXTENSION_KEY = "habitcast"


def init_app_context(app: Flask, app_context: AppContext) -> None:
    """Attach the application context so request handlers can reach it."""

    app.extensions[_EXTENSION_KEY] = app_context


def get_app_context() -> AppContext:
    try:
        return current_app.extensions[_EXTENSION_KEY]
    except KeyError:  # pragma: no cover - misconfigured app
        raise RuntimeError("HabitCast context not initialized") from None


def current_user_context() -> UserContext:
    """Build (once per request) the caller's context from the auth headers."""

    if "user_context" not in g:
        app_context = get_app_context()
        config = app_context.config
        user_id = (request.headers.get(config.AUTH_HEADER) or "").strip() or None
        email = (request.headers.get(config.AUTH_EMAIL_HEADER) or "").strip()
        g.user_context = UserContext(app=app_context, user_id=user_id, email=email)
    return g.user_context


def login_required(view: F) -> F:
    """Reject the request with an empty 401 unless a user is authenticated."""

    @wraps(view)
    def wrapped(*args, **kwargs):
        ctx = current_user_context()
        if not ctx.user_id:
            return "", 401
        return view(*args, **kwargs)

    return wrapped  # type: ignore[return-value]
