"""Review blueprint package."""

from __future__ import annotations

from flask import Blueprint

bp = Blueprint("review", __name__, url_prefix="/review")

from . import routes  # noqa: E402,F401 - import routes for registration

__all__ = ["bp"]
