"""Onboarding blueprint package."""

from __future__ import annotations

from flask import Blueprint

bp = Blueprint("onboarding", __name__, url_prefix="/onboarding")

from . import routes  # noqa: E402,F401 - import routes for registration

__all__ = ["bp"]
