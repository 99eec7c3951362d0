"""Profile routes."""

from __future__ import annotations

from flask import jsonify

from ...extensions import current_user_context, login_required
from ...services import profile as profile_service
from ..payload import load_form
from . import bp
from .forms import DisplayNameForm


@bp.get("/")
@login_required
def show_profile():
    profile = profile_service.get_profile(current_user_context())
    return jsonify(profile_service.profile_to_dict(profile))


@bp.patch("/")
@login_required
def update_profile():
    form = load_form(DisplayNameForm)
    profile = profile_service.update_display_name(current_user_context(), form.display_name)
    return jsonify(profile_service.profile_to_dict(profile))
