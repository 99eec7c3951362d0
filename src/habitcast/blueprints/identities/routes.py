"""Identity routes: statements, scoreboard and habits to break."""

from __future__ import annotations

from flask import jsonify

from ...extensions import current_user_context, login_required
from ...services import identities as identity_service
from ..payload import load_form
from . import bp
from .forms import HabitToBreakForm, IdentityCreateForm, IdentityUpdateForm


@bp.get("/")
@login_required
def list_identities():
    """Identities with this week's votes, trend and momentum."""

    return jsonify({"identities": identity_service.scoreboard(current_user_context())})


@bp.post("/")
@login_required
def create_identity():
    form = load_form(IdentityCreateForm)
    identity = identity_service.create_identity(current_user_context(), form.completion)
    return jsonify(identity_service.identity_to_dict(identity)), 201


@bp.patch("/<int:identity_id>")
@login_required
def update_identity(identity_id: int):
    form = load_form(IdentityUpdateForm)
    identity = identity_service.update_identity(current_user_context(), identity_id, form.statement)
    return jsonify(identity_service.identity_to_dict(identity))


@bp.delete("/<int:identity_id>")
@login_required
def delete_identity(identity_id: int):
    identity_service.delete_identity(current_user_context(), identity_id)
    return "", 204


@bp.get("/<int:identity_id>/breaks")
@login_required
def list_breaks(identity_id: int):
    rows = identity_service.list_breaks(current_user_context(), identity_id)
    return jsonify({"breaks": [identity_service.break_to_dict(row, for_edit=True) for row in rows]})


@bp.post("/<int:identity_id>/breaks")
@login_required
def create_break(identity_id: int):
    form = load_form(HabitToBreakForm)
    row = identity_service.create_break(
        current_user_context(), identity_id, form.name or "", form.design_break
    )
    return jsonify(identity_service.break_to_dict(row)), 201


@bp.patch("/<int:identity_id>/breaks/<int:break_id>")
@login_required
def update_break(identity_id: int, break_id: int):
    form = load_form(HabitToBreakForm)
    row = identity_service.update_break(
        current_user_context(), break_id, form.model_dump(exclude_unset=True)
    )
    return jsonify(identity_service.break_to_dict(row))


@bp.delete("/<int:identity_id>/breaks/<int:break_id>")
@login_required
def delete_break(identity_id: int, break_id: int):
    identity_service.delete_break(current_user_context(), break_id)
    return "", 204
