"""Habit routes."""

from __future__ import annotations

from flask import jsonify

from ...domain.anchor import NO_ANCHOR
from ...domain.design import BUILD_TEMPLATE, merge_for_edit
from ...extensions import current_user_context, login_required
from ...services import habits as habit_service
from ..payload import load_form
from . import bp
from .forms import HabitForm


@bp.get("/")
@login_required
def list_habits():
    """Current habits in display order plus the archive."""

    ctx = current_user_context()
    return jsonify(
        {
            "habits": [habit_service.habit_to_dict(h) for h in habit_service.list_current(ctx)],
            "archived": [habit_service.habit_to_dict(h) for h in habit_service.list_archived(ctx)],
        }
    )


@bp.post("/")
@login_required
def create_habit():
    form = load_form(HabitForm)
    intention = form.implementation_intention.model_dump() if form.implementation_intention else None
    habit = habit_service.create_habit(
        current_user_context(),
        form.name or "",
        identity_id=form.identity_id,
        two_minute_version=form.two_minute_version,
        implementation_intention=intention,
        temptation_bundle=form.temptation_bundle,
        design_build=form.design_build,
        anchor=form.anchor or NO_ANCHOR,
        frequency=form.frequency.value,
        custom_days=form.custom_days,
    )
    return jsonify(habit_service.habit_to_dict(habit)), 201


@bp.get("/<int:habit_id>")
@login_required
def edit_habit(habit_id: int):
    """One habit with its build template filled out for the edit form."""

    ctx = current_user_context()
    habit = habit_service.get_habit(ctx, habit_id)
    payload = habit_service.habit_to_dict(habit)
    payload["design_build"] = merge_for_edit(habit.design_build, BUILD_TEMPLATE)
    return jsonify(payload)


@bp.patch("/<int:habit_id>")
@login_required
def update_habit(habit_id: int):
    form = load_form(HabitForm)
    habit = habit_service.update_habit(current_user_context(), habit_id, form.changes())
    return jsonify(habit_service.habit_to_dict(habit))


@bp.post("/<int:habit_id>/archive")
@login_required
def archive_habit(habit_id: int):
    habit = habit_service.archive_habit(current_user_context(), habit_id)
    return jsonify(habit_service.habit_to_dict(habit))


@bp.post("/<int:habit_id>/restore")
@login_required
def restore_habit(habit_id: int):
    habit = habit_service.restore_habit(current_user_context(), habit_id)
    return jsonify(habit_service.habit_to_dict(habit))


@bp.post("/<int:habit_id>/complete")
@login_required
def complete_habit(habit_id: int):
    habit = habit_service.complete_habit(current_user_context(), habit_id)
    return jsonify(habit_service.habit_to_dict(habit))


@bp.delete("/<int:habit_id>")
@login_required
def delete_habit(habit_id: int):
    habit_service.delete_habit(current_user_context(), habit_id)
    return "", 204
