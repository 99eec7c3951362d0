"""Scorecard routes."""

from __future__ import annotations

from flask import jsonify

from ...extensions import current_user_context, login_required
from ...models.scorecard import ScorecardRating
from ...services import scorecard as scorecard_service
from ..payload import load_form
from . import bp
from .forms import ReorderForm, ScorecardEntryForm


@bp.get("/")
@login_required
def show_scorecard():
    """Entries grouped by time of day with summary and insights."""

    return jsonify(scorecard_service.scorecard_view(current_user_context()))


@bp.post("/")
@login_required
def create_entry():
    form = load_form(ScorecardEntryForm)
    entry = scorecard_service.create_entry(
        current_user_context(),
        form.habit_name or "",
        rating=form.rating or ScorecardRating.NEUTRAL.value,
        time_of_day=form.time_of_day,
        identity_id=form.identity_id,
    )
    return jsonify(scorecard_service.entry_to_dict(entry)), 201


@bp.patch("/<int:entry_id>")
@login_required
def update_entry(entry_id: int):
    form = load_form(ScorecardEntryForm)
    entry = scorecard_service.update_entry(
        current_user_context(), entry_id, form.model_dump(exclude_unset=True)
    )
    return jsonify(scorecard_service.entry_to_dict(entry))


@bp.post("/reorder")
@login_required
def reorder_entries():
    form = load_form(ReorderForm)
    plan = scorecard_service.reorder(
        current_user_context(), form.entry_id, form.time_of_day, form.position
    )
    return jsonify(
        {
            "changed": len(plan.changes),
            "layout": {time.value: ids for time, ids in plan.layout.items()},
        }
    )


@bp.delete("/<int:entry_id>")
@login_required
def delete_entry(entry_id: int):
    scorecard_service.delete_entry(current_user_context(), entry_id)
    return "", 204
