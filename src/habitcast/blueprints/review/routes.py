"""Weekly review and reset routes."""

from __future__ import annotations

from flask import jsonify, request

from ...extensions import current_user_context, login_required
from ...services import habits as habit_service
from ...services import weekly_review
from ..payload import load_form
from . import bp
from .forms import ApplyFixForm, FrictionForm, RateForm, ShrinkForm, StepForm


@bp.get("/weekly")
@login_required
def show_weekly():
    review = weekly_review.load_review(current_user_context(), request.args.get("step"))
    return jsonify(review.to_dict())


@bp.post("/weekly/rate")
@login_required
def rate():
    form = load_form(RateForm)
    review = weekly_review.rate_habit(current_user_context(), form.habit_id, form.rating, form.step)
    return jsonify(review.to_dict())


@bp.post("/weekly/friction")
@login_required
def friction():
    form = load_form(FrictionForm)
    review = weekly_review.tag_friction(
        current_user_context(), form.habit_id, form.friction, form.step
    )
    return jsonify(review.to_dict())


@bp.post("/weekly/advance")
@login_required
def advance():
    form = load_form(StepForm)
    return jsonify(weekly_review.advance(current_user_context(), form.step).to_dict())


@bp.post("/weekly/back")
@login_required
def back():
    form = load_form(StepForm)
    return jsonify(weekly_review.back(current_user_context(), form.step).to_dict())


@bp.post("/weekly/apply")
@login_required
def apply_fix():
    form = load_form(ApplyFixForm)
    review = weekly_review.apply_fix(current_user_context(), form.habit_id, form.accept)
    return jsonify(review.to_dict())


@bp.get("/reset")
@login_required
def reset_pick():
    """Active habits the user can shrink after a slip."""

    habits = habit_service.list_active(current_user_context())
    return jsonify({"habits": [habit_service.habit_to_dict(h) for h in habits]})


@bp.post("/reset/<int:habit_id>")
@login_required
def reset_shrink(habit_id: int):
    form = load_form(ShrinkForm)
    habit = habit_service.shrink_habit(current_user_context(), habit_id, form.two_minute_version)
    return jsonify(habit_service.habit_to_dict(habit))
