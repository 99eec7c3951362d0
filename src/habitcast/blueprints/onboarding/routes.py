"""Onboarding wizard routes."""

from __future__ import annotations

from flask import jsonify

from ...extensions import current_user_context, login_required
from ...services import habits as habit_service
from ...services import identities as identity_service
from ...services import onboarding
from ..payload import load_form
from . import bp
from .forms import FirstHabitForm, FirstIdentityForm, FirstRepForm, LawsForm


@bp.get("/")
@login_required
def show_onboarding():
    """Whether the wizard should run; users with identities go to the dashboard."""

    return jsonify(onboarding.onboarding_state(current_user_context()))


@bp.post("/identity")
@login_required
def submit_identity():
    form = load_form(FirstIdentityForm)
    identity = onboarding.create_first_identity(current_user_context(), form.completion)
    return jsonify(
        {"step": onboarding.OnboardingStep.HABIT.value, "identity": identity_service.identity_to_dict(identity)}
    ), 201


@bp.post("/habit")
@login_required
def submit_habit():
    form = load_form(FirstHabitForm)
    habit = onboarding.create_first_habit(
        current_user_context(), form.identity_id, form.name, form.two_minute_version
    )
    return jsonify(
        {"step": onboarding.OnboardingStep.LAWS.value, "habit": habit_service.habit_to_dict(habit)}
    ), 201


@bp.post("/laws")
@login_required
def submit_laws():
    form = load_form(LawsForm)
    habit = onboarding.configure_laws(
        current_user_context(),
        form.habit_id,
        form.cue_type,
        form.cue_value,
        reward=form.reward,
        reward_other=form.reward_other,
        bundle_with=form.bundle_with,
    )
    return jsonify(
        {"step": onboarding.OnboardingStep.FIRST_REP.value, "habit": habit_service.habit_to_dict(habit)}
    )


@bp.post("/first-rep")
@login_required
def submit_first_rep():
    form = load_form(FirstRepForm)
    habit = onboarding.record_first_rep(current_user_context(), form.habit_id)
    return jsonify(
        {"step": onboarding.OnboardingStep.DONE.value, "habit": habit_service.habit_to_dict(habit)}
    )
