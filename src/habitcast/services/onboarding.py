"""First-run wizard: one identity, one habit, its 4 Laws, the first rep.

Each step writes on its own. A failure part way leaves the earlier rows in
place; the user picks up from the identities and habits screens.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from ..context import UserContext
from ..domain.design import BUILD_TEMPLATE, trim_for_save
from ..domain.intention import normalize_intention
from ..domain.statement import MIN_COMPLETION_LENGTH, build_statement, is_valid_completion
from ..errors import FormValidationError, NotFoundError, ReviewStepError
from ..logging_config import get_logger
from ..models.habit import Habit, HabitFrequency
from ..models.identity import Identity

logger = get_logger(__name__)


class OnboardingStep(str, Enum):
    IDENTITY = "identity"
    HABIT = "habit"
    LAWS = "laws"
    FIRST_REP = "first_rep"
    DONE = "done"


STEP_TITLES = {
    OnboardingStep.IDENTITY: "Who do you want to become?",
    OnboardingStep.HABIT: "What's one habit that proves this identity?",
    OnboardingStep.LAWS: "Configure the 4 Laws (quick)",
    OnboardingStep.FIRST_REP: "Do the tiny version now",
    OnboardingStep.DONE: "You cast 1 vote for your identity",
}

CUE_TYPES = ("time", "after", "location")
REWARD_LABELS = {"check": "Check it off", "music": "Music", "sticker": "Sticker"}
REWARD_OTHER = "other"


def needs_onboarding(ctx: UserContext) -> bool:
    """New users have no identities yet; everyone else skips the wizard."""

    return ctx.app.identity_repo.count(user_id=ctx.require_user_id()) == 0


def onboarding_state(ctx: UserContext) -> dict[str, Any]:
    required = needs_onboarding(ctx)
    step = OnboardingStep.IDENTITY if required else OnboardingStep.DONE
    return {
        "required": required,
        "step": step.value,
        "title": STEP_TITLES[step],
        "cue_types": list(CUE_TYPES),
        "rewards": {**REWARD_LABELS, REWARD_OTHER: "Other"},
    }


def create_first_identity(ctx: UserContext, completion: str) -> Identity:
    user_id = ctx.require_user_id()
    if not needs_onboarding(ctx):
        raise ReviewStepError("Onboarding is already complete.")
    if not is_valid_completion(completion):
        raise FormValidationError.single(
            "statement", f"Finish the sentence with at least {MIN_COMPLETION_LENGTH} characters."
        )
    identity = ctx.app.identity_repo.create(
        Identity(user_id=user_id, statement=build_statement(completion), sort_order=0),
        user_id=user_id,
    )
    logger.info("Onboarding identity created", extra={"user_id": user_id, "identity_id": identity.id})
    return identity


def create_first_habit(
    ctx: UserContext, identity_id: int, name: str, two_minute_version: str
) -> Habit:
    """Both the habit and its 2-minute version are required here."""

    user_id = ctx.require_user_id()
    if ctx.app.identity_repo.get_by_id(identity_id, user_id=user_id) is None:
        raise NotFoundError("Identity not found.")
    errors: dict[str, list[str]] = {}
    clean_name = (name or "").strip()[:200]
    clean_two_minute = (two_minute_version or "").strip()[:200]
    if not clean_name:
        errors["name"] = ["Habit name is required."]
    if not clean_two_minute:
        errors["two_minute_version"] = ["The 2-minute version is required."]
    if errors:
        raise FormValidationError(errors)
    habit = ctx.app.habit_repo.create(
        Habit(
            user_id=user_id,
            identity_id=identity_id,
            name=clean_name,
            two_minute_version=clean_two_minute,
            frequency=HabitFrequency.DAILY.value,
            sort_order=0,
        ),
        user_id=user_id,
    )
    logger.info("Onboarding habit created", extra={"user_id": user_id, "habit_id": habit.id})
    return habit


def build_laws(
    habit: Habit,
    cue_type: str,
    cue_value: str,
    reward: str,
    reward_other: str = "",
    bundle_with: str = "",
) -> tuple[Optional[dict[str, str]], Optional[dict[str, dict[str, str]]]]:
    """Implementation intention and build template from the quick 4 Laws form."""

    if cue_type not in CUE_TYPES:
        raise FormValidationError.single("cue_type", "Cue must be a time, a habit to follow, or a place.")
    cue = (cue_value or "").strip()
    if cue_type == "time":
        intention = {"behavior": habit.name, "time": cue[:100]}
    elif cue_type == "after":
        intention = {"behavior": cue[:200]}
    else:
        intention = {"behavior": habit.name, "location": cue[:100]}

    if reward == REWARD_OTHER:
        reward_text = (reward_other or "").strip()[:200]
    else:
        reward_text = REWARD_LABELS.get(reward, REWARD_LABELS["check"])
    design = {
        "obvious": {"implementation_intention": cue[:200]},
        "easy": {"two_minute_rule": (habit.two_minute_version or "")[:200]},
        "satisfying": {"immediate_reward": reward_text},
        "attractive": {"temptation_bundling": (bundle_with or "").strip()[:500]},
    }
    return normalize_intention(intention), trim_for_save(design, BUILD_TEMPLATE)


def configure_laws(
    ctx: UserContext,
    habit_id: int,
    cue_type: str,
    cue_value: str,
    reward: str = "check",
    reward_other: str = "",
    bundle_with: str = "",
) -> Habit:
    user_id = ctx.require_user_id()
    habit = ctx.app.habit_repo.get_by_id(habit_id, user_id=user_id)
    if habit is None:
        raise NotFoundError("Habit not found.")
    intention, design = build_laws(habit, cue_type, cue_value, reward, reward_other, bundle_with)
    changes: dict[str, Any] = {"implementation_intention": intention, "design_build": design}
    bundle = (bundle_with or "").strip()[:500]
    if bundle:
        changes["temptation_bundle"] = bundle
    updated = ctx.app.habit_repo.update_fields(habit_id, changes, user_id=user_id)
    logger.info("Onboarding laws saved", extra={"user_id": user_id, "habit_id": habit_id, "cue_type": cue_type})
    return updated  # type: ignore[return-value]


def record_first_rep(ctx: UserContext, habit_id: int) -> Habit:
    """Mark the habit done today with a one-day streak."""

    user_id = ctx.require_user_id()
    if ctx.app.habit_repo.get_by_id(habit_id, user_id=user_id) is None:
        raise NotFoundError("Habit not found.")
    updated = ctx.app.habit_repo.update_fields(
        habit_id, {"last_completed_date": ctx.today(), "current_streak": 1}, user_id=user_id
    )
    logger.info("Onboarding first rep", extra={"user_id": user_id, "habit_id": habit_id})
    return updated  # type: ignore[return-value]


__all__ = [
    "CUE_TYPES",
    "OnboardingStep",
    "REWARD_LABELS",
    "STEP_TITLES",
    "build_laws",
    "configure_laws",
    "create_first_habit",
    "create_first_identity",
    "needs_onboarding",
    "onboarding_state",
    "record_first_rep",
]
