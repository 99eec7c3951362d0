"""Weekly review: rate each habit, name the friction, apply one fix.

The review is a linear state machine. Moving forward requires the current
step to be complete; moving back is always allowed and never undoes writes,
since every rating and friction tag is persisted the moment it is chosen.
The step itself is not stored: the client reports where it is and the
machine is rebuilt from the week's rows on every request; a claimed step
is refused while any step before it is incomplete.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Iterable, Optional

from ..context import UserContext
from ..errors import FormValidationError, NotFoundError, ReviewStepError
from ..logging_config import get_logger
from ..models.habit import Habit
from ..models.weekly_review import WeeklyRating, WeeklyReviewRating
from .metrics import week_start

logger = get_logger(__name__)


class ReviewStep(str, Enum):
    RATE = "rate"
    FRICTION = "friction"
    SUGGEST = "suggest"
    APPLY = "apply"


STEP_ORDER: tuple[ReviewStep, ...] = (
    ReviewStep.RATE,
    ReviewStep.FRICTION,
    ReviewStep.SUGGEST,
    ReviewStep.APPLY,
)

STEP_PROMPTS = {
    ReviewStep.RATE: "This week: tap = (kept up) or − (struggled) for each habit.",
    ReviewStep.FRICTION: "What got in the way for the habits you marked −?",
    ReviewStep.SUGGEST: "We suggest one fix per 4 Laws. Apply the one that fits.",
    ReviewStep.APPLY: "One-tap apply: change to 2-minute version, or later.",
}

FRICTION_OPTIONS: tuple[str, ...] = ("Forgot", "Too tired", "Too busy", "Phone", "Boring", "Hard")

ADVICE = {
    "Forgot": "Add cue",
    "Too tired": "Shrink habit",
    "Too busy": "Move time",
    "Phone": "Add cue",
    "Boring": "Add reward",
    "Hard": "Shrink habit",
}
DEFAULT_ADVICE = "Shrink habit"


def advice_for(friction: Optional[str]) -> str:
    if not friction:
        return DEFAULT_ADVICE
    return ADVICE.get(friction, DEFAULT_ADVICE)


def parse_step(value: Optional[str]) -> ReviewStep:
    if value in (None, ""):
        return ReviewStep.RATE
    try:
        return ReviewStep(value)
    except ValueError as exc:
        raise FormValidationError.single("step", f"Unknown review step: {value}") from exc


@dataclass
class WeeklyReview:
    """State of one user's review for one week."""

    week_start: date
    habits: list[Habit]
    ratings: dict[int, str] = field(default_factory=dict)
    frictions: dict[int, str] = field(default_factory=dict)
    applied: dict[int, bool] = field(default_factory=dict)
    step: ReviewStep = ReviewStep.RATE

    @classmethod
    def from_rows(
        cls,
        week: date,
        habits: Iterable[Habit],
        rows: Iterable[WeeklyReviewRating],
        step: ReviewStep = ReviewStep.RATE,
    ) -> "WeeklyReview":
        review = cls(week_start=week, habits=list(habits), step=step)
        active_ids = review.habit_ids
        for row in rows:
            if row.habit_id not in active_ids:
                continue
            review.ratings[row.habit_id] = row.rating
            if row.friction in FRICTION_OPTIONS:
                review.frictions[row.habit_id] = row.friction  # type: ignore[assignment]
            if row.advice_applied_at is not None:
                review.applied[row.habit_id] = True
        return review

    @property
    def habit_ids(self) -> set[int]:
        return {habit.id for habit in self.habits if habit.id is not None}

    @property
    def negative_habits(self) -> list[Habit]:
        return [h for h in self.habits if self.ratings.get(h.id) == WeeklyRating.NEGATIVE.value]  # type: ignore[arg-type]

    def require_habit(self, habit_id: int) -> None:
        if habit_id not in self.habit_ids:
            raise NotFoundError("Habit is not part of this week's review.")

    def rate(self, habit_id: int, rating: str) -> None:
        """Record a rating; a new rating always clears the friction tag."""

        self.require_habit(habit_id)
        try:
            value = WeeklyRating(rating).value
        except ValueError as exc:
            raise FormValidationError.single("rating", "Rating must be = or -.") from exc
        self.ratings[habit_id] = value
        self.frictions.pop(habit_id, None)

    def set_friction(self, habit_id: int, friction: str) -> None:
        self.require_habit(habit_id)
        if self.ratings.get(habit_id) != WeeklyRating.NEGATIVE.value:
            raise ReviewStepError("Only habits marked − take a friction tag.")
        if friction not in FRICTION_OPTIONS:
            raise FormValidationError.single(
                "friction", f"Friction must be one of: {', '.join(FRICTION_OPTIONS)}."
            )
        self.frictions[habit_id] = friction

    def is_step_complete(self, step: Optional[ReviewStep] = None) -> bool:
        step = step or self.step
        if step is ReviewStep.RATE:
            return bool(self.habits) and all(
                self.ratings.get(h.id) in (WeeklyRating.NEUTRAL.value, WeeklyRating.NEGATIVE.value)  # type: ignore[arg-type]
                for h in self.habits
            )
        if step is ReviewStep.FRICTION:
            return all(h.id in self.frictions for h in self.negative_habits)
        if step is ReviewStep.SUGGEST:
            return True
        return False

    def blocking_step(self, target: Optional[ReviewStep] = None) -> Optional[ReviewStep]:
        """First incomplete step that comes before `target`, if any."""

        target = target or self.step
        for step in STEP_ORDER[: STEP_ORDER.index(target)]:
            if not self.is_step_complete(step):
                return step
        return None

    def check_reachable(self) -> None:
        blocked = self.blocking_step()
        if blocked is not None:
            raise ReviewStepError(f"Finish the {blocked.value} step before {self.step.value}.")

    def can_advance(self) -> bool:
        return (
            self.step is not ReviewStep.APPLY
            and self.blocking_step() is None
            and self.is_step_complete()
        )

    def advance(self) -> ReviewStep:
        if self.step is ReviewStep.APPLY:
            raise ReviewStepError("The review is already on its last step.")
        self.check_reachable()
        if not self.is_step_complete():
            if self.step is ReviewStep.RATE:
                raise ReviewStepError("Rate every habit before moving on.")
            raise ReviewStepError("Pick what got in the way for each habit marked −.")
        self.step = STEP_ORDER[STEP_ORDER.index(self.step) + 1]
        return self.step

    def back(self) -> ReviewStep:
        index = STEP_ORDER.index(self.step)
        if index > 0:
            self.step = STEP_ORDER[index - 1]
        return self.step

    def suggestions(self) -> list[dict[str, Any]]:
        out = []
        for habit in self.negative_habits:
            friction = self.frictions.get(habit.id)  # type: ignore[arg-type]
            out.append(
                {
                    "habit_id": habit.id,
                    "habit_name": habit.name,
                    "two_minute_version": habit.two_minute_version,
                    "friction": friction,
                    "advice": advice_for(friction),
                    "applied": self.applied.get(habit.id, False),  # type: ignore[arg-type]
                }
            )
        return out

    def to_dict(self) -> dict[str, Any]:
        return {
            "week_start": self.week_start.isoformat(),
            "step": self.step.value,
            "prompt": STEP_PROMPTS[self.step],
            "can_advance": self.can_advance(),
            "habits": [
                {
                    "id": h.id,
                    "name": h.name,
                    "two_minute_version": h.two_minute_version,
                    "rating": self.ratings.get(h.id),  # type: ignore[arg-type]
                    "friction": self.frictions.get(h.id),  # type: ignore[arg-type]
                }
                for h in self.habits
            ],
            "friction_options": list(FRICTION_OPTIONS),
            "suggestions": self.suggestions(),
        }


def current_week(ctx: UserContext) -> date:
    return week_start(ctx.today())


def load_review(ctx: UserContext, step: Optional[str] = None, *, check: bool = True) -> WeeklyReview:
    """Rebuild the review for the current week from stored rows.

    The claimed step must be reachable: every step before it has to be
    complete according to the stored rows, otherwise `ReviewStepError`.
    """

    user_id = ctx.require_user_id()
    week = current_week(ctx)
    habits = ctx.app.habit_repo.list_active(user_id=user_id)
    rows = ctx.app.review_repo.list_for_week(week, user_id=user_id)
    review = WeeklyReview.from_rows(week, habits, rows, step=parse_step(step))
    if check:
        review.check_reachable()
    return review


def rate_habit(ctx: UserContext, habit_id: int, rating: str, step: Optional[str] = None) -> WeeklyReview:
    review = load_review(ctx, step)
    review.rate(habit_id, rating)
    user_id = ctx.require_user_id()
    ctx.app.review_repo.upsert_rating(
        habit_id, review.week_start, review.ratings[habit_id], None, user_id=user_id
    )
    logger.info(
        "Weekly rating saved",
        extra={"user_id": user_id, "habit_id": habit_id, "rating": rating},
    )
    return review


def tag_friction(ctx: UserContext, habit_id: int, friction: str, step: Optional[str] = None) -> WeeklyReview:
    review = load_review(ctx, step)
    review.set_friction(habit_id, friction)
    user_id = ctx.require_user_id()
    ctx.app.review_repo.upsert_rating(
        habit_id, review.week_start, WeeklyRating.NEGATIVE.value, friction, user_id=user_id
    )
    logger.info(
        "Weekly friction saved",
        extra={"user_id": user_id, "habit_id": habit_id, "friction": friction},
    )
    return review


def advance(ctx: UserContext, step: Optional[str]) -> WeeklyReview:
    review = load_review(ctx, step)
    review.advance()
    return review


def back(ctx: UserContext, step: Optional[str]) -> WeeklyReview:
    """Step back one; never lands past the first incomplete step."""

    review = load_review(ctx, step, check=False)
    review.back()
    blocked = review.blocking_step()
    if blocked is not None:
        review.step = blocked
    return review


def apply_fix(ctx: UserContext, habit_id: int, accept: bool) -> WeeklyReview:
    """Answer the apply prompt; only "yes" writes, "later" leaves the row alone.

    Rating and friction must both be complete for the week.
    """

    review = load_review(ctx, ReviewStep.APPLY.value)
    review.require_habit(habit_id)
    if review.ratings.get(habit_id) != WeeklyRating.NEGATIVE.value:
        raise ReviewStepError("Only habits marked − have a fix to apply.")
    if accept:
        user_id = ctx.require_user_id()
        ctx.app.review_repo.stamp_advice_applied(
            habit_id, review.week_start, ctx.current_time(), user_id=user_id
        )
        review.applied[habit_id] = True
        logger.info("Weekly fix applied", extra={"user_id": user_id, "habit_id": habit_id})
    return review


__all__ = [
    "ADVICE",
    "DEFAULT_ADVICE",
    "FRICTION_OPTIONS",
    "ReviewStep",
    "STEP_ORDER",
    "WeeklyReview",
    "advance",
    "advice_for",
    "apply_fix",
    "back",
    "current_week",
    "load_review",
    "parse_step",
    "rate_habit",
    "tag_friction",
]
