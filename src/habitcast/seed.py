"""Demo data for a fresh account."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import timedelta

from .context import UserContext
from .domain.anchor import ScorecardAnchor
from .logging_config import get_logger
from .services import habits as habit_service
from .services import identities as identity_service
from .services import scorecard as scorecard_service

logger = get_logger(__name__)

_SCORECARD = [
    ("Morning journal", "+", "morning"),
    ("Check phone first thing", "-", "morning"),
    ("Make coffee", "=", "morning"),
    ("Lunch walk", "+", "afternoon"),
    ("Snack from the vending machine", "-", "afternoon"),
    ("Scroll social media in bed", "-", "evening"),
    ("Brush teeth", "=", "anytime"),
]


@dataclass(frozen=True)
class SeedSummary:
    """Counts of rows created by the demo seed."""

    identities: int
    habits: int
    scorecard_entries: int
    habits_to_break: int


def run_demo_seed(ctx: UserContext) -> dict[str, int]:
    """Seed a small, realistic account. Accounts that already have identities are left alone."""

    user_id = ctx.require_user_id()
    if ctx.app.identity_repo.count(user_id=user_id):
        logger.info("Demo seed skipped; account has data", extra={"user_id": user_id})
        return asdict(SeedSummary(0, 0, 0, 0))

    entries = [
        scorecard_service.create_entry(ctx, name, rating=rating, time_of_day=time)
        for name, rating, time in _SCORECARD
    ]
    reader = identity_service.create_identity(ctx, "reads every day")
    mover = identity_service.create_identity(ctx, "moves their body")

    read = habit_service.create_habit(
        ctx,
        "Read",
        identity_id=reader.id,
        design_build={
            "obvious": {"implementation_intention": "After I pour coffee, I read"},
            "easy": {"two_minute_rule": "Read one page"},
            "satisfying": {"immediate_reward": "Check it off"},
        },
        anchor=ScorecardAnchor(entries[2].id),  # type: ignore[arg-type]
    )
    walk = habit_service.create_habit(
        ctx,
        "Evening walk",
        identity_id=mover.id,
        two_minute_version="Put on walking shoes",
        implementation_intention={"behavior": "walk", "time": "6pm", "location": "the park"},
    )
    today = ctx.today()
    habit_service.complete_habit(ctx, read.id, today=today - timedelta(days=1))  # type: ignore[arg-type]
    habit_service.complete_habit(ctx, read.id, today=today)  # type: ignore[arg-type]
    habit_service.complete_habit(ctx, walk.id, today=today - timedelta(days=7))  # type: ignore[arg-type]

    identity_service.create_break(
        ctx,
        reader.id,  # type: ignore[arg-type]
        "Scroll social media in bed",
        {"invisible": {"remove_cues": "Charge the phone in the kitchen"}},
    )
    summary = SeedSummary(identities=2, habits=2, scorecard_entries=len(entries), habits_to_break=1)
    logger.info("Demo seed completed", extra={"user_id": user_id, **asdict(summary)})
    return asdict(summary)
