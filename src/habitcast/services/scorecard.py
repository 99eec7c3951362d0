"""Scorecard insights and entry operations."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Optional, Sequence

from ..context import UserContext
from ..errors import FormValidationError, NotFoundError
from ..logging_config import get_logger
from ..models.scorecard import TIME_LABELS, ScorecardEntry, ScorecardRating, TimeOfDay
from .metrics import round_half_up

logger = get_logger(__name__)

TIME_ORDER: tuple[TimeOfDay, ...] = (
    TimeOfDay.MORNING,
    TimeOfDay.AFTERNOON,
    TimeOfDay.EVENING,
    TimeOfDay.ANYTIME,
)
MAX_HABIT_NAME = 200
REPLACEMENT_ACTION = "a 5-minute walk"
EMPTY_LABEL = "—"

INSIGHT_POSITIVE = "You're building momentum."
INSIGHT_NEGATIVE = "Focus on one habit to turn it around."
INSIGHT_EVEN = "One more positive habit will tip the scale."


@dataclass(frozen=True)
class ScorecardSummary:
    positive: int
    negative: int
    neutral: int

    @property
    def total(self) -> int:
        return self.positive + self.negative + self.neutral

    @property
    def net(self) -> int:
        return self.positive - self.negative

    @property
    def net_label(self) -> str:
        return f"+{self.net}" if self.net > 0 else str(self.net)

    @property
    def insight(self) -> Optional[str]:
        if self.total == 0:
            return None
        if self.net > 0:
            return INSIGHT_POSITIVE
        if self.net < 0:
            return INSIGHT_NEGATIVE
        return INSIGHT_EVEN

    def to_dict(self) -> dict[str, Any]:
        return {
            "positive": self.positive,
            "negative": self.negative,
            "neutral": self.neutral,
            "total": self.total,
            "net": self.net,
            "net_label": self.net_label,
            "insight": self.insight,
        }


@dataclass(frozen=True)
class BucketStats:
    time: TimeOfDay
    positive: int = 0
    negative: int = 0
    neutral: int = 0

    @property
    def total(self) -> int:
        return self.positive + self.negative + self.neutral

    def _pct(self, count: int) -> float:
        return (count / self.total) * 100 if self.total else 0.0

    @property
    def negative_pct(self) -> float:
        return self._pct(self.negative)

    @property
    def label(self) -> str:
        pos, neg, neu = self.positive, self.negative, self.neutral
        if self.total == 0:
            return EMPTY_LABEL
        if pos > neg and pos >= neu:
            return f"{round_half_up(self._pct(pos))}% positive"
        if neg > pos and neg >= neu:
            return f"{round_half_up(self._pct(neg))}% negative"
        return "Neutral"

    def to_dict(self) -> dict[str, Any]:
        return {
            "time": self.time.value,
            "time_label": TIME_LABELS[self.time],
            "total": self.total,
            "positive": self.positive,
            "negative": self.negative,
            "neutral": self.neutral,
            "positive_pct": round_half_up(self._pct(self.positive)),
            "negative_pct": round_half_up(self.negative_pct),
            "neutral_pct": round_half_up(self._pct(self.neutral)),
            "label": self.label,
        }


@dataclass(frozen=True)
class TakeAction:
    time: TimeOfDay
    negative_pct: int
    focus_entry_id: Optional[int]
    focus_habit_name: str
    replacement: str = REPLACEMENT_ACTION

    @property
    def message(self) -> str:
        return f'Replace "{self.focus_habit_name}" with {self.replacement}.'

    def to_dict(self) -> dict[str, Any]:
        return {
            "time": self.time.value,
            "time_label": TIME_LABELS[self.time],
            "negative_pct": self.negative_pct,
            "label": f"{self.negative_pct}% negative",
            "focus_entry_id": self.focus_entry_id,
            "focus_habit_name": self.focus_habit_name,
            "message": self.message,
        }


def _ordered(entries: Iterable[ScorecardEntry]) -> list[ScorecardEntry]:
    return sorted(entries, key=lambda e: (e.sort_order, e.id or 0))


def summarize(entries: Sequence[ScorecardEntry]) -> ScorecardSummary:
    """Rating counts and the net-score insight."""

    ratings = [entry.rating for entry in entries]
    return ScorecardSummary(
        positive=ratings.count(ScorecardRating.POSITIVE.value),
        negative=ratings.count(ScorecardRating.NEGATIVE.value),
        neutral=ratings.count(ScorecardRating.NEUTRAL.value),
    )


def breakdown(entries: Sequence[ScorecardEntry]) -> list[BucketStats]:
    """One stats row per time-of-day bucket, in morning..anytime order."""

    rows = []
    for time in TIME_ORDER:
        group = [entry.rating for entry in entries if entry.bucket == time]
        rows.append(
            BucketStats(
                time=time,
                positive=group.count(ScorecardRating.POSITIVE.value),
                negative=group.count(ScorecardRating.NEGATIVE.value),
                neutral=group.count(ScorecardRating.NEUTRAL.value),
            )
        )
    return rows


def worst_time(rows: Sequence[BucketStats]) -> Optional[TimeOfDay]:
    """Bucket with the highest negative share; first maximum wins."""

    if not any(row.negative_pct > 0 for row in rows):
        return None
    best = rows[0]
    for row in rows[1:]:
        if row.negative_pct > best.negative_pct:
            best = row
    return best.time


def take_action(entries: Sequence[ScorecardEntry]) -> Optional[TakeAction]:
    """Suggest replacing one negative habit in the worst bucket.

    Needs at least three entries and at least one negative one.
    """

    negatives = [e for e in _ordered(entries) if e.rating == ScorecardRating.NEGATIVE.value]
    if len(entries) < 3 or not negatives:
        return None
    friction_time: Optional[TimeOfDay] = None
    max_pct = 0.0
    for row in breakdown(entries):
        if row.total and row.negative_pct > max_pct:
            max_pct = row.negative_pct
            friction_time = row.time
    if friction_time is None:
        return None
    focus = next((e for e in negatives if e.bucket == friction_time), None)
    if focus is None:
        return None
    return TakeAction(
        time=friction_time,
        negative_pct=round_half_up(max_pct),
        focus_entry_id=focus.id,
        focus_habit_name=focus.habit_name,
    )


def focus_candidates(entries: Sequence[ScorecardEntry]) -> list[ScorecardEntry]:
    """Positive entries the user can commit to for the week."""

    return [e for e in _ordered(entries) if e.rating == ScorecardRating.POSITIVE.value]


def group_by_time(entries: Iterable[ScorecardEntry]) -> dict[TimeOfDay, list[ScorecardEntry]]:
    grouped: dict[TimeOfDay, list[ScorecardEntry]] = {time: [] for time in TIME_ORDER}
    for entry in entries:
        grouped[entry.bucket].append(entry)
    for group in grouped.values():
        group.sort(key=lambda e: (e.sort_order, e.id or 0))
    return grouped


@dataclass
class ReorderPlan:
    """Rows whose bucket or position changed, plus the final layout."""

    changes: list[tuple[int, str, int]] = field(default_factory=list)
    layout: dict[TimeOfDay, list[int]] = field(default_factory=dict)


def reorder_entries(
    entries: Iterable[ScorecardEntry],
    entry_id: int,
    time_of_day: TimeOfDay,
    position: int,
) -> ReorderPlan:
    """Move one entry to `position` in `time_of_day` and renumber every bucket.

    Each bucket ends up numbered 0..n-1; positions past the end append.
    """

    entries = list(entries)
    grouped = group_by_time(entries)
    moving = next((e for e in entries if e.id == entry_id), None)
    if moving is None:
        raise NotFoundError("Scorecard entry not found.")
    grouped[moving.bucket] = [e for e in grouped[moving.bucket] if e.id != entry_id]
    target = grouped[time_of_day]
    position = max(0, min(position, len(target)))
    target.insert(position, moving)

    plan = ReorderPlan()
    for time in TIME_ORDER:
        plan.layout[time] = [e.id for e in grouped[time]]  # type: ignore[misc]
        for index, entry in enumerate(grouped[time]):
            if entry.sort_order != index or entry.time_of_day != time.value:
                plan.changes.append((entry.id, time.value, index))  # type: ignore[arg-type]
    return plan


def _clean_name(value: Any) -> str:
    name = (value or "").strip() if isinstance(value, str) else ""
    if not name:
        raise FormValidationError.single("habit_name", "Habit name is required.")
    return name[:MAX_HABIT_NAME]


def _parse_rating(value: Any) -> str:
    try:
        return ScorecardRating(value).value
    except ValueError as exc:
        raise FormValidationError.single("rating", "Rating must be +, - or =.") from exc


def _parse_time(value: Any) -> TimeOfDay:
    if value in (None, ""):
        return TimeOfDay.ANYTIME
    try:
        return TimeOfDay(value)
    except ValueError as exc:
        raise FormValidationError.single(
            "time_of_day", "Time of day must be morning, afternoon, evening or anytime."
        ) from exc


def _check_identity(ctx: UserContext, identity_id: Optional[int]) -> None:
    if identity_id is None:
        return
    if ctx.app.identity_repo.get_by_id(identity_id, user_id=ctx.require_user_id()) is None:
        raise FormValidationError.single("identity_id", "Identity not found.")


def list_entries(ctx: UserContext) -> list[ScorecardEntry]:
    return ctx.app.scorecard_repo.list_all(user_id=ctx.require_user_id())


def create_entry(
    ctx: UserContext,
    habit_name: str,
    rating: str = ScorecardRating.NEUTRAL.value,
    time_of_day: Optional[str] = None,
    identity_id: Optional[int] = None,
) -> ScorecardEntry:
    """Append a rated entry to the end of its time-of-day bucket."""

    user_id = ctx.require_user_id()
    name = _clean_name(habit_name)
    rating_value = _parse_rating(rating)
    time = _parse_time(time_of_day)
    _check_identity(ctx, identity_id)
    repo = ctx.app.scorecard_repo
    entry = ScorecardEntry(
        habit_name=name,
        rating=rating_value,
        time_of_day=time.value,
        sort_order=repo.count_in_bucket(time.value, user_id=user_id),
        identity_id=identity_id,
        user_id=user_id,
    )
    created = repo.create(entry, user_id=user_id)
    logger.info(
        "Scorecard entry created",
        extra={"user_id": user_id, "entry_id": created.id, "time_of_day": time.value},
    )
    return created


def update_entry(ctx: UserContext, entry_id: int, fields: Mapping[str, Any]) -> ScorecardEntry:
    """Update rating, name or identity; a bucket change moves it to the bucket's end."""

    user_id = ctx.require_user_id()
    repo = ctx.app.scorecard_repo
    current = repo.get_by_id(entry_id, user_id=user_id)
    if current is None:
        raise NotFoundError("Scorecard entry not found.")

    changes: dict[str, Any] = {}
    if "habit_name" in fields:
        changes["habit_name"] = _clean_name(fields["habit_name"])
    if "rating" in fields:
        changes["rating"] = _parse_rating(fields["rating"])
    if "identity_id" in fields:
        _check_identity(ctx, fields["identity_id"])
        changes["identity_id"] = fields["identity_id"]
    new_time = _parse_time(fields["time_of_day"]) if "time_of_day" in fields else current.bucket

    if changes:
        repo.update_fields(entry_id, changes, user_id=user_id)
    if new_time != current.bucket:
        reorder(ctx, entry_id, new_time.value, position=10**9)
    updated = repo.get_by_id(entry_id, user_id=user_id)
    logger.info(
        "Scorecard entry updated",
        extra={"user_id": user_id, "entry_id": entry_id, "fields": sorted(fields)},
    )
    return updated  # type: ignore[return-value]


def reorder(ctx: UserContext, entry_id: int, time_of_day: str, position: int) -> ReorderPlan:
    """Persist a drag-and-drop move, renumbering every affected bucket."""

    user_id = ctx.require_user_id()
    time = _parse_time(time_of_day)
    if position < 0:
        raise FormValidationError.single("position", "Position must not be negative.")
    repo = ctx.app.scorecard_repo
    plan = reorder_entries(repo.list_all(user_id=user_id), entry_id, time, position)
    repo.apply_positions(plan.changes, user_id=user_id)
    logger.info(
        "Scorecard reordered",
        extra={"user_id": user_id, "entry_id": entry_id, "changed_rows": len(plan.changes)},
    )
    return plan


def delete_entry(ctx: UserContext, entry_id: int) -> None:
    user_id = ctx.require_user_id()
    repo = ctx.app.scorecard_repo
    entry = repo.get_by_id(entry_id, user_id=user_id)
    if entry is None:
        raise NotFoundError("Scorecard entry not found.")
    repo.delete(entry_id, user_id=user_id)
    remaining = [e for e in repo.list_all(user_id=user_id) if e.bucket == entry.bucket]
    repo.apply_positions(
        [
            (e.id, entry.bucket.value, index)  # type: ignore[misc]
            for index, e in enumerate(sorted(remaining, key=lambda e: (e.sort_order, e.id or 0)))
            if e.sort_order != index
        ],
        user_id=user_id,
    )
    logger.info("Scorecard entry deleted", extra={"user_id": user_id, "entry_id": entry_id})


def scorecard_view(ctx: UserContext) -> dict[str, Any]:
    """Everything the scorecard screen shows, as plain data."""

    entries = list_entries(ctx)
    rows = breakdown(entries)
    worst = worst_time(rows)
    action = take_action(entries)
    grouped = group_by_time(entries)
    return {
        "summary": summarize(entries).to_dict(),
        "breakdown": [row.to_dict() for row in rows],
        "worst_time": worst.value if worst else None,
        "take_action": action.to_dict() if action else None,
        "focus_candidates": [entry_to_dict(e) for e in focus_candidates(entries)],
        "groups": {time.value: [entry_to_dict(e) for e in grouped[time]] for time in TIME_ORDER},
    }


def entry_to_dict(entry: ScorecardEntry) -> dict[str, Any]:
    return {
        "id": entry.id,
        "habit_name": entry.habit_name,
        "rating": entry.rating,
        "time_of_day": entry.bucket.value,
        "sort_order": entry.sort_order,
        "identity_id": entry.identity_id,
    }


__all__ = [
    "BucketStats",
    "ReorderPlan",
    "ScorecardSummary",
    "TakeAction",
    "breakdown",
    "create_entry",
    "delete_entry",
    "entry_to_dict",
    "focus_candidates",
    "group_by_time",
    "list_entries",
    "reorder",
    "reorder_entries",
    "scorecard_view",
    "summarize",
    "take_action",
    "update_entry",
    "worst_time",
]
