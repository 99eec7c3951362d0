"""Week boundaries, identity votes and momentum percentages.

Completion is tracked as one `last_completed_date` per habit, so a habit casts
at most one vote in any week no matter how often it was done.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Iterable, Optional, Union

DateLike = Union[date, datetime]


@dataclass(frozen=True)
class WeekRange:
    """Inclusive range of ISO calendar dates (``YYYY-MM-DD``)."""

    start: str
    end: str

    def contains(self, value: Optional[str]) -> bool:
        return bool(value) and self.start <= value <= self.end  # type: ignore[operator]

    def shifted(self, days: int) -> "WeekRange":
        start = date.fromisoformat(self.start) + timedelta(days=days)
        end = date.fromisoformat(self.end) + timedelta(days=days)
        return WeekRange(start.isoformat(), end.isoformat())


def _as_date(value: DateLike) -> date:
    return value.date() if isinstance(value, datetime) else value


def week_start(now: DateLike) -> date:
    """Monday of the week containing `now`."""

    day = _as_date(now)
    return day - timedelta(days=day.weekday())


def this_week_bounds(now: DateLike) -> WeekRange:
    """Monday through the following Sunday of `now`'s week."""

    monday = week_start(now)
    return WeekRange(monday.isoformat(), (monday + timedelta(days=6)).isoformat())


def last_week_bounds(now: DateLike) -> WeekRange:
    return this_week_bounds(now).shifted(-7)


def _completion_key(habit: Any) -> Optional[str]:
    if isinstance(habit, dict):
        value = habit.get("last_completed_date")
    else:
        value = getattr(habit, "last_completed_date", None)
    if value is None or value == "":
        return None
    if isinstance(value, (date, datetime)):
        return _as_date(value).isoformat()
    return str(value)[:10]


def count_in_range(habits: Iterable[Any], week: WeekRange) -> int:
    """Number of habits whose last completion falls inside `week`."""

    return sum(1 for habit in habits if week.contains(_completion_key(habit)))


def trend_delta(habits: Iterable[Any], now: DateLike) -> Optional[int]:
    """Votes this week minus votes last week.

    None when none of the habits has ever been completed, which keeps "no
    data" apart from a flat week.
    """

    completed = [habit for habit in habits if _completion_key(habit) is not None]
    if not completed:
        return None
    return count_in_range(completed, this_week_bounds(now)) - count_in_range(
        completed, last_week_bounds(now)
    )


def round_half_up(value: float) -> int:
    """Round .5 away from zero for non-negative values, like a calculator."""

    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def momentum_pct(votes: int, habit_count: int) -> int:
    """Votes against a full week of daily reps, capped at 100."""

    if habit_count <= 0:
        return 0
    return min(100, round_half_up(votes / (habit_count * 7) * 100))


def consistency_pct(votes: int, habit_count: int) -> int:
    """Share of linked habits that earned a vote this week."""

    if habit_count <= 0:
        return 0
    return min(100, round_half_up(votes / habit_count * 100))


__all__ = [
    "WeekRange",
    "consistency_pct",
    "count_in_range",
    "last_week_bounds",
    "momentum_pct",
    "round_half_up",
    "this_week_bounds",
    "trend_delta",
    "week_start",
]
