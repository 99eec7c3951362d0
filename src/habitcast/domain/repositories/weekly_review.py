"""Weekly review rating repository protocol."""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, runtime_checkable

from ...models.weekly_review import WeeklyReviewRating


@runtime_checkable
class WeeklyReviewRepository(Protocol):
    """Ratings keyed by (user, habit, week_start)."""

    def list_for_week(self, week_start: date, *, user_id: str) -> list[WeeklyReviewRating]:
        ...

    def get(self, habit_id: int, week_start: date, *, user_id: str) -> Optional[WeeklyReviewRating]:
        ...

    def upsert_rating(
        self,
        habit_id: int,
        week_start: date,
        rating: str,
        friction: Optional[str],
        *,
        user_id: str,
    ) -> WeeklyReviewRating:
        """Insert or overwrite the week's rating and friction tag."""
        ...

    def stamp_advice_applied(
        self, habit_id: int, week_start: date, applied_at: datetime, *, user_id: str
    ) -> bool:
        """Set advice_applied_at on an existing row; False when there is no row."""
        ...
