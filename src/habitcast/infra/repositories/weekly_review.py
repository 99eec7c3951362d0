"""SQLModel implementation of the weekly review rating repository."""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from ...models.weekly_review import WeeklyReviewRating
from .base import SQLModelOwnedRepository


class SQLModelWeeklyReviewRepository(SQLModelOwnedRepository[WeeklyReviewRating]):
    """Ratings keyed by (user, habit, week_start)."""

    model = WeeklyReviewRating

    def _for_key(self, habit_id: int, week_start: date, user_id: str):
        return (
            self._owned(user_id)
            .where(WeeklyReviewRating.habit_id == habit_id)
            .where(WeeklyReviewRating.week_start == week_start)
        )

    def list_for_week(self, week_start: date, *, user_id: str) -> list[WeeklyReviewRating]:
        return self._list(
            self._owned(user_id)
            .where(WeeklyReviewRating.week_start == week_start)
            .order_by(WeeklyReviewRating.habit_id)
        )

    def get(self, habit_id: int, week_start: date, *, user_id: str) -> Optional[WeeklyReviewRating]:
        with self.session_factory() as session:
            obj = session.exec(self._for_key(habit_id, week_start, user_id)).first()
            if obj:
                session.expunge(obj)
            return obj

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
        with self.session_factory() as session:
            existing = session.exec(self._for_key(habit_id, week_start, user_id)).first()
            if existing:
                existing.rating = rating
                existing.friction = friction
                row = existing
            else:
                row = WeeklyReviewRating(
                    user_id=user_id,
                    habit_id=habit_id,
                    week_start=week_start,
                    rating=rating,
                    friction=friction,
                )
            session.add(row)
            session.commit()
            session.refresh(row)
            session.expunge(row)
            return row

    def stamp_advice_applied(
        self, habit_id: int, week_start: date, applied_at: datetime, *, user_id: str
    ) -> bool:
        with self.session_factory() as session:
            existing = session.exec(self._for_key(habit_id, week_start, user_id)).first()
            if existing is None:
                return False
            existing.advice_applied_at = applied_at
            session.add(existing)
            session.commit()
            return True
