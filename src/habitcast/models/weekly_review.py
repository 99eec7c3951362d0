"""Per-week habit ratings captured by the weekly review."""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import ClassVar, Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import Field

from .common import OwnedRecord


class WeeklyRating(str, Enum):
    """Whether a habit was kept up (=) or struggled with (-) this week."""

    NEUTRAL = "="
    NEGATIVE = "-"


class WeeklyReviewRating(OwnedRecord, table=True):
    """One rating per (user, habit, week_start); upserted, never duplicated."""

    __tablename__: ClassVar[str] = "weekly_review_rating"
    __table_args__ = (
        UniqueConstraint("user_id", "habit_id", "week_start", name="uq_weekly_review_week"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    habit_id: int = Field(foreign_key="habit.id", ondelete="CASCADE", index=True)
    week_start: date = Field(nullable=False, index=True)
    rating: str = Field(nullable=False, max_length=1)
    friction: Optional[str] = Field(default=None, max_length=32)
    advice_applied_at: Optional[datetime] = Field(default=None)
