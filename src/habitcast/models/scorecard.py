"""Habit scorecard rows."""

from __future__ import annotations

from enum import Enum
from typing import ClassVar, Optional

from sqlmodel import Field

from .common import OwnedRecord


class ScorecardRating(str, Enum):
    """Coarse rating of an existing daily habit."""

    POSITIVE = "+"
    NEGATIVE = "-"
    NEUTRAL = "="


class TimeOfDay(str, Enum):
    """Buckets used to group scorecard entries; order matters for insights."""

    MORNING = "morning"
    AFTERNOON = "afternoon"
    EVENING = "evening"
    ANYTIME = "anytime"


TIME_LABELS = {
    TimeOfDay.MORNING: "Morning",
    TimeOfDay.AFTERNOON: "Afternoon",
    TimeOfDay.EVENING: "Evening",
    TimeOfDay.ANYTIME: "Anytime",
}


class ScorecardEntry(OwnedRecord, table=True):
    """A named daily habit with a rating and a time-of-day bucket."""

    __tablename__: ClassVar[str] = "scorecard_entry"

    id: Optional[int] = Field(default=None, primary_key=True)
    habit_name: str = Field(nullable=False, max_length=200)
    rating: str = Field(default=ScorecardRating.NEUTRAL.value, max_length=1, nullable=False)
    time_of_day: Optional[str] = Field(default=TimeOfDay.ANYTIME.value, max_length=16)
    sort_order: int = Field(default=0, nullable=False)
    identity_id: Optional[int] = Field(
        default=None, foreign_key="identity.id", ondelete="SET NULL", index=True
    )

    @property
    def bucket(self) -> TimeOfDay:
        """Time-of-day bucket, reading legacy null rows as anytime."""

        return TimeOfDay(self.time_of_day or TimeOfDay.ANYTIME.value)
