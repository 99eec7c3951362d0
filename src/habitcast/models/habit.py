"""Habits tracking data structures."""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import ClassVar, Optional

from sqlmodel import Field

from ..domain.anchor import Anchor, anchor_from_columns, anchor_to_columns
from .common import OwnedRecord, json_column


class HabitFrequency(str, Enum):
    """Supported frequency options for habits."""

    DAILY = "daily"
    WEEKDAYS = "weekdays"
    WEEKENDS = "weekends"
    CUSTOM = "custom"


class Habit(OwnedRecord, table=True):
    """A habit the user is building, optionally reinforcing one identity."""

    __tablename__: ClassVar[str] = "habit"

    id: Optional[int] = Field(default=None, primary_key=True)
    identity_id: Optional[int] = Field(
        default=None, foreign_key="identity.id", ondelete="SET NULL", index=True
    )
    name: str = Field(nullable=False, max_length=200)
    two_minute_version: Optional[str] = Field(default=None, max_length=200)
    implementation_intention: Optional[dict] = Field(default=None, sa_column=json_column())
    stack_anchor_scorecard_id: Optional[int] = Field(
        default=None, foreign_key="scorecard_entry.id", ondelete="SET NULL"
    )
    stack_anchor_habit_id: Optional[int] = Field(
        default=None, foreign_key="habit.id", ondelete="SET NULL"
    )
    temptation_bundle: Optional[str] = Field(default=None, max_length=500)
    design_build: Optional[dict] = Field(default=None, sa_column=json_column())
    frequency: str = Field(default=HabitFrequency.DAILY.value, max_length=16)
    custom_days: Optional[list] = Field(default=None, sa_column=json_column())
    is_active: bool = Field(default=True, nullable=False)
    sort_order: int = Field(default=0, nullable=False)
    current_streak: int = Field(default=0, ge=0, nullable=False)
    last_completed_date: Optional[date] = Field(default=None, index=True)
    archived_at: Optional[datetime] = Field(default=None)

    @property
    def anchor(self) -> Anchor:
        return anchor_from_columns(self.stack_anchor_scorecard_id, self.stack_anchor_habit_id)

    def set_anchor(self, anchor: Anchor) -> None:
        """Point the habit at one anchor, clearing the other column."""

        for column, value in anchor_to_columns(anchor).items():
            setattr(self, column, value)

    @property
    def is_archived(self) -> bool:
        return self.archived_at is not None
