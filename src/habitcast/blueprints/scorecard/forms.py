"""Scorecard form definitions."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ScorecardEntryForm(BaseModel):
    """Create or edit an entry; rating and time of day are checked by the service."""

    model_config = ConfigDict(extra="ignore")

    habit_name: Optional[str] = Field(default=None, max_length=2000)
    rating: Optional[str] = None
    time_of_day: Optional[str] = None
    identity_id: Optional[int] = None


class ReorderForm(BaseModel):
    """Drop `entry_id` at `position` inside `time_of_day`."""

    model_config = ConfigDict(extra="ignore")

    entry_id: int
    time_of_day: str
    position: int = Field(ge=0)


__all__ = ["ReorderForm", "ScorecardEntryForm"]
