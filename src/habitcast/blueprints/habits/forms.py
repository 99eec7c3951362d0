"""Habit form definitions."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ...domain.anchor import Anchor, parse_anchor
from ...models.habit import HabitFrequency


class ImplementationIntentionForm(BaseModel):
    """"I will <behavior> at <time> in <location>"; every part optional."""

    model_config = ConfigDict(extra="ignore")

    behavior: Optional[str] = None
    time: Optional[str] = None
    location: Optional[str] = None


class HabitForm(BaseModel):
    """Create or edit a habit. On edit only the fields sent are written."""

    model_config = ConfigDict(extra="ignore")

    name: Optional[str] = Field(default=None, max_length=2000)
    identity_id: Optional[int] = None
    two_minute_version: Optional[str] = None
    implementation_intention: Optional[ImplementationIntentionForm] = None
    temptation_bundle: Optional[str] = None
    design_build: Optional[dict[str, Any]] = None
    anchor: Optional[Any] = None
    frequency: HabitFrequency = HabitFrequency.DAILY
    custom_days: Optional[list[int]] = None
    is_active: Optional[bool] = None
    sort_order: Optional[int] = Field(default=None, ge=0)

    @field_validator("anchor", mode="before")
    @classmethod
    def parse_anchor_payload(cls, value: Any) -> Optional[Anchor]:
        """Accept ``{"kind": "scorecard" | "habit" | "none", "id": ...}``."""

        if value is None:
            return None
        if not isinstance(value, dict):
            raise ValueError("Anchor must be an object with kind and id.")
        return parse_anchor(value)

    def changes(self) -> dict[str, Any]:
        """Only the fields present in the request, ready for the service."""

        data = self.model_dump(exclude_unset=True)
        if "anchor" in self.model_fields_set:
            data["anchor"] = self.anchor
        if "frequency" in data:
            data["frequency"] = self.frequency.value
        return data


__all__ = ["HabitForm", "ImplementationIntentionForm"]
