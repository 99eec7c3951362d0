"""Onboarding form definitions."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class FirstIdentityForm(BaseModel):
    model_config = ConfigDict(extra="ignore")

    completion: str = ""


class FirstHabitForm(BaseModel):
    """Name and 2-minute version are both required; the service says which is missing."""

    model_config = ConfigDict(extra="ignore")

    identity_id: int
    name: str = ""
    two_minute_version: str = ""


class LawsForm(BaseModel):
    model_config = ConfigDict(extra="ignore")

    habit_id: int
    cue_type: str = "time"
    cue_value: str = ""
    reward: str = "check"
    reward_other: str = ""
    bundle_with: str = ""


class FirstRepForm(BaseModel):
    model_config = ConfigDict(extra="ignore")

    habit_id: int


__all__ = ["FirstHabitForm", "FirstIdentityForm", "FirstRepForm", "LawsForm"]
