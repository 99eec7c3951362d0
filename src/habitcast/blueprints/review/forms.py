"""Weekly review and reset form definitions."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict


class StepForm(BaseModel):
    """The step the client is currently showing."""

    model_config = ConfigDict(extra="ignore")

    step: Optional[str] = None


class RateForm(StepForm):
    habit_id: int
    rating: str


class FrictionForm(StepForm):
    habit_id: int
    friction: str


class ApplyFixForm(BaseModel):
    """"Yes" stamps the week's row; "later" writes nothing."""

    model_config = ConfigDict(extra="ignore")

    habit_id: int
    accept: bool


class ShrinkForm(BaseModel):
    model_config = ConfigDict(extra="ignore")

    two_minute_version: str = ""


__all__ = ["ApplyFixForm", "FrictionForm", "RateForm", "ShrinkForm", "StepForm"]
