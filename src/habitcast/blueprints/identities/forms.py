"""Identity and habit-to-break form definitions."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class IdentityCreateForm(BaseModel):
    """The user's completion of "I am a person who ..."."""

    model_config = ConfigDict(extra="ignore")

    completion: str = Field(default="", max_length=2000)


class IdentityUpdateForm(BaseModel):
    model_config = ConfigDict(extra="ignore")

    statement: str = Field(default="", max_length=2000)


class HabitToBreakForm(BaseModel):
    """Create or edit a habit to break; every field is optional on edit."""

    model_config = ConfigDict(extra="ignore")

    name: Optional[str] = Field(default=None, max_length=2000)
    identity_id: Optional[int] = None
    design_break: Optional[dict[str, Any]] = None


__all__ = ["HabitToBreakForm", "IdentityCreateForm", "IdentityUpdateForm"]
