"""Profile form definitions."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class DisplayNameForm(BaseModel):
    model_config = ConfigDict(extra="ignore")

    display_name: str = ""


__all__ = ["DisplayNameForm"]
