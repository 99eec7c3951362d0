"""Identity statements and the habits that undermine them."""

from __future__ import annotations

from typing import ClassVar, Optional

from sqlmodel import Field

from .common import OwnedRecord, json_column


class Identity(OwnedRecord, table=True):
    """A first-person statement of who the user wants to become."""

    __tablename__: ClassVar[str] = "identity"

    id: Optional[int] = Field(default=None, primary_key=True)
    statement: str = Field(nullable=False, max_length=500)
    sort_order: int = Field(default=0, nullable=False)


class HabitToBreak(OwnedRecord, table=True):
    """A habit working against an identity, with an optional 4 Laws break plan."""

    __tablename__: ClassVar[str] = "habit_to_break"

    id: Optional[int] = Field(default=None, primary_key=True)
    identity_id: int = Field(foreign_key="identity.id", ondelete="CASCADE", index=True)
    name: str = Field(nullable=False, max_length=200)
    design_break: Optional[dict] = Field(default=None, sa_column=json_column())
