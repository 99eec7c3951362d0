"""Shared column helpers for HabitCast tables."""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel


def utcnow() -> datetime:
    """Return the current UTC time (timezone aware)."""

    return datetime.now(timezone.utc)


def json_column() -> Column:
    """Nullable JSON column; Python None is stored as SQL NULL."""

    return Column(JSON(none_as_null=True), nullable=True)


class OwnedRecord(SQLModel):
    """Columns every per-user table carries."""

    user_id: str = Field(nullable=False, index=True, max_length=64)
    created_at: datetime = Field(default_factory=utcnow, nullable=False)
    updated_at: datetime = Field(
        default_factory=utcnow,
        nullable=False,
        sa_column_kwargs={"onupdate": utcnow},
    )
