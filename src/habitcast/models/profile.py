"""User profile mirrored from the identity provider."""

from __future__ import annotations

from datetime import datetime
from typing import ClassVar, Optional

from sqlmodel import Field, SQLModel

from .common import utcnow


class Profile(SQLModel, table=True):
    """Display details for an authenticated user; `id` is the provider's user id."""

    __tablename__: ClassVar[str] = "profile"

    id: str = Field(primary_key=True, max_length=64)
    email: str = Field(default="", max_length=255)
    display_name: str = Field(default="", max_length=50)
    avatar_url: Optional[str] = Field(default=None, max_length=500)
    created_at: datetime = Field(default_factory=utcnow, nullable=False)
    updated_at: datetime = Field(
        default_factory=utcnow,
        nullable=False,
        sa_column_kwargs={"onupdate": utcnow},
    )
