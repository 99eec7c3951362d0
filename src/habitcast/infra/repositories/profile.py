"""SQLModel implementation of the profile repository."""

from __future__ import annotations

from typing import Optional

from sqlmodel import select

from ...models.profile import Profile
from ..database import SessionFactory


class SQLModelProfileRepository:
    """Profiles keyed by the identity provider's user id."""

    def __init__(self, session_factory: SessionFactory):
        self.session_factory = session_factory

    def get(self, user_id: str) -> Optional[Profile]:
        with self.session_factory() as session:
            obj = session.exec(select(Profile).where(Profile.id == user_id)).first()
            if obj:
                session.expunge(obj)
            return obj

    def ensure(self, user_id: str, *, email: str = "") -> Profile:
        """Return the profile, creating an empty one on first sight of the user."""
        with self.session_factory() as session:
            obj = session.exec(select(Profile).where(Profile.id == user_id)).first()
            if obj is None:
                obj = Profile(id=user_id, email=email)
                session.add(obj)
            elif email and obj.email != email:
                obj.email = email
                session.add(obj)
            session.commit()
            session.refresh(obj)
            session.expunge(obj)
            return obj

    def update_display_name(self, user_id: str, display_name: str) -> Profile:
        with self.session_factory() as session:
            obj = session.exec(select(Profile).where(Profile.id == user_id)).first()
            if obj is None:
                obj = Profile(id=user_id)
            obj.display_name = display_name
            session.add(obj)
            session.commit()
            session.refresh(obj)
            session.expunge(obj)
            return obj
