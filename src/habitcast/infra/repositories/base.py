"""Shared SQLModel plumbing for per-user repositories."""

from __future__ import annotations

from typing import Any, Generic, Mapping, Optional, TypeVar

from sqlmodel import SQLModel, func, select

from ..database import SessionFactory

ModelT = TypeVar("ModelT", bound=SQLModel)


class SQLModelOwnedRepository(Generic[ModelT]):
    """CRUD for a table whose rows carry `id` and `user_id`.

    Every query is filtered by the caller's user id; rows belonging to other
    users behave as if they do not exist.
    """

    model: type[ModelT]

    def __init__(self, session_factory: SessionFactory):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def _owned(self, user_id: str):
        return select(self.model).where(self.model.user_id == user_id)  # type: ignore[attr-defined]

    def get_by_id(self, row_id: int, *, user_id: str) -> Optional[ModelT]:
        with self.session_factory() as session:
            obj = session.exec(
                self._owned(user_id).where(self.model.id == row_id)  # type: ignore[attr-defined]
            ).first()
            if obj:
                session.expunge(obj)
            return obj

    def count(self, *, user_id: str) -> int:
        with self.session_factory() as session:
            statement = select(func.count()).select_from(self.model).where(
                self.model.user_id == user_id  # type: ignore[attr-defined]
            )
            return int(session.exec(statement).one())

    def create(self, obj: ModelT, *, user_id: str) -> ModelT:
        with self.session_factory() as session:
            obj.user_id = user_id  # type: ignore[attr-defined]
            session.add(obj)
            session.commit()
            session.refresh(obj)
            session.expunge(obj)
            return obj

    def update_fields(
        self, row_id: int, fields: Mapping[str, Any], *, user_id: str
    ) -> Optional[ModelT]:
        """Apply a targeted update; unknown column names raise AttributeError."""

        with self.session_factory() as session:
            obj = session.exec(
                self._owned(user_id).where(self.model.id == row_id)  # type: ignore[attr-defined]
            ).first()
            if obj is None:
                return None
            for key, value in fields.items():
                if key not in self.model.model_fields:
                    raise AttributeError(f"{self.model.__name__} has no column {key!r}")
                setattr(obj, key, value)
            session.add(obj)
            session.commit()
            session.refresh(obj)
            session.expunge(obj)
            return obj

    def delete(self, row_id: int, *, user_id: str) -> bool:
        with self.session_factory() as session:
            obj = session.exec(
                self._owned(user_id).where(self.model.id == row_id)  # type: ignore[attr-defined]
            ).first()
            if obj is None:
                return False
            session.delete(obj)
            session.commit()
            return True

    def _list(self, statement) -> list[ModelT]:
        with self.session_factory() as session:
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows
