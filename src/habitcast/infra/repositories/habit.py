"""SQLModel implementation of Habit repository."""

from __future__ import annotations

from ...models.habit import Habit
from .base import SQLModelOwnedRepository


class SQLModelHabitRepository(SQLModelOwnedRepository[Habit]):
    """SQLModel-based habit repository implementation."""

    model = Habit

    def list_current(self, *, user_id: str) -> list[Habit]:
        """Non-archived habits in display order."""
        statement = (
            self._owned(user_id)
            .where(Habit.archived_at.is_(None))  # type: ignore[union-attr]
            .order_by(Habit.sort_order, Habit.id)
        )
        return self._list(statement)

    def list_active(self, *, user_id: str) -> list[Habit]:
        """Non-archived habits that are switched on."""
        statement = (
            self._owned(user_id)
            .where(Habit.archived_at.is_(None))  # type: ignore[union-attr]
            .where(Habit.is_active == True)  # noqa: E712
            .order_by(Habit.sort_order, Habit.id)
        )
        return self._list(statement)

    def list_archived(self, *, user_id: str) -> list[Habit]:
        """Archived habits, most recently updated first."""
        statement = (
            self._owned(user_id)
            .where(Habit.archived_at.is_not(None))  # type: ignore[union-attr]
            .order_by(Habit.updated_at.desc(), Habit.id.desc())  # type: ignore[union-attr]
        )
        return self._list(statement)
