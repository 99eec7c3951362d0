"""Habit repository protocol."""

from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, runtime_checkable

from ...models.habit import Habit


@runtime_checkable
class HabitRepository(Protocol):
    """Repository for managing habit entities."""

    def get_by_id(self, habit_id: int, *, user_id: str) -> Optional[Habit]:
        """Retrieve a habit by ID."""
        ...

    def list_current(self, *, user_id: str) -> list[Habit]:
        """Non-archived habits in display order."""
        ...

    def list_active(self, *, user_id: str) -> list[Habit]:
        """Non-archived habits that are switched on."""
        ...

    def list_archived(self, *, user_id: str) -> list[Habit]:
        """Archived habits, most recently touched first."""
        ...

    def count(self, *, user_id: str) -> int:
        ...

    def create(self, habit: Habit, *, user_id: str) -> Habit:
        """Create a new habit."""
        ...

    def update_fields(
        self, habit_id: int, fields: Mapping[str, Any], *, user_id: str
    ) -> Optional[Habit]:
        """Write only the given columns."""
        ...

    def delete(self, habit_id: int, *, user_id: str) -> bool:
        """Delete a habit by ID."""
        ...
