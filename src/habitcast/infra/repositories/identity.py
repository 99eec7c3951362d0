"""SQLModel implementations of identity and habit-to-break repositories."""

from __future__ import annotations

from ...models.identity import HabitToBreak, Identity
from .base import SQLModelOwnedRepository


class SQLModelIdentityRepository(SQLModelOwnedRepository[Identity]):
    """SQLModel-based identity repository implementation."""

    model = Identity

    def list_all(self, *, user_id: str) -> list[Identity]:
        return self._list(self._owned(user_id).order_by(Identity.sort_order, Identity.id))


class SQLModelHabitToBreakRepository(SQLModelOwnedRepository[HabitToBreak]):
    """SQLModel-based habit-to-break repository implementation."""

    model = HabitToBreak

    def list_all(self, *, user_id: str) -> list[HabitToBreak]:
        return self._list(self._owned(user_id).order_by(HabitToBreak.id))

    def list_for_identity(self, identity_id: int, *, user_id: str) -> list[HabitToBreak]:
        return self._list(
            self._owned(user_id)
            .where(HabitToBreak.identity_id == identity_id)
            .order_by(HabitToBreak.id)
        )
