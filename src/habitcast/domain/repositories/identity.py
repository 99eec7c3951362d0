"""Identity and habit-to-break repository protocols."""

from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, runtime_checkable

from ...models.identity import HabitToBreak, Identity


@runtime_checkable
class IdentityRepository(Protocol):
    """Repository for managing identity statements."""

    def get_by_id(self, identity_id: int, *, user_id: str) -> Optional[Identity]:
        """Retrieve an identity by ID."""
        ...

    def list_all(self, *, user_id: str) -> list[Identity]:
        """List identities in display order."""
        ...

    def count(self, *, user_id: str) -> int:
        ...

    def create(self, identity: Identity, *, user_id: str) -> Identity:
        ...

    def update_fields(
        self, identity_id: int, fields: Mapping[str, Any], *, user_id: str
    ) -> Optional[Identity]:
        """Write only the given columns."""
        ...

    def delete(self, identity_id: int, *, user_id: str) -> bool:
        ...


@runtime_checkable
class HabitToBreakRepository(Protocol):
    """Repository for habits that undermine an identity."""

    def get_by_id(self, item_id: int, *, user_id: str) -> Optional[HabitToBreak]:
        ...

    def list_all(self, *, user_id: str) -> list[HabitToBreak]:
        ...

    def list_for_identity(self, identity_id: int, *, user_id: str) -> list[HabitToBreak]:
        ...

    def create(self, item: HabitToBreak, *, user_id: str) -> HabitToBreak:
        ...

    def update_fields(
        self, item_id: int, fields: Mapping[str, Any], *, user_id: str
    ) -> Optional[HabitToBreak]:
        ...

    def delete(self, item_id: int, *, user_id: str) -> bool:
        ...
