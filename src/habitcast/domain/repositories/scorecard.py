"""Scorecard repository protocol."""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Optional, Protocol, runtime_checkable

from ...models.scorecard import ScorecardEntry


@runtime_checkable
class ScorecardRepository(Protocol):
    """Repository for scorecard entries."""

    def get_by_id(self, entry_id: int, *, user_id: str) -> Optional[ScorecardEntry]:
        ...

    def list_all(self, *, user_id: str) -> list[ScorecardEntry]:
        """All entries ordered by sort order."""
        ...

    def count_in_bucket(self, time_of_day: str, *, user_id: str) -> int:
        ...

    def create(self, entry: ScorecardEntry, *, user_id: str) -> ScorecardEntry:
        ...

    def update_fields(
        self, entry_id: int, fields: Mapping[str, Any], *, user_id: str
    ) -> Optional[ScorecardEntry]:
        ...

    def delete(self, entry_id: int, *, user_id: str) -> bool:
        ...

    def apply_positions(
        self, positions: Iterable[tuple[int, str, int]], *, user_id: str
    ) -> None:
        """Write (entry_id, time_of_day, sort_order) triples in one transaction."""
        ...
