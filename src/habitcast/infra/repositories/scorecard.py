"""SQLModel implementation of the scorecard repository."""

from __future__ import annotations

from typing import Iterable

from sqlmodel import func, or_, select

from ...models.scorecard import ScorecardEntry, TimeOfDay
from .base import SQLModelOwnedRepository


class SQLModelScorecardRepository(SQLModelOwnedRepository[ScorecardEntry]):
    """SQLModel-based scorecard repository implementation."""

    model = ScorecardEntry

    def list_all(self, *, user_id: str) -> list[ScorecardEntry]:
        return self._list(
            self._owned(user_id).order_by(ScorecardEntry.sort_order, ScorecardEntry.id)
        )

    def count_in_bucket(self, time_of_day: str, *, user_id: str) -> int:
        bucket_filter = ScorecardEntry.time_of_day == time_of_day
        if time_of_day == TimeOfDay.ANYTIME.value:
            bucket_filter = or_(bucket_filter, ScorecardEntry.time_of_day.is_(None))  # type: ignore[union-attr]
        with self.session_factory() as session:
            statement = (
                select(func.count())
                .select_from(ScorecardEntry)
                .where(ScorecardEntry.user_id == user_id)
                .where(bucket_filter)
            )
            return int(session.exec(statement).one())

    def apply_positions(
        self, positions: Iterable[tuple[int, str, int]], *, user_id: str
    ) -> None:
        """Write (entry_id, time_of_day, sort_order) triples in one transaction."""

        wanted = {entry_id: (time_of_day, order) for entry_id, time_of_day, order in positions}
        if not wanted:
            return
        with self.session_factory() as session:
            rows = session.exec(
                self._owned(user_id).where(ScorecardEntry.id.in_(list(wanted)))  # type: ignore[union-attr]
            ).all()
            for row in rows:
                row.time_of_day, row.sort_order = wanted[row.id]
                session.add(row)
            session.commit()
