"""Habit stacking anchors.

A habit is stacked after at most one thing: a scorecard entry or another
habit. The anchor is a tagged union in code and two nullable columns in the
table; only `anchor_to_columns`/`anchor_from_columns` cross that boundary.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Union


@dataclass(frozen=True, slots=True)
class NoAnchor:
    """The habit is not stacked."""

    kind: str = "none"


@dataclass(frozen=True, slots=True)
class ScorecardAnchor:
    """Do the habit right after an existing scorecard entry."""

    scorecard_id: int
    kind: str = "scorecard"


@dataclass(frozen=True, slots=True)
class HabitAnchor:
    """Do the habit right after another tracked habit."""

    habit_id: int
    kind: str = "habit"


Anchor = Union[NoAnchor, ScorecardAnchor, HabitAnchor]

NO_ANCHOR = NoAnchor()


def anchor_to_columns(anchor: Anchor) -> dict[str, Optional[int]]:
    """Both column values for an anchor; the unused one is always None."""

    if isinstance(anchor, ScorecardAnchor):
        return {"stack_anchor_scorecard_id": anchor.scorecard_id, "stack_anchor_habit_id": None}
    if isinstance(anchor, HabitAnchor):
        return {"stack_anchor_scorecard_id": None, "stack_anchor_habit_id": anchor.habit_id}
    return {"stack_anchor_scorecard_id": None, "stack_anchor_habit_id": None}


def anchor_from_columns(scorecard_id: Optional[int], habit_id: Optional[int]) -> Anchor:
    """Rebuild the anchor from stored columns; a scorecard anchor wins if both are set."""

    if scorecard_id is not None:
        return ScorecardAnchor(scorecard_id)
    if habit_id is not None:
        return HabitAnchor(habit_id)
    return NO_ANCHOR


def parse_anchor(payload: Mapping[str, Any] | None) -> Anchor:
    """Read an anchor from request data shaped ``{"kind": ..., "id": ...}``."""

    if not payload:
        return NO_ANCHOR
    kind = str(payload.get("kind") or "none").strip().lower()
    raw_id = payload.get("id")
    if kind == "none":
        return NO_ANCHOR
    if raw_id is None or raw_id == "":
        raise ValueError("An anchor id is required.")
    try:
        anchor_id = int(raw_id)
    except (TypeError, ValueError) as exc:
        raise ValueError("Anchor id must be a whole number.") from exc
    if kind == "scorecard":
        return ScorecardAnchor(anchor_id)
    if kind == "habit":
        return HabitAnchor(anchor_id)
    raise ValueError(f"Unknown anchor kind: {kind}")


def anchor_to_dict(anchor: Anchor) -> dict[str, Any]:
    if isinstance(anchor, ScorecardAnchor):
        return {"kind": anchor.kind, "id": anchor.scorecard_id}
    if isinstance(anchor, HabitAnchor):
        return {"kind": anchor.kind, "id": anchor.habit_id}
    return {"kind": "none", "id": None}


__all__ = [
    "Anchor",
    "HabitAnchor",
    "NO_ANCHOR",
    "NoAnchor",
    "ScorecardAnchor",
    "anchor_from_columns",
    "anchor_to_columns",
    "anchor_to_dict",
    "parse_anchor",
]
