"""Identity statements, habits to break, and the identity scoreboard."""

from __future__ import annotations

from typing import Any, Mapping, Optional

from ..context import UserContext
from ..domain.design import BREAK_TEMPLATE, merge_for_edit, trim_for_save
from ..domain.statement import (
    MIN_COMPLETION_LENGTH,
    build_statement,
    clean_statement,
    is_valid_completion,
)
from ..errors import FormValidationError, NotFoundError
from ..logging_config import get_logger
from ..models.habit import Habit
from ..models.identity import HabitToBreak, Identity
from . import metrics

logger = get_logger(__name__)

MAX_BREAK_NAME = 200
REINFORCING_SHOWN = 3
UNDERMINING_SHOWN = 2


def list_identities(ctx: UserContext) -> list[Identity]:
    return ctx.app.identity_repo.list_all(user_id=ctx.require_user_id())


def _get_identity(ctx: UserContext, identity_id: int) -> Identity:
    identity = ctx.app.identity_repo.get_by_id(identity_id, user_id=ctx.require_user_id())
    if identity is None:
        raise NotFoundError("Identity not found.")
    return identity


def create_identity(ctx: UserContext, completion: str) -> Identity:
    """Create "I am a person who <completion>." at the end of the list."""

    user_id = ctx.require_user_id()
    if not is_valid_completion(completion):
        raise FormValidationError.single(
            "statement", f"Finish the sentence with at least {MIN_COMPLETION_LENGTH} characters."
        )
    repo = ctx.app.identity_repo
    identity = repo.create(
        Identity(
            user_id=user_id,
            statement=build_statement(completion),
            sort_order=repo.count(user_id=user_id),
        ),
        user_id=user_id,
    )
    logger.info("Identity created", extra={"user_id": user_id, "identity_id": identity.id})
    return identity


def update_identity(ctx: UserContext, identity_id: int, statement: str) -> Identity:
    user_id = ctx.require_user_id()
    _get_identity(ctx, identity_id)
    text = clean_statement(statement)
    if not text:
        raise FormValidationError.single("statement", "Statement cannot be empty.")
    identity = ctx.app.identity_repo.update_fields(
        identity_id, {"statement": text}, user_id=user_id
    )
    logger.info("Identity updated", extra={"user_id": user_id, "identity_id": identity_id})
    return identity  # type: ignore[return-value]


def delete_identity(ctx: UserContext, identity_id: int) -> None:
    """Delete the identity; its habits stay, unlinked, and its break plans go with it."""

    user_id = ctx.require_user_id()
    if not ctx.app.identity_repo.delete(identity_id, user_id=user_id):
        raise NotFoundError("Identity not found.")
    logger.info("Identity deleted", extra={"user_id": user_id, "identity_id": identity_id})


# Habits to break


def _clean_break_name(value: Any) -> str:
    name = value.strip()[:MAX_BREAK_NAME] if isinstance(value, str) else ""
    if not name:
        raise FormValidationError.single("name", "Name the habit to break.")
    return name


def list_breaks(ctx: UserContext, identity_id: Optional[int] = None) -> list[HabitToBreak]:
    user_id = ctx.require_user_id()
    if identity_id is None:
        return ctx.app.break_repo.list_all(user_id=user_id)
    _get_identity(ctx, identity_id)
    return ctx.app.break_repo.list_for_identity(identity_id, user_id=user_id)


def create_break(
    ctx: UserContext,
    identity_id: int,
    name: str,
    design_break: Optional[Mapping[str, Any]] = None,
) -> HabitToBreak:
    user_id = ctx.require_user_id()
    _get_identity(ctx, identity_id)
    row = ctx.app.break_repo.create(
        HabitToBreak(
            user_id=user_id,
            identity_id=identity_id,
            name=_clean_break_name(name),
            design_break=trim_for_save(design_break, BREAK_TEMPLATE),
        ),
        user_id=user_id,
    )
    logger.info(
        "Habit to break created",
        extra={"user_id": user_id, "identity_id": identity_id, "break_id": row.id},
    )
    return row


def update_break(ctx: UserContext, break_id: int, fields: Mapping[str, Any]) -> HabitToBreak:
    user_id = ctx.require_user_id()
    repo = ctx.app.break_repo
    if repo.get_by_id(break_id, user_id=user_id) is None:
        raise NotFoundError("Habit to break not found.")
    changes: dict[str, Any] = {}
    if "name" in fields:
        changes["name"] = _clean_break_name(fields["name"])
    if "identity_id" in fields:
        _get_identity(ctx, fields["identity_id"])
        changes["identity_id"] = fields["identity_id"]
    if "design_break" in fields:
        changes["design_break"] = trim_for_save(fields["design_break"], BREAK_TEMPLATE)
    row = repo.update_fields(break_id, changes, user_id=user_id) if changes else repo.get_by_id(
        break_id, user_id=user_id
    )
    logger.info(
        "Habit to break updated",
        extra={"user_id": user_id, "break_id": break_id, "fields": sorted(changes)},
    )
    return row  # type: ignore[return-value]


def delete_break(ctx: UserContext, break_id: int) -> None:
    user_id = ctx.require_user_id()
    if not ctx.app.break_repo.delete(break_id, user_id=user_id):
        raise NotFoundError("Habit to break not found.")
    logger.info("Habit to break deleted", extra={"user_id": user_id, "break_id": break_id})


def break_to_dict(row: HabitToBreak, *, for_edit: bool = False) -> dict[str, Any]:
    return {
        "id": row.id,
        "identity_id": row.identity_id,
        "name": row.name,
        "design_break": merge_for_edit(row.design_break, BREAK_TEMPLATE)
        if for_edit
        else row.design_break,
    }


# Scoreboard


def _reinforcing_order(habits: list[Habit]) -> list[Habit]:
    # Most recent completion first; never-completed habits last; ties by sort order.
    by_sort = sorted(habits, key=lambda h: h.sort_order)
    return sorted(
        by_sort,
        key=lambda h: h.last_completed_date.isoformat() if h.last_completed_date else "",
        reverse=True,
    )


def scoreboard(ctx: UserContext) -> list[dict[str, Any]]:
    """Per identity: weekly votes, trend, top habits and momentum."""

    user_id = ctx.require_user_id()
    now = ctx.today()
    this_week = metrics.this_week_bounds(now)
    identities = ctx.app.identity_repo.list_all(user_id=user_id)
    habits = ctx.app.habit_repo.list_current(user_id=user_id)
    breaks = ctx.app.break_repo.list_all(user_id=user_id)

    board = []
    for identity in identities:
        linked = [h for h in habits if h.identity_id == identity.id]
        votes = metrics.count_in_range(linked, this_week)
        reinforcing = _reinforcing_order(linked)[:REINFORCING_SHOWN]
        undermining = [b for b in breaks if b.identity_id == identity.id][:UNDERMINING_SHOWN]
        board.append(
            {
                "id": identity.id,
                "statement": identity.statement,
                "sort_order": identity.sort_order,
                "votes_this_week": votes,
                "trend_delta": metrics.trend_delta(linked, now),
                "reinforcing_habits": [
                    {
                        "id": h.id,
                        "name": h.name,
                        "two_minute_version": h.two_minute_version,
                        "last_completed_date": h.last_completed_date.isoformat()
                        if h.last_completed_date
                        else None,
                    }
                    for h in reinforcing
                ],
                "reinforcing_total": len(linked),
                "undermining": [break_to_dict(b) for b in undermining],
                "momentum_pct": metrics.momentum_pct(votes, len(reinforcing)),
                "consistency_pct": metrics.consistency_pct(votes, len(linked)),
            }
        )
    return board


def identity_to_dict(identity: Identity) -> dict[str, Any]:
    return {"id": identity.id, "statement": identity.statement, "sort_order": identity.sort_order}


__all__ = [
    "break_to_dict",
    "create_break",
    "create_identity",
    "delete_break",
    "delete_identity",
    "identity_to_dict",
    "list_breaks",
    "list_identities",
    "scoreboard",
    "update_break",
    "update_identity",
]
