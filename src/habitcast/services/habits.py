"""Habit operations: create, edit, archive, complete and shrink."""

from __future__ import annotations

from datetime import date, timedelta
from typing import Any, Mapping, Optional

from ..context import UserContext
from ..domain.anchor import (
    NO_ANCHOR,
    Anchor,
    HabitAnchor,
    ScorecardAnchor,
    anchor_to_columns,
    anchor_to_dict,
)
from ..domain.design import BUILD_TEMPLATE, design_field, is_empty_design, trim_for_save
from ..domain.intention import format_intention, normalize_intention
from ..errors import FormValidationError, NotFoundError
from ..logging_config import get_logger
from ..models.habit import Habit, HabitFrequency

logger = get_logger(__name__)

MAX_NAME = 200
MAX_TWO_MINUTE = 200
MAX_TEMPTATION = 500

_EDITABLE = {
    "name",
    "identity_id",
    "two_minute_version",
    "implementation_intention",
    "temptation_bundle",
    "design_build",
    "anchor",
    "frequency",
    "custom_days",
    "is_active",
    "sort_order",
}


def _clean_text(value: Any, limit: int) -> Optional[str]:
    if not isinstance(value, str):
        return None
    text = value.strip()[:limit]
    return text or None


def _clean_name(value: Any) -> str:
    name = _clean_text(value, MAX_NAME)
    if not name:
        raise FormValidationError.single("name", "Habit name is required.")
    return name


def _clean_frequency(frequency: Any, custom_days: Any) -> tuple[str, Optional[list[int]]]:
    try:
        value = HabitFrequency(frequency or HabitFrequency.DAILY.value)
    except ValueError as exc:
        raise FormValidationError.single("frequency", "Unknown frequency.") from exc
    if value is not HabitFrequency.CUSTOM:
        return value.value, None
    days = sorted({int(d) for d in (custom_days or []) if str(d).isdigit() and 0 <= int(d) <= 6})
    if not days:
        raise FormValidationError.single("custom_days", "Pick at least one day for a custom schedule.")
    return value.value, days


def has_design_fields(habit: Habit) -> bool:
    """Whether any planning field is filled, deciding if "design this habit" is shown."""

    if not is_empty_design(habit.design_build, BUILD_TEMPLATE):
        return True
    if normalize_intention(habit.implementation_intention) is not None:
        return True
    return bool(
        (habit.two_minute_version or "").strip()
        or (habit.temptation_bundle or "").strip()
        or habit.stack_anchor_scorecard_id
        or habit.stack_anchor_habit_id
    )


def derived_fields(design: Optional[Mapping[str, Any]]) -> dict[str, Any]:
    """Flat columns mirrored from a trimmed build template."""

    out: dict[str, Any] = {}
    behavior = design_field(design, "obvious", "implementation_intention")
    if behavior:
        out["implementation_intention"] = {"behavior": behavior[:MAX_NAME]}
    two_minute = design_field(design, "easy", "two_minute_rule")
    if two_minute:
        out["two_minute_version"] = two_minute[:MAX_TWO_MINUTE]
    temptation = design_field(design, "attractive", "temptation_bundling")
    if temptation:
        out["temptation_bundle"] = temptation[:MAX_TEMPTATION]
    return out


def get_habit(ctx: UserContext, habit_id: int) -> Habit:
    habit = ctx.app.habit_repo.get_by_id(habit_id, user_id=ctx.require_user_id())
    if habit is None:
        raise NotFoundError("Habit not found.")
    return habit


def _check_identity(ctx: UserContext, identity_id: Optional[int]) -> None:
    if identity_id is None:
        return
    if ctx.app.identity_repo.get_by_id(identity_id, user_id=ctx.require_user_id()) is None:
        raise FormValidationError.single("identity_id", "Identity not found.")


def _check_anchor(ctx: UserContext, anchor: Anchor, habit_id: Optional[int] = None) -> None:
    user_id = ctx.require_user_id()
    if isinstance(anchor, ScorecardAnchor):
        if ctx.app.scorecard_repo.get_by_id(anchor.scorecard_id, user_id=user_id) is None:
            raise FormValidationError.single("anchor", "Scorecard entry not found.")
    elif isinstance(anchor, HabitAnchor):
        if habit_id is not None and anchor.habit_id == habit_id:
            raise FormValidationError.single("anchor", "A habit cannot be stacked on itself.")
        if ctx.app.habit_repo.get_by_id(anchor.habit_id, user_id=user_id) is None:
            raise FormValidationError.single("anchor", "Habit to stack on not found.")


def list_current(ctx: UserContext) -> list[Habit]:
    return ctx.app.habit_repo.list_current(user_id=ctx.require_user_id())


def list_active(ctx: UserContext) -> list[Habit]:
    return ctx.app.habit_repo.list_active(user_id=ctx.require_user_id())


def list_archived(ctx: UserContext) -> list[Habit]:
    return ctx.app.habit_repo.list_archived(user_id=ctx.require_user_id())


def create_habit(
    ctx: UserContext,
    name: str,
    *,
    identity_id: Optional[int] = None,
    two_minute_version: Optional[str] = None,
    implementation_intention: Optional[Mapping[str, Any]] = None,
    temptation_bundle: Optional[str] = None,
    design_build: Optional[Mapping[str, Any]] = None,
    anchor: Anchor = NO_ANCHOR,
    frequency: str = HabitFrequency.DAILY.value,
    custom_days: Optional[list[int]] = None,
) -> Habit:
    """Create a habit at the end of the current list.

    Planning fields left out by the caller are filled from the build template.
    """

    user_id = ctx.require_user_id()
    clean_name = _clean_name(name)
    freq, days = _clean_frequency(frequency, custom_days)
    _check_identity(ctx, identity_id)
    _check_anchor(ctx, anchor)

    design = trim_for_save(design_build, BUILD_TEMPLATE)
    derived = derived_fields(design)
    habit = Habit(
        user_id=user_id,
        name=clean_name,
        identity_id=identity_id,
        two_minute_version=_clean_text(two_minute_version, MAX_TWO_MINUTE)
        or derived.get("two_minute_version"),
        implementation_intention=normalize_intention(implementation_intention)
        or derived.get("implementation_intention"),
        temptation_bundle=_clean_text(temptation_bundle, MAX_TEMPTATION)
        or derived.get("temptation_bundle"),
        design_build=design,
        frequency=freq,
        custom_days=days,
        sort_order=len(ctx.app.habit_repo.list_current(user_id=user_id)),
    )
    habit.set_anchor(anchor)
    created = ctx.app.habit_repo.create(habit, user_id=user_id)
    logger.info(
        "Habit created",
        extra={"user_id": user_id, "habit_id": created.id, "identity_id": identity_id},
    )
    return created


def update_habit(ctx: UserContext, habit_id: int, fields: Mapping[str, Any]) -> Habit:
    """Write only the logical groups present in `fields`.

    A new build template refreshes the flat planning columns it mirrors unless
    the same request sets them explicitly. A new anchor clears the other
    anchor column in the same write.
    """

    user_id = ctx.require_user_id()
    unknown = set(fields) - _EDITABLE
    if unknown:
        raise FormValidationError.single(sorted(unknown)[0], "Field cannot be edited.")
    habit = get_habit(ctx, habit_id)

    changes: dict[str, Any] = {}
    if "name" in fields:
        changes["name"] = _clean_name(fields["name"])
    if "identity_id" in fields:
        _check_identity(ctx, fields["identity_id"])
        changes["identity_id"] = fields["identity_id"]
    if "design_build" in fields:
        design = trim_for_save(fields["design_build"], BUILD_TEMPLATE)
        changes["design_build"] = design
        changes.update(derived_fields(design))
    if "two_minute_version" in fields:
        changes["two_minute_version"] = _clean_text(fields["two_minute_version"], MAX_TWO_MINUTE)
    if "temptation_bundle" in fields:
        changes["temptation_bundle"] = _clean_text(fields["temptation_bundle"], MAX_TEMPTATION)
    if "implementation_intention" in fields:
        changes["implementation_intention"] = normalize_intention(fields["implementation_intention"])
    if "anchor" in fields:
        anchor = fields["anchor"] or NO_ANCHOR
        _check_anchor(ctx, anchor, habit_id=habit_id)
        changes.update(anchor_to_columns(anchor))
    if "frequency" in fields or "custom_days" in fields:
        freq, days = _clean_frequency(
            fields.get("frequency", habit.frequency), fields.get("custom_days", habit.custom_days)
        )
        changes["frequency"] = freq
        changes["custom_days"] = days
    if "is_active" in fields:
        changes["is_active"] = bool(fields["is_active"])
    if "sort_order" in fields:
        changes["sort_order"] = int(fields["sort_order"])

    if not changes:
        return habit
    updated = ctx.app.habit_repo.update_fields(habit_id, changes, user_id=user_id)
    logger.info(
        "Habit updated",
        extra={"user_id": user_id, "habit_id": habit_id, "fields": sorted(changes)},
    )
    return updated  # type: ignore[return-value]


def archive_habit(ctx: UserContext, habit_id: int) -> Habit:
    """Soft-delete: hide from active views but keep for restore."""

    user_id = ctx.require_user_id()
    get_habit(ctx, habit_id)
    habit = ctx.app.habit_repo.update_fields(
        habit_id, {"archived_at": ctx.current_time(), "is_active": False}, user_id=user_id
    )
    logger.info("Habit archived", extra={"user_id": user_id, "habit_id": habit_id})
    return habit  # type: ignore[return-value]


def restore_habit(ctx: UserContext, habit_id: int) -> Habit:
    """Bring an archived habit back with a fresh streak."""

    user_id = ctx.require_user_id()
    get_habit(ctx, habit_id)
    habit = ctx.app.habit_repo.update_fields(
        habit_id,
        {"archived_at": None, "is_active": True, "current_streak": 0},
        user_id=user_id,
    )
    logger.info("Habit restored", extra={"user_id": user_id, "habit_id": habit_id})
    return habit  # type: ignore[return-value]


def delete_habit(ctx: UserContext, habit_id: int) -> None:
    user_id = ctx.require_user_id()
    if not ctx.app.habit_repo.delete(habit_id, user_id=user_id):
        raise NotFoundError("Habit not found.")
    logger.info("Habit deleted", extra={"user_id": user_id, "habit_id": habit_id})


def next_streak(current: int, last_completed: Optional[date], today: date) -> int:
    """Streak after completing on `today`; repeat completions the same day are no-ops."""

    if last_completed == today:
        return max(current, 1)
    if last_completed == today - timedelta(days=1):
        return current + 1
    return 1


def complete_habit(ctx: UserContext, habit_id: int, today: Optional[date] = None) -> Habit:
    """Record today's rep: one vote for the habit's identity."""

    user_id = ctx.require_user_id()
    habit = get_habit(ctx, habit_id)
    if habit.is_archived:
        raise FormValidationError.single("habit_id", "Restore the habit before completing it.")
    today = today or ctx.today()
    streak = next_streak(habit.current_streak, habit.last_completed_date, today)
    updated = ctx.app.habit_repo.update_fields(
        habit_id, {"last_completed_date": today, "current_streak": streak}, user_id=user_id
    )
    logger.info(
        "Habit completed",
        extra={"user_id": user_id, "habit_id": habit_id, "streak": streak},
    )
    return updated  # type: ignore[return-value]


def shrink_habit(ctx: UserContext, habit_id: int, two_minute_version: str) -> Habit:
    """Reset flow: swap in a smaller version and start the streak over."""

    user_id = ctx.require_user_id()
    habit = get_habit(ctx, habit_id)
    if habit.is_archived or not habit.is_active:
        raise FormValidationError.single("habit_id", "Only active habits can be reset.")
    smaller = _clean_text(two_minute_version, MAX_TWO_MINUTE)
    if not smaller:
        raise FormValidationError.single("two_minute_version", "Describe the 2-minute version.")
    updated = ctx.app.habit_repo.update_fields(
        habit_id, {"two_minute_version": smaller, "current_streak": 0}, user_id=user_id
    )
    logger.info("Habit shrunk", extra={"user_id": user_id, "habit_id": habit_id})
    return updated  # type: ignore[return-value]


def habit_to_dict(habit: Habit) -> dict[str, Any]:
    return {
        "id": habit.id,
        "identity_id": habit.identity_id,
        "name": habit.name,
        "two_minute_version": habit.two_minute_version,
        "implementation_intention": habit.implementation_intention,
        "intention_text": format_intention(habit.implementation_intention),
        "temptation_bundle": habit.temptation_bundle,
        "design_build": habit.design_build,
        "anchor": anchor_to_dict(habit.anchor),
        "frequency": habit.frequency,
        "custom_days": habit.custom_days,
        "is_active": habit.is_active,
        "sort_order": habit.sort_order,
        "current_streak": habit.current_streak,
        "last_completed_date": habit.last_completed_date.isoformat()
        if habit.last_completed_date
        else None,
        "archived_at": habit.archived_at.isoformat() if habit.archived_at else None,
        "has_design_fields": has_design_fields(habit),
    }


__all__ = [
    "archive_habit",
    "complete_habit",
    "create_habit",
    "delete_habit",
    "get_habit",
    "derived_fields",
    "habit_to_dict",
    "has_design_fields",
    "list_active",
    "list_archived",
    "list_current",
    "next_streak",
    "restore_habit",
    "shrink_habit",
    "update_habit",
]
