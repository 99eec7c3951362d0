"""Profile lookups and display-name edits."""

from __future__ import annotations

from typing import Any

from ..context import UserContext
from ..errors import FormValidationError
from ..logging_config import get_logger
from ..models.profile import Profile

logger = get_logger(__name__)

MAX_DISPLAY_NAME = 50


def get_profile(ctx: UserContext) -> Profile:
    """The caller's profile, created on first sight."""

    return ctx.app.profile_repo.ensure(ctx.require_user_id(), email=ctx.email)


def update_display_name(ctx: UserContext, display_name: str) -> Profile:
    user_id = ctx.require_user_id()
    name = (display_name or "").strip()[:MAX_DISPLAY_NAME]
    if not name:
        raise FormValidationError.single("display_name", "Display name cannot be empty.")
    profile = ctx.app.profile_repo.update_display_name(user_id, name)
    logger.info("Display name updated", extra={"user_id": user_id})
    return profile


def profile_to_dict(profile: Profile) -> dict[str, Any]:
    return {"id": profile.id, "email": profile.email, "display_name": profile.display_name}


__all__ = ["MAX_DISPLAY_NAME", "get_profile", "profile_to_dict", "update_display_name"]
