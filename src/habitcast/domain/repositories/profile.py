"""Profile repository protocol."""

from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable

from ...models.profile import Profile


@runtime_checkable
class ProfileRepository(Protocol):
    """Profiles keyed by the identity provider's user id."""

    def get(self, user_id: str) -> Optional[Profile]:
        ...

    def ensure(self, user_id: str, *, email: str = "") -> Profile:
        """Return the profile, creating an empty one on first sight of the user."""
        ...

    def update_display_name(self, user_id: str, display_name: str) -> Profile:
        ...
