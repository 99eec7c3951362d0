"""Application and per-request contexts passed explicitly to services."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from .config import BaseConfig
from .domain.repositories import (
    HabitRepository,
    HabitToBreakRepository,
    IdentityRepository,
    ProfileRepository,
    ScorecardRepository,
    WeeklyReviewRepository,
)
from .errors import MissingUserError
from .infra.database import SessionFactory, bootstrap_database
from .infra.repositories import (
    SQLModelHabitRepository,
    SQLModelHabitToBreakRepository,
    SQLModelIdentityRepository,
    SQLModelProfileRepository,
    SQLModelScorecardRepository,
    SQLModelWeeklyReviewRepository,
)
from .models.common import utcnow


@dataclass
class AppContext:
    """Configuration, session factory and repositories for one process."""

    config: BaseConfig
    session_factory: SessionFactory

    identity_repo: IdentityRepository
    break_repo: HabitToBreakRepository
    habit_repo: HabitRepository
    scorecard_repo: ScorecardRepository
    review_repo: WeeklyReviewRepository
    profile_repo: ProfileRepository

    engine: Optional[object] = None


def build_app_context(config: BaseConfig, session_factory: SessionFactory, engine=None) -> AppContext:
    """Wire every repository onto one session factory."""

    return AppContext(
        config=config,
        session_factory=session_factory,
        identity_repo=SQLModelIdentityRepository(session_factory),
        break_repo=SQLModelHabitToBreakRepository(session_factory),
        habit_repo=SQLModelHabitRepository(session_factory),
        scorecard_repo=SQLModelScorecardRepository(session_factory),
        review_repo=SQLModelWeeklyReviewRepository(session_factory),
        profile_repo=SQLModelProfileRepository(session_factory),
        engine=engine,
    )


def create_app_context(config: Optional[BaseConfig] = None) -> AppContext:
    """Create the engine, initialize the schema and build the context."""

    if config is None:
        config = BaseConfig()
    engine, session_factory = bootstrap_database(config)
    return build_app_context(config, session_factory, engine=engine)


@dataclass
class UserContext:
    """The authenticated caller plus the application it is talking to.

    `user_id` is None when the identity provider did not vouch for anyone;
    every service calls `require_user_id` before touching the store.
    """

    app: AppContext
    user_id: Optional[str]
    email: str = ""
    now: Optional[datetime] = None

    def require_user_id(self) -> str:
        """Return the current user id or raise if not set."""

        if not self.user_id:
            raise MissingUserError("User is not authenticated")
        return self.user_id

    def current_time(self) -> datetime:
        return self.now or utcnow()

    def today(self) -> date:
        return self.current_time().date()
