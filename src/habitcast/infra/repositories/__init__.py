"""Concrete repository implementations using SQLModel."""

from .habit import SQLModelHabitRepository
from .identity import SQLModelHabitToBreakRepository, SQLModelIdentityRepository
from .profile import SQLModelProfileRepository
from .scorecard import SQLModelScorecardRepository
from .weekly_review import SQLModelWeeklyReviewRepository

__all__ = [
    "SQLModelHabitRepository",
    "SQLModelHabitToBreakRepository",
    "SQLModelIdentityRepository",
    "SQLModelProfileRepository",
    "SQLModelScorecardRepository",
    "SQLModelWeeklyReviewRepository",
]
