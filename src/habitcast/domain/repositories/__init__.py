"""Repository protocol definitions for domain layer."""

from .habit import HabitRepository
from .identity import HabitToBreakRepository, IdentityRepository
from .profile import ProfileRepository
from .scorecard import ScorecardRepository
from .weekly_review import WeeklyReviewRepository

__all__ = [
    "HabitRepository",
    "HabitToBreakRepository",
    "IdentityRepository",
    "ProfileRepository",
    "ScorecardRepository",
    "WeeklyReviewRepository",
]
