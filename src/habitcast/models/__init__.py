"""SQLModel table exports."""

from .habit import Habit, HabitFrequency
from .identity import HabitToBreak, Identity
from .profile import Profile
from .scorecard import ScorecardEntry, ScorecardRating, TimeOfDay
from .weekly_review import WeeklyRating, WeeklyReviewRating

__all__ = [
    "Habit",
    "HabitFrequency",
    "HabitToBreak",
    "Identity",
    "Profile",
    "ScorecardEntry",
    "ScorecardRating",
    "TimeOfDay",
    "WeeklyRating",
    "WeeklyReviewRating",
]
