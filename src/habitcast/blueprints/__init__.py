"""Blueprint exports."""

from . import habits, identities, onboarding, profile, review, scorecard

__all__ = [
    "habits",
    "identities",
    "onboarding",
    "profile",
    "review",
    "scorecard",
]
