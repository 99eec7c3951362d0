"""Error hierarchy shared by services and the HTTP layer.

Validation failures are raised before any store call. Store failures keep the
driver's message so it can be shown to the user verbatim.
"""

from __future__ import annotations

from typing import Mapping, Optional


class HabitCastError(Exception):
    """Base class for expected, user-facing failures."""

    http_status = 400

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_response(self) -> Optional[dict]:
        return {"error": self.message}


class FormValidationError(HabitCastError):
    """Input rejected before reaching the store."""

    http_status = 422

    def __init__(self, errors: Mapping[str, list[str]], message: str | None = None) -> None:
        self.errors = {key: list(values) for key, values in errors.items()}
        first = next((msgs[0] for msgs in self.errors.values() if msgs), "Invalid input.")
        super().__init__(message or first)

    @classmethod
    def single(cls, field: str, message: str) -> "FormValidationError":
        return cls({field: [message]})

    def to_response(self) -> dict:
        return {"error": self.message, "fields": self.errors}


class ReviewStepError(HabitCastError):
    """A wizard transition was attempted before its step was complete."""

    http_status = 422


class NotFoundError(HabitCastError):
    """The requested row does not exist for the current user."""

    http_status = 404


class MissingUserError(HabitCastError):
    """No authenticated user; the operation is dropped without feedback."""

    http_status = 401

    def to_response(self) -> None:
        return None


class StoreError(HabitCastError):
    """The database rejected an operation; the message is the driver's."""

    http_status = 500

    @classmethod
    def from_exception(cls, exc: Exception) -> "StoreError":
        orig = getattr(exc, "orig", None)
        return cls(str(orig) if orig is not None else str(exc))


__all__ = [
    "FormValidationError",
    "HabitCastError",
    "MissingUserError",
    "NotFoundError",
    "ReviewStepError",
    "StoreError",
]
