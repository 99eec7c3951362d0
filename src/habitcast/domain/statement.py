"""Identity statement rules."""

from __future__ import annotations

IDENTITY_PREFIX = "I am a person who "
MIN_COMPLETION_LENGTH = 3
MAX_STATEMENT_LENGTH = 500


def statement_completion(text: str) -> str:
    """The user's part of a statement: trimmed, with the fixed prefix removed if typed."""

    completion = (text or "").strip()
    if completion.lower().startswith(IDENTITY_PREFIX.lower()):
        completion = completion[len(IDENTITY_PREFIX):].strip()
    return completion


def is_valid_completion(text: str) -> bool:
    return len(statement_completion(text)) >= MIN_COMPLETION_LENGTH


def build_statement(text: str) -> str:
    """Full statement from a completion; caller checks `is_valid_completion` first."""

    completion = statement_completion(text)
    suffix = "" if completion.endswith(".") else "."
    return (IDENTITY_PREFIX + completion + suffix)[:MAX_STATEMENT_LENGTH]


def clean_statement(text: str) -> str:
    """Edited statement as stored: trimmed and capped. Empty means invalid."""

    return (text or "").strip()[:MAX_STATEMENT_LENGTH]


__all__ = [
    "IDENTITY_PREFIX",
    "MAX_STATEMENT_LENGTH",
    "MIN_COMPLETION_LENGTH",
    "build_statement",
    "clean_statement",
    "is_valid_completion",
    "statement_completion",
]
