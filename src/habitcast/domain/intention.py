"""Implementation intentions: "I will <behavior> at <time> in <location>"."""

from __future__ import annotations

from typing import Any, Mapping, Optional

INTENTION_KEYS = ("behavior", "time", "location")
_LIMITS = {"behavior": 200, "time": 100, "location": 100}


def normalize_intention(value: Optional[Mapping[str, Any]]) -> Optional[dict[str, str]]:
    """Trim and cap each part; None unless at least one part is populated."""

    if not isinstance(value, Mapping):
        return None
    out: dict[str, str] = {}
    for key in INTENTION_KEYS:
        raw = value.get(key)
        if isinstance(raw, str) and raw.strip():
            out[key] = raw.strip()[: _LIMITS[key]]
    return out or None


def format_intention(value: Optional[Mapping[str, Any]]) -> Optional[str]:
    """Render the intention as a sentence for display."""

    intention = normalize_intention(value)
    if intention is None:
        return None
    parts = []
    if "behavior" in intention:
        parts.append(intention["behavior"])
    if "time" in intention:
        parts.append(f"at {intention['time']}")
    if "location" in intention:
        parts.append(f"in {intention['location']}")
    return f"I will {' '.join(parts)}"


__all__ = ["INTENTION_KEYS", "format_intention", "normalize_intention"]
