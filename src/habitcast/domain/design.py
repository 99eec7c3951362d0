"""4 Laws design templates for building and breaking habits.

A template has four fixed sections, each a record of optional strings. The
edit form always works on a fully merged copy (every field present, blank
allowed); storage only ever sees the trimmed copy, which drops blank fields
and sections and collapses to ``None`` when nothing is left.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

DesignValue = dict[str, dict[str, str]]


@dataclass(frozen=True)
class DesignTemplate:
    """Section and field names for one kind of design template."""

    kind: str
    sections: tuple[tuple[str, tuple[str, ...]], ...]

    @property
    def section_names(self) -> tuple[str, ...]:
        return tuple(name for name, _ in self.sections)

    def fields(self, section: str) -> tuple[str, ...]:
        for name, fields in self.sections:
            if name == section:
                return fields
        raise KeyError(section)

    def empty(self) -> DesignValue:
        """A fresh all-blank value for this template."""

        return {name: {field: "" for field in fields} for name, fields in self.sections}


BUILD_TEMPLATE = DesignTemplate(
    kind="build",
    sections=(
        ("obvious", ("clear_cue", "visible_trigger", "implementation_intention")),
        ("attractive", ("pair_with_enjoyment", "identity_reframe", "temptation_bundling")),
        ("easy", ("reduce_friction", "two_minute_rule", "environment_design")),
        ("satisfying", ("immediate_reward", "track_streak", "celebrate_completion")),
    ),
)

BREAK_TEMPLATE = DesignTemplate(
    kind="break",
    sections=(
        ("invisible", ("remove_cues", "change_environment", "avoid_triggers")),
        ("unattractive", ("reframe_cost", "highlight_downside", "negative_identity")),
        ("difficult", ("increase_friction", "add_steps", "add_accountability")),
        ("unsatisfying", ("immediate_consequence", "accountability_partner", "loss_based")),
    ),
)


def merge_for_edit(stored: Optional[Mapping[str, Any]], template: DesignTemplate) -> DesignValue:
    """Overlay a stored (possibly sparse or null) value onto the blank template.

    Total: every section and field of the template is present in the result
    and holds a string. Non-string stored values are treated as blank.
    """

    merged = template.empty()
    if not isinstance(stored, Mapping):
        return merged
    for section, fields in template.sections:
        stored_section = stored.get(section)
        if not isinstance(stored_section, Mapping):
            continue
        for field in fields:
            value = stored_section.get(field)
            if isinstance(value, str):
                merged[section][field] = value
    return merged


def trim_for_save(value: Optional[Mapping[str, Any]], template: DesignTemplate) -> Optional[DesignValue]:
    """Strip a value down to its non-blank fields, or ``None`` if nothing survives."""

    if not isinstance(value, Mapping):
        return None
    out: DesignValue = {}
    for section, fields in template.sections:
        raw_section = value.get(section)
        if not isinstance(raw_section, Mapping):
            continue
        kept: dict[str, str] = {}
        for field in fields:
            raw = raw_section.get(field)
            if isinstance(raw, str) and raw.strip():
                kept[field] = raw.strip()
        if kept:
            out[section] = kept
    return out or None


def is_empty_design(value: Optional[Mapping[str, Any]], template: DesignTemplate) -> bool:
    """True when no field of the value holds non-blank text."""

    return trim_for_save(value, template) is None


def design_field(value: Optional[Mapping[str, Any]], section: str, field: str) -> Optional[str]:
    """Trimmed text of one field, or None when missing or blank."""

    if not isinstance(value, Mapping):
        return None
    raw_section = value.get(section)
    if not isinstance(raw_section, Mapping):
        return None
    raw = raw_section.get(field)
    if isinstance(raw, str) and raw.strip():
        return raw.strip()
    return None


__all__ = [
    "BREAK_TEMPLATE",
    "BUILD_TEMPLATE",
    "DesignTemplate",
    "DesignValue",
    "design_field",
    "is_empty_design",
    "merge_for_edit",
    "trim_for_save",
]
