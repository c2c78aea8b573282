"""Row filters used by the query patterns.

Filters never mutate rows; they return the matching rows of one dataset unchanged and leave the
tagging with the source kind to the engine. Matching is deliberately loose (substring based):
"Java" also matches "JavaScript".
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping, Sequence
from typing import Any

from src.entities.values import coerce_int, is_blank, parse_phase_list, split_list
from src.query.dictionaries import (
    GROUP_FIELDS,
    LIST_FIELDS,
    SKILL_FIELDS,
    Comparator,
    detect_comparator,
    lookup_field,
    resolve_fields,
)

Row = Mapping[str, Any]

_NUMBER_RE = re.compile(r"\d+")
_PRIORITY_LEVEL_RE = re.compile(r"\bpriority(?:\s+level)?\s+(?:of\s+|is\s+|equal\s+to\s+)?(?P<value>\d+)")
_ALTERNATIVES_RE = re.compile(r"\s+(?:or|and)\s+", flags=re.IGNORECASE)


def numeric_value(field: str, value: Any) -> int | None:
    """Read a cell as a number; list fields count their comma-separated items."""

    if field in LIST_FIELDS:
        return len(split_list(value))
    return coerce_int(value)


def _compare(left: int, op: Comparator, right: int) -> bool:
    if op == ">":
        return left > right
    if op == "<":
        return left < right
    return left == right


def compare_rows(rows: Sequence[Row], field_term: str, op: Comparator, value: int | str) -> list[Row]:
    """Filter rows by `field op value`.

    Integer values compare numerically; string values match as case-insensitive substrings.
    """

    candidates = resolve_fields(field_term)
    matched: list[Row] = []
    for row in rows:
        found = lookup_field(row, candidates)
        if found is None or found[1] is None:
            continue
        field, cell = found

        if isinstance(value, int):
            number = numeric_value(field, cell)
            if number is not None and _compare(number, op, value):
                matched.append(row)
        elif str(value).lower() in str(cell).lower():
            matched.append(row)
    return matched


def group_rows(rows: Sequence[Row], group: str) -> list[Row]:
    """Rows whose first present group-like field contains `group`."""

    needle = group.lower()
    matched: list[Row] = []
    for row in rows:
        cell = next((row[f] for f in GROUP_FIELDS if not is_blank(row.get(f))), None)
        if cell is not None and needle in str(cell).lower():
            matched.append(row)
    return matched


def phase_rows(rows: Sequence[Row], phases: Sequence[int]) -> list[Row]:
    """Workers available in all requested phases, or tasks preferring any of them."""

    matched: list[Row] = []
    for row in rows:
        if not is_blank(row.get("AvailableSlots")):
            slots = parse_phase_list(row["AvailableSlots"])
            if slots is not None and all(p in slots for p in phases):
                matched.append(row)
        elif not is_blank(row.get("PreferredPhases")):
            preferred = parse_phase_list(row["PreferredPhases"])
            if preferred is not None and any(p in preferred for p in phases):
                matched.append(row)
    return matched


def skill_rows(rows: Sequence[Row], skills_text: str) -> list[Row]:
    """Rows whose skill field contains any of the "or"/"and" separated alternatives."""

    alternatives = [s.strip().lower() for s in _ALTERNATIVES_RE.split(skills_text) if s.strip()]
    if not alternatives:
        return []

    matched: list[Row] = []
    for row in rows:
        cell = next((row[f] for f in SKILL_FIELDS if not is_blank(row.get(f))), "")
        haystack = str(cell).lower()
        if any(skill in haystack for skill in alternatives):
            matched.append(row)
    return matched


def _priority_condition(condition: str) -> Callable[[Sequence[Row]], list[Row]] | None:
    match = _PRIORITY_LEVEL_RE.search(condition)
    if match:
        level = int(match.group("value"))
        return lambda rows: compare_rows(rows, "priority", "=", level)
    if "high priority" in condition:
        return lambda rows: compare_rows(rows, "priority", ">", 3)
    if "low priority" in condition:
        return lambda rows: compare_rows(rows, "priority", "<", 3)
    return None


def _threshold_condition(keyword: str) -> Callable[[str], Callable[[Sequence[Row]], list[Row]] | None]:
    def _build(condition: str) -> Callable[[Sequence[Row]], list[Row]] | None:
        if keyword not in condition:
            return None
        op = detect_comparator(condition)
        number = _NUMBER_RE.search(condition)
        if op is None or op == "=" or number is None:
            return None
        threshold = int(number.group())
        return lambda rows: compare_rows(rows, keyword, op, threshold)

    return _build


_CONDITION_HANDLERS: tuple[Callable[[str], Callable[[Sequence[Row]], list[Row]] | None], ...] = (
    _priority_condition,
    _threshold_condition("duration"),
    _threshold_condition("skills"),
)


def condition_rows(rows: Sequence[Row], condition: str) -> list[Row]:
    """Apply the first hand-coded condition handler that recognizes `condition`.

    Recognized: "priority [level] N", "high/low priority", "duration more/less than N",
    "skills more/fewer than N". Anything else matches nothing.
    """

    lowered = condition.lower()
    for handler in _CONDITION_HANDLERS:
        apply = handler(lowered)
        if apply is not None:
            return apply(rows)
    return []
