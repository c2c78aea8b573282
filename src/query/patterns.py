"""Ordered pattern table for natural-language queries.

Each pattern is a case-insensitive regular expression paired with a handler. The engine picks the
first pattern that matches; order therefore encodes priority (the generic "find X with ..." form
is tried before the narrower comparison forms).
"""

from __future__ import annotations

import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any

from src.entities.schema import Entity, EntityKind, find_entity
from src.query.dictionaries import Comparator, resolve_entity_kind
from src.query.filters import (
    compare_rows,
    condition_rows,
    group_rows,
    phase_rows,
    skill_rows,
)

Rows = list[dict[str, Any]]
Handler = Callable[[re.Match[str], Sequence[Entity]], tuple[EntityKind | None, Rows]]


@dataclass(frozen=True)
class QueryPattern:
    """A named regex plus the handler that turns its match into matching rows."""

    name: str
    regex: re.Pattern[str]
    description: str
    handler: Handler


def _target_rows(term: str, entities: Sequence[Entity]) -> tuple[EntityKind | None, Rows]:
    kind = resolve_entity_kind(term)
    if kind is None:
        return None, []
    entity = find_entity(entities, kind)
    return kind, (entity.rows if entity is not None else [])


def _condition(match: re.Match[str], entities: Sequence[Entity]) -> tuple[EntityKind | None, Rows]:
    kind, rows = _target_rows(match.group("kind"), entities)
    return kind, condition_rows(rows, match.group("condition"))


def _comparison(op: Comparator) -> Handler:
    def _handle(match: re.Match[str], entities: Sequence[Entity]) -> tuple[EntityKind | None, Rows]:
        kind, rows = _target_rows(match.group("kind"), entities)
        raw = match.group("value").strip()
        value: int | str = int(raw) if op != "=" else raw
        return kind, compare_rows(rows, match.group("field"), op, value)

    return _handle


def _group(match: re.Match[str], entities: Sequence[Entity]) -> tuple[EntityKind | None, Rows]:
    kind, rows = _target_rows(match.group("kind"), entities)
    return kind, group_rows(rows, match.group("group"))


def _phase(match: re.Match[str], entities: Sequence[Entity]) -> tuple[EntityKind | None, Rows]:
    kind, rows = _target_rows(match.group("kind"), entities)
    phases = [int(p) for p in (match.group("p1"), match.group("p2")) if p]
    return kind, phase_rows(rows, phases)


def _skill(match: re.Match[str], entities: Sequence[Entity]) -> tuple[EntityKind | None, Rows]:
    kind, rows = _target_rows(match.group("kind"), entities)
    return kind, skill_rows(rows, match.group("skills"))


def _compile(pattern: str) -> re.Pattern[str]:
    return re.compile(pattern, flags=re.IGNORECASE)


PATTERNS: tuple[QueryPattern, ...] = (
    QueryPattern(
        name="condition",
        regex=_compile(r"\b(?:all|find|show|get)\s+(?P<kind>\w+)\s+(?:with|having|where)\s+(?P<condition>.+)"),
        description="Find entities with specific conditions",
        handler=_condition,
    ),
    QueryPattern(
        name="greater_than",
        regex=_compile(
            r"\b(?P<kind>\w+)\s+(?:with|having)\s+(?P<field>\w+)\s+"
            r"(?:more than|greater than|>)\s+(?P<value>\d+)"
        ),
        description="Find entities with numeric comparisons",
        handler=_comparison(">"),
    ),
    QueryPattern(
        name="less_than",
        regex=_compile(
            r"\b(?P<kind>\w+)\s+(?:with|having)\s+(?P<field>\w+)\s+"
            r"(?:less than|fewer than|<)\s+(?P<value>\d+)"
        ),
        description="Find entities with numeric comparisons",
        handler=_comparison("<"),
    ),
    QueryPattern(
        name="equal_to",
        regex=_compile(
            r"\b(?P<kind>\w+)\s+(?:with|having)\s+(?P<field>\w+)\s+"
            r"(?:equal to|equals|=)\s+(?P<value>.+)"
        ),
        description="Find entities with exact matches",
        handler=_comparison("="),
    ),
    QueryPattern(
        name="group",
        regex=_compile(r"\b(?P<kind>\w+)\s+(?:in|from)\s+(?:group|team)\s+(?P<group>\w+)"),
        description="Find entities in specific groups",
        handler=_group,
    ),
    QueryPattern(
        name="phase",
        regex=_compile(
            r"\b(?P<kind>\w+)\s+(?:available|working)\s+(?:in|during)\s+phase\s+"
            r"(?P<p1>\d+)(?:\s+and\s+(?P<p2>\d+))?"
        ),
        description="Find entities available in specific phases",
        handler=_phase,
    ),
    QueryPattern(
        name="skill",
        regex=_compile(r"\b(?P<kind>\w+)\s+(?:requiring|needing|with)\s+(?:skill|skills)\s+(?P<skills>.+)"),
        description="Find entities with specific skills",
        handler=_skill,
    ),
)


def match_pattern(text: str) -> tuple[QueryPattern, re.Match[str]] | None:
    """Return the first pattern matching `text` together with its match object."""

    for pattern in PATTERNS:
        match = pattern.regex.search(text)
        if match:
            return pattern, match
    return None
