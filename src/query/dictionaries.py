"""English dictionaries for entity kinds, fields and comparators.

These mappings are used by the query patterns and should remain small and deterministic.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Literal

from src.entities.schema import EntityKind

Comparator = Literal[">", "<", "="]

ENTITY_SYNONYMS: dict[EntityKind, tuple[str, ...]] = {
    EntityKind.clients: ("client", "clients"),
    EntityKind.workers: ("worker", "workers", "employee", "employees"),
    EntityKind.tasks: ("task", "tasks", "job", "jobs"),
}

TERM_TO_ENTITY_KIND: dict[str, EntityKind] = {
    term: kind for kind, terms in ENTITY_SYNONYMS.items() for term in terms
}

FIELD_SYNONYMS: dict[str, tuple[str, ...]] = {
    "priority": ("PriorityLevel",),
    "duration": ("Duration",),
    "skills": ("Skills", "RequiredSkills"),
    "skill": ("Skills", "RequiredSkills"),
    "load": ("MaxLoadPerPhase",),
    "concurrent": ("MaxConcurrent",),
}

# Comma-separated fields compared by item count rather than by value.
LIST_FIELDS: frozenset[str] = frozenset({"Skills", "RequiredSkills"})

GROUP_FIELDS: tuple[str, ...] = ("GroupTag", "WorkerGroup", "Category")
SKILL_FIELDS: tuple[str, ...] = ("Skills", "RequiredSkills")

COMPARATOR_SYNONYMS: dict[Comparator, tuple[str, ...]] = {
    ">": ("more than", "greater than", "longer than", "over", "above"),
    "<": ("less than", "fewer than", "shorter than", "under", "below"),
    "=": ("equal to", "equals", "exactly"),
}


@dataclass(frozen=True)
class ComparatorMatch:
    """A concrete phrase matched to a canonical comparator operator."""

    op: Comparator
    phrase: str


_COMPARATOR_MATCHES: list[ComparatorMatch] = sorted(
    (ComparatorMatch(op=op, phrase=phrase) for op, phrases in COMPARATOR_SYNONYMS.items() for phrase in phrases),
    key=lambda m: (-len(m.phrase), m.phrase),
)


def resolve_entity_kind(term: str) -> EntityKind | None:
    """Map a user word ("employee", "Jobs", ...) to a dataset kind."""

    return TERM_TO_ENTITY_KIND.get((term or "").strip().lower())


def resolve_fields(term: str) -> tuple[str, ...]:
    """Map a user word to candidate canonical field names (the word itself if unknown)."""

    return FIELD_SYNONYMS.get((term or "").strip().lower(), (term,))


def lookup_field(row: Mapping[str, Any], candidates: tuple[str, ...]) -> tuple[str, Any] | None:
    """Return `(field, value)` for the first candidate present in the row.

    Exact keys are tried first, then a case-insensitive match against the row's keys.
    """

    for candidate in candidates:
        if candidate in row:
            return candidate, row[candidate]

    lowered = {str(key).lower(): key for key in row}
    for candidate in candidates:
        key = lowered.get(candidate.lower())
        if key is not None:
            return key, row[key]
    return None


def detect_comparator(text: str) -> Comparator | None:
    """Detect a comparator phrase in text (>, <, =)."""

    padded = f" {(text or '').lower()} "
    for match in _COMPARATOR_MATCHES:
        if f" {match.phrase} " in padded:
            return match.op
    return None
