"""Generic check primitives shared by every dataset kind.

Each primitive inspects one row (or the header set) and returns the diagnostics it found. None of
them raise on bad data: unparseable values are themselves findings.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from src.entities.schema import (
    Diagnostic,
    DiagnosticKind,
    Entity,
    EntityKind,
    Severity,
    find_entity,
)
from src.entities.values import (
    coerce_int,
    describe,
    is_blank,
    parse_json_object,
    parse_phase_list,
    split_list,
)

if TYPE_CHECKING:
    from src.validation.specs import RangeSpec, ReferenceSpec, StructureSpec

Row = Mapping[str, Any]


@dataclass(frozen=True)
class ValidationContext:
    """Cross-collection lookups computed once per validation call."""

    id_sets: dict[tuple[EntityKind, str], frozenset[str]] = field(default_factory=dict)
    worker_skills: tuple[frozenset[str], ...] = ()

    @property
    def all_worker_skills(self) -> frozenset[str]:
        return frozenset().union(*self.worker_skills)

    @classmethod
    def build(cls, all_entities: Sequence[Entity], references: Sequence[ReferenceSpec]) -> ValidationContext:
        id_sets: dict[tuple[EntityKind, str], frozenset[str]] = {}
        for ref in references:
            target = find_entity(all_entities, ref.target_kind)
            rows = target.rows if target is not None else []
            id_sets[(ref.target_kind, ref.target_field)] = frozenset(
                str(r.get(ref.target_field)).strip() for r in rows if not is_blank(r.get(ref.target_field))
            )

        workers = find_entity(all_entities, EntityKind.workers)
        worker_skills = tuple(
            frozenset(split_list(r.get("Skills"))) for r in (workers.rows if workers else [])
        )
        return cls(id_sets=id_sets, worker_skills=worker_skills)


def _diagnostic(
        row: int,
        column: str,
        kind: DiagnosticKind,
        message: str,
        severity: Severity = Severity.error,
) -> Diagnostic:
    return Diagnostic(row=row, column=column, kind=kind, message=message, severity=severity)


def check_required_columns(rows: Sequence[Row], required: Sequence[str]) -> list[Diagnostic]:
    """Report canonical columns absent from the first row's headers."""

    if not rows:
        return []

    available = set(rows[0])
    return [
        _diagnostic(1, column, DiagnosticKind.missing_column, f"Required column '{column}' is missing")
        for column in required
        if column not in available
    ]


def check_identity(row: Row, row_num: int, id_field: str, seen: set[str]) -> list[Diagnostic]:
    """Require a non-empty id and flag every repeat after its first occurrence."""

    value = row.get(id_field)
    if is_blank(value):
        return [_diagnostic(row_num, id_field, DiagnosticKind.missing_value, f"{id_field} is required")]

    key = repr(value)
    if key in seen:
        return [_diagnostic(row_num, id_field, DiagnosticKind.duplicate_id, f"Duplicate {id_field}: {value}")]
    seen.add(key)
    return []


def check_range(row: Row, row_num: int, spec: RangeSpec) -> Diagnostic | None:
    raw = row.get(spec.field)
    value = coerce_int(raw)
    if value is not None and value >= spec.minimum and (spec.maximum is None or value <= spec.maximum):
        return None

    if spec.maximum is not None:
        expected = f"between {spec.minimum} and {spec.maximum}"
    elif spec.minimum == 1:
        expected = "a positive integer"
    else:
        expected = f"an integer of at least {spec.minimum}"
    return _diagnostic(
        row_num,
        spec.field,
        DiagnosticKind.invalid_range,
        f"{spec.field} must be {expected} (got {describe(raw)})",
    )


def check_structure(row: Row, row_num: int, spec: StructureSpec) -> Diagnostic | None:
    """Validate an optional JSON-encoded cell against its expected shape."""

    raw = row.get(spec.field)
    if is_blank(raw):
        return None

    if spec.shape == "object":
        if parse_json_object(raw) is not None:
            return None
        return _diagnostic(
            row_num,
            spec.field,
            DiagnosticKind.invalid_json,
            f"Invalid JSON object in {spec.field}: {describe(raw)}",
        )

    if parse_phase_list(raw) is not None:
        return None
    return _diagnostic(
        row_num,
        spec.field,
        DiagnosticKind.malformed_list,
        f"{spec.field} must be a valid JSON array of phase numbers (got {describe(raw)})",
    )


def check_references(
        row: Row,
        row_num: int,
        spec: ReferenceSpec,
        context: ValidationContext,
) -> list[Diagnostic]:
    known = context.id_sets.get((spec.target_kind, spec.target_field), frozenset())
    return [
        _diagnostic(
            row_num,
            spec.field,
            DiagnosticKind.unknown_reference,
            f"Unknown {spec.target_field} reference: {token}",
        )
        for token in split_list(row.get(spec.field))
        if token not in known
    ]


def check_worker_capacity(row: Row, row_num: int, context: ValidationContext) -> list[Diagnostic]:
    """Warn when a worker declares a per-phase load larger than its slot count."""

    raw_slots = row.get("AvailableSlots")
    if is_blank(raw_slots):
        return []
    slots = parse_phase_list(raw_slots)
    max_load = coerce_int(row.get("MaxLoadPerPhase"))
    if slots is None or max_load is None or len(slots) >= max_load:
        return []

    return [
        _diagnostic(
            row_num,
            "MaxLoadPerPhase",
            DiagnosticKind.overloaded_worker,
            f"MaxLoadPerPhase ({max_load}) exceeds available slots ({len(slots)})",
            Severity.warning,
        )
    ]


def check_skill_coverage(row: Row, row_num: int, context: ValidationContext) -> list[Diagnostic]:
    required = split_list(row.get("RequiredSkills"))
    covered = context.all_worker_skills
    uncovered = [skill for skill in required if skill not in covered]
    if not uncovered:
        return []

    return [
        _diagnostic(
            row_num,
            "RequiredSkills",
            DiagnosticKind.skill_coverage,
            f"No workers have these required skills: {', '.join(uncovered)}",
            Severity.warning,
        )
    ]


def check_concurrency_feasibility(row: Row, row_num: int, context: ValidationContext) -> list[Diagnostic]:
    """Warn when fewer qualified workers exist than the task's MaxConcurrent."""

    required = set(split_list(row.get("RequiredSkills")))
    max_concurrent = coerce_int(row.get("MaxConcurrent"))
    if not required or max_concurrent is None:
        return []

    qualified = sum(1 for skills in context.worker_skills if skills & required)
    if qualified >= max_concurrent:
        return []

    return [
        _diagnostic(
            row_num,
            "MaxConcurrent",
            DiagnosticKind.max_concurrency_feasibility,
            f"MaxConcurrent ({max_concurrent}) exceeds qualified workers ({qualified})",
            Severity.warning,
        )
    ]
