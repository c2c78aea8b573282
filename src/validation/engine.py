"""Validation engine.

`validate` runs the per-kind rule table over one dataset; `validate_phase_saturation` compares
aggregate worker capacity with aggregate task demand per phase across datasets. Both are pure:
the same input always yields the same diagnostics in the same order.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Sequence

from src.entities.schema import (
    Diagnostic,
    DiagnosticKind,
    Entity,
    EntityKind,
    Severity,
    find_entity,
)
from src.entities.values import coerce_int, is_blank, parse_phase_list, valid_phases
from src.validation.checks import (
    ValidationContext,
    check_identity,
    check_range,
    check_references,
    check_required_columns,
    check_structure,
)
from src.validation.specs import KIND_SPECS

PHASE_ANALYSIS_COLUMN = "Phase Analysis"


def validate(entity: Entity, all_entities: Sequence[Entity]) -> list[Diagnostic]:
    """Validate one dataset against its kind's rules and the other datasets.

    Order: missing columns first, then row by row (identity, ranges, encoded structures,
    references, plausibility checks).
    """

    spec = KIND_SPECS.get(entity.kind)
    if spec is None:
        return []

    context = ValidationContext.build(all_entities, spec.references)
    diagnostics = check_required_columns(entity.rows, spec.required_columns)
    seen_ids: set[str] = set()

    for row_num, row in enumerate(entity.rows, start=1):
        diagnostics.extend(check_identity(row, row_num, spec.id_field, seen_ids))

        for range_spec in spec.ranges:
            found = check_range(row, row_num, range_spec)
            if found is not None:
                diagnostics.append(found)

        for structure_spec in spec.structures:
            found = check_structure(row, row_num, structure_spec)
            if found is not None:
                diagnostics.append(found)

        for reference_spec in spec.references:
            diagnostics.extend(check_references(row, row_num, reference_spec, context))

        for check in spec.plausibility:
            diagnostics.extend(check(row, row_num, context))

    return diagnostics


def _phase_capacity(workers: Entity) -> dict[int, int]:
    capacity: dict[int, int] = defaultdict(int)
    for row in workers.rows:
        # Malformed members are already reported per row; the valid ones still count.
        slots = valid_phases(row.get("AvailableSlots"))
        if not slots:
            continue

        max_load = coerce_int(row.get("MaxLoadPerPhase")) or 1
        for phase in slots:
            capacity[phase] += max_load
    return capacity


def validate_phase_saturation(all_entities: Sequence[Entity]) -> list[Diagnostic]:
    """Warn for every phase whose task demand exceeds worker capacity.

    Tasks with unparseable preferred phases get their own warning instead of being skipped.
    """

    tasks = find_entity(all_entities, EntityKind.tasks)
    workers = find_entity(all_entities, EntityKind.workers)
    if tasks is None or workers is None:
        return []

    diagnostics: list[Diagnostic] = []
    capacity = _phase_capacity(workers)
    demand: dict[int, int] = defaultdict(int)

    for row_num, row in enumerate(tasks.rows, start=1):
        raw_phases = row.get("PreferredPhases")
        if is_blank(raw_phases) or is_blank(row.get("Duration")):
            continue

        phases = parse_phase_list(raw_phases)
        if phases is None:
            diagnostics.append(
                Diagnostic(
                    row=row_num,
                    column="PreferredPhases",
                    kind=DiagnosticKind.phase_slot_saturation,
                    message="Cannot calculate phase demand due to malformed PreferredPhases",
                    severity=Severity.warning,
                )
            )
            continue

        duration = coerce_int(row.get("Duration")) or 0
        for phase in phases:
            demand[phase] += duration

    for phase in sorted(demand):
        phase_demand = demand[phase]
        phase_capacity = capacity.get(phase, 0)
        if phase_demand > phase_capacity:
            diagnostics.append(
                Diagnostic(
                    row=1,
                    column=PHASE_ANALYSIS_COLUMN,
                    kind=DiagnosticKind.phase_slot_saturation,
                    message=(
                        f"Phase {phase} is oversaturated: "
                        f"demand ({phase_demand}) > capacity ({phase_capacity})"
                    ),
                    severity=Severity.warning,
                )
            )

    return diagnostics
