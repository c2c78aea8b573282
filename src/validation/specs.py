"""Declarative per-kind validation tables.

The engine is generic; everything that differs between clients, workers and tasks lives here.
Supporting another dataset kind means adding one `KindSpec`.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Literal

from src.entities.schema import Diagnostic, EntityKind
from src.validation.checks import (
    ValidationContext,
    check_concurrency_feasibility,
    check_skill_coverage,
    check_worker_capacity,
)

Shape = Literal["list", "object"]
PlausibilityCheck = Callable[[dict[str, Any], int, ValidationContext], list[Diagnostic]]


@dataclass(frozen=True)
class RangeSpec:
    """An integer field bounded below (and optionally above), inclusive."""

    field: str
    minimum: int
    maximum: int | None = None


@dataclass(frozen=True)
class StructureSpec:
    """An optional JSON-encoded field and the shape it must decode to."""

    field: str
    shape: Shape


@dataclass(frozen=True)
class ReferenceSpec:
    """A comma-separated list of ids that must exist in another dataset."""

    field: str
    target_kind: EntityKind
    target_field: str


@dataclass(frozen=True)
class KindSpec:
    kind: EntityKind
    id_field: str
    required_columns: tuple[str, ...]
    ranges: tuple[RangeSpec, ...] = ()
    structures: tuple[StructureSpec, ...] = ()
    references: tuple[ReferenceSpec, ...] = ()
    plausibility: tuple[PlausibilityCheck, ...] = ()


KIND_SPECS: dict[EntityKind, KindSpec] = {
    EntityKind.clients: KindSpec(
        kind=EntityKind.clients,
        id_field="ClientID",
        required_columns=("ClientID", "ClientName", "PriorityLevel", "RequestedTaskIDs", "GroupTag"),
        ranges=(RangeSpec("PriorityLevel", minimum=1, maximum=5),),
        structures=(StructureSpec("AttributesJSON", shape="object"),),
        references=(ReferenceSpec("RequestedTaskIDs", EntityKind.tasks, "TaskID"),),
    ),
    EntityKind.workers: KindSpec(
        kind=EntityKind.workers,
        id_field="WorkerID",
        required_columns=("WorkerID", "WorkerName", "Skills", "AvailableSlots", "MaxLoadPerPhase"),
        ranges=(RangeSpec("MaxLoadPerPhase", minimum=1),),
        structures=(StructureSpec("AvailableSlots", shape="list"),),
        plausibility=(check_worker_capacity,),
    ),
    EntityKind.tasks: KindSpec(
        kind=EntityKind.tasks,
        id_field="TaskID",
        required_columns=("TaskID", "TaskName", "Duration", "RequiredSkills", "MaxConcurrent"),
        ranges=(
            RangeSpec("Duration", minimum=1),
            RangeSpec("MaxConcurrent", minimum=1),
        ),
        structures=(StructureSpec("PreferredPhases", shape="list"),),
        plausibility=(check_skill_coverage, check_concurrency_feasibility),
    ),
}
