"""Validation summary, export-readiness and operator-facing fix suggestions."""

from __future__ import annotations

from collections import Counter
from collections.abc import Sequence

from pydantic import BaseModel, ConfigDict, Field

from src.entities.schema import DiagnosticKind, Entity

_DEFAULT_SUGGESTIONS: tuple[str, ...] = ("Review and correct the data value",)

SUGGESTIONS: dict[DiagnosticKind, tuple[str, ...]] = {
    DiagnosticKind.missing_column: (
        "Add the missing column to your data file",
        "Check if the column name is spelled correctly",
        "Ensure the column header matches expected format",
    ),
    DiagnosticKind.missing_value: (
        "Fill in the empty cell with a valid value",
        "Check if this field is truly required for this record",
        "Use a default value if appropriate",
    ),
    DiagnosticKind.duplicate_id: (
        "Give each record a unique identifier",
        "Remove the repeated record if it is an accidental copy",
    ),
    DiagnosticKind.invalid_range: (
        "Update the value to be within the valid range",
        "Check the documentation for acceptable values",
        "Consider if the range constraint is appropriate",
    ),
    DiagnosticKind.invalid_json: (
        "Fix the JSON syntax (check brackets, quotes, commas)",
        "Make sure the value is a JSON object, e.g. {\"key\": \"value\"}",
        "Consider simplifying the JSON structure",
    ),
    DiagnosticKind.malformed_list: (
        "Use a JSON array of phase numbers, e.g. [1, 2, 3]",
        "Phase numbers must be positive integers",
    ),
    DiagnosticKind.unknown_reference: (
        "Check the referenced ID for typos",
        "Add the missing record to the referenced dataset",
    ),
    DiagnosticKind.overloaded_worker: (
        "Lower MaxLoadPerPhase or add available slots for the worker",
    ),
    DiagnosticKind.skill_coverage: (
        "Add a worker with the missing skill",
        "Check that skill names are spelled the same in workers and tasks",
    ),
    DiagnosticKind.max_concurrency_feasibility: (
        "Lower MaxConcurrent to the number of qualified workers",
        "Add more workers with the required skills",
    ),
    DiagnosticKind.phase_slot_saturation: (
        "Spread task preferred phases over more phases",
        "Increase worker availability or load in the saturated phase",
    ),
}


def suggestions_for(kind: DiagnosticKind | str) -> list[str]:
    """Return fix suggestions for a diagnostic kind (generic advice for unknown kinds)."""

    try:
        key = DiagnosticKind(kind)
    except ValueError:
        return list(_DEFAULT_SUGGESTIONS)
    return list(SUGGESTIONS.get(key, _DEFAULT_SUGGESTIONS))


class ValidationSummary(BaseModel):
    """Totals across all validated datasets."""

    model_config = ConfigDict(extra="forbid")

    entities_processed: int
    total_errors: int
    total_warnings: int
    errors_by_kind: dict[str, int] = Field(default_factory=dict)
    warnings_by_kind: dict[str, int] = Field(default_factory=dict)
    ready: bool


def summarize(entities: Sequence[Entity], *, block_on_warnings: bool = False) -> ValidationSummary:
    """Summarize annotated datasets.

    `ready` is False when any error exists, and also on warnings if `block_on_warnings` is set.
    """

    errors = [d for e in entities for d in e.errors]
    warnings = [d for e in entities for d in e.warnings]
    ready = not errors and not (block_on_warnings and warnings)

    return ValidationSummary(
        entities_processed=len(entities),
        total_errors=len(errors),
        total_warnings=len(warnings),
        errors_by_kind=dict(Counter(d.kind.value for d in errors)),
        warnings_by_kind=dict(Counter(d.kind.value for d in warnings)),
        ready=ready,
    )
