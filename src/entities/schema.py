"""Entity, diagnostic and business-rule models (Pydantic).

These models are the contract between the validation engine, the interpreters and whatever
renders or exports the results. Diagnostics are always derived by the validation engine; they
are never authored by hand.
"""

from __future__ import annotations

import uuid
from collections.abc import Iterable
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

SOURCE_KIND_KEY = "_entityType"


class EntityKind(StrEnum):
    """Supported dataset kinds."""

    clients = "clients"
    workers = "workers"
    tasks = "tasks"


class Severity(StrEnum):
    """Diagnostic severity. Errors block export-readiness; warnings do not."""

    error = "error"
    warning = "warning"


class DiagnosticKind(StrEnum):
    """Closed vocabulary of validation findings."""

    missing_column = "missing_column"
    missing_value = "missing_value"
    duplicate_id = "duplicate_id"
    invalid_range = "invalid_range"
    invalid_json = "invalid_json"
    malformed_list = "malformed_list"
    unknown_reference = "unknown_reference"
    overloaded_worker = "overloaded_worker"
    skill_coverage = "skill_coverage"
    max_concurrency_feasibility = "max_concurrency_feasibility"
    phase_slot_saturation = "phase_slot_saturation"


class RuleKind(StrEnum):
    """Business-rule kinds an operator can declare."""

    co_run = "coRun"
    slot_restriction = "slotRestriction"
    load_limit = "loadLimit"
    phase_window = "phaseWindow"
    pattern_match = "patternMatch"
    precedence = "precedence"


class Diagnostic(BaseModel):
    """One validation finding tied to a row and column.

    `row` is 1-based; dataset-level findings (missing column, phase saturation) use `1`.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    row: int = Field(ge=1)
    column: str
    kind: DiagnosticKind
    message: str
    severity: Severity


class Entity(BaseModel):
    """One uploaded dataset: its kind, its rows and the diagnostics of the last validation."""

    model_config = ConfigDict(extra="forbid")

    id: str | None = None
    kind: EntityKind
    rows: list[dict[str, Any]] = Field(default_factory=list)
    errors: list[Diagnostic] = Field(default_factory=list)
    warnings: list[Diagnostic] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_partition(self) -> Entity:
        """Errors and warnings must be a severity partition of one diagnostic stream."""

        if any(d.severity != Severity.error for d in self.errors):
            raise ValueError("errors may only contain diagnostics with severity=error")
        if any(d.severity != Severity.warning for d in self.warnings):
            raise ValueError("warnings may only contain diagnostics with severity=warning")
        return self

    @property
    def diagnostics(self) -> list[Diagnostic]:
        return [*self.errors, *self.warnings]

    def with_diagnostics(self, diagnostics: Iterable[Diagnostic]) -> Entity:
        """Return a copy whose errors/warnings are regenerated from `diagnostics`."""

        stream = list(diagnostics)
        return self.model_copy(
            update={
                "errors": [d for d in stream if d.severity == Severity.error],
                "warnings": [d for d in stream if d.severity == Severity.warning],
            }
        )


def _new_rule_id() -> str:
    return f"rule-{uuid.uuid4().hex[:12]}"


class BusinessRule(BaseModel):
    """An operator-declared rule. Recorded and exported, never enforced by the core."""

    model_config = ConfigDict(extra="forbid")

    id: str = Field(default_factory=_new_rule_id)
    kind: RuleKind
    name: str = Field(min_length=1)
    description: str = ""
    parameters: dict[str, Any] = Field(default_factory=dict)


class RuleDraft(BaseModel):
    """A best-effort rule skeleton produced from free text, to be refined by an operator."""

    model_config = ConfigDict(extra="forbid")

    kind: RuleKind
    name: str
    description: str
    parameters: dict[str, Any] = Field(default_factory=dict)

    def to_rule(self) -> BusinessRule:
        return BusinessRule(
            kind=self.kind,
            name=self.name,
            description=self.description,
            parameters=dict(self.parameters),
        )


class QueryResult(BaseModel):
    """Rows matched by a natural-language query plus how they were found."""

    model_config = ConfigDict(extra="forbid")

    rows: list[dict[str, Any]] = Field(default_factory=list)
    explanation: str
    pattern: str | None = None
    used_fallback: bool = False


def find_entity(entities: Iterable[Entity], kind: EntityKind) -> Entity | None:
    """Return the first dataset of the given kind, if any."""

    return next((e for e in entities if e.kind == kind), None)
