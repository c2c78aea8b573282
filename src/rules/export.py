"""Rules configuration document.

Bundles business rules, priority weights and validation totals into one JSON-ready mapping for
whatever downstream allocator consumes it.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from datetime import UTC, datetime
from typing import Any

from src.entities.schema import BusinessRule, Entity

CONFIG_VERSION = "1.0"
GENERATED_BY = "Data Alchemist"


def build_rules_config(
        rules: Sequence[BusinessRule],
        weights: Mapping[str, Any],
        entities: Sequence[Entity],
        *,
        exported_at: datetime | None = None,
) -> dict[str, Any]:
    """Build the configuration document (keys match the established export format)."""

    stamp = exported_at or datetime.now(UTC)
    return {
        "metadata": {
            "exportedAt": stamp.isoformat(),
            "version": CONFIG_VERSION,
            "generatedBy": GENERATED_BY,
        },
        "businessRules": [
            {
                "id": rule.id,
                "type": rule.kind.value,
                "name": rule.name,
                "description": rule.description,
                "parameters": dict(rule.parameters),
            }
            for rule in rules
        ],
        "priorityWeights": dict(weights),
        "dataValidation": {
            "totalErrors": sum(len(e.errors) for e in entities),
            "totalWarnings": sum(len(e.warnings) for e in entities),
            "entitiesProcessed": len(entities),
        },
    }
