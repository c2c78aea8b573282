"""Annotate uploaded datasets with validation findings.

Every run regenerates diagnostics from scratch: each dataset is validated against the full set,
then phase-saturation findings are attached to the tasks dataset.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from src.entities.schema import Entity, EntityKind
from src.validation.engine import validate, validate_phase_saturation

logger = logging.getLogger(__name__)


def annotate_entities(entities: Sequence[Entity]) -> list[Entity]:
    """Return new datasets whose `errors`/`warnings` reflect a fresh validation pass."""

    annotated = [entity.with_diagnostics(validate(entity, entities)) for entity in entities]

    saturation = validate_phase_saturation(annotated)
    if saturation:
        for idx, entity in enumerate(annotated):
            if entity.kind == EntityKind.tasks:
                annotated[idx] = entity.with_diagnostics([*entity.diagnostics, *saturation])
                break

    for entity in annotated:
        logger.debug(
            "validated kind=%s rows=%d errors=%d warnings=%d",
            entity.kind,
            len(entity.rows),
            len(entity.errors),
            len(entity.warnings),
        )
    logger.info(
        "validation done entities=%d errors=%d warnings=%d",
        len(annotated),
        sum(len(e.errors) for e in annotated),
        sum(len(e.warnings) for e in annotated),
    )
    return annotated
