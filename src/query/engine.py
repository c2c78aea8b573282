"""Natural-language query engine (pattern table first; text search fallback).

The engine never fails: an unmatched query falls back to a substring search, and a matched query
whose dataset is missing simply returns no rows.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from src.entities.schema import SOURCE_KIND_KEY, Entity, EntityKind, QueryResult
from src.query.normalize import normalize_query
from src.query.patterns import match_pattern

logger = logging.getLogger(__name__)

FALLBACK_EXPLANATION = "Used fallback text search across all entities"
EMPTY_QUERY_EXPLANATION = "Empty query"


def _tag(row: Mapping[str, Any], kind: EntityKind) -> dict[str, Any]:
    return {**row, SOURCE_KIND_KEY: kind.value}


def text_search(text: str, entities: Sequence[Entity]) -> list[dict[str, Any]]:
    """Case-insensitive substring search over every field of every row of every dataset."""

    needle = text.lower()
    results: list[dict[str, Any]] = []
    for entity in entities:
        for row in entity.rows:
            if any(value is not None and needle in str(value).lower() for value in row.values()):
                results.append(_tag(row, entity.kind))
    return results


def query(text: str, entities: Sequence[Entity]) -> QueryResult:
    """Answer a natural-language question with tagged copies of matching rows.

    Strategy:
        1) Try each pattern in order; the first match decides the filter.
        2) If no pattern matches, search all fields of all datasets for the text.
    """

    normalized = normalize_query(text)
    if not normalized:
        return QueryResult(rows=[], explanation=EMPTY_QUERY_EXPLANATION)

    matched = match_pattern(normalized)
    if matched is None:
        rows = text_search((text or "").strip(), entities)
        logger.debug("query fallback results=%d", len(rows))
        return QueryResult(rows=rows, explanation=FALLBACK_EXPLANATION, used_fallback=True)

    pattern, match = matched
    kind, rows = pattern.handler(match, entities)
    tagged = [_tag(row, kind) for row in rows] if kind is not None else []
    logger.debug("query pattern=%s kind=%s results=%d", pattern.name, kind, len(tagged))
    return QueryResult(
        rows=tagged,
        explanation=f"Processed using pattern '{pattern.name}': {pattern.description}",
        pattern=pattern.name,
    )
