"""Build datasets from already-decoded JSON row files.

Each file is expected to hold either a JSON array of objects or an object with a single
top-level key `"rows"` containing that array. Spreadsheet decoding happens upstream.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from src.entities.columns import detect_kind, normalize_columns
from src.entities.schema import Entity, EntityKind


class DatasetLoadError(ValueError):
    """Raised when a rows file cannot be turned into a dataset."""


def load_rows(path: str | Path) -> list[dict[str, Any]]:
    """Read decoded rows from a JSON file."""

    try:
        payload = json.loads(Path(path).read_bytes())
    except OSError as exc:
        raise DatasetLoadError(f"Cannot read {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise DatasetLoadError(f"{path} is not valid JSON: {exc}") from exc

    if isinstance(payload, dict) and isinstance(payload.get("rows"), list):
        payload = payload["rows"]

    if not isinstance(payload, list) or not all(isinstance(row, dict) for row in payload):
        raise DatasetLoadError(
            f"Unexpected dataset format in {path}: expected a list of objects or an object with key 'rows'"
        )
    return payload


def load_entity(path: str | Path, kind: EntityKind | None = None) -> Entity:
    """Load one dataset, detecting its kind when not given and normalizing its headers."""

    rows = load_rows(path)
    resolved = kind or detect_kind(Path(path).name, rows)
    if resolved is None:
        raise DatasetLoadError(f"Cannot tell whether {path} holds clients, workers or tasks")

    return Entity(
        id=f"{resolved.value}-{Path(path).stem}",
        kind=resolved,
        rows=normalize_columns(rows, resolved),
    )
