"""Loose cell-value coercion.

Rows carry whatever the upload produced: strings, numbers, JSON-encoded text or already-decoded
lists. These helpers read such values the same way everywhere and never raise.
"""

from __future__ import annotations

import json
import math
import re
from typing import Any

_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")


def is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, dict)):
        return not value
    return False


def describe(value: Any) -> str:
    """Render an offending value for a diagnostic message."""

    if is_blank(value):
        return "empty"
    return repr(value)


def coerce_int(value: Any) -> int | None:
    """Best-effort integer coercion.

    Strings are read up to the first non-digit ("12abc" -> 12, "3.7" -> 3). Booleans and
    non-finite numbers are rejected.
    """

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    match = _LEADING_INT_RE.match(str(value))
    if not match:
        return None
    return int(match.group(1))


def split_list(value: Any) -> list[str]:
    """Split a comma-separated cell (or an already-decoded list) into trimmed tokens."""

    if is_blank(value):
        return []
    items = value if isinstance(value, (list, tuple)) else str(value).split(",")
    tokens = (str(item).strip() for item in items)
    return [t for t in tokens if t]


def _decode(value: Any) -> Any:
    if isinstance(value, (list, dict)):
        return value
    return json.loads(str(value))


def _phase_number(item: Any) -> int | None:
    if isinstance(item, bool):
        return None
    if isinstance(item, float) and item.is_integer():
        item = int(item)
    if not isinstance(item, int) or item < 1:
        return None
    return item


def _decode_list(value: Any) -> list[Any] | None:
    try:
        decoded = _decode(value)
    except (ValueError, TypeError):
        return None
    return decoded if isinstance(decoded, list) else None


def parse_phase_list(value: Any) -> list[int] | None:
    """Decode a JSON array of positive integers, or `None` if malformed."""

    decoded = _decode_list(value)
    if decoded is None:
        return None

    phases: list[int] = []
    for item in decoded:
        phase = _phase_number(item)
        if phase is None:
            return None
        phases.append(phase)
    return phases


def valid_phases(value: Any) -> list[int]:
    """Positive-integer members of a decoded JSON array; other members are dropped."""

    decoded = _decode_list(value)
    if decoded is None:
        return []
    phases = (_phase_number(item) for item in decoded)
    return [phase for phase in phases if phase is not None]


def parse_json_object(value: Any) -> dict[str, Any] | None:
    try:
        decoded = _decode(value)
    except (ValueError, TypeError):
        return None
    return decoded if isinstance(decoded, dict) else None
