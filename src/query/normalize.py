"""Text normalization for deterministic query matching."""

from __future__ import annotations

import re

_MULTISPACE_RE = re.compile(r"\s+")


def normalize_query(text: str | None) -> str:
    """Normalize a query before pattern matching.

    Normalization is intentionally conservative:
        - Strip surrounding whitespace.
        - Replace common unicode dashes and quotes with ASCII ones.
        - Collapse whitespace.

    Case is preserved; all patterns match case-insensitively.
    """

    value = (text or "").strip()
    value = value.replace("—", "-").replace("–", "-")
    value = value.replace("“", '"').replace("”", '"').replace("’", "'")
    return _MULTISPACE_RE.sub(" ", value)
