"""Rule description interpreter (keyword baseline).

This interpreter is intentionally shallow and deterministic:
    - it looks for a handful of keywords, first match wins,
    - it only proposes a rule kind and a parameter skeleton,
    - it never fails; unknown wording becomes a pattern-match rule.

The operator is expected to review and complete every draft.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from src.entities.schema import RuleDraft, RuleKind

DEFAULT_MAX_SLOTS_PER_PHASE = 5


@dataclass(frozen=True)
class RuleKindInfo:
    """Display name and one-line description of a rule kind."""

    name: str
    description: str


RULE_CATALOG: dict[RuleKind, RuleKindInfo] = {
    RuleKind.co_run: RuleKindInfo("Co-run Tasks", "Tasks that must run together"),
    RuleKind.slot_restriction: RuleKindInfo("Slot Restriction", "Minimum common slots for groups"),
    RuleKind.load_limit: RuleKindInfo("Load Limit", "Maximum slots per phase for workers"),
    RuleKind.phase_window: RuleKindInfo("Phase Window", "Allowed phases for specific tasks"),
    RuleKind.pattern_match: RuleKindInfo("Pattern Match", "Regex-based rules"),
    RuleKind.precedence: RuleKindInfo("Precedence Override", "Rule priority settings"),
}


@dataclass(frozen=True)
class _KeywordRule:
    keywords: tuple[str, ...]
    kind: RuleKind
    name: str
    parameters: Callable[[str], dict[str, Any]]


_KEYWORD_RULES: tuple[_KeywordRule, ...] = (
    _KeywordRule(
        keywords=("together", "co-run"),
        kind=RuleKind.co_run,
        name="Co-run Rule",
        parameters=lambda _text: {"tasks": []},
    ),
    _KeywordRule(
        keywords=("load", "limit"),
        kind=RuleKind.load_limit,
        name="Load Limit Rule",
        parameters=lambda _text: {"maxSlotsPerPhase": DEFAULT_MAX_SLOTS_PER_PHASE, "workerGroup": ""},
    ),
    _KeywordRule(
        keywords=("phase", "window"),
        kind=RuleKind.phase_window,
        name="Phase Window Rule",
        parameters=lambda _text: {"taskId": "", "allowedPhases": []},
    ),
)


def _pattern_match_parameters(text: str) -> dict[str, Any]:
    return {"pattern": "", "action": "apply", "sourceText": text}


def interpret(text: str | None) -> RuleDraft:
    """Turn a free-text rule description into a rule draft.

    The original text is always kept verbatim in `description`.
    """

    raw = text or ""
    lowered = raw.lower()

    for rule in _KEYWORD_RULES:
        if any(keyword in lowered for keyword in rule.keywords):
            return RuleDraft(
                kind=rule.kind,
                name=rule.name,
                description=raw,
                parameters=rule.parameters(raw),
            )

    return RuleDraft(
        kind=RuleKind.pattern_match,
        name="Custom Rule",
        description=raw,
        parameters=_pattern_match_parameters(raw),
    )
