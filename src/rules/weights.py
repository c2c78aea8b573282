"""Priority-weight vocabulary and preset profiles.

Weights are owned by the operator and passed through unchanged; nothing here validates them.
"""

from __future__ import annotations

from enum import StrEnum

DEFAULT_WEIGHT = 50


class PriorityCriterion(StrEnum):
    """Criteria an operator can weight (0-100)."""

    priority_level = "priorityLevel"
    task_fulfillment = "taskFulfillment"
    fairness = "fairness"
    efficiency = "efficiency"
    deadline = "deadline"
    skill_match = "skillMatch"


class UnknownPresetError(ValueError):
    """Raised when a preset profile name is not known."""


def _profile(
        priority_level: int,
        task_fulfillment: int,
        fairness: int,
        efficiency: int,
        deadline: int,
        skill_match: int,
) -> dict[str, int]:
    return {
        PriorityCriterion.priority_level.value: priority_level,
        PriorityCriterion.task_fulfillment.value: task_fulfillment,
        PriorityCriterion.fairness.value: fairness,
        PriorityCriterion.efficiency.value: efficiency,
        PriorityCriterion.deadline.value: deadline,
        PriorityCriterion.skill_match.value: skill_match,
    }


PRESETS: dict[str, dict[str, int]] = {
    "balanced": _profile(50, 50, 50, 50, 50, 50),
    "priority-first": _profile(90, 70, 30, 40, 60, 50),
    "efficiency-focused": _profile(40, 60, 40, 90, 50, 80),
    "fair-distribution": _profile(30, 60, 90, 50, 40, 50),
}


def default_weights() -> dict[str, int]:
    return {criterion.value: DEFAULT_WEIGHT for criterion in PriorityCriterion}


def preset_weights(name: str) -> dict[str, int]:
    """Return a copy of a preset profile's weights.

    Raises:
        UnknownPresetError: If no preset has this name.
    """

    try:
        return dict(PRESETS[name])
    except KeyError as exc:
        raise UnknownPresetError(f"Unknown priority preset: {name}") from exc
