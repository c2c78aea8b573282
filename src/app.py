"""Application composition root.

This module wires together configuration and the operator's default priority weights.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from src.config.settings import Settings
from src.rules.weights import preset_weights


@dataclass(frozen=True)
class App:
    """Shared dependencies for the command-line entry points."""

    settings: Settings
    weights: dict[str, int] = field(default_factory=dict)


def create_app(settings: Settings) -> App:
    """Create the application container with weights from the configured preset."""

    return App(settings=settings, weights=preset_weights(settings.priority_preset))
