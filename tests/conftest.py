"""Pytest configuration.

The repository uses a flat `src/` layout. This conftest ensures tests can import from the `src.*`
namespace when running `pytest` without installing the package, and provides a small consistent
client/worker/task fixture set.

Fixture capacity per phase: {1: 4, 2: 3, 3: 4}; task demand per phase: {1: 2, 2: 5, 3: 4}.
Phase 2 is therefore the only oversaturated phase.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any

import pytest

# Ensure `import src...` works when running pytest without installing the package.
REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT))

from src.entities.schema import Entity, EntityKind  # noqa: E402

CLIENT_ROWS: list[dict[str, Any]] = [
    {
        "ClientID": "C1",
        "ClientName": "Acme Corp",
        "PriorityLevel": "3",
        "RequestedTaskIDs": "T1,T2",
        "GroupTag": "GroupA",
        "AttributesJSON": '{"location": "NY", "budget": 100000}',
    },
    {
        "ClientID": "C2",
        "ClientName": "Globex",
        "PriorityLevel": 5,
        "RequestedTaskIDs": "T2",
        "GroupTag": "GroupB",
        "AttributesJSON": "",
    },
    {
        "ClientID": "C3",
        "ClientName": "Initech",
        "PriorityLevel": "1",
        "RequestedTaskIDs": "T3",
        "GroupTag": "GroupA",
    },
]

WORKER_ROWS: list[dict[str, Any]] = [
    {
        "WorkerID": "W1",
        "WorkerName": "Alice",
        "Skills": "Python,SQL,Docker,Kubernetes",
        "AvailableSlots": "[1, 2, 3]",
        "MaxLoadPerPhase": "2",
        "WorkerGroup": "TechTeam",
    },
    {
        "WorkerID": "W2",
        "WorkerName": "Bob",
        "Skills": "Java,SQL",
        "AvailableSlots": "[2]",
        "MaxLoadPerPhase": "1",
        "WorkerGroup": "OpsTeam",
    },
    {
        "WorkerID": "W3",
        "WorkerName": "Carol",
        "Skills": "JavaScript,React,CSS,HTML,Python",
        "AvailableSlots": "[1, 3]",
        "MaxLoadPerPhase": 2,
        "WorkerGroup": "TechTeam",
    },
]

TASK_ROWS: list[dict[str, Any]] = [
    {
        "TaskID": "T1",
        "TaskName": "Data pipeline",
        "Category": "Data",
        "Duration": "2",
        "RequiredSkills": "Python,SQL",
        "PreferredPhases": "[1, 2]",
        "MaxConcurrent": "2",
    },
    {
        "TaskID": "T2",
        "TaskName": "Landing page",
        "Category": "UI",
        "Duration": "1",
        "RequiredSkills": "React",
        "PreferredPhases": "[3]",
        "MaxConcurrent": "1",
    },
    {
        "TaskID": "T3",
        "TaskName": "Cluster rollout",
        "Category": "Ops",
        "Duration": "3",
        "RequiredSkills": "Kubernetes",
        "PreferredPhases": "[2, 3]",
        "MaxConcurrent": "1",
    },
]


def make_entity(kind: EntityKind, rows: list[dict[str, Any]]) -> Entity:
    return Entity(id=f"{kind.value}-test", kind=kind, rows=[dict(r) for r in rows])


@pytest.fixture
def clients() -> Entity:
    return make_entity(EntityKind.clients, CLIENT_ROWS)


@pytest.fixture
def workers() -> Entity:
    return make_entity(EntityKind.workers, WORKER_ROWS)


@pytest.fixture
def tasks() -> Entity:
    return make_entity(EntityKind.tasks, TASK_ROWS)


@pytest.fixture
def entities(clients: Entity, workers: Entity, tasks: Entity) -> list[Entity]:
    return [clients, workers, tasks]


@pytest.fixture
def entity_factory():
    """Build an `Entity` of a given kind from plain row dicts."""

    return make_entity
