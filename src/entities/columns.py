"""Header normalization and dataset-kind detection.

Uploaded files arrive with arbitrary headers ("client_id", "Priority", "employee_name", ...).
Before validation every header that matches a known alias is renamed to its canonical field
name. Headers that match nothing are kept as-is so no data is lost.
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from typing import Any

from src.entities.schema import EntityKind

_NON_ALNUM_RE = re.compile(r"[^a-z0-9]")

COLUMN_ALIASES: dict[EntityKind, dict[str, tuple[str, ...]]] = {
    EntityKind.clients: {
        "ClientID": ("clientid", "client_id", "id", "client"),
        "ClientName": ("clientname", "client_name", "name", "company", "organization"),
        "PriorityLevel": ("prioritylevel", "priority_level", "priority", "urgency"),
        "RequestedTaskIDs": ("requestedtaskids", "requested_task_ids", "tasks", "task_ids"),
        "GroupTag": ("grouptag", "group_tag", "group", "category"),
        "AttributesJSON": ("attributesjson", "attributes_json", "attributes", "metadata"),
    },
    EntityKind.workers: {
        "WorkerID": ("workerid", "worker_id", "employeeid", "employee_id", "id"),
        "WorkerName": ("workername", "worker_name", "name", "employee_name"),
        "Skills": ("skills", "skill_set", "capabilities", "expertise"),
        "AvailableSlots": ("availableslots", "available_slots", "slots", "availability"),
        "MaxLoadPerPhase": ("maxloadperphase", "max_load_per_phase", "max_load", "capacity"),
        "WorkerGroup": ("workergroup", "worker_group", "group", "team"),
        "QualificationLevel": ("qualificationlevel", "qualification_level", "level", "seniority"),
    },
    EntityKind.tasks: {
        "TaskID": ("taskid", "task_id", "id", "job_id"),
        "TaskName": ("taskname", "task_name", "name", "title"),
        "Category": ("category", "type", "classification"),
        "Duration": ("duration", "time", "length", "phases"),
        "RequiredSkills": ("requiredskills", "required_skills", "skills", "skill_requirements"),
        "PreferredPhases": ("preferredphases", "preferred_phases", "phases", "timeline"),
        "MaxConcurrent": ("maxconcurrent", "max_concurrent", "concurrent", "parallel"),
    },
}

_FILENAME_KEYWORDS: tuple[tuple[EntityKind, tuple[str, ...]], ...] = (
    (EntityKind.clients, ("client",)),
    (EntityKind.workers, ("worker", "employee")),
    (EntityKind.tasks, ("task", "job")),
)

_ID_HEADER_HINTS: tuple[tuple[EntityKind, tuple[str, ...]], ...] = (
    (EntityKind.clients, ("clientid", "client_id")),
    (EntityKind.workers, ("workerid", "worker_id", "employeeid")),
    (EntityKind.tasks, ("taskid", "task_id", "jobid")),
)

_CONTENT_HEADER_HINTS: tuple[tuple[EntityKind, tuple[str, ...]], ...] = (
    (EntityKind.clients, ("prioritylevel", "requestedtaskids")),
    (EntityKind.workers, ("skills", "availableslots")),
    (EntityKind.tasks, ("duration", "requiredskills")),
)


def _squash(header: str) -> str:
    return _NON_ALNUM_RE.sub("", header.lower())


def detect_kind(filename: str, rows: Sequence[Mapping[str, Any]]) -> EntityKind | None:
    """Guess which kind of dataset a file holds.

    Filename keywords win; otherwise the first row's headers are inspected, ID headers
    before content headers. Returns `None` when nothing matches.
    """

    lowered = (filename or "").lower()
    for kind, keywords in _FILENAME_KEYWORDS:
        if any(k in lowered for k in keywords):
            return kind

    if not rows:
        return None

    headers = [str(h).lower() for h in rows[0]]
    for kind, hints in _ID_HEADER_HINTS:
        if any(hint in h for h in headers for hint in hints):
            return kind
    for kind, hints in _CONTENT_HEADER_HINTS:
        if any(hint in headers for hint in hints):
            return kind
    return None


def build_header_map(headers: Sequence[str], kind: EntityKind) -> dict[str, str]:
    """Map original headers to canonical field names for `kind`.

    When two canonical fields claim the same header the later one in the alias table wins.
    """

    header_map: dict[str, str] = {}
    for canonical, aliases in COLUMN_ALIASES[kind].items():
        squashed_aliases = {_squash(a) for a in aliases}
        matched = next((h for h in headers if _squash(h) in squashed_aliases), None)
        if matched is not None:
            header_map[matched] = canonical
    return header_map


def normalize_columns(rows: Sequence[Mapping[str, Any]], kind: EntityKind) -> list[dict[str, Any]]:
    """Return new rows with headers renamed to canonical field names."""

    if not rows:
        return []

    header_map = build_header_map([str(h) for h in rows[0]], kind)
    return [{header_map.get(str(key), str(key)): value for key, value in row.items()} for row in rows]
