"""Tests for natural-language query patterns and the text-search fallback."""

from __future__ import annotations

import copy

import pytest

from src.entities.schema import SOURCE_KIND_KEY, Entity, EntityKind
from src.query.engine import EMPTY_QUERY_EXPLANATION, FALLBACK_EXPLANATION, query
from src.query.patterns import PATTERNS, match_pattern


def _ids(result_rows: list[dict], field: str) -> list[str]:
    return [row[field] for row in result_rows]


def test_pattern_table_order() -> None:
    assert [p.name for p in PATTERNS] == [
        "condition",
        "greater_than",
        "less_than",
        "equal_to",
        "group",
        "phase",
        "skill",
    ]


def test_skill_count_comparison(entities: list[Entity]) -> None:
    result = query("workers with skills more than 3", entities)

    assert result.pattern == "greater_than"
    assert result.used_fallback is False
    assert _ids(result.rows, "WorkerID") == ["W1", "W3"]
    assert all(row[SOURCE_KIND_KEY] == "workers" for row in result.rows)
    assert result.explanation == "Processed using pattern 'greater_than': Find entities with numeric comparisons"

    repeated = query("workers with skills more than 3", entities)
    assert repeated.rows == result.rows


def test_patterns_are_case_insensitive(entities: list[Entity]) -> None:
    result = query("WORKERS WITH SKILLS MORE THAN 3", entities)

    assert _ids(result.rows, "WorkerID") == ["W1", "W3"]


def test_less_than_on_task_duration(entities: list[Entity]) -> None:
    result = query("tasks with duration less than 2", entities)

    assert result.pattern == "less_than"
    assert _ids(result.rows, "TaskID") == ["T2"]


def test_equal_to_matches_substring(entities: list[Entity]) -> None:
    result = query("clients with groupTag equal to groupa", entities)

    assert result.pattern == "equal_to"
    assert _ids(result.rows, "ClientID") == ["C1", "C3"]


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("find clients with high priority", ["C2"]),
        ("show clients with low priority", ["C3"]),
        ("all clients with priority level 3", ["C1"]),
        ("get clients where priority 5", ["C2"]),
    ],
)
def test_priority_conditions(entities: list[Entity], text: str, expected: list[str]) -> None:
    result = query(text, entities)

    assert result.pattern == "condition"
    assert _ids(result.rows, "ClientID") == expected


def test_duration_and_skill_conditions(entities: list[Entity]) -> None:
    assert _ids(query("find tasks with duration more than 1", entities).rows, "TaskID") == ["T1", "T3"]
    assert _ids(query("find workers with skills fewer than 3", entities).rows, "WorkerID") == ["W2"]


def test_unrecognized_condition_matches_nothing(entities: list[Entity]) -> None:
    result = query("find tasks with a blue label", entities)

    assert result.pattern == "condition"
    assert result.rows == []
    assert result.used_fallback is False


def test_group_pattern(entities: list[Entity]) -> None:
    assert _ids(query("workers in group TechTeam", entities).rows, "WorkerID") == ["W1", "W3"]
    assert _ids(query("clients from team groupb", entities).rows, "ClientID") == ["C2"]
    assert _ids(query("tasks in group ops", entities).rows, "TaskID") == ["T3"]


def test_phase_pattern_workers_need_every_phase(entities: list[Entity]) -> None:
    assert _ids(query("workers available in phase 2", entities).rows, "WorkerID") == ["W1", "W2"]
    assert _ids(query("workers available in phase 1 and 3", entities).rows, "WorkerID") == ["W1", "W3"]


def test_phase_pattern_tasks_need_any_phase(entities: list[Entity]) -> None:
    result = query("tasks working during phase 3", entities)

    assert _ids(result.rows, "TaskID") == ["T2", "T3"]


def test_skill_pattern_is_loose(entities: list[Entity]) -> None:
    result = query("workers with skill Java", entities)

    assert result.pattern == "skill"
    # "Java" is a substring of "JavaScript".
    assert _ids(result.rows, "WorkerID") == ["W2", "W3"]


def test_skill_alternatives_and_job_synonym(entities: list[Entity]) -> None:
    result = query("jobs requiring skills React or Kubernetes", entities)

    assert _ids(result.rows, "TaskID") == ["T2", "T3"]
    assert all(row[SOURCE_KIND_KEY] == "tasks" for row in result.rows)


def test_unknown_entity_word_returns_no_rows(entities: list[Entity]) -> None:
    result = query("find robots with high priority", entities)

    assert result.pattern == "condition"
    assert result.rows == []


def test_missing_dataset_returns_no_rows(clients: Entity) -> None:
    result = query("workers in group TechTeam", [clients])

    assert result.pattern == "group"
    assert result.rows == []


def test_fallback_text_search(entities: list[Entity]) -> None:
    result = query("Globex", entities)

    assert result.used_fallback is True
    assert result.pattern is None
    assert result.explanation == FALLBACK_EXPLANATION
    assert _ids(result.rows, "ClientID") == ["C2"]
    assert result.rows[0][SOURCE_KIND_KEY] == "clients"


def test_fallback_searches_every_dataset(entities: list[Entity]) -> None:
    result = query("python", entities)

    assert [row[SOURCE_KIND_KEY] for row in result.rows] == ["workers", "workers", "tasks"]


def test_empty_query(entities: list[Entity]) -> None:
    result = query("   ", entities)

    assert result.rows == []
    assert result.explanation == EMPTY_QUERY_EXPLANATION
    assert result.used_fallback is False


def test_results_are_copies(entities: list[Entity]) -> None:
    before = copy.deepcopy([e.rows for e in entities])

    result = query("workers with skills more than 3", entities)
    result.rows[0]["WorkerName"] = "Changed"

    assert [e.rows for e in entities] == before
    assert all(SOURCE_KIND_KEY not in row for e in entities for row in e.rows)


def test_match_pattern_returns_none_for_free_text() -> None:
    assert match_pattern("quarterly budget") is None


@pytest.mark.parametrize(
    ("text", "row_value"),
    [
        ("O’Brien", "O’Brien Ltd"),
        ("ETL  nightly", "ETL  nightly batch"),
        ("Q1–Q2", "Q1–Q2 roadmap"),
    ],
)
def test_fallback_searches_the_typed_text(entity_factory, text: str, row_value: str) -> None:
    rows = [{"TaskID": "T1", "TaskName": row_value}, {"TaskID": "T2", "TaskName": "x"}]
    tasks = entity_factory(EntityKind.tasks, rows)

    result = query(f"  {text} ", [tasks])

    assert result.used_fallback is True
    assert _ids(result.rows, "TaskID") == ["T1"]
