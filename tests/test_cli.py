"""End-to-end tests for the command-line entry point (files in, JSON out)."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from src.cli import EXIT_NOT_READY, EXIT_OK, EXIT_USAGE, main
from src.entities.schema import Entity


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.chdir(tmp_path)
    for name in ("LOG_LEVEL", "PRIORITY_PRESET", "EXPORT_BLOCK_ON_WARNINGS"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def dataset_files(tmp_path: Path, entities: list[Entity]) -> list[str]:
    paths = []
    for entity in entities:
        path = tmp_path / f"{entity.kind.value}.json"
        path.write_text(json.dumps(entity.rows), encoding="utf-8")
        paths.append(str(path))
    return paths


def _stdout_json(capsys: pytest.CaptureFixture[str]) -> dict:
    return json.loads(capsys.readouterr().out)


def test_validate_reports_and_is_ready(dataset_files: list[str], capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["validate", *dataset_files]) == EXIT_OK

    report = _stdout_json(capsys)
    assert report["summary"]["ready"] is True
    assert report["summary"]["total_warnings"] == 1
    tasks = next(e for e in report["entities"] if e["kind"] == "tasks")
    assert tasks["warnings"][0]["kind"] == "phase_slot_saturation"
    assert tasks["errors"] == []


def test_validate_blocks_on_warnings_when_configured(
        dataset_files: list[str],
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
) -> None:
    monkeypatch.setenv("EXPORT_BLOCK_ON_WARNINGS", "true")

    assert main(["validate", *dataset_files]) == EXIT_NOT_READY
    assert _stdout_json(capsys)["summary"]["ready"] is False


def test_query_command(dataset_files: list[str], capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["query", "workers with skills more than 3", *dataset_files]) == EXIT_OK

    result = _stdout_json(capsys)
    assert result["pattern"] == "greater_than"
    assert [row["WorkerID"] for row in result["rows"]] == ["W1", "W3"]


def test_rule_command(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["rule", "T1 and T2 must run together"]) == EXIT_OK

    draft = _stdout_json(capsys)
    assert draft["kind"] == "coRun"
    assert draft["parameters"] == {"tasks": []}


def test_config_round_trips_exported_rules(
        tmp_path: Path,
        dataset_files: list[str],
        capsys: pytest.CaptureFixture[str],
) -> None:
    rules_path = tmp_path / "rules.json"
    rules_path.write_text(
        json.dumps([{"id": "rule-1", "type": "loadLimit", "name": "Ops cap", "parameters": {"maxSlotsPerPhase": 2}}]),
        encoding="utf-8",
    )

    assert main(["config", "--rules", str(rules_path), *dataset_files]) == EXIT_OK
    document = _stdout_json(capsys)
    assert document["businessRules"][0]["type"] == "loadLimit"
    assert document["priorityWeights"]["fairness"] == 50
    assert document["dataValidation"]["totalWarnings"] == 1

    exported = tmp_path / "exported.json"
    exported.write_text(json.dumps(document), encoding="utf-8")
    assert main(["config", "--rules", str(exported)]) == EXIT_OK
    assert _stdout_json(capsys)["businessRules"][0]["id"] == "rule-1"


def test_config_uses_preset_from_environment(
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
) -> None:
    monkeypatch.setenv("PRIORITY_PRESET", "priority-first")

    assert main(["config"]) == EXIT_OK
    assert _stdout_json(capsys)["priorityWeights"]["priorityLevel"] == 90


def test_missing_dataset_is_usage_error(tmp_path: Path) -> None:
    assert main(["validate", str(tmp_path / "nope.json")]) == EXIT_USAGE


def test_invalid_rule_file_is_usage_error(tmp_path: Path) -> None:
    rules_path = tmp_path / "rules.json"
    rules_path.write_text(json.dumps([{"type": "coRun", "name": ""}]), encoding="utf-8")

    assert main(["config", "--rules", str(rules_path)]) == EXIT_USAGE


def test_invalid_settings_are_usage_error(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PRIORITY_PRESET", "speedy")

    assert main(["rule", "anything"]) == EXIT_USAGE
