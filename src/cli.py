"""Command-line entry point.

Sub-commands:
    validate  Validate datasets and print a JSON report (exit 1 when not export-ready).
    query     Run a natural-language query over datasets.
    rule      Interpret a free-text rule description into a rule draft.
    config    Print the rules configuration document.

Every dataset argument is a JSON rows file; its kind is detected from the file name or headers.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from pydantic import ValidationError

from src.app import App, create_app
from src.config.logging import configure_logging
from src.config.settings import load_settings
from src.entities.loader import DatasetLoadError, load_entity
from src.entities.schema import BusinessRule, Entity
from src.query.engine import query
from src.rules.export import build_rules_config
from src.rules.interpreter import interpret
from src.validation.pipeline import annotate_entities
from src.validation.report import summarize

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_NOT_READY = 1
EXIT_USAGE = 2


def _emit(payload: Any) -> None:
    sys.stdout.write(json.dumps(payload, indent=2, ensure_ascii=False, default=str) + "\n")


def _load_entities(paths: Sequence[str]) -> list[Entity]:
    return [load_entity(path) for path in paths]


def _load_rules(path: str | None) -> list[BusinessRule]:
    if not path:
        return []
    try:
        payload = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise DatasetLoadError(f"Cannot read rules file {path}: {exc}") from exc
    if isinstance(payload, dict):
        payload = payload.get("businessRules", payload.get("rules", []))
    if not isinstance(payload, list):
        raise DatasetLoadError(f"Unexpected rules format in {path}: expected a list of rules")
    return [BusinessRule.model_validate(_rule_fields(item)) for item in payload]


def _rule_fields(item: Any) -> Any:
    # Exported documents name the kind "type".
    if isinstance(item, dict) and "type" in item and "kind" not in item:
        item = {**item, "kind": item["type"]}
        del item["type"]
    return item


def _run_validate(app: App, args: argparse.Namespace) -> int:
    entities = annotate_entities(_load_entities(args.datasets))
    summary = summarize(entities, block_on_warnings=app.settings.export_block_on_warnings)
    _emit(
        {
            "summary": summary.model_dump(mode="json"),
            "entities": [
                {
                    "id": e.id,
                    "kind": e.kind.value,
                    "rows": len(e.rows),
                    "errors": [d.model_dump(mode="json") for d in e.errors],
                    "warnings": [d.model_dump(mode="json") for d in e.warnings],
                }
                for e in entities
            ],
        }
    )
    return EXIT_OK if summary.ready else EXIT_NOT_READY


def _run_query(app: App, args: argparse.Namespace) -> int:
    result = query(args.text, _load_entities(args.datasets))
    _emit(result.model_dump(mode="json"))
    return EXIT_OK


def _run_rule(app: App, args: argparse.Namespace) -> int:
    _emit(interpret(args.text).model_dump(mode="json"))
    return EXIT_OK


def _run_config(app: App, args: argparse.Namespace) -> int:
    entities = annotate_entities(_load_entities(args.datasets))
    _emit(build_rules_config(_load_rules(args.rules), app.weights, entities))
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="data-alchemist",
        description="Validate client/worker/task datasets, query them and draft business rules.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    validate_cmd = sub.add_parser("validate", help="Validate datasets and print a JSON report.")
    validate_cmd.add_argument("datasets", nargs="+", help="JSON rows files (clients, workers, tasks).")
    validate_cmd.set_defaults(handler=_run_validate)

    query_cmd = sub.add_parser("query", help="Run a natural-language query.")
    query_cmd.add_argument("text", help='Question, e.g. "workers with skills more than 3".')
    query_cmd.add_argument("datasets", nargs="+", help="JSON rows files to search.")
    query_cmd.set_defaults(handler=_run_query)

    rule_cmd = sub.add_parser("rule", help="Interpret a rule description.")
    rule_cmd.add_argument("text", help='Description, e.g. "T1 and T2 must run together".')
    rule_cmd.set_defaults(handler=_run_rule)

    config_cmd = sub.add_parser("config", help="Print the rules configuration document.")
    config_cmd.add_argument("datasets", nargs="*", help="JSON rows files to summarize.")
    config_cmd.add_argument("--rules", help="JSON file with a list of business rules.")
    config_cmd.set_defaults(handler=_run_config)

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """CLI entry point; returns the process exit code."""

    args = build_parser().parse_args(argv)

    load_dotenv(".env")
    try:
        settings = load_settings()
    except RuntimeError as exc:
        sys.stderr.write(f"{exc}\n")
        return EXIT_USAGE
    configure_logging(settings.log_level)

    app = create_app(settings)
    try:
        return args.handler(app, args)
    except (DatasetLoadError, ValidationError) as exc:
        logger.error("command failed command=%s reason=%s", args.command, exc)
        return EXIT_USAGE


if __name__ == "__main__":
    raise SystemExit(main())
