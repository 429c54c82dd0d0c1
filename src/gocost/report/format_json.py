from __future__ import annotations

import json
from collections.abc import Iterable
from pathlib import Path

from gocost.analyze.functions import FunctionRecord

from .models import SCHEMA_VERSION, FileReport, GoCostReport, ParseFailureEntry


def records_to_json(records: Iterable[FunctionRecord]) -> str:
    """Compact single-line array, the form consumed by editor integrations."""
    return json.dumps([r.to_dict() for r in records], separators=(",", ":"))


def records_from_json(text: str) -> list[FunctionRecord]:
    raw = json.loads(text)
    if not isinstance(raw, list):
        raise ValueError("expected a JSON array of function records")
    return [FunctionRecord.from_dict(item) for item in raw if isinstance(item, dict)]


def report_to_json(report: GoCostReport) -> str:
    return json.dumps(report.to_dict(), indent=2)


def write_json(report: GoCostReport, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(report_to_json(report), encoding="utf-8")


def read_json(path: Path) -> GoCostReport:
    raw = json.loads(path.read_text(encoding="utf-8"))
    files = []
    for f in raw.get("files", []):
        functions = [FunctionRecord.from_dict(r) for r in f.get("functions", []) if isinstance(r, dict)]
        files.append(FileReport(file=str(f.get("file", "")), functions=functions))
    failures = []
    for p in raw.get("parse_failures", []):
        line = p.get("line")
        failures.append(
            ParseFailureEntry(
                file=str(p.get("file", "")),
                message=str(p.get("message", "")),
                line=int(line) if line is not None else None,
            )
        )
    return GoCostReport(
        schema_version=int(raw.get("schema_version", SCHEMA_VERSION)),
        generated_at=str(raw.get("generated_at", "")),
        root=str(raw.get("root", "")),
        files=files,
        parse_failures=failures,
    )
