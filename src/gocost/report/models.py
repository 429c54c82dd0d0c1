from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from gocost.analyze.functions import FunctionRecord

SCHEMA_VERSION = 1


@dataclass(frozen=True)
class ParseFailureEntry:
    file: str
    message: str
    line: int | None = None


@dataclass(frozen=True)
class FileReport:
    file: str
    functions: list[FunctionRecord] = field(default_factory=list)


@dataclass(frozen=True)
class GoCostReport:
    schema_version: int
    generated_at: str
    root: str
    files: list[FileReport]
    parse_failures: list[ParseFailureEntry] = field(default_factory=list)

    @property
    def functions_total(self) -> int:
        return sum(len(f.functions) for f in self.files)

    def to_dict(self) -> dict[str, Any]:
        return {
            "schema_version": self.schema_version,
            "generated_at": self.generated_at,
            "root": self.root,
            "files": [
                {"file": f.file, "functions": [r.to_dict() for r in f.functions]}
                for f in self.files
            ],
            "parse_failures": [
                {"file": p.file, "line": p.line, "message": p.message} for p in self.parse_failures
            ],
        }
