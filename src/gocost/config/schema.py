from __future__ import annotations

from dataclasses import dataclass, field

REPORT_FORMATS = {"json", "md"}


@dataclass(frozen=True)
class GoCostConfig:
    include: list[str] = field(default_factory=lambda: ["."])
    exclude: list[str] = field(default_factory=lambda: ["vendor", "testdata", ".git"])
    include_tests: bool = True
    max_files: int = 1000
    # Candidate rule for the inlining report.
    inline_budget: int = 80
    max_func_calls: int = 1
    only_inlineable: bool = False
    show_noinline: bool = False
    format: str = "json"
