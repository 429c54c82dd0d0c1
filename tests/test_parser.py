from __future__ import annotations

import pytest

from gocost.analyze.functions import analyze_source
from gocost.analyze.parser import ParseFailure, parse_source


@pytest.mark.parametrize(
    "src",
    [
        "",
        "\n\n",
        "// Package doc only.\n",
        "package main\n",
        "// Copyright notice.\n\npackage main\n\nimport \"fmt\"\n\nvar _ = fmt.Sprint\n",
    ],
)
def test_valid_files_without_functions(src: str) -> None:
    assert analyze_source(src) == []


def test_top_level_statement_is_rejected() -> None:
    with pytest.raises(ParseFailure) as excinfo:
        parse_source("package main\n\nfunc main() {}\n\nmain()\n")
    assert excinfo.value.line == 5


def test_missing_package_clause_is_rejected() -> None:
    with pytest.raises(ParseFailure) as excinfo:
        parse_source("func f() {\n\treturn\n}\n")
    assert excinfo.value.line == 1
    assert "package" in str(excinfo.value)


def test_import_after_declaration_is_rejected() -> None:
    with pytest.raises(ParseFailure) as excinfo:
        parse_source('package main\n\nfunc f() {}\n\nimport "fmt"\n')
    assert excinfo.value.line == 5


def test_syntax_error_reports_its_line() -> None:
    with pytest.raises(ParseFailure) as excinfo:
        parse_source("package main\n\nfunc f() {\n\tx := \n}\n")
    assert excinfo.value.line is not None
    assert str(excinfo.value).startswith(f"line {excinfo.value.line}:")
