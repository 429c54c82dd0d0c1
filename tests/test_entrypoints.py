from __future__ import annotations

from pathlib import Path

from gocost.analyze.entrypoints import discover_files
from gocost.config.schema import GoCostConfig

GO_SRC = "package p\n\nfunc f() int {\n\treturn 1\n}\n"


def _write(root: Path, rel: str, text: str = GO_SRC) -> None:
    p = root / rel
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(text, encoding="utf-8")


def _rels(root: Path, files: list[Path]) -> list[str]:
    return sorted(p.relative_to(root).as_posix() for p in files)


def test_discover_files_respects_exclude(tmp_path: Path) -> None:
    _write(tmp_path, "pkg/keep.go")
    _write(tmp_path, "pkg/excluded/skip.go")

    cfg = GoCostConfig(include=["pkg"], exclude=["pkg/excluded"])
    files = discover_files(tmp_path, cfg)

    assert _rels(tmp_path, files) == ["pkg/keep.go"]


def test_default_excludes_vendor_at_any_depth(tmp_path: Path) -> None:
    _write(tmp_path, "main.go")
    _write(tmp_path, "vendor/dep/dep.go")
    _write(tmp_path, "internal/vendor/x.go")
    _write(tmp_path, "internal/testdata/broken.go", "not go")

    files = discover_files(tmp_path, GoCostConfig())

    assert _rels(tmp_path, files) == ["main.go"]


def test_discover_files_respects_ignore_file(tmp_path: Path) -> None:
    _write(tmp_path, "pkg/keep.go")
    _write(tmp_path, "pkg/skip.go")
    _write(tmp_path, "gen/api.pb.go")
    (tmp_path / ".gocostignore").write_text("pkg/skip.go\n*.pb.go\n", encoding="utf-8")

    files = discover_files(tmp_path, GoCostConfig())

    assert _rels(tmp_path, files) == ["pkg/keep.go"]


def test_discover_files_glob_includes(tmp_path: Path) -> None:
    _write(tmp_path, "pkg/a.go")
    _write(tmp_path, "pkg/nested/b.go")
    _write(tmp_path, "cmd/main.go")

    cfg = GoCostConfig(include=["pkg/**/*.go"])
    files = discover_files(tmp_path, cfg)

    assert _rels(tmp_path, files) == ["pkg/a.go", "pkg/nested/b.go"]


def test_test_files_can_be_skipped(tmp_path: Path) -> None:
    _write(tmp_path, "a.go")
    _write(tmp_path, "a_test.go")
    _write(tmp_path, "notes.txt", "hello")

    assert _rels(tmp_path, discover_files(tmp_path, GoCostConfig())) == ["a.go", "a_test.go"]
    cfg = GoCostConfig(include_tests=False)
    assert _rels(tmp_path, discover_files(tmp_path, cfg)) == ["a.go"]


def test_explicit_file_is_always_included(tmp_path: Path) -> None:
    _write(tmp_path, "vendor/dep.go")
    target = tmp_path / "vendor" / "dep.go"

    files = discover_files(tmp_path, GoCostConfig(include_tests=False), [target])

    assert files == [target]


def test_max_files_limits_discovery(tmp_path: Path) -> None:
    for name in ("a.go", "b.go", "c.go"):
        _write(tmp_path, name)

    files = discover_files(tmp_path, GoCostConfig(max_files=2))

    assert _rels(tmp_path, files) == ["a.go", "b.go"]
