from __future__ import annotations

from pathlib import Path

from gocost.config.loader import load_config
from gocost.config.schema import GoCostConfig


def test_missing_default_config_gives_defaults(tmp_path: Path) -> None:
    assert load_config(tmp_path) == GoCostConfig()


def test_default_config_file_is_read(tmp_path: Path) -> None:
    (tmp_path / ".gocost.yml").write_text(
        "include: ['pkg']\ninclude_tests: false\ninline_budget: 40\nformat: md\n",
        encoding="utf-8",
    )

    cfg = load_config(tmp_path)

    assert cfg.include == ["pkg"]
    assert cfg.exclude == ["vendor", "testdata", ".git"]
    assert cfg.include_tests is False
    assert cfg.inline_budget == 40
    assert cfg.format == "md"


def test_load_multiple_configs_merges_lists(tmp_path: Path) -> None:
    cfg1 = tmp_path / "a.yml"
    cfg2 = tmp_path / "b.yml"
    cfg1.write_text("include: ['pkg/a']\nexclude: ['gen']\n", encoding="utf-8")
    cfg2.write_text("include: ['pkg/b']\nmax_func_calls: 0\n", encoding="utf-8")

    cfg = load_config(tmp_path, [cfg1, cfg2])

    assert cfg.include == ["pkg/a", "pkg/b"]
    assert cfg.exclude == ["gen"]
    assert cfg.max_func_calls == 0


def test_bad_values_fall_back(tmp_path: Path) -> None:
    (tmp_path / ".gocost.yml").write_text(
        "max_files: 0\ninline_budget: lots\nformat: html\nshow_noinline: 'yes'\n",
        encoding="utf-8",
    )

    cfg = load_config(tmp_path)

    assert cfg.max_files == 1000
    assert cfg.inline_budget == 80
    assert cfg.format == "json"
    assert cfg.show_noinline is True


def test_unreadable_yaml_is_skipped(tmp_path: Path) -> None:
    (tmp_path / ".gocost.yml").write_text("include: [unclosed\n", encoding="utf-8")

    assert load_config(tmp_path) == GoCostConfig()
