from __future__ import annotations

import subprocess
import sys
from pathlib import Path


def _run(*args: str) -> subprocess.CompletedProcess[str]:
    return subprocess.run(
        [sys.executable, "-m", "gocost", *args],
        capture_output=True,
        text=True,
        check=False,
    )


def test_cli_init_writes_config(tmp_path: Path) -> None:
    result = _run("init", str(tmp_path), "--preset", "minimal")
    assert result.returncode == 0
    cfg = tmp_path / ".gocost.yml"
    assert cfg.exists()
    assert "exclude:" in cfg.read_text(encoding="utf-8")


def test_cli_init_refuses_overwrite(tmp_path: Path) -> None:
    (tmp_path / ".gocost.yml").write_text("format: md\n", encoding="utf-8")
    result = _run("init", str(tmp_path))
    assert result.returncode == 1
    assert (tmp_path / ".gocost.yml").read_text(encoding="utf-8") == "format: md\n"


def test_cli_config_show_and_validate(tmp_path: Path) -> None:
    assert _run("init", str(tmp_path), "--preset", "inlining").returncode == 0

    shown = _run("config", "show", str(tmp_path))
    assert shown.returncode == 0
    assert "only_inlineable: true" in shown.stdout

    assert _run("config", "validate", str(tmp_path)).returncode == 0
    (tmp_path / ".gocost.yml").write_text("languages: [go]\n", encoding="utf-8")
    assert _run("config", "validate", str(tmp_path)).returncode == 1
