from __future__ import annotations

import fnmatch
import logging
from collections.abc import Callable, Iterable
from pathlib import Path, PurePosixPath

import pathspec

from gocost.config.schema import GoCostConfig

log = logging.getLogger(__name__)

GO_EXTENSION = ".go"
IGNORE_FILE = ".gocostignore"

_GLOB_CHARS = set("*?[")


def _has_glob(pattern: str) -> bool:
    return any(ch in pattern for ch in _GLOB_CHARS)


def _normalize_pattern(pattern: str) -> str:
    p = pattern.strip().replace("\\", "/")
    if not p or p.startswith("#"):
        return ""
    if p.startswith("./"):
        p = p[2:]
    p = p.lstrip("/").rstrip("/")
    if p in {"", "."}:
        return "**"
    return p


def _matches(rel: PurePosixPath, pattern: str) -> bool:
    if pattern == "**":
        return True
    text = rel.as_posix()
    if _has_glob(pattern):
        candidates = [pattern]
        if "**/" in pattern:
            candidates.append(pattern.replace("**/", ""))
        return any(fnmatch.fnmatchcase(text, p) or rel.match(p) for p in candidates)
    if text == pattern or text.startswith(f"{pattern}/"):
        return True
    # A bare directory name such as "vendor" matches at any depth.
    return "/" not in pattern and pattern in rel.parts[:-1]


def is_go_file(p: Path, include_tests: bool = True) -> bool:
    if not p.is_file() or p.suffix.lower() != GO_EXTENSION:
        return False
    if not include_tests and p.name.endswith("_test.go"):
        return False
    return True


def _build_ignore_matcher(root: Path) -> Callable[[PurePosixPath], bool]:
    ignore_path = root / IGNORE_FILE
    if not ignore_path.exists():
        return lambda _p: False
    try:
        lines = ignore_path.read_text(encoding="utf-8").splitlines()
    except OSError as e:
        log.warning("Failed to read %s (%s). Skipping.", ignore_path, e)
        return lambda _p: False
    spec = pathspec.GitIgnoreSpec.from_lines(lines)

    def match_spec(rel: PurePosixPath) -> bool:
        return bool(spec.match_file(rel.as_posix()))

    return match_spec


def _build_included_predicate(root: Path, cfg: GoCostConfig) -> Callable[[Path], bool]:
    include_patterns = [p for p in (_normalize_pattern(x) for x in cfg.include or ["."]) if p]
    exclude_patterns = [p for p in (_normalize_pattern(x) for x in cfg.exclude) if p]
    ignore_matcher = _build_ignore_matcher(root)
    resolved_root = root.resolve()

    def included(p: Path) -> bool:
        try:
            rel = PurePosixPath(p.resolve().relative_to(resolved_root).as_posix())
        except ValueError:
            return False
        if include_patterns and not any(_matches(rel, pattern) for pattern in include_patterns):
            return False
        if any(_matches(rel, pattern) for pattern in exclude_patterns):
            return False
        return not ignore_matcher(rel)

    return included


def discover_files(root: Path, cfg: GoCostConfig, targets: Iterable[Path] | None = None) -> list[Path]:
    """Expand ``targets`` (default: ``root``) into Go files under ``root``.

    Explicitly named files are always analysed; files found by walking a
    directory must pass the include/exclude patterns and the ignore file.
    """
    included = _build_included_predicate(root, cfg)
    seen: set[Path] = set()
    files: list[Path] = []
    for target in targets or [root]:
        if target.is_dir():
            candidates = sorted(p for p in target.rglob(f"*{GO_EXTENSION}") if included(p))
        else:
            candidates = [target]
        for p in candidates:
            if not is_go_file(p, cfg.include_tests or target == p):
                continue
            rp = p.resolve()
            if rp in seen:
                continue
            seen.add(rp)
            files.append(p)
            if len(files) >= cfg.max_files:
                log.warning("Reached max_files=%d; remaining files skipped.", cfg.max_files)
                return files
    return files
