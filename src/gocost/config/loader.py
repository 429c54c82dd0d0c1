from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import yaml

from .schema import REPORT_FORMATS, GoCostConfig

log = logging.getLogger(__name__)

CONFIG_FILE = ".gocost.yml"


def _load_raw_config(path: Path) -> dict[str, Any]:
    try:
        return yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as e:
        log.warning("Failed to load %s (%s). Skipping.", path, e)
        return {}


def _get_list(raw: dict[str, Any], key: str) -> list[str] | None:
    if key not in raw:
        return None
    v = raw.get(key)
    if isinstance(v, list):
        return [str(x) for x in v]
    return None


def _get_optional_int(raw: dict[str, Any], key: str) -> int | None:
    if key not in raw:
        return None
    v = raw.get(key)
    if v is None or isinstance(v, bool):
        return None
    try:
        return int(v)
    except (TypeError, ValueError):
        log.warning("Ignoring non-integer %s=%r.", key, v)
        return None


def _get_bool(raw: dict[str, Any], key: str, default: bool) -> bool:
    if key not in raw:
        return default
    v = raw.get(key)
    if isinstance(v, bool):
        return v
    if isinstance(v, (int, float)):
        return bool(v)
    if isinstance(v, str):
        if v.strip().lower() in {"true", "yes", "1", "on"}:
            return True
        if v.strip().lower() in {"false", "no", "0", "off"}:
            return False
    return default


def _get_format(raw: dict[str, Any], default: str) -> str:
    v = raw.get("format")
    if v is None:
        return default
    value = str(v).strip().lower()
    if value not in REPORT_FORMATS:
        log.warning("Unknown report format %r; using %s.", v, default)
        return default
    return value


def _merge_config(
    base: GoCostConfig,
    raw: dict[str, Any],
    include_set: bool,
    exclude_set: bool,
) -> tuple[GoCostConfig, bool, bool]:
    include = base.include
    exclude = base.exclude

    raw_include = _get_list(raw, "include")
    if raw_include is not None:
        if include_set:
            include = [*include, *raw_include]
        else:
            include = raw_include
            include_set = True

    raw_exclude = _get_list(raw, "exclude")
    if raw_exclude is not None:
        if exclude_set:
            exclude = [*exclude, *raw_exclude]
        else:
            exclude = raw_exclude
            exclude_set = True

    max_files = _get_optional_int(raw, "max_files")
    if max_files is None or max_files < 1:
        max_files = base.max_files
    inline_budget = _get_optional_int(raw, "inline_budget")
    if inline_budget is None:
        inline_budget = base.inline_budget
    max_func_calls = _get_optional_int(raw, "max_func_calls")
    if max_func_calls is None:
        max_func_calls = base.max_func_calls

    return (
        GoCostConfig(
            include=include,
            exclude=exclude,
            include_tests=_get_bool(raw, "include_tests", base.include_tests),
            max_files=max_files,
            inline_budget=inline_budget,
            max_func_calls=max_func_calls,
            only_inlineable=_get_bool(raw, "only_inlineable", base.only_inlineable),
            show_noinline=_get_bool(raw, "show_noinline", base.show_noinline),
            format=_get_format(raw, base.format),
        ),
        include_set,
        exclude_set,
    )


def resolve_config_paths(root: Path, config_paths: Iterable[Path] | None) -> list[Path]:
    if config_paths is None:
        return [root / CONFIG_FILE]
    resolved: list[Path] = []
    for path in config_paths:
        p = path
        if not p.is_absolute():
            p = root / p
        resolved.append(p)
    return resolved


def load_config(root: Path, config_paths: Iterable[Path] | None = None) -> GoCostConfig:
    paths = resolve_config_paths(root, config_paths)
    if config_paths is None and not paths[0].exists():
        return GoCostConfig()

    cfg = GoCostConfig()
    include_set = False
    exclude_set = False
    for path in paths:
        if not path.exists():
            log.warning("Config %s not found; skipping.", path)
            continue
        raw = _load_raw_config(path)
        if not isinstance(raw, dict):
            log.warning("Config %s is not a mapping; skipping.", path)
            continue
        cfg, include_set, exclude_set = _merge_config(cfg, raw, include_set, exclude_set)
        log.debug("Loaded config %s", path)
    return cfg
