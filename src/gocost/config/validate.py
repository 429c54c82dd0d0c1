from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path
from typing import Any

import yaml

from .schema import REPORT_FORMATS

KNOWN_KEYS = {
    "include",
    "exclude",
    "include_tests",
    "max_files",
    "inline_budget",
    "max_func_calls",
    "only_inlineable",
    "show_noinline",
    "format",
}


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _validate_list_strings(raw: dict[str, Any], key: str, errors: list[str]) -> None:
    if key not in raw:
        return
    value = raw.get(key)
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        errors.append(f"{key} must be a list of strings")


def _validate_optional_int(raw: dict[str, Any], key: str, errors: list[str], minimum: int = 0) -> None:
    if key not in raw:
        return
    value = raw.get(key)
    if value is None:
        return
    if not _is_int(value):
        errors.append(f"{key} must be an integer")
    elif value < minimum:
        errors.append(f"{key} must be >= {minimum}")


def _validate_optional_bool(raw: dict[str, Any], key: str, errors: list[str]) -> None:
    if key not in raw:
        return
    value = raw.get(key)
    if value is None:
        return
    if not isinstance(value, bool):
        errors.append(f"{key} must be a boolean")


def _validate_optional_str_choice(raw: dict[str, Any], key: str, choices: set[str], errors: list[str]) -> None:
    if key not in raw:
        return
    value = raw.get(key)
    if value is None:
        return
    if not isinstance(value, str):
        errors.append(f"{key} must be a string")
        return
    if value.lower() not in choices:
        errors.append(f"{key} must be one of: {', '.join(sorted(choices))}")


def validate_raw_config(raw: dict[str, Any]) -> list[str]:
    errors: list[str] = []
    for key in raw.keys():
        if key not in KNOWN_KEYS:
            errors.append(f"Unknown key: {key}")

    _validate_list_strings(raw, "include", errors)
    _validate_list_strings(raw, "exclude", errors)
    for key in ["include_tests", "only_inlineable", "show_noinline"]:
        _validate_optional_bool(raw, key, errors)
    _validate_optional_int(raw, "max_files", errors, minimum=1)
    _validate_optional_int(raw, "inline_budget", errors)
    _validate_optional_int(raw, "max_func_calls", errors)
    _validate_optional_str_choice(raw, "format", REPORT_FORMATS, errors)
    return errors


def validate_config_path(path: Path) -> list[str]:
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as exc:
        return [f"{path}: failed to read ({exc})"]
    if not isinstance(raw, dict):
        return [f"{path}: config must be a mapping"]
    errors = validate_raw_config(raw)
    return [f"{path}: {err}" for err in errors]


def validate_config_paths(paths: Iterable[Path]) -> list[str]:
    errors: list[str] = []
    for path in paths:
        if not path.exists():
            errors.append(f"{path}: file not found")
            continue
        errors.extend(validate_config_path(path))
    return errors
