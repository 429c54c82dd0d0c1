from __future__ import annotations

import argparse
import dataclasses
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path

import yaml

from gocost import __version__
from gocost.analyze.entrypoints import discover_files
from gocost.analyze.functions import analyze_file, analyze_source
from gocost.analyze.parser import ParseFailure
from gocost.config.loader import load_config, resolve_config_paths
from gocost.config.schema import REPORT_FORMATS, GoCostConfig
from gocost.config.templates import CONFIG_PRESETS
from gocost.config.validate import validate_config_paths
from gocost.report.format_json import records_to_json, report_to_json
from gocost.report.format_md import to_markdown
from gocost.report.models import SCHEMA_VERSION, FileReport, GoCostReport, ParseFailureEntry
from gocost.util.logging import setup_logging

log = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1


def _relative_path(root: Path, path: Path) -> str:
    try:
        return path.resolve().relative_to(root.resolve()).as_posix()
    except ValueError:
        return path.as_posix()


def _write_output(text: str, output: str | None, root: Path) -> None:
    if not output:
        sys.stdout.write(text)
        if not text.endswith("\n"):
            sys.stdout.write("\n")
        return
    out_path = Path(output)
    if not out_path.is_absolute():
        out_path = root / out_path
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(text, encoding="utf-8")
    log.info("Wrote %s", out_path)


def cmd_count(args: argparse.Namespace) -> int:
    try:
        if args.file and args.file != "-":
            src = Path(args.file).read_bytes()
        else:
            src = sys.stdin.buffer.read()
    except OSError as e:
        log.error("Failed to read input (%s).", e)
        return EXIT_FAILURE
    try:
        records = analyze_source(src)
    except ParseFailure as e:
        log.error("Parse failure: %s", e)
        return EXIT_FAILURE
    sys.stdout.write(records_to_json(records) + "\n")
    return EXIT_OK


def _apply_overrides(cfg: GoCostConfig, args: argparse.Namespace) -> GoCostConfig:
    changes: dict[str, object] = {}
    if args.format:
        changes["format"] = args.format
    if args.only_inlineable:
        changes["only_inlineable"] = True
    if args.show_noinline:
        changes["show_noinline"] = True
    if args.inline_budget is not None:
        changes["inline_budget"] = args.inline_budget
    if args.max_func_calls is not None:
        changes["max_func_calls"] = args.max_func_calls
    if args.exclude_tests:
        changes["include_tests"] = False
    return dataclasses.replace(cfg, **changes) if changes else cfg


def build_report(root: Path, files: list[Path]) -> GoCostReport:
    file_reports: list[FileReport] = []
    failures: list[ParseFailureEntry] = []
    for path in files:
        rel = _relative_path(root, path)
        try:
            records = analyze_file(path)
        except ParseFailure as e:
            log.warning("Skipping %s: %s", rel, e)
            failures.append(ParseFailureEntry(file=rel, message=str(e), line=e.line))
            continue
        except OSError as e:
            log.warning("Skipping %s: %s", rel, e)
            failures.append(ParseFailureEntry(file=rel, message=f"unreadable ({e})"))
            continue
        log.debug("%s: %d functions", rel, len(records))
        file_reports.append(FileReport(file=rel, functions=records))
    return GoCostReport(
        schema_version=SCHEMA_VERSION,
        generated_at=datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        root=str(root),
        files=file_reports,
        parse_failures=failures,
    )


def cmd_analyze(args: argparse.Namespace) -> int:
    target = Path(args.path)
    if not target.exists():
        log.error("Path %s not found.", target)
        return EXIT_FAILURE
    root = target if target.is_dir() else target.parent
    config_paths = [Path(p) for p in args.config] if args.config else None
    cfg = _apply_overrides(load_config(root, config_paths), args)

    files = discover_files(root, cfg, [target])
    log.info("Analyzing %d Go files under %s", len(files), root)
    report = build_report(root, files)

    if cfg.format == "md":
        text = to_markdown(
            report,
            only_inlineable=cfg.only_inlineable,
            show_noinline=cfg.show_noinline,
            inline_budget=cfg.inline_budget,
            max_func_calls=cfg.max_func_calls,
        )
    else:
        text = report_to_json(report)
    _write_output(text, args.output, root)

    if report.parse_failures:
        log.error("%d file(s) failed to parse.", len(report.parse_failures))
        return EXIT_FAILURE
    return EXIT_OK


def cmd_init(args: argparse.Namespace) -> int:
    root = Path(args.path).resolve()
    target = Path(args.output) if args.output else root / ".gocost.yml"
    if not target.is_absolute():
        target = root / target
    preset = str(args.preset or "full").lower()
    template = CONFIG_PRESETS.get(preset, CONFIG_PRESETS["full"])
    if target.exists() and not args.force:
        log.error("Config %s already exists. Use --force to overwrite.", target)
        return EXIT_FAILURE
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(template, encoding="utf-8")
    log.info("Wrote config to %s", target)
    return EXIT_OK


def cmd_config_show(args: argparse.Namespace) -> int:
    root = Path(args.path).resolve()
    config_paths = [Path(p) for p in args.config] if args.config else None
    cfg = load_config(root, config_paths)
    text = yaml.safe_dump(dataclasses.asdict(cfg), sort_keys=False)
    _write_output(text, args.output, root)
    return EXIT_OK


def cmd_config_validate(args: argparse.Namespace) -> int:
    root = Path(args.path).resolve()
    config_paths = resolve_config_paths(root, [Path(p) for p in args.config] if args.config else None)
    if not args.config and not config_paths[0].exists():
        log.error("Config %s not found.", config_paths[0])
        return EXIT_FAILURE
    errors = validate_config_paths(config_paths)
    if errors:
        for err in errors:
            log.error("%s", err)
        return EXIT_FAILURE
    log.info("Config valid.")
    return EXIT_OK


def _add_config_arg(a: argparse.ArgumentParser) -> None:
    a.add_argument(
        "--config",
        action="append",
        default=None,
        help="Config file path (repeatable, root-relative or absolute)",
    )


def _add_analyze_args(a: argparse.ArgumentParser) -> None:
    a.add_argument("path", nargs="?", default=".", help="Go file or directory (default: .)")
    _add_config_arg(a)
    a.add_argument("--format", choices=sorted(REPORT_FORMATS), default=None, help="Report format")
    a.add_argument("--output", default=None, help="Write report to path instead of stdout")
    a.add_argument(
        "--only-inlineable",
        action="store_true",
        help="Markdown: list only functions under the inline budget",
    )
    a.add_argument(
        "--show-noinline",
        action="store_true",
        help="Markdown: keep functions marked go:noinline",
    )
    a.add_argument("--inline-budget", type=int, default=None, help="Node-count ceiling for candidates")
    a.add_argument("--max-func-calls", type=int, default=None, help="Real-call ceiling for candidates")
    a.add_argument("--exclude-tests", action="store_true", help="Skip _test.go files")


def _add_init_args(a: argparse.ArgumentParser) -> None:
    a.add_argument("path", nargs="?", default=".", help="Root directory (default: .)")
    a.add_argument("--output", default=None, help="Output path (default: .gocost.yml)")
    a.add_argument(
        "--preset",
        default="full",
        choices=sorted(CONFIG_PRESETS.keys()),
        help="Template preset (default: full)",
    )
    a.add_argument("--force", action="store_true", help="Overwrite existing config if present")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="gocost", description="gocost: per-function size metrics for Go")
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable verbose logging")

    sub = p.add_subparsers(dest="cmd", required=True)

    c = sub.add_parser("count", help="Measure one Go source (file or stdin) and print JSON records")
    c.add_argument("file", nargs="?", default=None, help="Go source file (default: stdin)")
    c.set_defaults(func=cmd_count)

    a = sub.add_parser("analyze", help="Analyze a Go file or directory tree")
    _add_analyze_args(a)
    a.set_defaults(func=cmd_analyze)

    cfg = sub.add_parser("config", help="Config utilities")
    cfg_sub = cfg.add_subparsers(dest="config_cmd", required=True)
    cfg_show = cfg_sub.add_parser("show", help="Show merged config")
    cfg_show.add_argument("path", nargs="?", default=".", help="Root directory (default: .)")
    _add_config_arg(cfg_show)
    cfg_show.add_argument("--output", default=None, help="Write output to path instead of stdout")
    cfg_show.set_defaults(func=cmd_config_show)

    cfg_validate = cfg_sub.add_parser("validate", help="Validate config file(s)")
    cfg_validate.add_argument("path", nargs="?", default=".", help="Root directory (default: .)")
    _add_config_arg(cfg_validate)
    cfg_validate.set_defaults(func=cmd_config_validate)

    i = sub.add_parser("init", help="Create a gocost configuration file")
    _add_init_args(i)
    i.set_defaults(func=cmd_init)

    return p


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(bool(args.verbose))
    return int(args.func(args))
