from __future__ import annotations

from gocost.analyze.functions import FunctionRecord

from .models import GoCostReport

UNCERTAIN_HINT = "Actual nodes count may be higher due to function calls that could be inlined"


def _nodes_word(record: FunctionRecord) -> str:
    return "nodes" if record.ast_count > 1 else "node"


def lens_title(record: FunctionRecord) -> str:
    """Short label such as ``~12 nodes``; ``~`` marks a function with calls."""
    prefix = "~" if record.has_any_calls else ""
    return f"{prefix}{record.ast_count} {_nodes_word(record)}"


def is_inlining_candidate(record: FunctionRecord, inline_budget: int = 80, max_func_calls: int = 1) -> bool:
    return record.ast_count < inline_budget and record.func_call_count <= max_func_calls


def visible_records(
    records: list[FunctionRecord],
    only_inlineable: bool = False,
    show_noinline: bool = False,
    inline_budget: int = 80,
    max_func_calls: int = 1,
) -> list[FunctionRecord]:
    out: list[FunctionRecord] = []
    for r in records:
        if only_inlineable and not is_inlining_candidate(r, inline_budget, max_func_calls):
            continue
        if not show_noinline and r.has_noinline:
            continue
        out.append(r)
    return out


def to_markdown(
    report: GoCostReport,
    only_inlineable: bool = False,
    show_noinline: bool = False,
    inline_budget: int = 80,
    max_func_calls: int = 1,
) -> str:
    lines: list[str] = []
    lines.append("# gocost report")
    lines.append("")
    lines.append(f"- Generated: `{report.generated_at}`")
    lines.append(f"- Root: `{report.root}`")
    lines.append(f"- Files: `{len(report.files)}`")
    lines.append(f"- Functions: `{report.functions_total}`")
    lines.append(f"- Inline budget: `{inline_budget}` nodes, `{max_func_calls}` call(s)")
    if report.parse_failures:
        lines.append(f"- Parse failures: `{len(report.parse_failures)}`")
    lines.append("")

    shown = 0
    uncertain = False
    for file_report in report.files:
        records = visible_records(
            file_report.functions,
            only_inlineable=only_inlineable,
            show_noinline=show_noinline,
            inline_budget=inline_budget,
            max_func_calls=max_func_calls,
        )
        if not records:
            continue
        lines.append(f"## {file_report.file}")
        lines.append("")
        lines.append("| Line | Size | Calls | Candidate | noinline |")
        lines.append("|---:|---|---:|---|---|")
        for r in records:
            candidate = "yes" if is_inlining_candidate(r, inline_budget, max_func_calls) else "no"
            noinline = "yes" if r.has_noinline else ""
            lines.append(f"| {r.line} | {lens_title(r)} | {r.func_call_count} | {candidate} | {noinline} |")
        lines.append("")
        shown += len(records)
        uncertain = uncertain or any(r.has_any_calls for r in records)

    if shown == 0:
        lines.append("No functions to report.")
        lines.append("")
    elif uncertain:
        lines.append(f"`~`: {UNCERTAIN_HINT}.")
        lines.append("")

    if report.parse_failures:
        lines.append("## Parse failures")
        lines.append("")
        for p in report.parse_failures:
            loc = f"{p.file}:{p.line}" if p.line is not None else p.file
            lines.append(f"- {loc}: {p.message}")
        lines.append("")
    return "\n".join(lines)
