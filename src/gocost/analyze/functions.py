from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from tree_sitter import Node

from gocost.analyze.calls import count_func_calls, has_any_calls
from gocost.analyze.directives import CommentMap, build_comment_map, has_noinline_directive
from gocost.analyze.lines import LineMap, build_line_map
from gocost.analyze.nodes import count_body
from gocost.analyze.parser import parse_source
from gocost.analyze.resolve import Resolution, resolve_file

log = logging.getLogger(__name__)

_DECLARATION_NODES = {
    "function_declaration",
    "method_declaration",
}

_LITERAL_NODES = {"func_literal"}


@dataclass(frozen=True)
class FunctionRecord:
    line: int
    ast_count: int
    func_call_count: int
    has_noinline: bool
    has_any_calls: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "line": self.line,
            "astCount": self.ast_count,
            "funcCallCount": self.func_call_count,
            "hasNoinline": self.has_noinline,
            "hasAnyCalls": self.has_any_calls,
        }

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> FunctionRecord:
        return cls(
            line=int(raw.get("line", 1)),
            ast_count=int(raw.get("astCount", 0)),
            func_call_count=int(raw.get("funcCallCount", 0)),
            has_noinline=bool(raw.get("hasNoinline", False)),
            has_any_calls=bool(raw.get("hasAnyCalls", False)),
        )


def _collect_functions(node: Node) -> Iterable[Node]:
    stack = list(reversed(node.named_children))
    while stack:
        child = stack.pop()
        if child.type in _DECLARATION_NODES:
            if child.child_by_field_name("body") is not None:
                yield child
        elif child.type in _LITERAL_NODES:
            yield child
        stack.extend(reversed(child.named_children))


def _record(fn: Node, src: bytes, resolution: Resolution, cmap: CommentMap, lines: LineMap) -> FunctionRecord:
    body = fn.child_by_field_name("body")
    noinline = False
    if fn.type in _DECLARATION_NODES:
        noinline = has_noinline_directive(fn, cmap)
    return FunctionRecord(
        line=lines.start_line(fn),
        ast_count=count_body(body),
        func_call_count=count_func_calls(body, src, resolution),
        has_noinline=noinline,
        has_any_calls=has_any_calls(body, src, resolution),
    )


def analyze_source(src: str | bytes) -> list[FunctionRecord]:
    """Return one record per function declaration and function literal.

    Records come out in document order; a literal nested in a function follows
    its enclosing function. Lines honour ``//line`` directives. Raises
    ``ParseFailure`` for invalid input before anything is measured.
    """
    tree, src_bytes = parse_source(src)
    root = tree.root_node
    lines = build_line_map(root, src_bytes)
    resolution = resolve_file(root, src_bytes)
    cmap = build_comment_map(root, src_bytes, lines)
    records = [_record(fn, src_bytes, resolution, cmap, lines) for fn in _collect_functions(root)]
    log.debug("Analyzed %d functions", len(records))
    return records


def analyze_file(path: Path) -> list[FunctionRecord]:
    return analyze_source(path.read_bytes())
