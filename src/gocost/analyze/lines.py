"""Line numbers as Go reports them.

Generated Go files (cgo, yacc) carry ``//line file:N`` comments that restart
line numbering for the text that follows. A ``//line`` comment only counts at
the start of a line and takes effect on the next line; ``/*line file:N*/``
takes effect right after the comment.
"""

from __future__ import annotations

import bisect
import re
from collections.abc import Iterable
from dataclasses import dataclass

from tree_sitter import Node

from gocost.analyze.parser import ParseFailure, node_text

LINE_PREFIXES = ("//line ", "/*line ")

_DIGITS = re.compile(r"[0-9]+")
_MAX_LINE_COL = 1 << 30


@dataclass(frozen=True)
class LineDirective:
    offset: int
    row: int
    line: int


class LineMap:
    def __init__(self, directives: Iterable[LineDirective] = ()) -> None:
        self._directives = sorted(directives, key=lambda d: d.offset)
        self._offsets = [d.offset for d in self._directives]

    def line(self, offset: int, row: int) -> int:
        i = bisect.bisect_right(self._offsets, offset) - 1
        if i < 0:
            return row + 1
        d = self._directives[i]
        return d.line + row - d.row

    def start_line(self, node: Node) -> int:
        return self.line(node.start_byte, int(node.start_point[0]))

    def end_line(self, node: Node) -> int:
        return self.line(node.end_byte, int(node.end_point[0]))


def _trailing_digits(text: str) -> tuple[int, int, bool]:
    i = text.rfind(":")
    if i < 0:
        return 0, 0, False
    digits = text[i + 1 :]
    if not _DIGITS.fullmatch(digits):
        return i + 1, 0, False
    return i + 1, int(digits), True


def directive_line(text: str) -> int | None:
    """Line number named by a line directive, or None if ``text`` is not one.

    Raises ValueError for a directive with a malformed line or column.
    """
    if not text.startswith(LINE_PREFIXES):
        return None
    if text.startswith("/*"):
        text = text[:-2]
    text = text[len("//line ") :]
    i, n, ok = _trailing_digits(text)
    if i == 0:
        return None
    if not ok:
        raise ValueError(f"invalid line number: {text[i:]}")
    _, prev, has_col = _trailing_digits(text[: i - 1])
    if has_col:
        # filename:line:col
        line, col = prev, n
        if col == 0 or col > _MAX_LINE_COL:
            raise ValueError(f"invalid column number: {col}")
    else:
        line = n
    if line == 0 or line > _MAX_LINE_COL:
        raise ValueError(f"invalid line number: {line}")
    return line


def _iter_comments(root: Node) -> Iterable[Node]:
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == "comment":
            yield node
            continue
        stack.extend(node.named_children)


def _directive(comment: Node, src: bytes) -> LineDirective | None:
    text = node_text(src, comment).rstrip("\r")
    if text.startswith("//"):
        if comment.start_point[1] != 0:
            return None
    elif not text.endswith("*/"):
        return None
    try:
        line = directive_line(text)
    except ValueError as e:
        row = int(comment.start_point[0]) + 1
        raise ParseFailure(f"line {row}: {e}", line=row) from e
    if line is None:
        return None
    if text.startswith("/*"):
        return LineDirective(offset=comment.end_byte, row=int(comment.end_point[0]), line=line)
    offset = comment.end_byte
    while src[offset : offset + 1] == b"\r":
        offset += 1
    if src[offset : offset + 1] != b"\n":
        # At end of file there is nothing left to renumber.
        return None
    return LineDirective(offset=offset + 1, row=int(comment.end_point[0]) + 1, line=line)


def build_line_map(root: Node, src: bytes) -> LineMap:
    if not any(prefix.encode() in src for prefix in LINE_PREFIXES):
        return LineMap()
    directives = []
    for comment in _iter_comments(root):
        d = _directive(comment, src)
        if d is not None:
            directives.append(d)
    return LineMap(directives)
