from __future__ import annotations

import logging
from functools import lru_cache

import tree_sitter_go
from tree_sitter import Language, Node, Parser, Tree

log = logging.getLogger(__name__)


class ParseFailure(Exception):
    """Raised when the input is not syntactically valid Go."""

    def __init__(self, message: str, line: int | None = None) -> None:
        super().__init__(message)
        self.line = line


@lru_cache(maxsize=1)
def get_parser() -> Parser:
    return Parser(Language(tree_sitter_go.language()))


def node_text(src: bytes, node: Node) -> str:
    return src[node.start_byte : node.end_byte].decode("utf-8", errors="replace")


def start_line(node: Node) -> int:
    return int(node.start_point[0]) + 1


def end_line(node: Node) -> int:
    return int(node.end_point[0]) + 1


def _first_error(node: Node) -> Node | None:
    stack = [node]
    while stack:
        current = stack.pop()
        if current.type == "ERROR" or current.is_missing:
            return current
        stack.extend(reversed([child for child in current.children if child.has_error]))
    return None


_TOP_LEVEL_DECLARATIONS = {
    "function_declaration",
    "method_declaration",
    "var_declaration",
    "const_declaration",
    "type_declaration",
}


def _check_file_layout(root: Node) -> None:
    """Reject what the grammar tolerates but Go does not: a file must open
    with its package clause, imports come before other declarations, and
    statements only appear inside function bodies. Empty or comment-only
    input is accepted."""
    nodes = [child for child in root.named_children if child.type != "comment"]
    if not nodes:
        return
    if nodes[0].type != "package_clause":
        line = start_line(nodes[0])
        raise ParseFailure(f"line {line}: expected 'package'", line=line)
    imports_done = False
    for node in nodes[1:]:
        line = start_line(node)
        if node.type == "import_declaration":
            if imports_done:
                raise ParseFailure(f"line {line}: imports must appear before other declarations", line=line)
            continue
        if node.type not in _TOP_LEVEL_DECLARATIONS:
            raise ParseFailure(f"line {line}: non-declaration statement outside function body", line=line)
        imports_done = True


def to_bytes(src: str | bytes) -> bytes:
    if isinstance(src, bytes):
        return src
    return src.encode("utf-8", errors="replace")


def parse_source(src: str | bytes) -> tuple[Tree, bytes]:
    src_bytes = to_bytes(src)
    tree = get_parser().parse(src_bytes)
    root = tree.root_node
    if root.has_error:
        bad = _first_error(root) or root
        line = start_line(bad)
        if bad.is_missing:
            message = f"line {line}: missing {bad.type}"
        else:
            message = f"line {line}: syntax error"
        raise ParseFailure(message, line=line)
    _check_file_layout(root)
    log.debug("Parsed %d bytes (%d top-level nodes)", len(src_bytes), root.named_child_count)
    return tree, src_bytes
