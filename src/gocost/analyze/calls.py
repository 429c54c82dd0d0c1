from __future__ import annotations

from collections.abc import Iterable
from enum import Enum

from tree_sitter import Node

from gocost.analyze.parser import node_text
from gocost.analyze.resolve import Resolution

BUILTINS = frozenset(
    {
        "append",
        "len",
        "cap",
        "copy",
        "new",
        "make",
        "delete",
        "close",
        "complex",
        "imag",
        "real",
        "print",
        "println",
        "panic",
        "recover",
    }
)


class CalleeKind(Enum):
    BUILTIN = "builtin"
    FUNCTION = "function"
    QUALIFIED = "qualified"
    OTHER = "other"


def _iter_calls(node: Node) -> Iterable[Node]:
    """Call expressions below ``node`` in pre-order."""
    stack = list(reversed(node.named_children))
    while stack:
        child = stack.pop()
        if child.type == "call_expression":
            yield child
        stack.extend(reversed(child.named_children))


def classify_callee(call: Node, src: bytes, resolution: Resolution) -> tuple[CalleeKind, bool]:
    """Return the callee kind and, for bare names, whether it is a builtin.

    Explicitly instantiated generic calls (``f[int](x)``) are neither bare names
    nor selectors.
    """
    callee = call.child_by_field_name("function")
    if callee is None or call.child_by_field_name("type_arguments") is not None:
        return CalleeKind.OTHER, False
    if callee.type == "selector_expression":
        return CalleeKind.QUALIFIED, False
    if callee.type != "identifier":
        return CalleeKind.OTHER, False
    builtin = node_text(src, callee) in BUILTINS
    if resolution.is_function(callee):
        return CalleeKind.FUNCTION, builtin
    if builtin:
        return CalleeKind.BUILTIN, True
    return CalleeKind.OTHER, False


def count_func_calls(body: Node | None, src: bytes, resolution: Resolution) -> int:
    """Count calls that likely cost something: file-level functions that are
    not builtins, and every qualified or method call."""
    if body is None:
        return 0
    count = 0
    for call in _iter_calls(body):
        kind, builtin = classify_callee(call, src, resolution)
        if kind is CalleeKind.QUALIFIED:
            count += 1
        elif kind is CalleeKind.FUNCTION and not builtin:
            count += 1
    return count


def has_any_calls(body: Node | None, src: bytes, resolution: Resolution) -> bool:
    # Unlike count_func_calls, builtins are calls here.
    if body is None:
        return False
    for call in _iter_calls(body):
        kind, _ = classify_callee(call, src, resolution)
        if kind is not CalleeKind.OTHER:
            return True
    return False

