"""Lexical name resolution for bare call targets.

A call ``f(x)`` is only a call to a user function when ``f`` resolves to a
function declared at file level. Parameters, locals, package-level variables,
constants and types shadow or replace that meaning, so identifiers are resolved
against the scope chain in force at the point of use, falling back to the file
scope (which is order independent, as in Go).
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from enum import Enum
from functools import partial

from tree_sitter import Node

from gocost.analyze.parser import node_text


class ObjKind(Enum):
    FUN = "func"
    VAR = "var"
    CON = "const"
    TYP = "type"


class Scope:
    def __init__(self, outer: Scope | None = None) -> None:
        self.outer = outer
        self.objects: dict[str, ObjKind] = {}

    def declare(self, name: str, kind: ObjKind) -> None:
        if not name or name == "_":
            return
        # First declaration wins, like go/ast.Scope.Insert.
        self.objects.setdefault(name, kind)

    def lookup(self, name: str) -> ObjKind | None:
        scope: Scope | None = self
        while scope is not None:
            kind = scope.objects.get(name)
            if kind is not None:
                return kind
            scope = scope.outer
        return None


@dataclass
class Resolution:
    """Start bytes of callee identifiers that name a file-level function."""

    function_callees: set[int] = field(default_factory=set)

    def is_function(self, ident: Node) -> bool:
        return ident.start_byte in self.function_callees


_SCOPED_STATEMENTS = {
    "block",
    "if_statement",
    "for_statement",
    "expression_switch_statement",
    "select_statement",
    "expression_case",
    "default_case",
    "communication_case",
}

_SPEC_KINDS = {
    "var_declaration": ("var_spec", ObjKind.VAR),
    "const_declaration": ("const_spec", ObjKind.CON),
    "type_declaration": ("type_spec", ObjKind.TYP),
}


def _specs(decl: Node, spec_type: str) -> Iterable[Node]:
    for child in decl.named_children:
        if child.type == spec_type or (spec_type == "type_spec" and child.type == "type_alias"):
            yield child
        elif child.type.endswith("_spec_list"):
            yield from _specs(child, spec_type)


def _identifiers(node: Node | None) -> list[Node]:
    if node is None:
        return []
    if node.type == "identifier":
        return [node]
    return [child for child in node.named_children if child.type == "identifier"]


def _declares(node: Node) -> bool:
    return any(child.type == ":=" for child in node.children)


def file_scope(root: Node, src: bytes) -> Scope:
    scope = Scope()
    for decl in root.named_children:
        if decl.type == "function_declaration":
            name = decl.child_by_field_name("name")
            # init is never declared; methods live on their receiver type.
            if name is not None and node_text(src, name) != "init":
                scope.declare(node_text(src, name), ObjKind.FUN)
            continue
        spec_kind = _SPEC_KINDS.get(decl.type)
        if spec_kind is None:
            continue
        spec_type, kind = spec_kind
        for spec in _specs(decl, spec_type):
            for name in spec.children_by_field_name("name"):
                scope.declare(node_text(src, name), kind)
    return scope


class _Resolver:
    """Walks a file with an explicit work stack.

    Stack items are either ``(node, scope)`` pairs to visit or deferred
    declarations; items are pushed in reverse so they run in source order.
    """

    def __init__(self, src: bytes) -> None:
        self._src = src
        self._stack: list[tuple[Node, Scope] | Callable[[], None]] = []
        self.resolution = Resolution()

    def run(self, root: Node, scope: Scope) -> Resolution:
        self._push_children(root, scope)
        while self._stack:
            item = self._stack.pop()
            if isinstance(item, tuple):
                self.visit(*item)
            else:
                item()
        return self.resolution

    def _push(self, node: Node | None, scope: Scope) -> None:
        if node is not None:
            self._stack.append((node, scope))

    def _push_children(self, node: Node, scope: Scope) -> None:
        for child in reversed(node.named_children):
            self._stack.append((child, scope))

    def _declare(self, scope: Scope, names: Iterable[Node], kind: ObjKind) -> None:
        for name in names:
            scope.declare(node_text(self._src, name), kind)

    def _declare_later(self, scope: Scope, names: list[Node], kind: ObjKind) -> None:
        self._stack.append(partial(self._declare, scope, names, kind))

    def _declare_params(self, scope: Scope, params: Node | None) -> None:
        if params is None or params.type not in {"parameter_list", "type_parameter_list"}:
            return
        kind = ObjKind.TYP if params.type == "type_parameter_list" else ObjKind.VAR
        for param in params.named_children:
            self._declare(scope, param.children_by_field_name("name"), kind)

    def visit(self, node: Node, scope: Scope) -> None:
        handler = getattr(self, f"visit_{node.type}", None)
        if handler is not None:
            handler(node, scope)
            return
        if node.type in _SCOPED_STATEMENTS:
            self._push_children(node, Scope(scope))
            return
        self._push_children(node, scope)

    def _visit_function(self, node: Node, outer: Scope) -> None:
        scope = Scope(outer)
        for field_name in ("receiver", "type_parameters", "parameters", "result"):
            self._declare_params(scope, node.child_by_field_name(field_name))
        body = node.child_by_field_name("body")
        if body is not None:
            self._push_children(body, scope)

    def visit_function_declaration(self, node: Node, scope: Scope) -> None:
        self._visit_function(node, scope)

    def visit_method_declaration(self, node: Node, scope: Scope) -> None:
        self._visit_function(node, scope)

    def visit_func_literal(self, node: Node, scope: Scope) -> None:
        self._visit_function(node, scope)

    def visit_call_expression(self, node: Node, scope: Scope) -> None:
        callee = node.child_by_field_name("function")
        if callee is not None and callee.type == "identifier":
            if scope.lookup(node_text(self._src, callee)) is ObjKind.FUN:
                self.resolution.function_callees.add(callee.start_byte)
        self._push_children(node, scope)

    def _visit_binding(self, node: Node, scope: Scope) -> None:
        # The right side is resolved before the left side is declared.
        self._declare_later(scope, _identifiers(node.child_by_field_name("left")), ObjKind.VAR)
        self._push(node.child_by_field_name("right"), scope)

    def visit_short_var_declaration(self, node: Node, scope: Scope) -> None:
        self._visit_binding(node, scope)

    def visit_range_clause(self, node: Node, scope: Scope) -> None:
        if _declares(node):
            self._visit_binding(node, scope)
        else:
            self._push_children(node, scope)

    def visit_receive_statement(self, node: Node, scope: Scope) -> None:
        self.visit_range_clause(node, scope)

    def _visit_decl(self, node: Node, scope: Scope) -> None:
        spec_type, kind = _SPEC_KINDS[node.type]
        for spec in reversed(list(_specs(node, spec_type))):
            names = spec.children_by_field_name("name")
            if kind is ObjKind.TYP:
                # A type name is in scope inside its own definition.
                self._declare(scope, names, kind)
                continue
            self._declare_later(scope, names, kind)
            self._push(spec.child_by_field_name("value"), scope)

    def visit_var_declaration(self, node: Node, scope: Scope) -> None:
        self._visit_decl(node, scope)

    def visit_const_declaration(self, node: Node, scope: Scope) -> None:
        self._visit_decl(node, scope)

    def visit_type_declaration(self, node: Node, scope: Scope) -> None:
        self._visit_decl(node, scope)

    def visit_type_switch_statement(self, node: Node, outer: Scope) -> None:
        scope = Scope(outer)
        aliases = _identifiers(node.child_by_field_name("alias"))
        for clause in reversed(node.named_children):
            if clause.type not in {"type_case", "default_case"}:
                continue
            clause_scope = Scope(scope)
            self._declare(clause_scope, aliases, ObjKind.VAR)
            self._push_children(clause, clause_scope)
        self._push(node.child_by_field_name("value"), scope)
        self._push(node.child_by_field_name("initializer"), scope)


def resolve_file(root: Node, src: bytes) -> Resolution:
    return _Resolver(src).run(root, file_scope(root, src))
