"""Structural size metric over a Go function body.

Weights follow the shape of Go's own syntax tree (``go/ast``): every statement
and expression node is one unit, grouping nodes (blocks, field and parameter
lists, argument lists) weigh nothing, and composite-literal keys are invisible.
tree-sitter's concrete tree does not always line up with ``go/ast``, so a few
node kinds carry extra weight for the implicit nodes Go would create.
"""

from __future__ import annotations

from enum import Enum

from tree_sitter import Node


class Category(Enum):
    GROUPING = "grouping"
    KEY_VALUE = "key_value"
    COUNTED = "counted"
    NESTED_FUNCTION = "nested_function"
    SKIPPED = "skipped"
    OTHER = "other"


_GROUPING_NODES = {
    "block",
    "statement_list",
    "parameter_list",
    "parameter_declaration",
    "type_parameter_list",
    "type_parameter_declaration",
    "type_constraint",
    "field_declaration_list",
    "field_declaration",
    "argument_list",
    "expression_list",
    "literal_element",
    "for_clause",
    "range_clause",
    "variadic_argument",
    "generic_type",
}

_STATEMENT_NODES = {
    "expression_statement",
    "send_statement",
    "inc_statement",
    "dec_statement",
    "assignment_statement",
    "short_var_declaration",
    "receive_statement",
    "labeled_statement",
    "empty_labeled_statement",
    "empty_statement",
    "fallthrough_statement",
    "break_statement",
    "continue_statement",
    "goto_statement",
    "return_statement",
    "go_statement",
    "defer_statement",
    "if_statement",
    "for_statement",
    "expression_switch_statement",
    "type_switch_statement",
    "select_statement",
    "expression_case",
    "type_case",
    "default_case",
    "communication_case",
    "var_declaration",
    "const_declaration",
    "type_declaration",
}

_EXPRESSION_NODES = {
    "identifier",
    "field_identifier",
    "package_identifier",
    "type_identifier",
    "label_name",
    "blank_identifier",
    "int_literal",
    "float_literal",
    "imaginary_literal",
    "rune_literal",
    "interpreted_string_literal",
    "raw_string_literal",
    "true",
    "false",
    "nil",
    "iota",
    "parenthesized_expression",
    "call_expression",
    "type_conversion_expression",
    "selector_expression",
    "index_expression",
    "type_instantiation_expression",
    "slice_expression",
    "type_assertion_expression",
    "unary_expression",
    "binary_expression",
    "composite_literal",
    "type_arguments",
    "pointer_type",
    "array_type",
    "implicit_length_array_type",
    "slice_type",
    "map_type",
    "channel_type",
    "function_type",
    "struct_type",
    "interface_type",
    "qualified_type",
    "parenthesized_type",
    "negated_type",
    "method_elem",
    "method_spec",
    "variadic_parameter_declaration",
}

# Implicit go/ast nodes with no tree-sitter node of their own.
_EXTRA_WEIGHT = {
    # TypeSwitchStmt carries an AssignStmt/ExprStmt wrapping a TypeAssertExpr.
    "type_switch_statement": 2,
    # [...]T is an ArrayType whose length is an Ellipsis.
    "implicit_length_array_type": 1,
    # Older grammars name a label in front of "}" separately.
    "empty_labeled_statement": 1,
}


def categorize(node: Node) -> Category:
    kind = node.type
    if kind == "comment":
        return Category.SKIPPED
    if kind == "func_literal":
        return Category.NESTED_FUNCTION
    if kind == "keyed_element":
        return Category.KEY_VALUE
    if kind == "literal_value":
        # Only the braces of a typed composite literal are pure grouping; an
        # element literal with an elided type is a composite literal itself.
        parent = node.parent
        if parent is not None and parent.type == "composite_literal":
            return Category.GROUPING
        return Category.COUNTED
    if kind == "type_elem":
        # "A | B" is a binary expression; a single constraint is just its type.
        return Category.COUNTED if _union_operands(node) > 1 else Category.GROUPING
    if kind in _GROUPING_NODES:
        return Category.GROUPING
    if kind in _STATEMENT_NODES or kind in _EXPRESSION_NODES:
        return Category.COUNTED
    return Category.OTHER


def _is_bare_label(node: Node) -> bool:
    # A label in front of "}" labels an implicit EmptyStmt.
    return all(child.type in {"label_name", "comment"} for child in node.named_children)


def _union_operands(node: Node) -> int:
    return sum(1 for child in node.named_children if child.type != "comment")


def _weight(node: Node) -> int:
    kind = node.type
    if kind == "type_elem":
        return _union_operands(node) - 1
    if kind == "labeled_statement" and _is_bare_label(node):
        return 2
    return 1 + _EXTRA_WEIGHT.get(kind, 0)


def _embedded_pointer(node: Node) -> int:
    # An embedded "*T" field has no pointer_type node but is a StarExpr in go/ast.
    if node.type != "field_declaration" or node.child_by_field_name("name") is not None:
        return 0
    return 1 if any(child.type == "*" for child in node.children) else 0


def _key_value_target(node: Node) -> Node | None:
    value = node.child_by_field_name("value")
    if value is not None:
        return value
    named = [child for child in node.named_children if child.type != "comment"]
    return named[-1] if named else None


def count_nodes(node: Node) -> int:
    """Sum of the weights below ``node``; ``node`` itself is not weighed."""
    return _count_all(node.named_children)


def _count_all(roots: list[Node]) -> int:
    # Explicit stack: generated files nest binary expressions thousands deep.
    total = 0
    stack = list(roots)
    while stack:
        node = stack.pop()
        category = categorize(node)
        if category is Category.SKIPPED:
            continue
        if category is Category.NESTED_FUNCTION:
            # The literal is one expression; its body gets its own record.
            total += 1
            continue
        if category is Category.KEY_VALUE:
            value = _key_value_target(node)
            if value is not None:
                stack.append(value)
            continue
        if category is Category.COUNTED:
            total += _weight(node)
        total += _embedded_pointer(node)
        stack.extend(node.named_children)
    return total


def count_body(body: Node | None) -> int:
    """Node count of a function body; a missing body counts as zero."""
    if body is None:
        return 0
    return _count_all([body])
