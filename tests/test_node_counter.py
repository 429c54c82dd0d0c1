from __future__ import annotations

from gocost.analyze.functions import analyze_source


def _single(src: str):
    records = analyze_source(src)
    assert len(records) == 1
    return records[0]


def test_return_of_binary_expression() -> None:
    rec = _single(
        """package main

func add(a, b int) int {
	return a + b
}
"""
    )
    assert rec.line == 3
    assert rec.ast_count == 4


def test_empty_body_counts_zero() -> None:
    rec = _single("package main\n\nfunc noop() {}\n")
    assert rec.ast_count == 0
    assert rec.func_call_count == 0
    assert rec.has_any_calls is False


def test_for_clause_counts_each_statement_and_expression() -> None:
    rec = _single(
        """package main

func loop(n int) {
	for i := 0; i < n; i++ {
	}
}
"""
    )
    # ForStmt, AssignStmt(i, 0), BinaryExpr(i, n), IncDecStmt(i)
    assert rec.ast_count == 9


def test_if_statement_blocks_are_not_counted() -> None:
    rec = _single(
        """package main

func sign(x int) int {
	if x > 0 {
		return 1
	}
	return 0
}
"""
    )
    assert rec.ast_count == 8


def test_selector_call_counts_every_identifier() -> None:
    rec = _single(
        """package main

import "fmt"

func hello() {
	fmt.Println("hi")
}
"""
    )
    # ExprStmt, CallExpr, SelectorExpr, fmt, Println, "hi"
    assert rec.ast_count == 6


def test_composite_literal_key_is_invisible() -> None:
    records = analyze_source(
        """package main

func plain() map[string]int {
	return map[string]int{"k": 1}
}

func keyed() map[string]int {
	return map[string]int{key(): 1}
}

func key() string {
	return "k"
}
"""
    )
    plain, keyed, _ = records
    assert plain.ast_count == keyed.ast_count
    # ReturnStmt, CompositeLit, MapType, string, int, value 1
    assert plain.ast_count == 6


def test_key_value_counts_value_subtree() -> None:
    records = analyze_source(
        """package main

type pair struct{ x, y string }

func build() pair {
	return pair{x: compute(), y: "a"}
}

func compute() string { return "" }
"""
    )
    build = records[0]
    # ReturnStmt, CompositeLit, pair, compute() (call + ident), "a"
    assert build.ast_count == 6
    assert build.func_call_count == 1


def test_nested_literal_counts_as_one_node_in_outer() -> None:
    records = analyze_source(
        """package main

func outer() {
	f := func() {
		a := 1
		a++
	}
	f()
}
"""
    )
    assert [r.line for r in records] == [3, 4]
    outer, inner = records
    # AssignStmt, f, FuncLit, ExprStmt, CallExpr, f
    assert outer.ast_count == 6
    assert inner.ast_count == 5


def test_comments_inside_body_are_ignored() -> None:
    with_comment = _single(
        """package main

func a() int {
	// a comment
	return 1 /* another */
}
"""
    )
    assert with_comment.ast_count == 2


def test_counts_are_non_negative() -> None:
    records = analyze_source(
        """package main

func many(xs []int) (total int) {
	for _, x := range xs {
		switch {
		case x > 10:
			total += x
		default:
			total--
		}
	}
	return
}
"""
    )
    assert records
    for rec in records:
        assert rec.ast_count >= 0
        assert rec.func_call_count >= 0


def test_label_before_closing_brace_labels_empty_statement() -> None:
    rec = _single(
        """package main

func jumps() {
L:
	for {
		break L
	}
	goto M
M:
}
"""
    )
    # LabeledStmt, L, ForStmt, BranchStmt, L, BranchStmt, M, LabeledStmt, M, EmptyStmt
    assert rec.ast_count == 10


def test_deeply_nested_expression() -> None:
    terms = " + ".join(f'"s{i}"' for i in range(1500))
    rec = _single(f"package main\n\nfunc table() string {{\n\treturn {terms}\n}}\n")
    # ReturnStmt, 1499 BinaryExpr, 1500 BasicLit
    assert rec.ast_count == 3000
