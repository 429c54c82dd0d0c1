from __future__ import annotations

from gocost.analyze.directives import build_comment_map, comment_groups
from gocost.analyze.functions import analyze_source
from gocost.analyze.parser import parse_source


def _noinline(src: str) -> list[bool]:
    return [r.has_noinline for r in analyze_source(src)]


def test_doc_comment_directive() -> None:
    src = """package main

//go:noinline
func slow() int {
	return 1
}

// fast has no directive.
func fast() int {
	return 2
}
"""
    assert _noinline(src) == [True, False]


def test_directive_inside_doc_group() -> None:
    src = """package main

// compute does the work.
//
//go:noinline
func compute() {}
"""
    assert _noinline(src) == [True]


def test_unrelated_comment_elsewhere_does_not_match() -> None:
    src = """package main

func a() int {
	// go:noinline mentioned inside a body
	return 1
}

func b() int {
	return 2
}

// go:noinline far from any declaration
"""
    assert _noinline(src) == [False, False]


def test_prose_mention_is_a_match() -> None:
    src = """package main

// Do not add go:noinline here, it is fast enough.
func quick() {}
"""
    assert _noinline(src) == [True]


def test_directive_is_case_sensitive() -> None:
    src = """package main

//GO:NOINLINE
func f() {}
"""
    assert _noinline(src) == [False]


def test_trailing_comment_on_closing_line_belongs_to_function() -> None:
    src = """package main

func tiny() int { return 1 } // go:noinline

func other() int { return 2 }
"""
    assert _noinline(src) == [True, False]


def test_comment_after_function_with_blank_line_belongs_to_previous() -> None:
    src = """package main

func first() {
}
// go:noinline

func second() {}
"""
    assert _noinline(src) == [True, False]


def test_method_declaration_directive() -> None:
    src = """package main

type T struct{}

//go:noinline
func (t *T) M() {}
"""
    assert _noinline(src) == [True]


def test_function_literal_never_reports_directive() -> None:
    src = """package main

//go:noinline
var handler = func() int { return 1 }
"""
    records = analyze_source(src)
    assert len(records) == 1
    assert records[0].has_noinline is False


def test_comment_groups_split_on_blank_lines() -> None:
    src = """package main

// one
// two

// three
func f() {}
"""
    tree, src_bytes = parse_source(src)
    groups = [g for g, _, _ in comment_groups(tree.root_node, src_bytes)]
    assert [g.texts for g in groups] == [("// one", "// two"), ("// three",)]
    cmap = build_comment_map(tree.root_node, src_bytes)
    func = tree.root_node.named_children[-1]
    assert [g.texts for g in cmap[func.start_byte]] == [("// one", "// two"), ("// three",)]
