"""Tests for size_of() accounting per value shape."""

from memo_status.core.sizing import size_of
from memo_status.engine.symbols import SYMBOL_RECORD_SIZE, FileSymbol, SymbolIndex
from memo_status.engine.syntax import (
    CHILD_SLOT_SIZE,
    NODE_HEADER_SIZE,
    SyntaxKind,
    SyntaxNode,
    parse_text,
)


def test_text_is_sized_in_utf8_bytes():
    assert size_of("") == 0
    assert size_of("hello") == 5
    assert size_of("héllo") == 6


def test_raw_bytes():
    assert size_of(b"abc") == 3
    assert size_of(bytearray(10)) == 10


def test_syntax_tree_counts_whole_subtree():
    tree = parse_text("fn helper").tree
    # root(1 child) + line(3 children) + tokens "fn", " ", "helper"
    expected = (
        (NODE_HEADER_SIZE + CHILD_SLOT_SIZE)
        + (NODE_HEADER_SIZE + 3 * CHILD_SLOT_SIZE)
        + (NODE_HEADER_SIZE + 2)
        + (NODE_HEADER_SIZE + 1)
        + (NODE_HEADER_SIZE + 6)
    )
    assert expected == 201
    assert size_of(tree) == expected


def test_subtree_is_larger_than_any_child():
    tree = parse_text("a\nb\n").tree
    assert size_of(tree) > size_of(tree.children[0])


def test_shared_node_counted_once_within_subtree():
    token = SyntaxNode(SyntaxKind.IDENT, token_text="abc")
    parent = SyntaxNode(SyntaxKind.LINE, (token, token))
    assert size_of(parent) == (NODE_HEADER_SIZE + 2 * CHILD_SLOT_SIZE) + (NODE_HEADER_SIZE + 3)


def test_empty_tree_is_header_only():
    assert size_of(SyntaxNode(SyntaxKind.SOURCE_FILE)) == NODE_HEADER_SIZE


def test_parse_is_sized_by_its_tree():
    parse = parse_text("x = (1\n")
    assert parse.errors
    assert size_of(parse) == size_of(parse.tree)


def test_symbol_index_footprint():
    index = SymbolIndex([FileSymbol("open", "fn", 0, 1), FileSymbol("MAX", "const", 0, 2)])
    assert size_of(index) == 2 * SYMBOL_RECORD_SIZE + len("open") + len("MAX")
    assert size_of(SymbolIndex()) == 0


def test_unknown_shape_reports_zero():
    assert size_of(object()) == 0
    assert size_of(42) == 0
