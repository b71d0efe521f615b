"""Tests for the in-memory query engine."""

import pytest

from memo_status.core.enumeration import TableEntry, TableId, enumerate_table
from memo_status.engine.database import MacroFile, RootDatabase
from memo_status.engine.symbols import FileSymbol, SymbolIndex
from memo_status.engine.syntax import (
    SyntaxKind,
    macro_call_argument,
    macro_call_name,
    macro_calls,
    parse_text,
)
from memo_status.engine.tables import QueryTable


class TestParse:
    def test_lossless(self):
        text = "fn main()\n  debug!(x, y)\n\nlet é = 1;\n"
        assert parse_text(text).tree.text() == text

    def test_line_kinds(self):
        tree = parse_text("a\nlog!(b)\n").tree
        assert [c.kind for c in tree.children] == [SyntaxKind.LINE, SyntaxKind.MACRO_CALL]

    def test_unbalanced_parentheses(self):
        parse = parse_text("ok()\nbad(\n")
        assert parse.errors == ("line 2: unbalanced parentheses",)
        assert not parse.ok

    def test_empty_text(self):
        parse = parse_text("")
        assert parse.ok
        assert parse.tree.children == ()

    def test_macro_call_parts(self):
        (call,) = macro_calls(parse_text("vec!(1, (2))\n").tree)
        assert macro_call_name(call) == "vec"
        assert macro_call_argument(call) == "1, (2)"


class TestSymbolIndex:
    def test_definitions_only(self, loaded_db):
        index = loaded_db.library_symbols(1)
        assert [s.name for s in index] == ["File", "MAX_OPEN", "open", "read"]
        assert len(index) == 4

    def test_search_by_prefix(self):
        index = SymbolIndex(
            [FileSymbol("read", "fn", 0, 1), FileSymbol("open", "fn", 0, 2), FileSymbol("reader", "struct", 0, 3)]
        )
        assert [s.name for s in index.search("read")] == ["read", "reader"]
        assert index.search("zzz") == []


class TestQueryTable:
    def test_get_computes_once(self):
        calls = []

        def compute(key):
            calls.append(key)
            return key * 2

        table = QueryTable("double", compute)
        assert table.get(3) == 6
        assert table.get(3) == 6
        assert calls == [3]

    def test_input_table_requires_set(self):
        with pytest.raises(KeyError):
            QueryTable("input").get("missing")

    def test_entries_do_not_compute(self):
        table = QueryTable("double", lambda key: key * 2)
        assert table.entries() == []
        assert table.peek(1) is None

    def test_discarded_values_stay_tracked(self):
        table = QueryTable("double", lambda key: key * 2)
        table.get(1)
        table.get(2)
        assert table.discard_values() == 2
        assert sorted(table.entries()) == [TableEntry(1, None), TableEntry(2, None)]
        assert table.get(1) == 2
        assert table.peek(1) == 2


class TestRootDatabase:
    def test_macro_expansions(self, loaded_db):
        first, second = loaded_db.macro_files(0)
        assert first == MacroFile(0, 0)
        assert loaded_db.parse_macro(first).name == "debug"
        assert loaded_db.parse_macro(first).tree.text() == "fn helper"
        assert loaded_db.parse_macro(second).tree is None

    def test_collect_garbage(self, loaded_db, clock):
        clock.advance(30)
        dropped = loaded_db.collect_garbage()
        assert dropped == 4
        assert loaded_db.last_gc == clock()
        parse_entries = list(enumerate_table(loaded_db, TableId.PARSE))
        assert len(parse_entries) == 2
        assert all(entry.value is None for entry in parse_entries)

    def test_collect_garbage_keeps_inputs_and_indexes(self, loaded_db):
        loaded_db.collect_garbage()
        assert loaded_db.table(TableId.FILE_TEXT).peek(0) is not None
        assert loaded_db.table(TableId.LIBRARY_SYMBOLS).peek(1) is not None

    def test_last_gc_starts_at_creation(self, clock):
        assert RootDatabase(clock=clock).last_gc == clock()
