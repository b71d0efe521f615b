"""Seam between the status reporter and the query engine.

// [LAW:locality-or-seam] The reporter only sees tables through this contract.
"""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum
from typing import Any, NamedTuple, Protocol


class TableId(str, Enum):
    FILE_TEXT = "file_text"
    PARSE = "parse"
    PARSE_MACRO = "parse_macro"
    LIBRARY_SYMBOLS = "library_symbols"


class TableEntry(NamedTuple):
    """A memoized key and its value; ``value`` is None when not materialized."""

    key: Any
    value: Any = None


class EnumerableTable(Protocol):
    def entries(self) -> Iterable[TableEntry]:
        """Snapshot of cached entries. Must not compute missing values."""
        ...


class QueryDatabase(Protocol):
    last_gc: float

    def table(self, table_id: TableId) -> EnumerableTable:
        ...


def enumerate_table(db: QueryDatabase, table_id: TableId) -> Iterable[TableEntry]:
    """Currently cached ``(key, value-or-None)`` pairs of one table, in no particular order."""
    return db.table(table_id).entries()
