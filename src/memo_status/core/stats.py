"""Per-table accumulation of entry counts and retained sizes.

Every table shape goes through the same fold, accumulate(); tables differ
only in how a cached value is unwrapped, sized and counted.

// [LAW:one-source-of-truth] Category labels and line grammar are defined in CATEGORIES.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Any

from memo_status.core.bytes_fmt import Bytes
from memo_status.core.enumeration import QueryDatabase, TableEntry, TableId, enumerate_table
from memo_status.core.sizing import size_of as default_size_of


@dataclass(frozen=True)
class CategorySummary:
    total_entries: int = 0
    retained_entries: int = 0
    retained_size: Bytes = field(default_factory=Bytes)


def accumulate(
    entries: Iterable[TableEntry],
    *,
    size_of: Callable[[Any], int] = default_size_of,
    unwrap: Callable[[Any], Any] | None = None,
    count_of: Callable[[Any], int] | None = None,
) -> CategorySummary:
    """Fold table entries into a CategorySummary in a single pass.

    Args:
        entries: ``(key, value-or-None)`` pairs, in any order.
        size_of: bytes retained by one materialized value.
        unwrap: maps a present value to the sized value, or None when the
            value holds nothing worth sizing.
        count_of: when given, a materialized value contributes ``count_of(value)``
            to both the total and the retained count instead of 1 (absent values
            contribute nothing).
    """
    total = 0
    retained = 0
    size = Bytes()
    for entry in entries:
        value = entry.value
        if value is not None and unwrap is not None:
            value = unwrap(value)
        if value is None:
            if count_of is None:
                total += 1
            continue
        weight = 1 if count_of is None else count_of(value)
        total += weight
        retained += weight
        size += size_of(value)
    return CategorySummary(total, retained, size)


def _parse_tree(parse):
    return parse.tree


def _macro_tree(macro_parse):
    return macro_parse.tree


@dataclass(frozen=True)
class Category:
    name: str
    table_id: TableId
    render: Callable[[CategorySummary], str]
    unwrap: Callable[[Any], Any] | None = None
    count_of: Callable[[Any], int] | None = None

    def collect(self, db: QueryDatabase, size_of: Callable[[Any], int] = default_size_of) -> CategorySummary:
        return accumulate(
            enumerate_table(db, self.table_id),
            size_of=size_of,
            unwrap=self.unwrap,
            count_of=self.count_of,
        )


def render_files(summary: CategorySummary) -> str:
    return f"{summary.total_entries} ({summary.retained_size}) files"


def render_symbols(summary: CategorySummary) -> str:
    return f"{summary.total_entries} ({summary.retained_size}) symbols"


def render_trees(summary: CategorySummary) -> str:
    return f"{summary.total_entries} trees, {summary.retained_entries} ({summary.retained_size}) retained"


def render_macro_trees(summary: CategorySummary) -> str:
    return f"{render_trees(summary)} (macros)"


FILES = Category("files", TableId.FILE_TEXT, render_files)
LIBRARY_SYMBOLS = Category("symbols", TableId.LIBRARY_SYMBOLS, render_symbols, count_of=len)
SYNTAX_TREES = Category("syntax_trees", TableId.PARSE, render_trees, unwrap=_parse_tree)
MACRO_SYNTAX_TREES = Category(
    "macro_syntax_trees", TableId.PARSE_MACRO, render_macro_trees, unwrap=_macro_tree
)

# Report order. Operators parse the report by line position.
CATEGORIES: tuple[Category, ...] = (FILES, LIBRARY_SYMBOLS, SYNTAX_TREES, MACRO_SYNTAX_TREES)


def file_stats(db: QueryDatabase) -> CategorySummary:
    return FILES.collect(db)


def symbol_stats(db: QueryDatabase) -> CategorySummary:
    return LIBRARY_SYMBOLS.collect(db)


def syntax_tree_stats(db: QueryDatabase) -> CategorySummary:
    return SYNTAX_TREES.collect(db)


def macro_syntax_tree_stats(db: QueryDatabase) -> CategorySummary:
    return MACRO_SYNTAX_TREES.collect(db)
