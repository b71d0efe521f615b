"""In-memory incremental query database.

Inputs are file texts and source roots. Everything else (parse trees, macro
expansions, library symbol indexes) is derived on first use and memoized
until collect_garbage() discards it.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from memo_status.core.enumeration import TableId
from memo_status.engine.symbols import SymbolIndex
from memo_status.engine.syntax import (
    Parse,
    SyntaxNode,
    macro_call_argument,
    macro_call_name,
    macro_calls,
    parse_text,
)
from memo_status.engine.tables import QueryTable

logger = logging.getLogger(__name__)

FileId = int
SourceRootId = int


@dataclass(frozen=True, order=True)
class MacroFile:
    """The expansion of the ``index``-th macro call in ``file_id``."""

    file_id: FileId
    index: int


@dataclass(frozen=True)
class SourceRoot:
    files: tuple[FileId, ...]
    is_library: bool = False


@dataclass(frozen=True)
class MacroParse:
    """Expansion result; ``tree`` is None when the macro expands to nothing."""

    name: str
    tree: SyntaxNode | None


class RootDatabase:
    # Tables whose values are cheap to rebuild from inputs.
    GC_TABLES = (TableId.PARSE, TableId.PARSE_MACRO)

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._roots: dict[SourceRootId, SourceRoot] = {}
        self._tables: dict[TableId, QueryTable] = {
            TableId.FILE_TEXT: QueryTable("file_text"),
            TableId.PARSE: QueryTable("parse", self._compute_parse),
            TableId.PARSE_MACRO: QueryTable("parse_macro", self._compute_parse_macro),
            TableId.LIBRARY_SYMBOLS: QueryTable("library_symbols", self._compute_library_symbols),
        }
        self.last_gc = clock()

    def table(self, table_id: TableId) -> QueryTable:
        return self._tables[TableId(table_id)]

    # ─── Inputs ──────────────────────────────────────────────────────────

    def set_file_text(self, file_id: FileId, text: str) -> None:
        self._tables[TableId.FILE_TEXT].set(file_id, text)

    def set_source_root(self, root_id: SourceRootId, files: Iterable[FileId], *, is_library: bool = False) -> None:
        self._roots[root_id] = SourceRoot(tuple(files), is_library)

    def source_root(self, root_id: SourceRootId) -> SourceRoot:
        return self._roots[root_id]

    def library_roots(self) -> list[SourceRootId]:
        return sorted(root_id for root_id, root in self._roots.items() if root.is_library)

    # ─── Queries ─────────────────────────────────────────────────────────

    def file_text(self, file_id: FileId) -> str:
        return self._tables[TableId.FILE_TEXT].get(file_id)

    def parse(self, file_id: FileId) -> Parse:
        return self._tables[TableId.PARSE].get(file_id)

    def macro_files(self, file_id: FileId) -> list[MacroFile]:
        return [MacroFile(file_id, i) for i, _ in enumerate(macro_calls(self.parse(file_id).tree))]

    def parse_macro(self, macro_file: MacroFile) -> MacroParse:
        return self._tables[TableId.PARSE_MACRO].get(macro_file)

    def library_symbols(self, root_id: SourceRootId) -> SymbolIndex:
        return self._tables[TableId.LIBRARY_SYMBOLS].get(root_id)

    def _compute_parse(self, file_id: FileId) -> Parse:
        return parse_text(self.file_text(file_id))

    def _compute_parse_macro(self, macro_file: MacroFile) -> MacroParse:
        call = macro_calls(self.parse(macro_file.file_id).tree)[macro_file.index]
        expansion = macro_call_argument(call)
        tree = parse_text(expansion).tree if expansion.strip() else None
        return MacroParse(macro_call_name(call), tree)

    def _compute_library_symbols(self, root_id: SourceRootId) -> SymbolIndex:
        root = self._roots[root_id]
        return SymbolIndex.for_files((file_id, self.parse(file_id).tree) for file_id in root.files)

    # ─── Maintenance ─────────────────────────────────────────────────────

    def collect_garbage(self) -> int:
        """Discard derived syntax trees and stamp ``last_gc``. Returns values dropped."""
        dropped = sum(self._tables[table_id].discard_values() for table_id in self.GC_TABLES)
        self.last_gc = self._clock()
        logger.debug("collect_garbage dropped=%d", dropped)
        return dropped
