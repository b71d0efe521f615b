"""Symbol indexes for library source roots."""

from __future__ import annotations

from bisect import bisect_left
from collections.abc import Iterable
from dataclasses import dataclass

from memo_status.engine.syntax import SyntaxKind, SyntaxNode

DEFINITION_KEYWORDS = frozenset({"fn", "def", "struct", "class", "enum", "const", "trait"})

# Accounting model used by SymbolIndex.memory_size().
SYMBOL_RECORD_SIZE = 40


@dataclass(frozen=True, order=True)
class FileSymbol:
    name: str
    kind: str
    file_id: int
    line: int


def file_symbols(file_id: int, tree: SyntaxNode) -> list[FileSymbol]:
    """Definitions of the form ``<keyword> <name>`` at the start of a line."""
    symbols: list[FileSymbol] = []
    for lineno, line in enumerate(tree.children, start=1):
        words = [t.token_text for t in line.children if t.kind is SyntaxKind.IDENT]
        significant = [t for t in line.children if t.kind is not SyntaxKind.WHITESPACE]
        if len(words) < 2 or not significant or significant[0].token_text != words[0]:
            continue
        if words[0] in DEFINITION_KEYWORDS and significant[1].token_text == words[1]:
            symbols.append(FileSymbol(words[1], words[0], file_id, lineno))
    return symbols


class SymbolIndex:
    """Immutable, name-sorted collection of symbols."""

    def __init__(self, symbols: Iterable[FileSymbol] = ()) -> None:
        self._symbols: tuple[FileSymbol, ...] = tuple(sorted(symbols))
        self._names = [s.name for s in self._symbols]

    @classmethod
    def for_files(cls, files: Iterable[tuple[int, SyntaxNode]]) -> "SymbolIndex":
        symbols: list[FileSymbol] = []
        for file_id, tree in files:
            symbols.extend(file_symbols(file_id, tree))
        return cls(symbols)

    def __len__(self) -> int:
        return len(self._symbols)

    def __iter__(self):
        return iter(self._symbols)

    def memory_size(self) -> int:
        """Bytes held by the index records and their names."""
        return sum(SYMBOL_RECORD_SIZE + len(s.name.encode("utf-8")) for s in self._symbols)

    def search(self, prefix: str) -> list[FileSymbol]:
        """All symbols whose name starts with ``prefix``."""
        start = bisect_left(self._names, prefix)
        matches: list[FileSymbol] = []
        for symbol in self._symbols[start:]:
            if not symbol.name.startswith(prefix):
                break
            matches.append(symbol)
        return matches
