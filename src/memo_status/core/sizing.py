"""Approximate retained size of cached values.

Sizes cover the owned substructure of a value (a whole syntax subtree, every
record of a symbol index) but never the engine's bookkeeping around it.
"""

from __future__ import annotations

from functools import singledispatch

from memo_status.engine.symbols import SymbolIndex
from memo_status.engine.syntax import Parse, SyntaxNode


@singledispatch
def size_of(value: object) -> int:
    """Return the approximate in-memory size of ``value`` in bytes.

    Shapes without an accounting method report 0.
    """
    return 0


@size_of.register
def _(value: str) -> int:
    return len(value.encode("utf-8"))


@size_of.register(bytes)
@size_of.register(bytearray)
def _(value) -> int:
    return len(value)


@size_of.register
def _(value: SyntaxNode) -> int:
    return value.memory_size_of_subtree()


@size_of.register
def _(value: Parse) -> int:
    return value.tree.memory_size_of_subtree()


@size_of.register
def _(value: SymbolIndex) -> int:
    return value.memory_size()
