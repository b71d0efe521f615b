"""Memo tables for the in-memory query engine."""

from __future__ import annotations

import threading
from collections.abc import Callable
from typing import Any

from memo_status.core.enumeration import TableEntry

_MISSING = object()


class QueryTable:
    """Thread-safe memo of ``key -> value`` for one query.

    Input tables are filled with set(); derived tables compute lazily in get().
    A key whose value was discarded stays tracked and reports ``None`` from
    entries() until it is recomputed.
    """

    def __init__(self, name: str, compute: Callable[[Any], Any] | None = None) -> None:
        self.name = name
        self._compute = compute
        self._memo: dict[Any, Any] = {}
        self._present: set[Any] = set()
        self._lock = threading.RLock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._memo)

    def __repr__(self) -> str:
        return f"QueryTable({self.name!r}, {len(self)} entries)"

    def set(self, key: Any, value: Any) -> None:
        with self._lock:
            self._memo[key] = value
            self._present.add(key)

    def peek(self, key: Any, default: Any = None) -> Any:
        """Cached value for ``key`` without computing it."""
        with self._lock:
            if key in self._present:
                return self._memo[key]
            return default

    def get(self, key: Any) -> Any:
        with self._lock:
            if key in self._present:
                return self._memo[key]
        if self._compute is None:
            raise KeyError(f"{self.name}: no input set for {key!r}")
        value = self._compute(key)
        self.set(key, value)
        return value

    def discard_values(self) -> int:
        """Drop every materialized value, keeping the keys. Returns how many were dropped."""
        with self._lock:
            dropped = len(self._present)
            for key in self._present:
                self._memo[key] = _MISSING
            self._present.clear()
            return dropped

    def entries(self) -> list[TableEntry]:
        with self._lock:
            return [
                TableEntry(key, value if key in self._present else None)
                for key, value in self._memo.items()
            ]
