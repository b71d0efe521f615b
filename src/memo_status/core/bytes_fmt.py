"""Human-readable byte counts.

// [LAW:one-source-of-truth] bytes/kb/mb thresholds live here and nowhere else.
"""

from __future__ import annotations

from dataclasses import dataclass

_UNIT_LIMIT = 4096


def format_bytes(count: int) -> str:
    """Render a byte count as ``N bytes``, ``Nkb`` or ``Nmb`` (truncating)."""
    if count < 0:
        raise ValueError(f"byte count must be non-negative, got {count}")
    if count < _UNIT_LIMIT:
        return f"{count} bytes"
    kb = count // 1024
    if kb < _UNIT_LIMIT:
        return f"{kb}kb"
    mb = kb // 1024
    return f"{mb}mb"


@dataclass(frozen=True)
class Bytes:
    """Immutable byte count; ``+=`` rebinds to a larger count."""

    count: int = 0

    def __add__(self, size: int) -> "Bytes":
        return Bytes(self.count + size)

    __iadd__ = __add__

    def __int__(self) -> int:
        return self.count

    def __str__(self) -> str:
        return format_bytes(self.count)
