"""Process-wide memory counters for the status report.

// [LAW:locality-or-seam] Memory diagnostics are centralized in this module.
// [LAW:dataflow-not-control-flow] Profiling on/off selects a probe object once; callers never branch.
"""

from __future__ import annotations

import logging
import tracemalloc
from dataclasses import dataclass, field
from typing import Protocol

import psutil

from memo_status.core.bytes_fmt import Bytes

logger = logging.getLogger(__name__)

_TRACE_FRAMES = 25


class MemoryProbeError(RuntimeError):
    """Memory profiling is configured but its counters cannot be refreshed."""


@dataclass(frozen=True)
class MemorySnapshot:
    allocated: Bytes = field(default_factory=Bytes)
    resident: Bytes = field(default_factory=Bytes)

    def __str__(self) -> str:
        return f"{self.allocated} allocated {self.resident} resident"


class MemoryProbe(Protocol):
    def current(self) -> MemorySnapshot:
        ...


class NullProbe:
    """Probe used when profiling is disabled: always reports zero."""

    def current(self) -> MemorySnapshot:
        return MemorySnapshot(Bytes(0), Bytes(0))


class TracemallocProbe:
    """Allocated bytes from tracemalloc, resident bytes from the OS.

    Starts tracing if nothing else has. Construction performs one refresh so
    a broken setup fails at startup instead of on the first report.
    """

    def __init__(self, frames: int = _TRACE_FRAMES, process: psutil.Process | None = None) -> None:
        if not tracemalloc.is_tracing():
            tracemalloc.start(frames)
            logger.info("tracemalloc started frames=%d", frames)
        self._process = process if process is not None else psutil.Process()
        self._refresh()

    def _refresh(self) -> None:
        if not tracemalloc.is_tracing():
            raise MemoryProbeError("tracemalloc is not tracing; memory profiling was stopped")

    def current(self) -> MemorySnapshot:
        self._refresh()
        allocated, _peak = tracemalloc.get_traced_memory()
        resident = self._process.memory_info().rss
        return MemorySnapshot(Bytes(int(allocated)), Bytes(int(resident)))


def select_probe(profiling_enabled: bool) -> MemoryProbe:
    """Pick the probe strategy for this process."""
    if profiling_enabled:
        return TracemallocProbe()
    return NullProbe()
