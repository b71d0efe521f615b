"""Status report for the query database.

Walks every tracked table once, then appends process memory and the age of
the last garbage collection::

    12 (40kb) files
    310 (14kb) symbols
    12 trees, 9 (1mb) retained
    4 trees, 3 (2104 bytes) retained (macros)

    0 bytes allocated 0 bytes resident
    gc 17 seconds ago

The report only reads what is already cached; it never computes a value.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

from memo_status.app.memory_probe import MemoryProbe, NullProbe
from memo_status.core.enumeration import QueryDatabase
from memo_status.core.stats import CATEGORIES
from memo_status.io.perf_logging import monitor_slow_path

logger = logging.getLogger(__name__)


def gc_age_seconds(last_gc: float, now: float) -> int:
    """Whole seconds from ``last_gc`` to ``now``; 0 for timestamps in the future."""
    return max(0, int(now - last_gc))


def build_report(
    db: QueryDatabase,
    last_gc: float,
    *,
    probe: MemoryProbe | None = None,
    clock: Callable[[], float] = time.monotonic,
    slow_threshold_ms: float | None = None,
) -> str:
    """Render the status report. ``last_gc`` is a ``clock()`` timestamp."""
    probe = probe if probe is not None else NullProbe()
    with monitor_slow_path("status.build_report", logger=logger, threshold_ms=slow_threshold_ms):
        category_lines = [category.render(category.collect(db)) for category in CATEGORIES]
        memory = probe.current()
        age = gc_age_seconds(last_gc, clock())
    return "\n".join(category_lines) + f"\n\n{memory}\ngc {age} seconds ago"


def status(
    db: QueryDatabase,
    *,
    probe: MemoryProbe | None = None,
    clock: Callable[[], float] = time.monotonic,
    slow_threshold_ms: float | None = None,
) -> str:
    """build_report() against the database's own ``last_gc`` stamp."""
    return build_report(
        db, db.last_gc, probe=probe, clock=clock, slow_threshold_ms=slow_threshold_ms
    )
