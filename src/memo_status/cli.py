"""CLI entry point for memo-status."""

import argparse
import logging
import sys
from pathlib import Path

import memo_status.io.logging_setup
import memo_status.settings
from memo_status.app.memory_probe import MemoryProbeError, select_probe
from memo_status.core.status import status
from memo_status.engine.database import RootDatabase

logger = logging.getLogger(__name__)

LOCAL_ROOT = 0


def _collect_files(paths: list[str]) -> list[Path]:
    files: list[Path] = []
    for raw in paths:
        path = Path(raw)
        if path.is_dir():
            files.extend(sorted(p for p in path.rglob("*") if p.is_file()))
        elif path.is_file():
            files.append(path)
        else:
            logger.warning("skipping missing path %s", path)
    return files


def load_database(local: list[str], libraries: list[str]) -> RootDatabase:
    """Load files into a fresh database and compute every derived query once."""
    db = RootDatabase()
    next_file_id = 0
    roots = [(LOCAL_ROOT, local, False)]
    roots.extend((root_id, [lib], True) for root_id, lib in enumerate(libraries, start=1))
    for root_id, paths, is_library in roots:
        file_ids = []
        for path in _collect_files(paths):
            try:
                text = path.read_text(encoding="utf-8")
            except (UnicodeDecodeError, OSError) as exc:
                logger.warning("skipping unreadable file %s: %s", path, exc)
                continue
            db.set_file_text(next_file_id, text)
            file_ids.append(next_file_id)
            next_file_id += 1
        db.set_source_root(root_id, file_ids, is_library=is_library)
        for file_id in file_ids:
            db.parse(file_id)
            for macro_file in db.macro_files(file_id):
                db.parse_macro(macro_file)
    for root_id in db.library_roots():
        db.library_symbols(root_id)
    return db


def main(argv=None):
    parser = argparse.ArgumentParser(description="Memory status of the in-memory query database")
    parser.add_argument("paths", nargs="*", help="Files or directories of the local source root")
    parser.add_argument(
        "--library",
        action="append",
        default=[],
        metavar="PATH",
        help="Library source root to index for symbols (repeatable)",
    )
    parser.add_argument(
        "--gc", action="store_true", help="Discard cached syntax trees before reporting"
    )
    profiling = parser.add_mutually_exclusive_group()
    profiling.add_argument(
        "--profile", dest="profile", action="store_true", default=None,
        help="Report tracemalloc/RSS memory (default: settings file / MEMO_STATUS_PROFILING)",
    )
    profiling.add_argument("--no-profile", dest="profile", action="store_false")
    parser.set_defaults(profile=None)
    args = parser.parse_args(argv)

    memo_status.io.logging_setup.configure()
    profiling_enabled = (
        memo_status.settings.load_profiling_enabled() if args.profile is None else args.profile
    )
    # Fail before loading anything if profiling is requested but broken.
    try:
        probe = select_probe(profiling_enabled)
    except MemoryProbeError as exc:
        logger.error("memory profiling unavailable: %s", exc)
        return 2

    db = load_database(args.paths, args.library)
    if args.gc:
        db.collect_garbage()

    print(status(db, probe=probe, slow_threshold_ms=memo_status.settings.load_slow_report_ms()))
    return 0


if __name__ == "__main__":
    sys.exit(main())
