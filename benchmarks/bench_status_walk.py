"""Repeatable benchmark for the status report walk over a synthetic database.

Builds N files (with macro calls and a library root), computes every derived
query once, then times repeated status() calls and the memory the walk
allocates.

Usage:
    uv run python benchmarks/bench_status_walk.py              # default 2000 files
    uv run python benchmarks/bench_status_walk.py --files 20000
    uv run python benchmarks/bench_status_walk.py --json        # machine-readable output
"""

import argparse
import json
import sys
import time
import tracemalloc

from memo_status.core.status import status
from memo_status.engine.database import RootDatabase


def build_database(n_files: int) -> RootDatabase:
    """One local root with every file, one library root with every tenth file."""
    db = RootDatabase()
    for file_id in range(n_files):
        db.set_file_text(
            file_id,
            f"fn item_{file_id}(a, b)\n"
            f"struct Record{file_id}\n"
            f"trace!(let v = {file_id})\n"
            "let total = a + b\n",
        )
    db.set_source_root(0, range(n_files))
    db.set_source_root(1, range(0, n_files, 10), is_library=True)
    for file_id in range(n_files):
        db.parse(file_id)
        for macro_file in db.macro_files(file_id):
            db.parse_macro(macro_file)
    db.library_symbols(1)
    return db


def run_benchmark(n_files: int, runs: int) -> dict:
    db = build_database(n_files)

    timings_ms: list[float] = []
    tracemalloc.start()
    mem_before = tracemalloc.get_traced_memory()
    report = ""
    for _ in range(runs):
        started = time.perf_counter_ns()
        report = status(db)
        timings_ms.append((time.perf_counter_ns() - started) / 1_000_000)
    mem_after = tracemalloc.get_traced_memory()
    tracemalloc.stop()

    timings_ms.sort()
    return {
        "n_files": n_files,
        "runs": runs,
        "min_ms": round(timings_ms[0], 2),
        "p50_ms": round(timings_ms[len(timings_ms) // 2], 2),
        "max_ms": round(timings_ms[-1], 2),
        "walk_peak_kb": round((mem_after[1] - mem_before[0]) / 1024, 1),
        "report": report,
    }


def print_report(results: dict) -> None:
    print(f"\n{'='*60}")
    print("  Status Walk Benchmark")
    print(f"{'='*60}")
    print(f"  Files:      {results['n_files']} ({results['runs']} runs)")
    print(f"  Walk time:  min={results['min_ms']:.1f}ms  "
          f"p50={results['p50_ms']:.1f}ms  max={results['max_ms']:.1f}ms")
    print(f"  Walk peak:  {results['walk_peak_kb']:.0f} KB")
    print()
    for line in results["report"].splitlines():
        print(f"  {line}")
    print(f"{'='*60}\n")


def main() -> None:
    parser = argparse.ArgumentParser(description="Status report walk benchmark")
    parser.add_argument("--files", type=int, default=2000,
                        help="Number of synthetic files (default: 2000)")
    parser.add_argument("--runs", type=int, default=20,
                        help="Number of timed status() calls (default: 20)")
    parser.add_argument("--json", action="store_true",
                        help="Output machine-readable JSON")
    args = parser.parse_args()

    results = run_benchmark(args.files, max(1, args.runs))

    if args.json:
        json.dump(results, sys.stdout, indent=2)
        sys.stdout.write("\n")
    else:
        print_report(results)


if __name__ == "__main__":
    main()
