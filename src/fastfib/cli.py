"""Command-line interface.

Provides the `fastfib` command with subcommands for:
- Computing a single Fibonacci number
- Listing the algorithms
- Running the benchmark suite
- Listing and comparing saved benchmark sessions
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from fastfib.algorithms import DESCRIPTIONS, available_algorithms, get_algorithm
from fastfib.benchmark.database import BenchmarkDatabase
from fastfib.benchmark.runner import (
    DEFAULT_SUITE_PATH,
    BenchmarkProgress,
    BenchmarkRunner,
    format_results_table,
    load_suite_config,
)
from fastfib.finder import check_index

DEFAULT_DB_PATH = Path("fastfib_benchmarks.db")

LOG_LEVELS = [logging.WARNING, logging.INFO, logging.DEBUG]


def cmd_fib(args: argparse.Namespace) -> int:
    """Compute one Fibonacci number."""
    try:
        n = check_index(args.n)
        options = {"prec": args.prec} if args.prec is not None else {}
        if options and args.algorithm != "binet":
            print("Error: --prec only applies to the binet algorithm")
            return 1
        if args.digits is not None and args.digits < 1:
            print("Error: --digits must be at least 1")
            return 1
        algorithm = get_algorithm(args.algorithm, **options)
    except (KeyError, ValueError) as e:
        print(f"Error: {e.args[0]}")
        return 1

    value = algorithm.fib(n)
    if args.digits is not None:
        print(f"F({n}) = ...{int(value % 10**args.digits):0{args.digits}d}")
    else:
        print(f"F({n}) = {value}")
    return 0


def cmd_algorithms(args: argparse.Namespace) -> int:
    """List the registered algorithms."""
    for name in available_algorithms():
        print(f"{name:<12} {DESCRIPTIONS[name]}")
    return 0


def cmd_run(args: argparse.Namespace) -> int:
    """Run the benchmark suite."""
    suite_path = Path(args.suite) if args.suite else DEFAULT_SUITE_PATH
    if not suite_path.exists():
        print(f"Error: Suite configuration not found: {suite_path}")
        return 1

    try:
        suite = load_suite_config(suite_path)
    except (OSError, ValueError) as e:
        print(f"Error loading suite configuration: {e}")
        return 1

    if args.group and args.group not in {g.name for g in suite.groups}:
        print(f"Error: No group named {args.group!r} in {suite_path}")
        return 1

    def progress(p: BenchmarkProgress) -> None:
        print(f"  [{p.group}] {p.algorithm} n={p.n} {p.phase}...".ljust(60), end="\r", flush=True)

    runner = BenchmarkRunner(
        suite=suite,
        target_cv=args.cv_target,
        min_runs=args.min_runs,
        max_runs=args.max_runs,
        warmup=args.warmup,
        progress_callback=None if args.quiet else progress,
    )

    print(f"fastfib benchmark suite: {suite.name} (reference: {suite.reference})")
    print(f"Target CV: {args.cv_target * 100:.1f}%")
    session = runner.run_all(group_filter=args.group)

    print(" " * 60, end="\r")
    print(format_results_table(session))

    if args.save:
        with BenchmarkDatabase(args.db or DEFAULT_DB_PATH) as db:
            session.description = args.description
            session_id = db.save_session(session)
        print(f"\nResults saved to session #{session_id}")

    return 0


def cmd_list(args: argparse.Namespace) -> int:
    """List saved sessions."""
    db_path = Path(args.db) if args.db else DEFAULT_DB_PATH
    if not db_path.exists():
        print("No benchmark database found.")
        return 0

    with BenchmarkDatabase(db_path) as db:
        sessions = db.list_sessions()

    if not sessions:
        print("No benchmark sessions recorded yet.")
        return 0

    print(f"{'ID':>5} {'Date':>20} {'Commit':>12} Description")
    print("-" * 80)
    for session_id, timestamp, description, git_commit in sessions:
        print(
            f"{session_id:>5} {timestamp:%Y-%m-%d %H:%M:%S} "
            f"{git_commit or '-':>12} {description or ''}"
        )
    print(f"Total: {len(sessions)} session(s)")
    return 0


def cmd_compare(args: argparse.Namespace) -> int:
    """Compare two saved sessions."""
    db_path = Path(args.db) if args.db else DEFAULT_DB_PATH
    if not db_path.exists():
        print("No benchmark database found.")
        return 1

    with BenchmarkDatabase(db_path) as db:
        id1, id2 = args.id1, args.id2
        if id2 is None:
            id2 = db.get_latest_session_id()
            if id2 is None or id2 == id1:
                print("Need a second session to compare with.")
                return 1

        for session_id in (id1, id2):
            if db.load_session(session_id) is None:
                print(f"Error: Session #{session_id} not found.")
                return 1

        comparison = db.compare_sessions(id1, id2)

    print(
        f"{'Group':<10} {'Algorithm':<12} {'n':>12} "
        f"{'#' + str(id1):>12} {'#' + str(id2):>12} {'Ratio':>8} {'Change':>14}"
    )
    print("-" * 86)
    for (group, algorithm, n), (mean1, mean2, ratio) in sorted(comparison.items()):
        if ratio > 0:
            pct = (ratio - 1) * 100
            if pct < -5:
                change = f"{pct:.1f}% faster"
            elif pct > 5:
                change = f"+{pct:.1f}% slower"
            else:
                change = "~same"
            mean2_str, ratio_str = f"{mean2:.3f}ms", f"{ratio:.2f}x"
        else:
            change = mean2_str = ratio_str = "-"
        print(
            f"{group:<10} {algorithm:<12} {n:>12} {mean1:>10.3f}ms {mean2_str:>12} "
            f"{ratio_str:>8} {change:>14}"
        )
    return 0


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="fastfib",
        description="Exact Fibonacci numbers by several algorithms, and benchmarks comparing them",
    )
    parser.add_argument(
        "--db",
        help=f"Path to benchmark database (default: {DEFAULT_DB_PATH})",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Log more (repeat for debug output)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    fib_parser = subparsers.add_parser("fib", help="Compute F(n)")
    fib_parser.add_argument("n", type=int, help="Fibonacci index")
    fib_parser.add_argument(
        "-a",
        "--algorithm",
        default="cassini-gmp",
        help="Algorithm to use (default: cassini-gmp)",
    )
    fib_parser.add_argument(
        "--digits",
        type=int,
        help="Print only the last DIGITS decimal digits",
    )
    fib_parser.add_argument(
        "--prec",
        type=int,
        help="Fixed float precision in bits for the binet algorithm",
    )
    fib_parser.set_defaults(func=cmd_fib)

    algorithms_parser = subparsers.add_parser("algorithms", help="List algorithms")
    algorithms_parser.set_defaults(func=cmd_algorithms)

    run_parser = subparsers.add_parser("run", help="Run benchmarks")
    run_parser.add_argument("--suite", help="Path to suite.yaml configuration")
    run_parser.add_argument("--group", help="Run only the named group")
    run_parser.add_argument(
        "--cv-target",
        type=float,
        default=0.01,
        help="Target coefficient of variation (default: 0.01 = 1%%)",
    )
    run_parser.add_argument(
        "--min-runs",
        type=int,
        default=5,
        help="Minimum number of timed runs (default: 5)",
    )
    run_parser.add_argument(
        "--max-runs",
        type=int,
        default=50,
        help="Maximum number of timed runs (default: 50)",
    )
    run_parser.add_argument(
        "--warmup",
        type=int,
        default=3,
        help="Number of warmup runs (default: 3)",
    )
    run_parser.add_argument("--save", action="store_true", help="Save results to database")
    run_parser.add_argument("-d", "--description", help="Description for this benchmark run")
    run_parser.add_argument("--quiet", action="store_true", help="Suppress progress output")
    run_parser.set_defaults(func=cmd_run)

    list_parser = subparsers.add_parser("list", help="List saved sessions")
    list_parser.set_defaults(func=cmd_list)

    compare_parser = subparsers.add_parser("compare", help="Compare two sessions")
    compare_parser.add_argument("id1", type=int, help="First session ID")
    compare_parser.add_argument(
        "id2",
        type=int,
        nargs="?",
        help="Second session ID (default: latest)",
    )
    compare_parser.set_defaults(func=cmd_compare)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=LOG_LEVELS[min(args.verbose, len(LOG_LEVELS) - 1)],
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command is None:
        parser.print_help()
        return 0

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
