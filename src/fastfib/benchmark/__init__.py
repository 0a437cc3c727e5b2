"""Benchmark suite comparing the Fibonacci algorithms.

- Answers are checked against a reference algorithm before timing
- Adaptive run counts targeting a coefficient of variation
- SQLite storage of sessions for later comparison
"""

from __future__ import annotations

from fastfib.benchmark.database import BenchmarkDatabase, BenchmarkResult, Session
from fastfib.benchmark.runner import (
    BenchmarkGroup,
    BenchmarkRunner,
    BenchmarkSuite,
    format_results_table,
    load_suite_config,
)
from fastfib.benchmark.stats import BenchmarkStats, compute_stats, run_until_stable

__all__ = [
    "BenchmarkDatabase",
    "BenchmarkGroup",
    "BenchmarkResult",
    "BenchmarkRunner",
    "BenchmarkStats",
    "BenchmarkSuite",
    "Session",
    "compute_stats",
    "format_results_table",
    "load_suite_config",
    "run_until_stable",
]
