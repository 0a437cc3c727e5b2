"""Timing statistics for benchmark cases.

Timings are collected until the coefficient of variation drops below a
target or a run cap is reached; outliers are screened with the IQR rule
before the summary is computed.
"""

from __future__ import annotations

import statistics
import time
from collections.abc import Callable
from dataclasses import dataclass, field


@dataclass(frozen=True)
class BenchmarkStats:
    """Summary of the timings of one benchmark case.

    Attributes:
        times: Every measured time, in seconds, outliers included.
        mean: Mean of the retained times.
        median: Median of the retained times.
        stddev: Sample standard deviation of the retained times.
        cv: Coefficient of variation, stddev / mean.
        min: Fastest retained time.
        max: Slowest retained time.
        outliers: Times excluded by the IQR rule.
        runs_to_stable: Timed runs taken before stopping.
    """

    times: tuple[float, ...]
    mean: float
    median: float
    stddev: float
    cv: float
    min: float
    max: float
    outliers: tuple[float, ...] = field(default_factory=tuple)
    runs_to_stable: int = 0


EMPTY_STATS = BenchmarkStats(
    times=(), mean=0.0, median=0.0, stddev=0.0, cv=0.0, min=0.0, max=0.0
)


def coefficient_of_variation(times: list[float]) -> float:
    if len(times) < 2:
        return 0.0
    mean = statistics.fmean(times)
    return statistics.stdev(times) / mean if mean > 0 else 0.0


def detect_outliers(times: list[float], factor: float = 1.5) -> list[float]:
    """Return the times outside [Q1 - factor*IQR, Q3 + factor*IQR].

    Fewer than four samples never yield outliers.
    """
    if len(times) < 4:
        return []
    q1, _, q3 = statistics.quantiles(times, n=4, method="inclusive")
    spread = factor * (q3 - q1)
    return [t for t in times if t < q1 - spread or t > q3 + spread]


def compute_stats(
    times: list[float], remove_outliers: bool = True, runs_to_stable: int = 0
) -> BenchmarkStats:
    """Summarize a list of timings.

    Args:
        times: Timings in seconds.
        remove_outliers: Drop IQR outliers before summarizing, unless that
            would leave fewer than two samples.
        runs_to_stable: Recorded as is.

    Returns:
        The summary; ``EMPTY_STATS`` for no timings.
    """
    if not times:
        return EMPTY_STATS

    outliers = detect_outliers(times)
    kept = times
    if remove_outliers and outliers:
        excluded = set(outliers)
        kept = [t for t in times if t not in excluded]
        if len(kept) < 2:
            kept = times

    mean = statistics.fmean(kept)
    stddev = statistics.stdev(kept) if len(kept) > 1 else 0.0
    return BenchmarkStats(
        times=tuple(times),
        mean=mean,
        median=statistics.median(kept),
        stddev=stddev,
        cv=stddev / mean if mean > 0 else 0.0,
        min=min(kept),
        max=max(kept),
        outliers=tuple(outliers),
        runs_to_stable=runs_to_stable,
    )


def time_call(fn: Callable[[], object]) -> float:
    """Return the wall-clock seconds taken by one call of ``fn``."""
    start = time.perf_counter()
    fn()
    return time.perf_counter() - start


def run_until_stable(
    runner: Callable[[], float],
    min_runs: int = 5,
    max_runs: int = 50,
    target_cv: float = 0.01,
    warmup: int = 3,
) -> BenchmarkStats:
    """Measure until the timings settle.

    Args:
        runner: Callable returning one measured time in seconds.
        min_runs: Timed runs before the first stability check.
        max_runs: Hard cap on timed runs.
        target_cv: Stop once the coefficient of variation is at or below this.
        warmup: Untimed runs made first and discarded.

    Returns:
        Statistics over all timed runs.
    """
    for _ in range(warmup):
        runner()

    times = [runner() for _ in range(min_runs)]
    while len(times) < max_runs and coefficient_of_variation(times) > target_cv:
        times.append(runner())

    return compute_stats(times, runs_to_stable=len(times))


def format_duration(seconds: float) -> str:
    """Render a duration with a unit suited to its magnitude."""
    if seconds >= 1.0:
        return f"{seconds:.2f}s"
    if seconds >= 1e-3:
        return f"{seconds * 1e3:.2f}ms"
    return f"{seconds * 1e6:.1f}us"


def format_stats(stats: BenchmarkStats) -> str:
    """Format a summary like ``"1.52ms +/- 12.0us (CV=0.79%, 12 runs)"``."""
    return (
        f"{format_duration(stats.mean)} +/- {format_duration(stats.stddev)} "
        f"(CV={stats.cv * 100:.2f}%, {len(stats.times)} runs)"
    )
