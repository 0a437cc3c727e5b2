"""Benchmark orchestration.

Loads a YAML suite, checks every algorithm's answer against a reference
algorithm, times each case until the timings settle and collects the
results in a ``Session``.
"""

from __future__ import annotations

import logging
import platform
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

import gmpy2
import mpmath
import yaml
from mpmath.libmp import BACKEND

from fastfib.algorithms import ALGORITHMS, get_algorithm
from fastfib.benchmark.database import BenchmarkResult, Session
from fastfib.benchmark.stats import EMPTY_STATS, format_duration, run_until_stable, time_call
from fastfib.finder import IndexMismatchError, Integer, check_index

logger = logging.getLogger(__name__)

DEFAULT_SUITE_PATH = Path(__file__).parent / "suite.yaml"

CHECKSUM_MODULUS = 10**10


@dataclass
class BenchmarkGroup:
    """A set of algorithms timed over a common list of indices.

    Attributes:
        name: Group identifier.
        algorithms: Registered algorithm names.
        ns: Fibonacci indices, in increasing order.
        enabled: Whether the group runs.
        budget: Seconds of mean time after which an algorithm's remaining
            indices are skipped; None for no limit.
        min_runs: Overrides the runner's minimum timed runs.
        max_runs: Overrides the runner's maximum timed runs.
        warmup: Overrides the runner's warmup runs.
    """

    name: str
    algorithms: list[str]
    ns: list[int]
    enabled: bool = True
    budget: float | None = None
    min_runs: int | None = None
    max_runs: int | None = None
    warmup: int | None = None


@dataclass
class BenchmarkSuite:
    """Benchmark groups plus the algorithm whose answers are trusted."""

    name: str
    groups: list[BenchmarkGroup]
    reference: str = "gmp"


@dataclass
class BenchmarkProgress:
    """Progress callback information.

    Attributes:
        group: Current group name.
        algorithm: Current algorithm name.
        n: Current index.
        phase: "verifying" or "timing".
    """

    group: str
    algorithm: str
    n: int
    phase: str


ProgressCallback = Callable[[BenchmarkProgress], None]


def _parse_group(data: dict) -> BenchmarkGroup:
    if not isinstance(data, dict) or "name" not in data:
        msg = f"Benchmark group needs a name: {data!r}"
        raise ValueError(msg)
    name = data["name"]

    algorithms = list(data.get("algorithms") or [])
    unknown = [a for a in algorithms if a not in ALGORITHMS]
    if unknown:
        msg = f"Group {name!r}: unknown algorithms {', '.join(unknown)}"
        raise ValueError(msg)

    try:
        ns = sorted(check_index(n) for n in data.get("n") or [])
    except ValueError as e:
        msg = f"Group {name!r}: {e}"
        raise ValueError(msg) from e

    return BenchmarkGroup(
        name=name,
        algorithms=algorithms,
        ns=ns,
        enabled=data.get("enabled", True),
        budget=data.get("budget"),
        min_runs=data.get("min_runs"),
        max_runs=data.get("max_runs"),
        warmup=data.get("warmup"),
    )


def load_suite_config(config_path: Path | str) -> BenchmarkSuite:
    """Load a benchmark suite from YAML.

    Args:
        config_path: Path to the suite file.

    Returns:
        The parsed suite.

    Raises:
        ValueError: If the file names unknown algorithms or invalid indices.
    """
    with Path(config_path).open() as f:
        data = yaml.safe_load(f) or {}

    reference = data.get("reference", "gmp")
    if reference not in ALGORITHMS:
        msg = f"Unknown reference algorithm {reference!r}"
        raise ValueError(msg)

    return BenchmarkSuite(
        name=data.get("name", "fibonacci"),
        groups=[_parse_group(g) for g in data.get("groups", [])],
        reference=reference,
    )


def detect_environment() -> dict[str, str]:
    """Return the versions of the components that determine the timings."""
    return {
        "python": platform.python_version(),
        "gmpy2": gmpy2.version(),
        "gmp": gmpy2.mp_version(),
        "mpmath": mpmath.__version__,
        "mpmath-backend": BACKEND,
    }


def checksum(value: Integer) -> int:
    """Return the last ten decimal digits of a result."""
    return int(value % CHECKSUM_MODULUS)


@dataclass
class BenchmarkRunner:
    """Runs the cases of a benchmark suite.

    Attributes:
        suite: Suite to run.
        target_cv: Target coefficient of variation.
        min_runs: Default minimum timed runs per case.
        max_runs: Default maximum timed runs per case.
        warmup: Default warmup runs per case.
        progress_callback: Optional callback for progress updates.
    """

    suite: BenchmarkSuite
    target_cv: float = 0.01
    min_runs: int = 5
    max_runs: int = 50
    warmup: int = 3
    progress_callback: ProgressCallback | None = None
    _references: dict[int, Integer] = field(default_factory=dict, init=False, repr=False)

    def _progress(self, group: str, algorithm: str, n: int, phase: str) -> None:
        if self.progress_callback:
            self.progress_callback(BenchmarkProgress(group, algorithm, n, phase))

    def reference_value(self, n: int) -> Integer:
        """Return F(n) from the suite's reference algorithm, computed once per n."""
        if n not in self._references:
            self._references[n] = get_algorithm(self.suite.reference).fib(n)
        return self._references[n]

    def run_case(self, group: BenchmarkGroup, algorithm: str, n: int) -> BenchmarkResult:
        """Verify and time one algorithm at one index.

        A fresh algorithm instance is used for every call, so cached state
        never carries over between measurements.
        """
        self._progress(group.name, algorithm, n, "verifying")
        logger.info("[%s] %s at n=%d", group.name, algorithm, n)

        def call() -> Integer:
            return get_algorithm(algorithm).fib(n)

        try:
            value = call()
        except IndexMismatchError:
            raise
        except (RecursionError, MemoryError, RuntimeError) as e:
            logger.warning("[%s] %s failed at n=%d: %s", group.name, algorithm, n, e)
            return BenchmarkResult(
                group=group.name,
                algorithm=algorithm,
                n=n,
                stats=EMPTY_STATS,
                checksum=None,
                correct=False,
                error=f"{type(e).__name__}: {e}",
            )

        correct = value == self.reference_value(n)
        if not correct:
            logger.warning("[%s] %s gave a wrong result at n=%d", group.name, algorithm, n)

        self._progress(group.name, algorithm, n, "timing")
        stats = run_until_stable(
            lambda: time_call(call),
            min_runs=group.min_runs if group.min_runs is not None else self.min_runs,
            max_runs=group.max_runs if group.max_runs is not None else self.max_runs,
            target_cv=self.target_cv,
            warmup=group.warmup if group.warmup is not None else self.warmup,
        )
        return BenchmarkResult(
            group=group.name,
            algorithm=algorithm,
            n=n,
            stats=stats,
            checksum=checksum(value),
            correct=correct,
        )

    def run_group(self, group: BenchmarkGroup) -> list[BenchmarkResult]:
        """Run every case of a group, honouring its time budget."""
        results: list[BenchmarkResult] = []
        exhausted: set[str] = set()
        for n in group.ns:
            for algorithm in group.algorithms:
                if algorithm in exhausted:
                    continue
                result = self.run_case(group, algorithm, n)
                results.append(result)
                if result.error or (
                    group.budget is not None and result.stats.mean > group.budget
                ):
                    logger.warning(
                        "[%s] skipping %s beyond n=%d (mean %s)",
                        group.name,
                        algorithm,
                        n,
                        format_duration(result.stats.mean),
                    )
                    exhausted.add(algorithm)
        return results

    def run_all(self, group_filter: str | None = None) -> Session:
        """Run all enabled groups, or only the one named ``group_filter``."""
        session = Session(
            timestamp=datetime.now(),
            description=None,
            git_commit=None,
            results=[],
            environment=detect_environment(),
        )
        for group in self.suite.groups:
            if not group.enabled:
                continue
            if group_filter and group.name != group_filter:
                continue
            session.results.extend(self.run_group(group))
        return session


def format_results_table(session: Session) -> str:
    """Format a session as one table per group.

    Rows are indices and columns algorithms; cells hold mean times, with
    ``!`` marking wrong results and ``-`` cases that did not run.
    """
    lines = ["=" * 100, "BENCHMARK RESULTS", "=" * 100]

    groups: dict[str, dict[tuple[str, int], BenchmarkResult]] = {}
    for result in session.results:
        groups.setdefault(result.group, {})[result.algorithm, result.n] = result

    for group_name, cases in groups.items():
        algorithms = [a for a in ALGORITHMS if any(a == alg for alg, _ in cases)]
        ns = sorted({n for _, n in cases})

        lines.append(f"\n{group_name}:")
        lines.append(f"{'n':>12}" + "".join(f" {a:>12}" for a in algorithms))
        lines.append("-" * (12 + 13 * len(algorithms)))
        for n in ns:
            row = f"{n:>12}"
            for algorithm in algorithms:
                result = cases.get((algorithm, n))
                if result is None or result.error:
                    cell = "-"
                else:
                    cell = format_duration(result.stats.mean)
                    if not result.correct:
                        cell += "!"
                row += f" {cell:>12}"
            lines.append(row)

    wrong = [r for r in session.results if not r.correct and not r.error]
    if wrong:
        lines.append("\nWrong results (!):")
        lines.extend(f"  {r.algorithm} at n={r.n}" for r in wrong)

    return "\n".join(lines)
