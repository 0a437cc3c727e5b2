"""Reference algorithms the fast ones are measured against.

None of these is sub-linear. They serve as correctness oracles and as
performance baselines in the benchmark suite.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import gmpy2

from fastfib.finder import FibFinder, Integer


@dataclass(frozen=True)
class NaiveRecursor(FibFinder):
    """Recursive approach straight from the definition.

    F(0) = 0, F(1) = 1 and F(n) = F(n - 1) + F(n - 2), recomputing every
    subproblem, so the running time grows like phi**n.
    """

    def fib(self, n: int) -> Integer:
        if n < 2:
            return Integer(n)
        return self.fib(n - 1) + self.fib(n - 2)


@dataclass
class MemoizedRecursor(FibFinder):
    """Recursive approach that caches every result it computes.

    The cache lives on the instance and persists between calls until
    ``clear`` is called. Recursion depth still grows with n, so large
    indices hit the interpreter's recursion limit.
    """

    results: dict[int, Integer] = field(default_factory=dict, repr=False)

    def clear(self) -> None:
        """Forget all cached results."""
        self.results = {}

    def fib(self, n: int) -> Integer:
        cached = self.results.get(n)
        if cached is not None:
            return cached
        result = Integer(n) if n < 2 else self.fib(n - 1) + self.fib(n - 2)
        self.results[n] = result
        return result


@dataclass(frozen=True)
class DPIterator(FibFinder):
    """Iterates through the sequence up to n, keeping the last two terms."""

    def fib(self, n: int) -> Integer:
        prev, curr = Integer(0), Integer(1)
        for _ in range(n):
            prev, curr = curr, prev + curr
        return prev


@dataclass(frozen=True)
class GMP(FibFinder):
    """Delegates to GMP's own Fibonacci routine."""

    def fib(self, n: int) -> Integer:
        return gmpy2.fib(n)
