"""Registry of the available Fibonacci algorithms, keyed by stable names."""

from __future__ import annotations

from typing import Any

from fastfib.baselines import GMP, DPIterator, MemoizedRecursor, NaiveRecursor
from fastfib.binet import Binet
from fastfib.binet_z5 import BinetZ5
from fastfib.cassini import Cassini, CassiniGMP
from fastfib.finder import FibFinder
from fastfib.matrix import MatExponentiator

# Ordered from the slowest family to the fastest.
ALGORITHMS: dict[str, type[FibFinder]] = {
    "naive": NaiveRecursor,
    "memoized": MemoizedRecursor,
    "dp": DPIterator,
    "matrix": MatExponentiator,
    "binet": Binet,
    "binet-z5": BinetZ5,
    "cassini": Cassini,
    "cassini-gmp": CassiniGMP,
    "gmp": GMP,
}

DESCRIPTIONS = {
    "naive": "plain recursion, O(phi^n)",
    "memoized": "recursion with a result cache, O(n)",
    "dp": "iteration over consecutive terms, O(n)",
    "matrix": "2x2 matrix exponentiation by squaring",
    "binet": "closed form with budgeted float precision",
    "binet-z5": "closed form in Z[sqrt 5], three products per step",
    "cassini": "index doubling over (F(i), F(i+1))",
    "cassini-gmp": "index doubling over (F(i), F(i-1)), two squarings per step",
    "gmp": "GMP's mpz_fib_ui",
}

# Exact algorithms fast enough for very large indices.
SUBLINEAR = ("matrix", "binet-z5", "cassini", "cassini-gmp")


def available_algorithms() -> list[str]:
    """Return the registered algorithm names in registry order."""
    return list(ALGORITHMS)


def get_algorithm(name: str, **options: Any) -> FibFinder:
    """Instantiate an algorithm by name.

    Args:
        name: Registered algorithm name.
        **options: Keyword arguments for the algorithm's constructor.

    Returns:
        A fresh algorithm instance.

    Raises:
        KeyError: If the name is not registered.
    """
    try:
        cls = ALGORITHMS[name]
    except KeyError:
        known = ", ".join(ALGORITHMS)
        msg = f"Unknown algorithm {name!r} (known: {known})"
        raise KeyError(msg) from None
    return cls(**options)
