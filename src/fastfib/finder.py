"""Common interface shared by every Fibonacci algorithm."""

from __future__ import annotations

from abc import ABC, abstractmethod

import gmpy2

# Arbitrary-precision integer type returned by every algorithm.
Integer = gmpy2.mpz

MAX_INDEX = 2**64 - 1


class IndexMismatchError(RuntimeError):
    """Raised when a doubling walk ends on an index other than the one requested.

    This signals a defect in the algorithm, never bad input.
    """

    def __init__(self, algorithm: str, reached: int, n: int) -> None:
        self.algorithm = algorithm
        self.reached = reached
        self.n = n
        super().__init__(f"{algorithm}: bit walk reached index {reached}, expected {n}")


class FibFinder(ABC):
    """An algorithm for finding the n-th Fibonacci number."""

    @abstractmethod
    def fib(self, n: int) -> Integer:
        """Return F(n), with F(0) = 0 and F(1) = 1."""


def check_index(n: object) -> int:
    """Validate a user-supplied Fibonacci index.

    Args:
        n: Candidate index.

    Returns:
        The index as an int.

    Raises:
        ValueError: If n is not an integer in [0, 2**64).
    """
    if isinstance(n, bool) or not isinstance(n, int):
        msg = f"Fibonacci index must be an integer, got {n!r}"
        raise ValueError(msg)
    if n < 0 or n > MAX_INDEX:
        msg = f"Fibonacci index must be in [0, 2**64), got {n}"
        raise ValueError(msg)
    return n
