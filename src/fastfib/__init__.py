"""fastfib: exact Fibonacci numbers by sub-linear algorithms."""

from __future__ import annotations

from fastfib.algorithms import ALGORITHMS, available_algorithms, get_algorithm
from fastfib.baselines import GMP, DPIterator, MemoizedRecursor, NaiveRecursor
from fastfib.binet import Binet, working_precision
from fastfib.binet_z5 import BinetZ5, Z5
from fastfib.cassini import Cassini, CassiniGMP
from fastfib.finder import FibFinder, IndexMismatchError, Integer, check_index
from fastfib.matrix import Mat2x2, MatExponentiator
from fastfib.repeated_squaring import power

__version__ = "0.1.0"

__all__ = [
    "ALGORITHMS",
    "GMP",
    "Binet",
    "BinetZ5",
    "Cassini",
    "CassiniGMP",
    "DPIterator",
    "FibFinder",
    "IndexMismatchError",
    "Integer",
    "Mat2x2",
    "MatExponentiator",
    "MemoizedRecursor",
    "NaiveRecursor",
    "Z5",
    "available_algorithms",
    "check_index",
    "get_algorithm",
    "power",
    "working_precision",
]
