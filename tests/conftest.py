"""Shared fixtures: known Fibonacci values and algorithm instances."""

from __future__ import annotations

import pytest

from fastfib.algorithms import SUBLINEAR, get_algorithm
from fastfib.finder import FibFinder

F1000 = int(
    "434665576869374564356885276750406258025646605173717804024817290895365554"
    "1794905189040387984007925516929592259308032263477520968962323987332247116164299"
    "6440906533187938298969649928516003704476137795166849228875"
)

KNOWN_VALUES = {
    0: 0,
    1: 1,
    2: 1,
    12: 144,
    37: 24157817,
    100: 354224848179261915075,
    1000: F1000,
}

# F(n) mod 10**10
LAST_TEN_DIGITS = {
    10**4: 9947366875,
    10**5: 3428746875,
    10**6: 8242546875,
    10**7: 6380546875,
    10**8: 7760546875,
    10**9: 1560546875,
}


@pytest.fixture
def known_values() -> dict[int, int]:
    return KNOWN_VALUES


@pytest.fixture
def last_ten_digits() -> dict[int, int]:
    return LAST_TEN_DIGITS


@pytest.fixture(params=SUBLINEAR)
def exact_algorithm(request: pytest.FixtureRequest) -> FibFinder:
    """Each exact sub-linear algorithm in turn."""
    return get_algorithm(request.param)


@pytest.fixture(params=[*SUBLINEAR, "binet"])
def fast_algorithm(request: pytest.FixtureRequest) -> FibFinder:
    """Each sub-linear algorithm in turn, the closed form included."""
    return get_algorithm(request.param)
