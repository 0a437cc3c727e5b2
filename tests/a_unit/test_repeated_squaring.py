"""Unit tests for fastfib.repeated_squaring."""

from __future__ import annotations

import pytest

from fastfib.binet_z5 import Z5
from fastfib.matrix import Mat2x2
from fastfib.repeated_squaring import power


class CountingInt:
    """Int carrier that counts how many products it takes part in."""

    calls = 0

    def __init__(self, value: int) -> None:
        self.value = value

    def __mul__(self, other: CountingInt) -> CountingInt:
        CountingInt.calls += 1
        return CountingInt(self.value * other.value)


class TestPowerOnIntegers:
    """Tests against the built-in integer power."""

    @pytest.mark.parametrize(
        ("base", "exponent"),
        [(3, 8), (4, 10), (2, 17), (5, 5), (10, 1), (6, 0), (7, 63), (2, 64)],
    )
    def test_matches_builtin_pow(self, base: int, exponent: int) -> None:
        assert power(base, exponent, 1) == base**exponent

    def test_logarithmic_number_of_products(self) -> None:
        """At most two products per exponent bit."""
        CountingInt.calls = 0
        exponent = 10**6
        result = power(CountingInt(1), exponent, CountingInt(1))

        assert result.value == 1
        assert CountingInt.calls <= 2 * exponent.bit_length()


class TestPowerLaws:
    """Identity and additivity laws for every carrier."""

    carriers = [
        (Mat2x2.of(1, 1, 1, 0), Mat2x2.identity()),
        (Mat2x2.of(2, -1, 3, 5), Mat2x2.identity()),
        (Z5.phi(), Z5.one()),
        (Z5.of(3, 1), Z5.one()),
        (7, 1),
    ]

    def test_zero_exponent_ignores_base(self) -> None:
        """The base is never touched for exponent 0."""
        identity = Mat2x2.identity()
        assert power(object(), 0, identity) is identity

    @pytest.mark.parametrize(("base", "identity"), carriers)
    def test_zero_exponent(self, base, identity) -> None:
        assert power(base, 0, identity) == identity

    @pytest.mark.parametrize(("base", "identity"), carriers)
    def test_first_power(self, base, identity) -> None:
        assert power(base, 1, identity) == identity * base

    @pytest.mark.parametrize(("base", "identity"), carriers)
    @pytest.mark.parametrize(("a", "b"), [(0, 3), (1, 1), (2, 5), (7, 9), (16, 15)])
    def test_exponents_add(self, base, identity, a: int, b: int) -> None:
        assert power(base, a + b, identity) == power(base, a, identity) * power(
            base, b, identity
        )

    def test_non_commutative_carrier(self) -> None:
        """Matrix powers equal the left-to-right product of copies."""
        m = Mat2x2.of(1, 2, 0, 3)
        expected = Mat2x2.identity()
        for _ in range(11):
            expected = expected * m
        assert power(m, 11, Mat2x2.identity()) == expected
