"""Unit tests for fastfib.binet_z5."""

from __future__ import annotations

import pytest

from fastfib.baselines import DPIterator
from fastfib.binet_z5 import Z5, BinetZ5
from fastfib.repeated_squaring import power


def naive_product(x: Z5, y: Z5) -> Z5:
    """Four-product schoolbook multiplication of (a + b sqrt 5)/2 values."""
    return Z5((x.a * y.a + 5 * x.b * y.b) // 2, (x.a * y.b + x.b * y.a) // 2)


class TestZ5:
    """Tests for the Z[sqrt 5] carrier."""

    @pytest.mark.parametrize(
        ("x", "y"),
        [
            ((1, 1), (1, 1)),
            ((3, 1), (1, -1)),
            ((2, 0), (7, 3)),
            ((11, 5), (4, 2)),
            ((-3, 5), (9, -1)),
        ],
    )
    def test_matches_schoolbook_product(self, x, y) -> None:
        left, right = Z5.of(*x), Z5.of(*y)
        assert left * right == naive_product(left, right)

    def test_identity(self) -> None:
        x = Z5.of(7, 3)
        assert x * Z5.one() == x
        assert Z5.one() * x == x

    def test_phi_squared_is_phi_plus_one(self) -> None:
        # phi**2 = (3 + sqrt 5)/2
        assert Z5.phi() * Z5.phi() == Z5.of(3, 1)

    @pytest.mark.parametrize("n", [1, 2, 3, 8, 21, 100, 513])
    def test_powers_of_phi(self, n: int) -> None:
        """phi**n = (L(n) + F(n) sqrt 5)/2, with norm 4 (-1)**n."""
        dp = DPIterator()
        result = power(Z5.phi(), n, Z5.one())

        assert result.b == dp.fib(n)
        assert result.a == dp.fib(n - 1) + dp.fib(n + 1)
        assert result.norm() == 4 * (-1) ** n

    def test_str(self) -> None:
        assert str(Z5.of(3, 1)) == "(3 + 1√5)/2"


class TestBinetZ5:
    """Tests for the Z[sqrt 5] algorithm."""

    def test_known_values(self, known_values: dict[int, int]) -> None:
        alg = BinetZ5()
        for n, expected in known_values.items():
            assert alg.fib(n) == expected

    def test_agrees_with_iteration(self) -> None:
        alg, dp = BinetZ5(), DPIterator()
        for n in range(300):
            assert alg.fib(n) == dp.fib(n)

    def test_last_digits(self, last_ten_digits: dict[int, int]) -> None:
        alg = BinetZ5()
        for n in (10**4, 10**5):
            assert alg.fib(n) % 10**10 == last_ten_digits[n]
