"""Unit tests for fastfib.binet."""

from __future__ import annotations

import logging

import pytest
from mpmath.libmp import from_int, to_int

from fastfib import binet
from fastfib.baselines import DPIterator
from fastfib.binet import Binet, BigFloat, evaluate, working_precision
from fastfib.cassini import CassiniGMP
from fastfib.finder import Integer


class TestWorkingPrecision:
    """Tests for the precision budget."""

    def test_floor(self) -> None:
        assert working_precision(0) == 64
        assert working_precision(1, margin=0, min_prec=100) == 100

    def test_scales_with_n(self) -> None:
        # ceil(1.05 * 1000 * log2(phi)) = 729
        assert working_precision(1000) == 729 + 64
        assert working_precision(1000, margin=10) == 739

    def test_exceeds_size_of_result(self) -> None:
        for n in (100, 10**4, 10**6, 10**9):
            assert working_precision(n) > n * binet.LOG2_PHI

    def test_monotonic(self) -> None:
        values = [working_precision(n) for n in range(0, 5000, 7)]
        assert values == sorted(values)


class TestBigFloat:
    """Tests for the fixed-precision float carrier."""

    def test_identity(self) -> None:
        one = BigFloat.one(53)
        three = BigFloat(from_int(3), 53)
        assert one * three == three
        assert three * one == three

    def test_products_round_to_precision(self) -> None:
        x = BigFloat(from_int(2**20 + 1), 8)
        square = x * x
        # 2**40 + 2**21 + 1 needs 41 bits; only 8 survive.
        assert to_int(square.value) == 2**40


class TestEvaluate:
    """Tests for a single fixed-precision evaluation."""

    def test_small_index(self) -> None:
        value, ambiguous = evaluate(10, 64)
        assert value == 55
        assert ambiguous is False

    def test_zero(self) -> None:
        # 1/sqrt 5 = 0.447... rounds to 0
        assert evaluate(0, 64) == (0, False)


class TestBinet:
    """Tests for the closed-form algorithm."""

    def test_known_values(self, known_values: dict[int, int]) -> None:
        alg = Binet()
        for n, expected in known_values.items():
            assert alg.fib(n) == expected

    def test_agrees_with_iteration(self) -> None:
        alg, dp = Binet(), DPIterator()
        for n in range(400):
            assert alg.fib(n) == dp.fib(n)

    @pytest.mark.parametrize("n", [10**4, 10**5, 123457])
    def test_agrees_with_exact_algorithm(self, n: int) -> None:
        assert Binet().fib(n) == CassiniGMP().fib(n)

    def test_returns_integer(self) -> None:
        assert isinstance(Binet().fib(50), Integer)

    def test_fixed_precision_large_enough(self) -> None:
        """The old fixed default of 10000 bits covers n = 10000."""
        assert Binet(prec=10000).fib(10000) % 10**10 == 9947366875

    def test_insufficient_precision_is_silently_wrong(self) -> None:
        """Too few bits give a plausible but wrong integer, not an error."""
        exact = CassiniGMP().fib(200)
        approx = Binet(prec=64).fib(200)

        assert approx != exact
        # Right magnitude, wrong low bits.
        assert abs(approx - exact) < exact // 2**50

    def test_widens_margin_when_ambiguous(self, monkeypatch: pytest.MonkeyPatch) -> None:
        precisions: list[int] = []

        def fake_evaluate(n: int, prec: int) -> tuple[Integer, bool]:
            precisions.append(prec)
            return Integer(1), len(precisions) < 3

        monkeypatch.setattr(binet, "evaluate", fake_evaluate)
        assert Binet().fib(1000) == 1
        assert precisions == [
            working_precision(1000, 64),
            working_precision(1000, 128),
            working_precision(1000, 256),
        ]

    def test_no_widening_when_disabled(self, monkeypatch: pytest.MonkeyPatch) -> None:
        calls: list[int] = []

        def fake_evaluate(n: int, prec: int) -> tuple[Integer, bool]:
            calls.append(prec)
            return Integer(1), True

        monkeypatch.setattr(binet, "evaluate", fake_evaluate)
        Binet(adaptive=False).fib(1000)
        Binet(prec=500).fib(1000)
        assert calls == [working_precision(1000), 500]

    def test_gives_up_after_max_widenings(
        self, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
    ) -> None:
        calls: list[int] = []

        def fake_evaluate(n: int, prec: int) -> tuple[Integer, bool]:
            calls.append(prec)
            return Integer(7), True

        monkeypatch.setattr(binet, "evaluate", fake_evaluate)
        with caplog.at_level(logging.WARNING, logger="fastfib.binet"):
            assert Binet().fib(1000) == 7

        assert len(calls) == binet.MAX_WIDENINGS + 1
        assert "still ambiguous" in caplog.text
