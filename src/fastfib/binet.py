"""Binet's closed form, F(n) = round(phi**n / sqrt 5), in binary floating point.

Uses mpmath's raw multiprecision floats with an explicit precision on every
operation. phi**n carries about n log2(phi) significant bits, so the working
precision has to grow with n; with too few bits the result comes back
silently wrong, never as an error.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from mpmath.libmp import (
    fhalf,
    fone,
    from_int,
    mpf_abs,
    mpf_add,
    mpf_div,
    mpf_mul,
    mpf_sqrt,
    mpf_sub,
    round_nearest,
    to_float,
    to_int,
)

from fastfib.finder import FibFinder, Integer
from fastfib.repeated_squaring import power

logger = logging.getLogger(__name__)

LOG2_PHI = math.log2((1 + math.sqrt(5)) / 2)

# Extra fraction of the theoretical bit count of phi**n.
PRECISION_FACTOR = 1.05

# Quotients closer than this to a half-integer are re-evaluated.
HALF_TOLERANCE = 2.0**-16

MAX_WIDENINGS = 4


def working_precision(n: int, margin: int = 64, min_prec: int = 64) -> int:
    """Return the number of mantissa bits used to evaluate F(n).

    Args:
        n: Fibonacci index.
        margin: Fixed number of guard bits added to the scaled estimate.
        min_prec: Lower bound on the result.

    Returns:
        ``max(min_prec, ceil(1.05 * n * log2(phi)) + margin)``.
    """
    return max(min_prec, math.ceil(PRECISION_FACTOR * n * LOG2_PHI) + margin)


@dataclass(frozen=True)
class BigFloat:
    """A raw mpmath float tied to the precision its products round to.

    Attributes:
        value: mpmath ``(sign, mantissa, exponent, bitcount)`` tuple.
        prec: Mantissa bits kept after each multiplication.
    """

    value: tuple
    prec: int

    @classmethod
    def one(cls, prec: int) -> BigFloat:
        return cls(fone, prec)

    def __mul__(self, other: BigFloat) -> BigFloat:
        if not isinstance(other, BigFloat):
            return NotImplemented
        return BigFloat(mpf_mul(self.value, other.value, self.prec, round_nearest), self.prec)


def evaluate(n: int, prec: int) -> tuple[Integer, bool]:
    """Evaluate round(phi**n / sqrt 5) at a fixed precision.

    Args:
        n: Fibonacci index.
        prec: Mantissa bits for every intermediate value.

    Returns:
        Tuple of (rounded value, ambiguous), where ambiguous is True when the
        quotient lies within ``HALF_TOLERANCE`` of a half-integer.
    """
    sqrt5 = mpf_sqrt(from_int(5), prec, round_nearest)
    phi = mpf_mul(mpf_add(fone, sqrt5, prec, round_nearest), fhalf, prec, round_nearest)
    phi_n = power(BigFloat(phi, prec), n, BigFloat.one(prec)).value
    quotient = mpf_div(phi_n, sqrt5, prec, round_nearest)

    rounded = to_int(quotient, round_nearest)
    distance = to_float(mpf_abs(mpf_sub(quotient, from_int(rounded))))
    return Integer(rounded), 0.5 - distance < HALF_TOLERANCE


@dataclass(frozen=True)
class Binet(FibFinder):
    """Closed-form approach using arbitrary-precision floats.

    Attributes:
        prec: Fixed precision in bits. When None, the precision is budgeted
            from n with ``working_precision``.
        margin: Guard bits added by the budget.
        min_prec: Smallest budgeted precision.
        adaptive: Re-evaluate with a doubled margin when the budgeted result
            sits too close to a half-integer to round reliably.
    """

    prec: int | None = None
    margin: int = 64
    min_prec: int = 64
    adaptive: bool = True

    def fib(self, n: int) -> Integer:
        if self.prec is not None:
            value, _ = evaluate(n, self.prec)
            return value

        margin = self.margin
        for _ in range(MAX_WIDENINGS + 1):
            prec = working_precision(n, margin, self.min_prec)
            logger.debug("binet: n=%d, precision=%d bits", n, prec)
            value, ambiguous = evaluate(n, prec)
            if not (self.adaptive and ambiguous):
                return value
            margin *= 2
            logger.debug("binet: n=%d rounds ambiguously, widening margin to %d", n, margin)

        logger.warning("binet: n=%d still ambiguous at %d bits", n, prec)
        return value
