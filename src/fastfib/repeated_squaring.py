"""Generic exponentiation by repeated squaring.

Works for any carrier whose ``*`` is associative and closed: plain ints,
2x2 matrices, elements of Z[sqrt 5], fixed-precision floats.
"""

from __future__ import annotations

from typing import TypeVar

T = TypeVar("T")


def power(base: T, exponent: int, identity: T) -> T:
    """Raise ``base`` to ``exponent`` under the carrier's multiplication.

    Bits of the exponent are consumed from least to most significant: the
    squaring accumulator is folded into the running product whenever the
    current bit is set, then squared for the next bit.

    Args:
        base: Value to exponentiate.
        exponent: Non-negative integer exponent.
        identity: Two-sided identity of the carrier's multiplication.

    Returns:
        ``base`` combined with itself ``exponent`` times, or ``identity`` when
        ``exponent`` is 0 (``base`` is not inspected in that case).
    """
    if exponent == 0:
        return identity

    p = base
    prod = identity
    while True:
        if exponent & 1:
            prod = prod * p  # type: ignore[operator]
        exponent >>= 1
        if not exponent:
            break
        p = p * p  # type: ignore[operator]
    return prod
