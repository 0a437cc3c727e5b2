"""Index-doubling recurrences derived from Cassini's identity.

Both algorithms here do what matrix exponentiation does without carrying the
redundant matrix entries. Walking the bits of n from the most significant
one, each step doubles the current index i (and adds one for a set bit)
using

    F(2i)   = F(i) (2 F(i+1) - F(i))
    F(2i+1) = F(i)**2 + F(i+1)**2

so the index follows the same addition chain as exponentiation by squaring.
"""

from __future__ import annotations

from dataclasses import dataclass

import gmpy2

from fastfib.finder import FibFinder, IndexMismatchError, Integer


def _bits_after_leading_one(n: int) -> str:
    return format(n, "b")[1:]


@dataclass(frozen=True)
class Cassini(FibFinder):
    """Doubling walk over the pair (F(i), F(i+1))."""

    def fib(self, n: int) -> Integer:
        if n < 2:
            return Integer(n)

        i = 1
        f_i = Integer(1)
        f_ip1 = Integer(1)

        for bit in _bits_after_leading_one(n):
            f_i_sqr = gmpy2.square(f_i)
            f_ip1_sqr = gmpy2.square(f_ip1)
            f_2ip1 = f_i_sqr + f_ip1_sqr
            double_f_i_ip1 = (f_i * f_ip1) << 1
            if bit == "0":
                i = 2 * i
                f_i, f_ip1 = double_f_i_ip1 - f_i_sqr, f_2ip1
            else:
                i = 2 * i + 1
                f_i, f_ip1 = f_2ip1, double_f_i_ip1 + f_ip1_sqr

        if i != n:
            raise IndexMismatchError("cassini", i, n)
        return f_i


@dataclass(frozen=True)
class CassiniGMP(FibFinder):
    """Doubling walk over (F(i), F(i-1)), the way GMP's mpz_fib_ui does it.

    Uses F(2i+1) = 4 F(i)**2 - F(i-1)**2 + 2 (-1)**i and
    F(2i-1) = F(i)**2 + F(i-1)**2, so each step costs two squarings. The
    2 (-1)**i term is tracked from the parity of the last bit rather than
    recomputed.
    """

    def fib(self, n: int) -> Integer:
        if n < 2:
            return Integer(n)

        i = 1
        f_i = Integer(1)
        f_im1 = Integer(0)
        # 2 (-1)**i for the current i.
        offset = -2

        for bit in _bits_after_leading_one(n):
            f_i_sqr = gmpy2.square(f_i)
            f_im1_sqr = gmpy2.square(f_im1)
            f_2im1 = f_i_sqr + f_im1_sqr
            f_2ip1 = (f_i_sqr << 2) - f_im1_sqr + offset
            f_2i = f_2ip1 - f_2im1
            if bit == "0":
                i = 2 * i
                f_i, f_im1 = f_2i, f_2im1
                offset = 2
            else:
                i = 2 * i + 1
                f_i, f_im1 = f_2ip1, f_2i
                offset = -2

        if i != n:
            raise IndexMismatchError("cassini-gmp", i, n)
        return f_i
