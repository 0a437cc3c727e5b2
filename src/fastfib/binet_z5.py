"""Binet's formula evaluated exactly in the field extension Z[sqrt 5].

phi**n = (L(n) + F(n) sqrt 5) / 2, so raising phi = (1 + sqrt 5) / 2 to the
n-th power with integer coefficients gives F(n) as the sqrt 5 coefficient,
with no square root, division by sqrt 5 or rounding involved.
"""

from __future__ import annotations

from dataclasses import dataclass

from fastfib.finder import FibFinder, Integer
from fastfib.repeated_squaring import power


@dataclass(frozen=True)
class Z5:
    """The number a/2 + (b/2) sqrt 5 with a and b integers.

    Halving is kept implicit so that the half-integer coefficients of phi
    stay integral.
    """

    a: Integer
    b: Integer

    @classmethod
    def of(cls, a: int, b: int) -> Z5:
        return cls(Integer(a), Integer(b))

    @classmethod
    def one(cls) -> Z5:
        """Return the multiplicative identity, 2/2 + 0 sqrt 5."""
        return cls.of(2, 0)

    @classmethod
    def phi(cls) -> Z5:
        """Return the golden ratio, 1/2 + (1/2) sqrt 5."""
        return cls.of(1, 1)

    def __mul__(self, other: Z5) -> Z5:
        # (a + b sqrt 5)(c + d sqrt 5) = (ac + 5bd) + (ad + bc) sqrt 5, using
        # three products instead of four:
        #   k1 = c(a + b), k2 = b(c - 5d), k3 = a(d - c)
        #   ac + 5bd = k1 - k2, ad + bc = k1 + k3
        if not isinstance(other, Z5):
            return NotImplemented
        a, b = self.a, self.b
        c, d = other.a, other.b
        k1 = c * (a + b)
        k2 = b * (c - 5 * d)
        k3 = a * (d - c)
        # Both factors carry a hidden 1/2, so the product carries 1/4: shed one.
        return Z5((k1 - k2) >> 1, (k1 + k3) >> 1)

    def norm(self) -> Integer:
        """Return a**2 - 5 b**2, i.e. four times the field norm."""
        return self.a * self.a - 5 * self.b * self.b

    def __str__(self) -> str:
        return f"({self.a} + {self.b}√5)/2"


@dataclass(frozen=True)
class BinetZ5(FibFinder):
    """Binet approach using the Z[sqrt 5] integer field extension."""

    def fib(self, n: int) -> Integer:
        if n < 2:
            return Integer(n)
        # phi**n = (L(n) + F(n) sqrt 5) / 2, stored as (L(n), F(n)).
        return power(Z5.phi(), n, Z5.one()).b
