"""Matrix exponentiation of the Fibonacci matrix.

Raises ``[[1, 1], [1, 0]]`` to the n-th power by repeated squaring instead of
walking the whole sequence. Matrix products are written out by hand so no
linear algebra package is involved.
"""

from __future__ import annotations

from dataclasses import dataclass

from fastfib.finder import FibFinder, Integer
from fastfib.repeated_squaring import power


@dataclass(frozen=True)
class Mat2x2:
    """A 2x2 matrix of big integers.

    Attributes:
        a: Top left element.
        b: Top right element.
        c: Bottom left element.
        d: Bottom right element.
    """

    a: Integer
    b: Integer
    c: Integer
    d: Integer

    @classmethod
    def of(cls, a: int, b: int, c: int, d: int) -> Mat2x2:
        """Build a matrix from plain ints."""
        return cls(Integer(a), Integer(b), Integer(c), Integer(d))

    @classmethod
    def identity(cls) -> Mat2x2:
        """Return the multiplicative identity."""
        return cls.of(1, 0, 0, 1)

    @classmethod
    def fibonacci(cls) -> Mat2x2:
        """Return the matrix whose n-th power holds F(n+1), F(n), F(n-1)."""
        return cls.of(1, 1, 1, 0)

    def __mul__(self, other: Mat2x2) -> Mat2x2:
        # (a b) (a' b')   (aa' + bc'  ab' + bd')
        # (c d) (c' d') = (ca' + dc'  cb' + dd')
        if not isinstance(other, Mat2x2):
            return NotImplemented
        return Mat2x2(
            self.a * other.a + self.b * other.c,
            self.a * other.b + self.b * other.d,
            self.c * other.a + self.d * other.c,
            self.c * other.b + self.d * other.d,
        )

    def apply(self, x: Integer, y: Integer) -> tuple[Integer, Integer]:
        """Multiply this matrix by the column vector (x, y)."""
        return self.a * x + self.b * y, self.c * x + self.d * y


@dataclass(frozen=True)
class MatExponentiator(FibFinder):
    """Matrix exponentiation approach using repeated squaring."""

    def fib(self, n: int) -> Integer:
        m = power(Mat2x2.fibonacci(), n, Mat2x2.identity())
        fib_curr, _fib_prev = m.apply(Integer(0), Integer(1))
        return fib_curr
