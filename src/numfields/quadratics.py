# src/numfields/quadratics.py
"""
Quadratic integers (a + b√d)/n with n in {1, 2}.

A denominator of 2 only occurs in rings where d ≡ 1 (mod 4), and then both
a and b are odd. Values are immutable; every operation returns a new one.
"""

from __future__ import annotations

import math
import operator
from dataclasses import dataclass

from numfields.errors import AlgebraicDegreeOverflowError, UnsupportedNumberDomainError
from numfields.fraction import Fraction
from numfields.rings import QuadraticRing
from numfields.utility import squarefree_decomposition


@dataclass(frozen=True, eq=False)
class QuadraticInteger:
    reg_part_mult: int
    surd_part_mult: int
    ring: QuadraticRing
    denominator: int = 1

    def __post_init__(self) -> None:
        if not isinstance(self.ring, QuadraticRing):
            raise UnsupportedNumberDomainError(
                f"{self.ring!r} is not a quadratic ring", self.ring
            )
        a = operator.index(self.reg_part_mult)
        b = operator.index(self.surd_part_mult)
        den = operator.index(self.denominator)
        if den < 0:
            a, b, den = -a, -b, -den
        if den not in (1, 2):
            raise ValueError(f"Denominator {den} is not valid; use 1 or 2")
        if den == 2:
            if a % 2 == 0 and b % 2 == 0:
                a, b, den = a // 2, b // 2, 1
            elif a % 2 == 1 and b % 2 == 1:
                if not self.ring.has_half_integers:
                    raise ValueError(
                        f"{self.ring.to_ascii()} has no half-integers, so ({a}, {b})/2 is not in it"
                    )
            else:
                raise ValueError(f"Parts {a} and {b} must have the same parity when the denominator is 2")
        object.__setattr__(self, "reg_part_mult", a)
        object.__setattr__(self, "surd_part_mult", b)
        object.__setattr__(self, "denominator", den)

    @classmethod
    def apply(cls, a: int, b: int, ring: QuadraticRing, denominator: int = 1) -> QuadraticInteger:
        return cls(a, b, ring, denominator)

    @classmethod
    def apply_theta(cls, m: int, n: int, ring: QuadraticRing) -> QuadraticInteger:
        """m + nθ where θ = (1 + √d)/2."""
        return cls(2 * m + n, n, ring, 2)

    # --- equality ------------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        # Rationals compare equal across rings
        if not isinstance(other, QuadraticInteger):
            return NotImplemented
        if (self.reg_part_mult, self.surd_part_mult, self.denominator) != (
            other.reg_part_mult,
            other.surd_part_mult,
            other.denominator,
        ):
            return False
        return self.surd_part_mult == 0 or self.ring == other.ring

    def __hash__(self) -> int:
        ring = self.ring if self.surd_part_mult else None
        return hash((self.reg_part_mult, self.surd_part_mult, self.denominator, ring))

    # --- invariants of the number ------------------------------------------

    def is_zero(self) -> bool:
        return self.reg_part_mult == 0 and self.surd_part_mult == 0

    def is_rational(self) -> bool:
        return self.surd_part_mult == 0

    def is_pure_surd(self) -> bool:
        return self.reg_part_mult == 0 and self.surd_part_mult != 0

    def regular_part(self) -> Fraction:
        return Fraction(self.reg_part_mult, self.denominator)

    def surd_part(self) -> Fraction:
        return Fraction(self.surd_part_mult, self.denominator)

    def norm(self) -> int:
        a, b, den = self.reg_part_mult, self.surd_part_mult, self.denominator
        return (a * a - self.ring.radicand * b * b) // (den * den)

    def trace(self) -> int:
        if self.denominator == 2:
            return self.reg_part_mult
        return 2 * self.reg_part_mult

    def conjugate(self) -> QuadraticInteger:
        return QuadraticInteger(self.reg_part_mult, -self.surd_part_mult, self.ring, self.denominator)

    def algebraic_degree(self) -> int:
        if self.is_zero():
            return 0
        if self.surd_part_mult == 0:
            return 1
        return 2

    def min_polynomial_coeffs(self) -> tuple[int, int, int]:
        """Coefficients of the minimal polynomial, constant term first."""
        degree = self.algebraic_degree()
        if degree == 0:
            return (0, 1, 0)
        if degree == 1:
            return (-self.reg_part_mult, 1, 0)
        return (self.norm(), -self.trace(), 1)

    # --- numeric views -------------------------------------------------------

    def numeric_real_part(self) -> float:
        if self.ring.is_imaginary:
            return self.reg_part_mult / self.denominator
        return (self.reg_part_mult + self.surd_part_mult * self.ring.rad_sqrt) / self.denominator

    def numeric_imag_part(self) -> float:
        if self.ring.is_imaginary:
            return self.surd_part_mult * self.ring.rad_sqrt / self.denominator
        return 0.0

    def abs(self) -> float:
        if self.ring.is_real:
            return abs(self.numeric_real_part())
        return math.hypot(self.numeric_real_part(), self.numeric_imag_part())

    def angle(self) -> float:
        return math.atan2(self.numeric_imag_part(), self.numeric_real_part())

    # --- arithmetic ----------------------------------------------------------

    def plus(self, summand: QuadraticInteger | int) -> QuadraticInteger:
        if isinstance(summand, int):
            den = self.denominator
            return QuadraticInteger(self.reg_part_mult + summand * den, self.surd_part_mult, self.ring, den)
        if summand.ring != self.ring:
            if summand.is_rational():
                return self.plus(summand.reg_part_mult)
            if self.is_rational():
                return summand.plus(self.reg_part_mult)
            raise AlgebraicDegreeOverflowError(
                f"Adding {self} and {summand} gives an algebraic integer of degree 4",
                QuadraticRing.MAX_ALGEBRAIC_DEGREE,
                self,
                summand,
            )
        den = max(self.denominator, summand.denominator)
        k1 = den // self.denominator
        k2 = den // summand.denominator
        return QuadraticInteger(
            self.reg_part_mult * k1 + summand.reg_part_mult * k2,
            self.surd_part_mult * k1 + summand.surd_part_mult * k2,
            self.ring,
            den,
        )

    def minus(self, subtrahend: QuadraticInteger | int) -> QuadraticInteger:
        if isinstance(subtrahend, int):
            return self.plus(-subtrahend)
        return self.plus(subtrahend.negate())

    def times(self, multiplicand: QuadraticInteger | int) -> QuadraticInteger:
        if isinstance(multiplicand, int):
            return QuadraticInteger(
                self.reg_part_mult * multiplicand,
                self.surd_part_mult * multiplicand,
                self.ring,
                self.denominator,
            )
        if multiplicand.ring != self.ring:
            if multiplicand.is_rational():
                return self.times(multiplicand.reg_part_mult)
            if self.is_rational():
                return multiplicand.times(self.reg_part_mult)
            if self.is_pure_surd() and multiplicand.is_pure_surd():
                return self._times_surd(multiplicand)
            raise AlgebraicDegreeOverflowError(
                f"Multiplying {self} by {multiplicand} gives an algebraic integer of degree 4",
                QuadraticRing.MAX_ALGEBRAIC_DEGREE,
                self,
                multiplicand,
            )
        a, b = self.reg_part_mult, self.surd_part_mult
        c, e = multiplicand.reg_part_mult, multiplicand.surd_part_mult
        d = self.ring.radicand
        reg = a * c + d * b * e
        surd = a * e + b * c
        den = self.denominator * multiplicand.denominator
        if den == 4:
            # (odd, odd)/2 times (odd, odd)/2 always leaves even numerators
            reg, surd, den = reg // 2, surd // 2, 2
        return QuadraticInteger(reg, surd, self.ring, den)

    def _times_surd(self, other: QuadraticInteger) -> QuadraticInteger:
        d1 = self.ring.radicand
        d2 = other.ring.radicand
        coat, core = squarefree_decomposition(d1 * d2)
        s = -1 if d1 < 0 and d2 < 0 else 1
        coef = self.surd_part_mult * other.surd_part_mult * s * coat
        if core == 1:
            return QuadraticInteger(coef, 0, self.ring)
        return QuadraticInteger(0, coef, QuadraticRing(core))

    def negate(self) -> QuadraticInteger:
        return QuadraticInteger(-self.reg_part_mult, -self.surd_part_mult, self.ring, self.denominator)

    def divide(self, divisor: QuadraticInteger | int):
        from numfields.division import divide, divide_int

        if isinstance(divisor, int):
            return divide_int(self, divisor)
        return divide(self, divisor)

    def divide_int(self, divisor: int):
        from numfields.division import divide_int

        return divide_int(self, divisor)

    def mod(self, divisor: QuadraticInteger | int) -> QuadraticInteger:
        from numfields.division import remainder

        return remainder(self, divisor)

    def is_divisible_by(self, divisor: QuadraticInteger | int) -> bool:
        from numfields.division import is_divisible_by

        return is_divisible_by(self, divisor)

    # --- operators -----------------------------------------------------------

    def __add__(self, other):
        if isinstance(other, bool) or not isinstance(other, (int, QuadraticInteger)):
            return NotImplemented
        return self.plus(other)

    def __radd__(self, other):
        return self.__add__(other)

    def __sub__(self, other):
        if isinstance(other, bool) or not isinstance(other, (int, QuadraticInteger)):
            return NotImplemented
        return self.minus(other)

    def __rsub__(self, other):
        if isinstance(other, bool) or not isinstance(other, int):
            return NotImplemented
        return self.negate().plus(other)

    def __mul__(self, other):
        if isinstance(other, bool) or not isinstance(other, (int, QuadraticInteger)):
            return NotImplemented
        return self.times(other)

    def __rmul__(self, other):
        return self.__mul__(other)

    def __mod__(self, other):
        if isinstance(other, bool) or not isinstance(other, (int, QuadraticInteger)):
            return NotImplemented
        return self.mod(other)

    def __neg__(self) -> QuadraticInteger:
        return self.negate()

    # --- display -------------------------------------------------------------

    def to_ascii(self) -> str:
        from numfields.fmt import format_quadratic

        return format_quadratic(self, style="ascii")

    def to_tex(self) -> str:
        from numfields.fmt import format_quadratic

        return format_quadratic(self, style="tex")

    def to_html(self) -> str:
        from numfields.fmt import format_quadratic

        return format_quadratic(self, style="html")

    def __str__(self) -> str:
        from numfields.fmt import format_quadratic

        return format_quadratic(self)

    def __repr__(self) -> str:
        if self.denominator == 1:
            return f"QuadraticInteger({self.reg_part_mult}, {self.surd_part_mult}, QuadraticRing({self.ring.radicand}))"
        return (
            f"QuadraticInteger({self.reg_part_mult}, {self.surd_part_mult}, "
            f"QuadraticRing({self.ring.radicand}), {self.denominator})"
        )


def by_norm(n: QuadraticInteger) -> int:
    """Sort key: absolute value of the norm."""
    return abs(n.norm())


def by_abs(n: QuadraticInteger) -> float:
    """Sort key: distance from zero in the complex plane or on the real line."""
    return n.abs()
