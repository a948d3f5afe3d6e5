# src/numfields/division.py
"""
Division of quadratic integers.

divide() never raises for an inexact quotient. It returns either
Divided(quotient) or NotDivisible(failure); the failure record keeps the
exact fractional coordinates (p, q) of the quotient p + q√d and derives the
candidate integers around it, from which both rounding policies pick.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Union

from numfields.errors import (
    AlgebraicDegreeOverflowError,
    NonEuclideanDomainError,
    UnsupportedNumberDomainError,
)
from numfields.fraction import BigFraction, Fraction
from numfields.quadratics import QuadraticInteger, by_norm
from numfields.rings import IntegerRing, QuadraticRing, RingKind
from numfields.utility import euclidean_gcd as _int_gcd
from numfields.utility import squarefree_decomposition

_QUADRATIC_KINDS = (RingKind.REAL_QUADRATIC, RingKind.IMAGINARY_QUADRATIC)


# --- ring inference ----------------------------------------------------------


def infer_ring(d1: int, d2: int) -> QuadraticRing:
    """
    Ring in which b₁√d₁ / b₂√d₂ lives.

    Only two shapes are recognized: coprime radicands give the product, and
    when one radicand divides the other the quotient is used.
    """
    g = _int_gcd(d1, d2)
    if g == 1:
        return QuadraticRing(d1 * d2)
    if g in (abs(d1), abs(d2)):
        return QuadraticRing(d1 * d2 // (g * g))
    raise UnsupportedNumberDomainError(
        f"Cannot infer a ring for radicands {d1} and {d2}",
        QuadraticRing(d1),
        QuadraticRing(d2),
    )


# --- failure record ----------------------------------------------------------


class DivisionFailure:
    """
    An inexact division and the fractional coordinates of its true quotient.

    `fractions` holds (p, q) for p + q√d, so it must have as many entries as
    the ring's maximum algebraic degree. `ring` defaults to the dividend's
    ring; cross-ring failures pass the inferred one.
    """

    def __init__(
        self,
        dividend: QuadraticInteger,
        divisor: QuadraticInteger,
        fractions: Sequence[Fraction | BigFraction],
        ring: IntegerRing | None = None,
    ):
        ring = dividend.ring if ring is None else ring
        fractions = tuple(fractions)
        if len(fractions) != ring.max_algebraic_degree:
            raise ValueError(
                f"Expected {ring.max_algebraic_degree} fractions for {ring.to_ascii()}, got {len(fractions)}"
            )
        self.causing_dividend = dividend
        self.causing_divisor = divisor
        self.causing_ring = ring
        self.fractions: tuple[Fraction | BigFraction, ...] = fractions

    def __repr__(self) -> str:
        return (
            f"DivisionFailure({self.causing_dividend!r}, {self.causing_divisor!r}, "
            f"{self.fractions!r}, {self.causing_ring!r})"
        )

    def _quadratic_ring(self) -> QuadraticRing:
        ring = self.causing_ring
        if ring.kind not in _QUADRATIC_KINDS:
            raise UnsupportedNumberDomainError(
                f"{ring.to_ascii()} is not a quadratic ring",
                ring,
                self.causing_dividend,
                self.causing_divisor,
            )
        return ring

    def numeric_real_part(self) -> float:
        ring = self._quadratic_ring()
        p, q = self.fractions
        if ring.is_real:
            return float(p) + ring.rad_sqrt * float(q)
        return float(p)

    def numeric_imag_part(self) -> float:
        ring = self._quadratic_ring()
        if ring.is_imaginary:
            return ring.rad_sqrt * float(self.fractions[1])
        return 0.0

    def abs(self) -> float:
        return math.hypot(self.numeric_real_part(), self.numeric_imag_part())

    def bounding_integers(self) -> list[QuadraticInteger]:
        """
        Algebraic integers around the quotient, in a fixed order without
        repeats. The set always brackets the quotient's distance from zero.
        """
        ring = self._quadratic_ring()
        p, q = (BigFraction(f.numerator, f.denominator) for f in self.fractions)
        points: list[QuadraticInteger] = []

        if ring.has_half_integers:
            # (x + y√d)/2 with x = u + v, y = u − v covers exactly the ring
            u = p.plus(q)
            v = p.minus(q)
            lo_u, hi_u = u.round_down().numerator, u.round_up().numerator
            lo_v, hi_v = v.round_down().numerator, v.round_up().numerator
            for s, t in ((lo_u, lo_v), (hi_u, lo_v), (lo_u, hi_v), (hi_u, hi_v)):
                points.append(QuadraticInteger(s + t, s - t, ring, 2))
        # ℤ[√d] corners; truncating both coordinates never moves away from 0
        lo_p, hi_p = p.round_down().numerator, p.round_up().numerator
        lo_q, hi_q = q.round_down().numerator, q.round_up().numerator
        for x, y in ((lo_p, lo_q), (hi_p, lo_q), (lo_p, hi_q), (hi_p, hi_q)):
            points.append(QuadraticInteger(x, y, ring))
        if ring.is_real:
            x = self.numeric_real_part()
            r = math.floor(x - ring.rad_sqrt)
            points.append(QuadraticInteger(math.floor(x), 0, ring))
            points.append(QuadraticInteger(math.ceil(x), 0, ring))
            points.append(QuadraticInteger(r, 1, ring))
            points.append(QuadraticInteger(r + 1, 1, ring))

        unique: list[QuadraticInteger] = []
        for n in points:
            if n not in unique:
                unique.append(n)
        return unique

    def _distance(self, n: QuadraticInteger) -> int | float:
        if self.causing_ring.is_imaginary:
            return n.norm()
        return n.abs()

    def round_towards_zero(self) -> QuadraticInteger:
        """Bounding integer nearest to zero; the first one wins a tie."""
        return min(self.bounding_integers(), key=self._distance)

    def round_away_from_zero(self) -> QuadraticInteger:
        """Bounding integer farthest from zero; the first one wins a tie."""
        return max(self.bounding_integers(), key=self._distance)


class NotDivisibleError(ArithmeticError):
    """Raised by unwrap() on an inexact division; carries the DivisionFailure."""

    def __init__(
        self,
        dividend: QuadraticInteger,
        divisor: QuadraticInteger,
        fractions: Sequence[Fraction | BigFraction],
        ring: IntegerRing | None = None,
    ):
        self.failure = DivisionFailure(dividend, divisor, fractions, ring)
        super().__init__(f"{dividend} is not divisible by {divisor}")

    @classmethod
    def from_failure(cls, failure: DivisionFailure) -> NotDivisibleError:
        return cls(failure.causing_dividend, failure.causing_divisor, failure.fractions, failure.causing_ring)

    @property
    def causing_dividend(self) -> QuadraticInteger:
        return self.failure.causing_dividend

    @property
    def causing_divisor(self) -> QuadraticInteger:
        return self.failure.causing_divisor

    @property
    def causing_ring(self) -> IntegerRing:
        return self.failure.causing_ring

    @property
    def fractions(self) -> tuple[Fraction | BigFraction, ...]:
        return self.failure.fractions

    def numeric_real_part(self) -> float:
        return self.failure.numeric_real_part()

    def numeric_imag_part(self) -> float:
        return self.failure.numeric_imag_part()

    def abs(self) -> float:
        return self.failure.abs()

    def bounding_integers(self) -> list[QuadraticInteger]:
        return self.failure.bounding_integers()

    def round_towards_zero(self) -> QuadraticInteger:
        return self.failure.round_towards_zero()

    def round_away_from_zero(self) -> QuadraticInteger:
        return self.failure.round_away_from_zero()


# --- results -----------------------------------------------------------------


@dataclass(frozen=True)
class Divided:
    quotient: QuadraticInteger

    exact = True

    def unwrap(self) -> QuadraticInteger:
        return self.quotient


@dataclass(frozen=True)
class NotDivisible:
    failure: DivisionFailure

    exact = False

    def unwrap(self) -> QuadraticInteger:
        raise NotDivisibleError.from_failure(self.failure)


DivisionResult = Union[Divided, NotDivisible]


# --- division ----------------------------------------------------------------


def _exact(numer: int, denom: int) -> Fraction | BigFraction:
    """numer/denom as a Fraction when it fits in 64 bits, else as a BigFraction."""
    big = BigFraction(numer, denom)
    return big.downsample() if big.can_downsample() else big


def _settle(
    dividend: QuadraticInteger,
    divisor: QuadraticInteger,
    p: Fraction | BigFraction,
    q: Fraction | BigFraction,
    ring: QuadraticRing,
) -> DivisionResult:
    den = p.denominator
    if den == q.denominator and (den == 1 or (den == 2 and ring.has_half_integers)):
        return Divided(QuadraticInteger(p.numerator, q.numerator, ring, den))
    return NotDivisible(DivisionFailure(dividend, divisor, (p, q), ring))


def divide_int(dividend: QuadraticInteger, divisor: int) -> DivisionResult:
    """Divide by a rational integer; exact iff both parts divide."""
    if divisor == 0:
        raise ZeroDivisionError(f"Dividing {dividend} by 0")
    den = dividend.denominator * divisor
    p = _exact(dividend.reg_part_mult, den)
    q = _exact(dividend.surd_part_mult, den)
    return _settle(dividend, QuadraticInteger(divisor, 0, dividend.ring), p, q, dividend.ring)


def _divide_same_ring(dividend: QuadraticInteger, divisor: QuadraticInteger) -> DivisionResult:
    # dividend * conj(divisor) / N(divisor)
    a, b, n1 = dividend.reg_part_mult, dividend.surd_part_mult, dividend.denominator
    c, e, n2 = divisor.reg_part_mult, divisor.surd_part_mult, divisor.denominator
    d = dividend.ring.radicand
    den = divisor.norm() * n1 * n2
    p = _exact(a * c - d * b * e, den)
    q = _exact(b * c - a * e, den)
    return _settle(dividend, divisor, p, q, dividend.ring)


def _divide_surds(dividend: QuadraticInteger, divisor: QuadraticInteger) -> DivisionResult:
    """b₁√d₁ / b₂√d₂ = (b₁ / (b₂ d₂)) √(d₁ d₂), reduced to a squarefree radicand."""
    d1 = dividend.ring.radicand
    d2 = divisor.ring.radicand
    ring = infer_ring(d1, d2)
    coat, _ = squarefree_decomposition(d1 * d2)
    s = -1 if d1 < 0 and d2 < 0 else 1
    coef = _exact(dividend.surd_part_mult * s * coat, divisor.surd_part_mult * d2)
    return _settle(dividend, divisor, Fraction(0), coef, ring)


def divide(dividend: QuadraticInteger, divisor: QuadraticInteger) -> DivisionResult:
    if divisor.is_zero():
        raise ZeroDivisionError(f"Dividing {dividend} by 0")
    if divisor.is_rational():
        return divide_int(dividend, divisor.reg_part_mult)
    if dividend.ring == divisor.ring:
        return _divide_same_ring(dividend, divisor)
    if dividend.is_rational():
        promoted = QuadraticInteger(dividend.reg_part_mult, 0, divisor.ring)
        return _divide_same_ring(promoted, divisor)
    if dividend.is_pure_surd() and divisor.is_pure_surd():
        return _divide_surds(dividend, divisor)
    raise AlgebraicDegreeOverflowError(
        f"Dividing {dividend} by {divisor} gives an algebraic number of degree 4",
        QuadraticRing.MAX_ALGEBRAIC_DEGREE,
        dividend,
        divisor,
    )


def remainder(dividend: QuadraticInteger, divisor: QuadraticInteger | int) -> QuadraticInteger:
    """dividend − ⌊dividend / divisor⌋·divisor; zero when the division is exact."""
    if isinstance(divisor, int):
        result = divide_int(dividend, divisor)
    else:
        result = divide(dividend, divisor)
    if isinstance(result, Divided):
        return QuadraticInteger(0, 0, dividend.ring)

    failure = result.failure
    ring = failure.causing_ring
    p, q = (BigFraction(f.numerator, f.denominator) for f in failure.fractions)
    if ring.has_half_integers:
        reg = p.round_down(Fraction(1, 2))
        surd = q.conform_down(reg.denominator)
    else:
        reg = p.round_down()
        surd = q.round_down()
    floor_quotient = QuadraticInteger(reg.numerator, surd.numerator, ring, reg.denominator)
    return dividend.minus(floor_quotient.times(divisor))


def is_divisible_by(dividend: QuadraticInteger, divisor: QuadraticInteger | int) -> bool:
    """False for a zero divisor, True for a zero dividend, else exactness of the quotient."""
    if isinstance(divisor, int):
        if divisor == 0:
            return False
        return isinstance(divide_int(dividend, divisor), Divided)
    if divisor.is_zero():
        return False
    if dividend.is_zero():
        return True
    return isinstance(divide(dividend, divisor), Divided)


# --- greatest common divisor -------------------------------------------------


def _euclidean_step(a: QuadraticInteger, b: QuadraticInteger) -> QuadraticInteger:
    """A remainder a − t·b with |N| below |N(b)|, t taken from the bounding integers."""
    result = _divide_same_ring(a, b)
    if isinstance(result, Divided):
        return QuadraticInteger(0, 0, a.ring)
    limit = abs(b.norm())
    best = min(
        (a.minus(t.times(b)) for t in result.failure.bounding_integers()),
        key=by_norm,
    )
    if abs(best.norm()) >= limit:
        raise NonEuclideanDomainError(
            f"No quotient of {a} by {b} leaves a remainder of smaller norm", a, b
        )
    return best


def _normalize_gcd(g: QuadraticInteger) -> QuadraticInteger:
    if g.ring.radicand == -1 and g.reg_part_mult == 0:
        g = g.times(QuadraticInteger(0, -1, g.ring))
    if g.reg_part_mult < 0:
        g = g.negate()
    return g


def euclidean_gcd(a: QuadraticInteger, b: QuadraticInteger) -> QuadraticInteger:
    """
    Greatest common divisor by the Euclidean algorithm on |N|.

    Only rings with is_norm_euclidean are attempted; others
    raise NonEuclideanDomainError without trying. A rational operand is
    promoted into the other operand's ring. The result is unique up to a
    unit and is returned with a non-negative rational part (and, in ℤ[i],
    with a non-zero rational part).
    """
    if a.ring != b.ring:
        if b.is_rational():
            b = QuadraticInteger(b.reg_part_mult, 0, a.ring)
        elif a.is_rational():
            a = QuadraticInteger(a.reg_part_mult, 0, b.ring)
        else:
            raise AlgebraicDegreeOverflowError(
                f"{a} is from {a.ring.to_ascii()} but {b} is from {b.ring.to_ascii()}",
                QuadraticRing.MAX_ALGEBRAIC_DEGREE,
                a,
                b,
            )
    if not a.ring.is_norm_euclidean:
        raise NonEuclideanDomainError(f"{a.ring.to_ascii()} is not a norm-Euclidean domain", a, b)

    if abs(a.norm()) < abs(b.norm()):
        a, b = b, a
    while not b.is_zero():
        a, b = b, _euclidean_step(a, b)
    return _normalize_gcd(a)
