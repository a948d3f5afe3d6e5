# tests/test_division.py
"""
Tests for division, failure records, bounding integers and rounding.

Run: pytest -v
"""

from __future__ import annotations

import math

import pytest

from numfields.division import (
    Divided,
    DivisionFailure,
    NotDivisible,
    NotDivisibleError,
    divide,
    divide_int,
    euclidean_gcd,
    infer_ring,
    is_divisible_by,
    remainder,
)
from numfields.errors import (
    AlgebraicDegreeOverflowError,
    NonEuclideanDomainError,
    UnsupportedNumberDomainError,
)
from numfields.fraction import BigFraction, Fraction
from numfields.quadratics import QuadraticInteger as QI
from numfields.rings import IntegerRing, QuadraticRing, RingKind

R = QuadraticRing


class CubicRing(IntegerRing):
    kind = RingKind.OTHER
    max_algebraic_degree = 3

    def to_ascii(self) -> str:
        return "Z[cbrt(2)]"


# ---------- exact division ----------------------------------------------------

def test_exact_division_in_gaussian_integers(zi):
    result = divide(QI(5, 5, zi), QI(1, 2, zi))
    assert isinstance(result, Divided)
    assert result.quotient == QI(3, -1, zi)
    assert result.unwrap() == QI(3, -1, zi)


def test_exact_division_lands_on_half_integer(eisenstein):
    omega = QI(-1, 1, eisenstein, 2)
    result = divide(QI(1, 0, eisenstein), omega)
    assert result.unwrap() == QI(-1, -1, eisenstein, 2)


def test_divide_int(zi, eisenstein):
    assert divide_int(QI(4, 6, zi), 2).unwrap() == QI(2, 3, zi)
    assert isinstance(divide_int(QI(3, 1, zi), 2), NotDivisible)
    # (3 + √-3)/2 is an integer of O_Q(√-3)
    assert divide_int(QI(3, 1, eisenstein), 2).unwrap() == QI(3, 1, eisenstein, 2)


def test_method_forms(zi):
    x = QI(5, 5, zi)
    assert x.divide(QI(1, 2, zi)).unwrap() == QI(3, -1, zi)
    assert x.divide(5).unwrap() == QI(1, 1, zi)
    assert x.divide_int(5).unwrap() == QI(1, 1, zi)


def test_division_by_zero(zi):
    with pytest.raises(ZeroDivisionError):
        divide(QI(1, 1, zi), QI(0, 0, zi))
    with pytest.raises(ZeroDivisionError):
        divide_int(QI(1, 1, zi), 0)


# ---------- worked examples ---------------------------------------------------

def test_gaussian_example(zi):
    result = divide(QI(5, 1, zi), QI(3, 1, zi))
    assert isinstance(result, NotDivisible)
    failure = result.failure
    assert failure.fractions == (Fraction(8, 5), Fraction(-1, 5))
    assert failure.causing_ring == zi
    assert failure.bounding_integers() == [QI(1, -1, zi), QI(2, -1, zi), QI(1, 0, zi), QI(2, 0, zi)]
    assert failure.round_towards_zero() == QI(1, 0, zi)
    assert failure.round_away_from_zero() == QI(2, -1, zi)
    assert failure.numeric_real_part() == pytest.approx(1.6)
    assert failure.numeric_imag_part() == pytest.approx(-0.2)
    assert failure.abs() == pytest.approx(math.hypot(1.6, 0.2))


def test_eisenstein_example(eisenstein):
    result = divide(QI(61, 0, eisenstein), QI(1, 9, eisenstein))
    failure = result.failure
    assert failure.fractions == (Fraction(1, 4), Fraction(-9, 4))
    assert failure.bounding_integers() == [
        QI(0, -2, eisenstein),
        QI(1, -5, eisenstein, 2),
        QI(0, -3, eisenstein),
        QI(1, -3, eisenstein),
        QI(1, -2, eisenstein),
    ]
    assert failure.round_towards_zero() == QI(0, -2, eisenstein)
    assert failure.round_away_from_zero() == QI(1, -3, eisenstein)
    assert failure.numeric_imag_part() == pytest.approx(-9 * math.sqrt(3) / 4)


def test_real_ring_adds_axis_candidates(z2):
    # 1 / (2 + √2) = 1 - √2/2 ≈ 0.2929
    failure = divide(QI(1, 0, z2), QI(2, 1, z2)).failure
    assert failure.fractions == (Fraction(1), Fraction(-1, 2))
    assert failure.bounding_integers() == [
        QI(1, -1, z2),
        QI(1, 0, z2),
        QI(0, 0, z2),
        QI(-2, 1, z2),
        QI(-1, 1, z2),
    ]
    assert failure.round_towards_zero() == QI(0, 0, z2)
    assert failure.round_away_from_zero() == QI(1, 0, z2)


# ---------- bracketing --------------------------------------------------------

BRACKET_CASES = [
    # dividend (a, b), divisor (c, e), radicand
    ((7, 3), (2, -1), -1),
    ((11, 0), (3, 2), -1),
    ((-4, 9), (1, 3), -1),
    ((5, 1), (1, 1), -2),
    ((7, 3), (1, 2), 2),
    ((5, 1), (3, 1), 3),
    ((7, 2), (3, 1), 5),
]


@pytest.mark.parametrize(
    "num,den,d",
    BRACKET_CASES,
    ids=[f"{n}/{m}@{d}" for n, m, d in BRACKET_CASES],
)
def test_bounds_bracket_the_true_quotient(num, den, d):
    ring = R(d)
    result = divide(QI(*num, ring), QI(*den, ring))
    assert isinstance(result, NotDivisible)
    failure = result.failure
    bounds = failure.bounding_integers()
    assert bounds
    assert len(bounds) == len(set(bounds))

    p, q = failure.fractions
    if ring.is_imaginary:
        true = p.times(p).minus(q.times(q).times(d))
        dists = [Fraction(b.norm()) for b in bounds]
        assert min(dists) <= true <= max(dists)
    else:
        true = abs(failure.numeric_real_part())
        dists = [b.abs() for b in bounds]
        assert min(dists) <= true + 1e-9
        assert max(dists) >= true - 1e-9


def _ring_elements(ring, span):
    """Every element of the ring with both coordinates in range(-span, span + 1)."""
    r = range(-span, span + 1)
    if ring.has_half_integers:
        return [QI.apply_theta(m, n, ring) for m in r for n in r]
    return [QI(a, b, ring) for a in r for b in r]


@pytest.mark.parametrize("d", [-1, -2, -3, -7, -11, -15], ids=lambda d: f"d={d}")
def test_bounds_bracket_every_small_quotient(d):
    ring = R(d)
    divisors = [x for x in _ring_elements(ring, 2) if not x.is_zero()]
    for dividend in _ring_elements(ring, 4):
        for divisor in divisors:
            result = divide(dividend, divisor)
            if isinstance(result, Divided):
                continue
            p, q = result.failure.fractions
            true = p.times(p).minus(q.times(q).times(d))
            norms = [Fraction(b.norm()) for b in result.failure.bounding_integers()]
            assert min(norms) <= true <= max(norms), (dividend, divisor)


def test_half_integer_bounds_surround_the_quotient(eisenstein):
    # -1 / 2 = -1/2 sits between -1 and 0
    failure = divide(QI(-1, 0, eisenstein), QI(2, 0, eisenstein)).failure
    bounds = failure.bounding_integers()
    assert QI(0, 0, eisenstein) in bounds
    assert QI(-1, 1, eisenstein, 2) in bounds
    assert QI(-1, -1, eisenstein, 2) in bounds
    assert failure.round_towards_zero() == QI(0, 0, eisenstein)


@pytest.mark.parametrize(
    "d,limit",
    [(-1, 4), (-3, 8), (2, 8), (13, 12)],
    ids=["imag", "imag-half", "real", "real-half"],
)
def test_bounding_integer_totals_are_capped(d, limit):
    ring = R(d)
    failure = DivisionFailure(QI(1, 0, ring), QI(3, 0, ring), (Fraction(7, 3), Fraction(-5, 3)))
    assert 0 < len(failure.bounding_integers()) <= limit


# ---------- failure record and exception --------------------------------------

def test_failure_requires_one_fraction_per_degree(zi):
    with pytest.raises(ValueError):
        DivisionFailure(QI(1, 0, zi), QI(2, 0, zi), (Fraction(1, 2), Fraction(0), Fraction(0)))
    with pytest.raises(ValueError):
        NotDivisibleError(QI(1, 0, zi), QI(2, 0, zi), (Fraction(1, 2),))


def test_unsupported_ring_has_no_bounds(zi):
    thirds = (Fraction(1, 3), Fraction(1, 3), Fraction(1, 3))
    failure = DivisionFailure(QI(1, 0, zi), QI(3, 0, zi), thirds, CubicRing())
    with pytest.raises(UnsupportedNumberDomainError):
        failure.bounding_integers()
    with pytest.raises(UnsupportedNumberDomainError):
        failure.round_towards_zero()


def test_unwrap_raises_not_divisible(zi):
    result = divide(QI(5, 1, zi), QI(3, 1, zi))
    with pytest.raises(NotDivisibleError) as info:
        result.unwrap()
    err = info.value
    assert isinstance(err, ArithmeticError)
    assert str(err) == "5 + i is not divisible by 3 + i"
    assert err.causing_dividend == QI(5, 1, zi)
    assert err.causing_divisor == QI(3, 1, zi)
    assert err.fractions == (Fraction(8, 5), Fraction(-1, 5))
    assert err.round_towards_zero() == QI(1, 0, zi)
    assert err.round_away_from_zero() == QI(2, -1, zi)


# ---------- cross-ring division -----------------------------------------------

def test_rational_dividend_is_promoted(zi, z2):
    assert divide(QI(6, 0, zi), QI(1, 1, z2)).unwrap() == QI(-6, 6, z2)


def test_rational_divisor_divides_in_dividend_ring(zi, z2):
    failure = divide(QI(1, 1, zi), QI(2, 0, z2)).failure
    assert failure.causing_ring == zi
    assert failure.fractions == (Fraction(1, 2), Fraction(1, 2))


SURD_QUOTIENTS = [
    # (b1, d1) / (b2, d2) -> exact (coefficient, radicand)
    ((1, 6), (1, 2), (1, 3)),
    ((1, -2), (1, -1), (1, 2)),
    ((1, -6), (1, 3), (1, -2)),
    ((4, 3), (2, 2), (1, 6)),
]


@pytest.mark.parametrize(
    "num,den,expected",
    SURD_QUOTIENTS,
    ids=[f"{n[0]}r{n[1]}/{m[0]}r{m[1]}" for n, m, _ in SURD_QUOTIENTS],
)
def test_exact_surd_quotients(num, den, expected):
    result = divide(QI(0, num[0], R(num[1])), QI(0, den[0], R(den[1])))
    coef, d = expected
    assert result.unwrap() == QI(0, coef, R(d))


def test_inexact_surd_quotient_reports_inferred_ring():
    # √2 / √6 = √3 / 3
    failure = divide(QI(0, 1, R(2)), QI(0, 1, R(6))).failure
    assert failure.causing_ring == R(3)
    assert failure.fractions == (Fraction(0), Fraction(1, 3))
    assert failure.round_towards_zero() == QI(0, 0, R(3))


def test_mixed_cross_ring_division_overflows(zi, z2):
    with pytest.raises(AlgebraicDegreeOverflowError):
        divide(QI(1, 1, zi), QI(1, 1, z2))


INFER_CASES = [
    (2, 3, 6),
    (-1, -2, 2),
    (-6, 3, -2),
    (3, -6, -2),
    (10, 5, 2),
]


@pytest.mark.parametrize("d1,d2,expected", INFER_CASES, ids=[f"{a},{b}" for a, b, _ in INFER_CASES])
def test_infer_ring(d1, d2, expected):
    assert infer_ring(d1, d2) == R(expected)


def test_infer_ring_gives_up_on_partial_overlap():
    with pytest.raises(UnsupportedNumberDomainError) as info:
        infer_ring(6, 10)
    assert info.value.causing_domain == R(6)
    with pytest.raises(UnsupportedNumberDomainError):
        divide(QI(0, 1, R(6)), QI(0, 1, R(10)))


# ---------- remainder ---------------------------------------------------------

REMAINDER_CASES = [
    ((5, 1), (3, 1), -1, (1, 3)),
    ((5, 5), (1, 2), -1, (0, 0)),
    ((61, 0), (1, 9), -3, (-20, 3)),
]


@pytest.mark.parametrize(
    "num,den,d,expected",
    REMAINDER_CASES,
    ids=[f"{n} mod {m} @{d}" for n, m, d, _ in REMAINDER_CASES],
)
def test_remainder(num, den, d, expected):
    ring = R(d)
    dividend = QI(*num, ring)
    divisor = QI(*den, ring)
    assert remainder(dividend, divisor) == QI(*expected, ring)
    assert dividend.mod(divisor) == QI(*expected, ring)
    assert dividend % divisor == QI(*expected, ring)


def test_remainder_by_int(zi):
    assert QI(7, 3, zi).mod(2) == QI(1, 1, zi)
    with pytest.raises(ZeroDivisionError):
        QI(7, 3, zi).mod(0)


# ---------- large coordinates -------------------------------------------------

def test_quotient_beyond_long_range_is_kept_exact(zi):
    divisor = QI(2 ** 32 + 1, 2 ** 32, zi)
    result = divide(QI(1, 0, zi), divisor)
    assert isinstance(result, NotDivisible)
    p, q = result.failure.fractions
    assert isinstance(p, BigFraction)
    assert p == BigFraction(2 ** 32 + 1, divisor.norm())
    assert q == BigFraction(-(2 ** 32), divisor.norm())
    assert result.failure.round_towards_zero() == QI(0, 0, zi)
    # floor quotient is -i
    assert remainder(QI(1, 0, zi), divisor) == QI(1 - 2 ** 32, 2 ** 32 + 1, zi)


def test_exact_division_of_large_numbers(zi, eisenstein):
    x = QI(2 ** 33 + 1, 2 ** 33, zi)
    y = QI(3, 1, zi)
    assert divide(x.times(y), x).unwrap() == y
    assert divide_int(QI(2 ** 70, 2 ** 71, zi), 2 ** 69).unwrap() == QI(2, 4, zi)
    w = QI(2 ** 40 + 1, 1, eisenstein, 2)
    assert divide(w.times(w), w).unwrap() == w


def test_small_quotients_stay_fixed_width(zi):
    p, q = divide(QI(5, 1, zi), QI(3, 1, zi)).failure.fractions
    assert type(p) is Fraction
    assert type(q) is Fraction


# ---------- divisibility ------------------------------------------------------

DIVISIBILITY_CASES = [
    ((5, 5), (1, 2), -1, True),
    ((5, 1), (3, 1), -1, False),
    ((0, 0), (3, 1), -1, True),
    ((3, 1), (0, 0), -1, False),
    ((0, 1), (4, 1), 14, True),
    ((0, 1), (3, 1), 14, False),
]


@pytest.mark.parametrize(
    "num,den,d,expected",
    DIVISIBILITY_CASES,
    ids=[f"{n} by {m} @{d}" for n, m, d, _ in DIVISIBILITY_CASES],
)
def test_is_divisible_by(num, den, d, expected):
    ring = R(d)
    assert is_divisible_by(QI(*num, ring), QI(*den, ring)) is expected
    assert QI(*num, ring).is_divisible_by(QI(*den, ring)) is expected


def test_is_divisible_by_int(zi):
    assert is_divisible_by(QI(4, 6, zi), 2)
    assert not is_divisible_by(QI(4, 5, zi), 2)
    assert not is_divisible_by(QI(4, 6, zi), 0)


# ---------- greatest common divisor -------------------------------------------

def _associates(x, y):
    return is_divisible_by(x, y) and is_divisible_by(y, x)


GCD_CASES = [
    # a, b, radicand, an associate of the gcd
    ((5, 0), (3, 4), -1, (2, 1)),
    ((3, 1), (2, 0), -1, (1, 1)),
    ((3, 0), (1, 1), -2, (1, 1)),
    ((2, 0), (1, 1), -3, (2, 0)),
    ((6, 0), (4, 0), -7, (2, 0)),
    ((14, 0), (6, 2), 2, (6, 2)),
    ((7, 0), (0, 0), -1, (7, 0)),
]


@pytest.mark.parametrize(
    "a,b,d,expected",
    GCD_CASES,
    ids=[f"gcd{a},{b}@{d}" for a, b, d, _ in GCD_CASES],
)
def test_euclidean_gcd(a, b, d, expected):
    ring = R(d)
    x, y = QI(*a, ring), QI(*b, ring)
    g = euclidean_gcd(x, y)
    assert g.ring == ring
    assert _associates(g, QI(*expected, ring))
    assert is_divisible_by(x, g) and is_divisible_by(y, g)
    assert g.reg_part_mult >= 0
    assert _associates(euclidean_gcd(y, x), g)


def test_gcd_in_gaussian_integers_is_normalized(zi):
    # 5 = (2 + i)(2 - i) and 3 + 4i = (2 + i)², so the gcd is 2 + i up to a unit
    assert euclidean_gcd(QI(5, 0, zi), QI(3, 4, zi)) == QI(2, 1, zi)
    assert euclidean_gcd(QI(0, 2, zi), QI(0, 0, zi)) == QI(2, 0, zi)


def test_gcd_promotes_rationals(zi, z2):
    assert _associates(euclidean_gcd(QI(2, 0, z2), QI(1, 1, zi)), QI(1, 1, zi))


def test_gcd_refuses_non_euclidean_rings():
    ring = R(-5)
    with pytest.raises(NonEuclideanDomainError) as info:
        euclidean_gcd(QI(6, 0, ring), QI(1, 1, ring))
    assert info.value.attempted_numbers == (QI(6, 0, ring), QI(1, 1, ring))


def test_gcd_across_surd_rings_overflows(zi, z2):
    with pytest.raises(AlgebraicDegreeOverflowError):
        euclidean_gcd(QI(1, 1, zi), QI(1, 1, z2))
