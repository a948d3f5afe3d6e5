# src/numfields/fraction.py
"""
Exact rational arithmetic.

Fraction keeps numerator and denominator inside the signed 64-bit range and
raises OverflowError instead of wrapping. BigFraction carries gmpy2.mpz parts
with no bound and only turns back into a Fraction through downsample().

Both are always stored in lowest terms with a positive denominator.
"""

from __future__ import annotations

import operator
import re
from collections.abc import Iterator
from dataclasses import dataclass
from decimal import Decimal, localcontext
from typing import Any

import gmpy2

from numfields.utility import LONG_MAX, LONG_MIN, euclidean_gcd, fits_long, sign

BIG_DECIMAL_DIGITS = 128

_MPZ = type(gmpy2.mpz(0))

_HTML_MINUS = ("&minus;", "&#x2212;", "&#8722;")
_TEX_FRAC_RE = re.compile(r"^(-?)\\frac\{(-?\d+)\}\{(-?\d+)\}$")
_HTML_FRAC_RE = re.compile(r"^(-?)(?:<sup>)?(-?\d+)(?:</sup>)?&frasl;(?:<sub>)?(-?\d+)(?:</sub>)?$")


def _split_fraction_text(s: str) -> tuple[str, str | None]:
    """
    Reduce the accepted spellings ("n", "n/d", TeX \\frac, HTML &frasl;) to a
    (numerator, denominator-or-None) pair of digit strings.
    """
    s = (s or "").replace(" ", "").replace("−", "-")
    for ent in _HTML_MINUS:
        s = s.replace(ent, "-")
    if not s:
        raise ValueError("Empty string is not a fraction")

    m = _HTML_FRAC_RE.match(s) if "&frasl;" in s else None
    if m is None and "\\frac" in s:
        m = _TEX_FRAC_RE.match(s)
    if m is not None:
        outer, numer, denom = m.groups()
        if outer:
            numer = numer[1:] if numer.startswith("-") else "-" + numer
        return numer, denom
    if "&frasl;" in s or "\\frac" in s:
        raise ValueError(f"Cannot parse fraction from {s!r}")

    if "/" not in s:
        return s, None
    numer, _, denom = s.partition("/")
    return numer, denom


def _parse_int_part(text: str) -> int:
    try:
        return int(text)
    except ValueError:
        raise ValueError(f"Invalid integer {text!r} in fraction") from None


class _RationalOps:
    """Arithmetic shared by Fraction and BigFraction; subclasses supply _new/_coerce."""

    numerator: Any
    denominator: Any

    # --- hooks ---------------------------------------------------------------

    @classmethod
    def _new(cls, numer, denom):
        return cls(numer, denom)

    def _coerce(self, other):
        raise NotImplementedError

    # --- arithmetic ----------------------------------------------------------

    def plus(self, addend):
        other = self._coerce(addend)
        numer = self.numerator * other.denominator + other.numerator * self.denominator
        return self._new(numer, self.denominator * other.denominator)

    def minus(self, subtrahend):
        return self.plus(self._coerce(subtrahend).negate())

    def times(self, multiplicand):
        other = self._coerce(multiplicand)
        return self._new(self.numerator * other.numerator, self.denominator * other.denominator)

    def divided_by(self, divisor):
        return self.times(self._coerce(divisor).reciprocal())

    def negate(self):
        return self._new(-self.numerator, self.denominator)

    def reciprocal(self):
        if self.numerator == 0:
            raise ZeroDivisionError("Zero has no reciprocal")
        return self._new(self.denominator, self.numerator)

    def compare_to(self, other) -> int:
        """Sign of (self - other): -1, 0 or 1."""
        o = self._coerce(other)
        # cross products on plain ints, so no intermediate fraction can overflow
        lhs = int(self.numerator) * int(o.denominator)
        rhs = int(o.numerator) * int(self.denominator)
        return sign(lhs - rhs)

    def is_integer(self) -> bool:
        return self.denominator == 1

    def is_unit_fraction(self) -> bool:
        return self.numerator == 1

    # --- rounding ------------------------------------------------------------

    def round_down(self, interval=None):
        """Floor to an integer, or to a multiple of `interval` when given."""
        if interval is None:
            return self._new(self.numerator // self.denominator, 1)
        step = self._coerce(interval)
        return step.times(self.divided_by(step).round_down())

    def round_up(self, interval=None):
        """Ceiling to an integer, or to a multiple of `interval` when given."""
        if interval is None:
            return self._new(-(-self.numerator // self.denominator), 1)
        step = self._coerce(interval)
        return step.times(self.divided_by(step).round_up())

    def conform_down(self, denom: int):
        """Greatest fraction <= self whose reduced denominator is exactly denom."""
        if denom < 1:
            raise ValueError(f"Denominator {denom} must be positive")
        if self.denominator == denom:
            return self
        numer = (self.numerator * denom) // self.denominator
        while euclidean_gcd(int(numer), denom) > 1:
            numer -= 1
        return self._new(numer, denom)

    def conform_up(self, denom: int):
        """Least fraction >= self whose reduced denominator is exactly denom."""
        if denom < 1:
            raise ValueError(f"Denominator {denom} must be positive")
        if self.denominator == denom:
            return self
        numer = -(-(self.numerator * denom) // self.denominator)
        while euclidean_gcd(int(numer), denom) > 1:
            numer += 1
        return self._new(numer, denom)

    # --- display -------------------------------------------------------------

    def __str__(self) -> str:
        if self.denominator == 1:
            return str(self.numerator)
        return f"{self.numerator}/{self.denominator}"

    def to_html(self) -> str:
        if self.denominator == 1:
            return str(self.numerator).replace("-", "&minus;")
        lead = "&minus;" if self.numerator < 0 else ""
        return f"{lead}<sup>{abs(self.numerator)}</sup>&frasl;<sub>{self.denominator}</sub>"

    def to_tex(self) -> str:
        if self.denominator == 1:
            return str(self.numerator)
        lead = "-" if self.numerator < 0 else ""
        return f"{lead}\\frac{{{abs(self.numerator)}}}{{{self.denominator}}}"

    # --- operators -----------------------------------------------------------

    def _operand(self, other):
        try:
            return self._coerce(other)
        except TypeError:
            return None

    def __add__(self, other):
        o = self._operand(other)
        return NotImplemented if o is None else self.plus(o)

    def __radd__(self, other):
        return self.__add__(other)

    def __sub__(self, other):
        o = self._operand(other)
        return NotImplemented if o is None else self.minus(o)

    def __rsub__(self, other):
        o = self._operand(other)
        return NotImplemented if o is None else o.minus(self)

    def __mul__(self, other):
        o = self._operand(other)
        return NotImplemented if o is None else self.times(o)

    def __rmul__(self, other):
        return self.__mul__(other)

    def __truediv__(self, other):
        o = self._operand(other)
        return NotImplemented if o is None else self.divided_by(o)

    def __rtruediv__(self, other):
        o = self._operand(other)
        return NotImplemented if o is None else o.divided_by(self)

    def __neg__(self):
        return self.negate()

    def __abs__(self):
        return self.negate() if self.numerator < 0 else self

    def __lt__(self, other):
        o = self._operand(other)
        return NotImplemented if o is None else self.compare_to(o) < 0

    def __le__(self, other):
        o = self._operand(other)
        return NotImplemented if o is None else self.compare_to(o) <= 0

    def __gt__(self, other):
        o = self._operand(other)
        return NotImplemented if o is None else self.compare_to(o) > 0

    def __ge__(self, other):
        o = self._operand(other)
        return NotImplemented if o is None else self.compare_to(o) >= 0

    def __eq__(self, other):
        # equal values are equal across int, Fraction and BigFraction
        if isinstance(other, _RationalOps):
            return (int(self.numerator), int(self.denominator)) == (int(other.numerator), int(other.denominator))
        if isinstance(other, (int, _MPZ)) and not isinstance(other, bool):
            return self.denominator == 1 and self.numerator == other
        return NotImplemented

    def __hash__(self) -> int:
        if self.denominator == 1:
            return hash(int(self.numerator))
        return hash((int(self.numerator), int(self.denominator)))


@dataclass(frozen=True, eq=False)
class Fraction(_RationalOps):
    """Rational number in lowest terms with both parts in the signed 64-bit range."""

    numerator: int
    denominator: int = 1

    def __post_init__(self) -> None:
        numer = operator.index(self.numerator)
        denom = operator.index(self.denominator)
        if denom == 0:
            raise ValueError(f"Denominator 0 is invalid for numerator {numer}")
        adjustment = euclidean_gcd(numer, denom) * sign(denom)
        numer //= adjustment
        denom //= adjustment
        if not (fits_long(numer) and fits_long(denom)):
            raise OverflowError(
                f"{numer}/{denom} exceeds the range [{LONG_MIN}, {LONG_MAX}] of Fraction; use BigFraction"
            )
        object.__setattr__(self, "numerator", numer)
        object.__setattr__(self, "denominator", denom)

    def _coerce(self, other) -> Fraction:
        if isinstance(other, Fraction):
            return other
        if isinstance(other, int) and not isinstance(other, bool):
            return Fraction(other)
        raise TypeError(f"Cannot combine Fraction with {type(other).__name__}")

    def numeric_approximation(self) -> float:
        return self.numerator / self.denominator

    def __float__(self) -> float:
        return self.numeric_approximation()

    def __repr__(self) -> str:
        return f"Fraction({self.numerator}, {self.denominator})"

    @classmethod
    def parse(cls, text: str) -> Fraction:
        """Parse "n", "n/d", "\\frac{n}{d}" or "<sup>n</sup>&frasl;<sub>d</sub>"."""
        numer, denom = _split_fraction_text(text)
        if denom is None:
            return cls(_parse_int_part(numer))
        return cls(_parse_int_part(numer), _parse_int_part(denom))


@dataclass(frozen=True, eq=False)
class BigFraction(_RationalOps):
    """Arbitrary-precision counterpart of Fraction, backed by gmpy2.mpz."""

    numerator: Any
    denominator: Any = 1

    def __post_init__(self) -> None:
        numer = gmpy2.mpz(operator.index(self.numerator))
        denom = gmpy2.mpz(operator.index(self.denominator))
        if denom == 0:
            raise ValueError("Denominator zero is not allowed")
        adjustment = gmpy2.gcd(numer, denom) * gmpy2.sign(denom)
        object.__setattr__(self, "numerator", numer // adjustment)
        object.__setattr__(self, "denominator", denom // adjustment)

    def _coerce(self, other) -> BigFraction:
        if isinstance(other, BigFraction):
            return other
        if isinstance(other, Fraction):
            return BigFraction(other.numerator, other.denominator)
        if isinstance(other, int) and not isinstance(other, bool):
            return BigFraction(other)
        if isinstance(other, _MPZ):
            return BigFraction(other)
        raise TypeError(f"Cannot combine BigFraction with {type(other).__name__}")

    @classmethod
    def from_fraction(cls, fraction: Fraction) -> BigFraction:
        return cls(fraction.numerator, fraction.denominator)

    def numeric_approximation(self) -> Decimal:
        """Exact Decimal when the expansion terminates, else 128 significant digits."""
        numer = int(self.numerator)
        denom = int(self.denominator)
        rest, twos, fives = denom, 0, 0
        while rest % 2 == 0:
            rest //= 2
            twos += 1
        while rest % 5 == 0:
            rest //= 5
            fives += 1
        if rest == 1:
            k = max(twos, fives)
            return Decimal(f"{numer * (10 ** k // denom)}E-{k}")
        with localcontext() as ctx:
            ctx.prec = BIG_DECIMAL_DIGITS
            return Decimal(numer) / Decimal(denom)

    def to_float(self) -> float:
        return int(self.numerator) / int(self.denominator)

    def __float__(self) -> float:
        return self.to_float()

    def can_downsample(self) -> bool:
        return fits_long(int(self.numerator)) and fits_long(int(self.denominator))

    def downsample(self) -> Fraction:
        if not self.can_downsample():
            raise OverflowError(f"{self} does not fit in a Fraction")
        return Fraction(int(self.numerator), int(self.denominator))

    def __repr__(self) -> str:
        return f"BigFraction({self.numerator}, {self.denominator})"

    @classmethod
    def parse(cls, text: str) -> BigFraction:
        numer, denom = _split_fraction_text(text)
        if denom is None:
            return cls(_parse_int_part(numer))
        return cls(_parse_int_part(numer), _parse_int_part(denom))


class FractionRange:
    """Evenly spaced fractions from start to end inclusive."""

    def __init__(self, start: Fraction, end: Fraction, step: Fraction | None = None):
        span = end.minus(start)
        self._inferred = step is None
        if step is None:
            step = Fraction(sign(span.numerator) or 1, span.denominator)
        elif step.numerator == 0:
            raise ValueError(f"Step 0 is not valid for range from {start} to {end}")
        else:
            check = span.divided_by(step)
            if not check.is_integer() or check.numerator < 0:
                raise ValueError(f"{step} is not valid for range from {start} to {end}")
        self.start = start
        self.end = end
        self.step = step
        self._size = span.divided_by(step).numerator + 1

    def __len__(self) -> int:
        return self._size

    def __getitem__(self, index: int) -> Fraction:
        if index < 0:
            index += self._size
        if not 0 <= index < self._size:
            raise IndexError(f"Index {index} out of range for {self}")
        return self.start.plus(self.step.times(index))

    def __iter__(self) -> Iterator[Fraction]:
        for i in range(self._size):
            yield self[i]

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, FractionRange):
            return NotImplemented
        return (self.start, self.end, self.step) == (other.start, other.end, other.step)

    def __hash__(self) -> int:
        return hash((self.start, self.end, self.step))

    def __str__(self) -> str:
        text = f"{self.start} to {self.end}"
        easy = self.start.denominator == self.step.denominator == self.end.denominator
        if self._inferred or easy:
            return text
        return f"{text} by {self.step}"

    def __repr__(self) -> str:
        return f"FractionRange({self.start!r}, {self.end!r}, {self.step!r})"
