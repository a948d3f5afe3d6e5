# src/numfields/rings.py
from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum

from numfields.utility import is_squarefree


# d for which O_Q(√d) is Euclidean with respect to |N| (OEIS A048981)
NORM_EUCLIDEAN_RADICANDS = frozenset(
    {-11, -7, -3, -2, -1, 2, 3, 5, 6, 7, 11, 13, 17, 19, 21, 29, 33, 37, 41, 57, 73}
)


class RingKind(Enum):
    REAL_QUADRATIC = "real quadratic"
    IMAGINARY_QUADRATIC = "imaginary quadratic"
    OTHER = "other"


class IntegerRing:
    """
    Base descriptor for a ring of algebraic integers.

    Dispatch in this package goes through `kind`; only the two quadratic
    kinds are modelled; anything else is reported as an unsupported domain.
    """

    kind: RingKind = RingKind.OTHER
    max_algebraic_degree: int = 1

    def to_ascii(self) -> str:
        return type(self).__name__


@dataclass(frozen=True)
class QuadraticRing(IntegerRing):
    """ℤ[√d] or, when d ≡ 1 (mod 4), the ring O_ℚ(√d) with half-integers."""

    radicand: int
    _rad_sqrt: float = field(init=False, repr=False, compare=False)

    MAX_ALGEBRAIC_DEGREE = 2

    def __post_init__(self) -> None:
        d = self.radicand
        if not isinstance(d, int) or isinstance(d, bool):
            raise TypeError(f"Radicand must be an int, got {type(d).__name__}")
        if d == 0:
            raise ValueError("0 is not valid for parameter d")
        if d == 1:
            raise ValueError("Sorry, O_(Q(sqrt(1))) is not supported")
        if not is_squarefree(d):
            raise ValueError(f"Squarefree integer required for parameter d, {d} is not squarefree")
        object.__setattr__(self, "_rad_sqrt", math.sqrt(abs(d)))

    @classmethod
    def apply(cls, d: int) -> QuadraticRing:
        return cls(d)

    # --- descriptor properties ------------------------------------------------

    @property
    def kind(self) -> RingKind:  # type: ignore[override]
        return RingKind.REAL_QUADRATIC if self.radicand > 0 else RingKind.IMAGINARY_QUADRATIC

    @property
    def max_algebraic_degree(self) -> int:  # type: ignore[override]
        return self.MAX_ALGEBRAIC_DEGREE

    @property
    def is_real(self) -> bool:
        return self.radicand > 0

    @property
    def is_imaginary(self) -> bool:
        return self.radicand < 0

    @property
    def has_half_integers(self) -> bool:
        return self.radicand % 4 == 1

    @property
    def abs_radicand(self) -> int:
        return abs(self.radicand)

    @property
    def rad_sqrt(self) -> float:
        """√|d| as a float."""
        return self._rad_sqrt

    @property
    def discriminant(self) -> int:
        return self.radicand if self.has_half_integers else 4 * self.radicand

    @property
    def is_norm_euclidean(self) -> bool:
        return self.radicand in NORM_EUCLIDEAN_RADICANDS

    def to_ascii(self) -> str:
        from numfields.fmt import format_ring

        return format_ring(self, style="ascii")

    def __str__(self) -> str:
        from numfields.fmt import format_ring

        return format_ring(self)


GAUSSIAN = QuadraticRing(-1)
EISENSTEIN = QuadraticRing(-3)
GOLDEN = QuadraticRing(5)
