from __future__ import annotations

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _pkg_version

# Version
try:
    __version__ = _pkg_version("numfields")
except PackageNotFoundError:
    __version__ = "0+unknown"

# Public API re-exports
from .division import (
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
from .errors import (
    AlgebraicDegreeOverflowError,
    NonEuclideanDomainError,
    UnsupportedNumberDomainError,
    UserInputError,
)
from .fmt import FormatOptions, format_min_polynomial, format_quadratic, format_ring
from .fraction import BigFraction, Fraction, FractionRange
from .quadratics import QuadraticInteger, by_abs, by_norm
from .rings import IntegerRing, QuadraticRing, RingKind
from .runtime import APPLY, CFG

__all__ = [
    "APPLY",
    "CFG",
    "AlgebraicDegreeOverflowError",
    "BigFraction",
    "Divided",
    "DivisionFailure",
    "FormatOptions",
    "Fraction",
    "FractionRange",
    "IntegerRing",
    "NonEuclideanDomainError",
    "NotDivisible",
    "NotDivisibleError",
    "QuadraticInteger",
    "QuadraticRing",
    "RingKind",
    "UnsupportedNumberDomainError",
    "UserInputError",
    "__version__",
    "by_abs",
    "by_norm",
    "divide",
    "divide_int",
    "euclidean_gcd",
    "format_min_polynomial",
    "format_quadratic",
    "format_ring",
    "infer_ring",
    "is_divisible_by",
    "remainder",
]
