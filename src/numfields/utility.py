# -----------------------------------------------------------------------------
#  Utility functions
# -----------------------------------------------------------------------------

from __future__ import annotations

import shutil
from functools import lru_cache

import gmpy2
from sympy import factorint

# Signed 64-bit range used by the fixed-width Fraction
LONG_MIN = -(2 ** 63)
LONG_MAX = 2 ** 63 - 1


def fits_long(n: int) -> bool:
    return LONG_MIN <= n <= LONG_MAX


def euclidean_gcd(a: int, b: int) -> int:
    """Non-negative gcd; gcd(0, 0) is 0."""
    return int(gmpy2.gcd(a, b))


@lru_cache(maxsize=4096)
def _factor_abs(n: int) -> dict[int, int]:
    return factorint(n)


def mobius_and_radical(factors: dict[int, int]) -> tuple[int, int, bool]:
    """
    Return (μ(n), rad(n), squarefree) from a prime factor dict.
    μ(n)=0 if any exponent>1; else (-1)^ω(n).  rad(n)=∏p.
    """
    rad = 1
    squarefree = True
    for p, e in factors.items():
        rad *= p
        if e > 1:
            squarefree = False
    mu = 0 if not squarefree else (-1 if (len(factors) % 2) else 1)
    return mu, rad, squarefree


def is_squarefree(n: int) -> bool:
    """0 is not squarefree; ±1 are."""
    if n == 0:
        return False
    a = abs(n)
    if a == 1:
        return True
    _, _, sqf = mobius_and_radical(_factor_abs(a))
    return sqf


def squarefree_decomposition(n: int) -> tuple[int, int]:
    """
    Split n into (coat, core) with n == coat**2 * core and core squarefree.
    The sign of n stays with the core.
    """
    if n == 0:
        raise ValueError("0 has no squarefree decomposition")
    coat = 1
    core = 1
    for p, e in _factor_abs(abs(n)).items():
        coat *= p ** (e // 2)
        if e % 2:
            core *= p
    return coat, (core if n > 0 else -core)


def sign(n: int) -> int:
    return (n > 0) - (n < 0)


def typename(v: object) -> str:
    return type(v).__name__


def flatten_dotted(d: dict, prefix: str = "") -> dict[str, object]:
    out: dict[str, object] = {}
    for k, v in (d or {}).items():
        key = f"{prefix}.{k}" if prefix else str(k)
        if isinstance(v, dict):
            out.update(flatten_dotted(v, key))
        else:
            out[key] = v
    return out


def get_terminal_width(default=80):
    """
    Return the terminal's character width if detected, else the default
    value (80 by default).
    """
    try:
        return shutil.get_terminal_size().columns
    except Exception:
        return default
