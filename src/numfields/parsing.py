# src/numfields/parsing.py
"""
Reading fractions, radicands and quadratic integers typed by a user.

Accepted quadratic forms (spaces are ignored):
    7, -3, 2+i, 3-2i, 1+sqrt(-3), 5√2, -√(-7), 4*sqrt(2), (1+√5)/2
plus the Unicode minus, &minus; / &radic; HTML entities and TeX \\sqrt{d}.
"""

from __future__ import annotations

import re

from numfields.errors import UserInputError
from numfields.fraction import Fraction
from numfields.quadratics import QuadraticInteger
from numfields.rings import QuadraticRing

_THIN_SPACES = ("\u2009", "\u202F", "\u00A0")  # thin, narrow no-break, no-break

_TERM_RE = re.compile(
    r"""
    (?P<sign>[+-])?
    (?P<coef>\d+)?
    (?:
        \*?
        (?:
            (?P<i>i)
          | sqrt\((?P<r1>-?\d+)\)
          | √\((?P<r2>-?\d+)\)
          | √(?P<r3>-?\d+)
        )
    )?
    """,
    re.VERBOSE,
)
_HALF_RE = re.compile(r"^\((?P<inner>.+)\)/(?P<den>-?\d+)$")
_TEX_HALF_RE = re.compile(r"^\\frac\{(?P<inner>.+)\}\{(?P<den>-?\d+)\}$")
_TEX_SQRT_RE = re.compile(r"\\sqrt\{(-?\d+)\}")


def _normalize(text: str) -> str:
    s = text or ""
    for ch in _THIN_SPACES:
        s = s.replace(ch, " ")
    s = s.replace("−", "-").replace("&minus;", "-").replace("&radic;", "√")
    s = s.replace("<i>", "").replace("</i>", "")
    s = _TEX_SQRT_RE.sub(r"sqrt(\1)", s)
    s = s.replace("\\,", "").replace("\\cdot", "*")
    return "".join(s.split())


def parse_fraction(text: str) -> Fraction:
    try:
        return Fraction.parse(text)
    except (ValueError, OverflowError) as e:
        raise UserInputError(f"Cannot read fraction {text!r}: {e}") from None


def parse_ring(text: str | int) -> QuadraticRing:
    """Ring from its radicand ("-1", "5", "−7"); "i" is accepted for -1."""
    s = _normalize(str(text))
    if s == "i":
        return QuadraticRing(-1)
    try:
        d = int(s)
    except ValueError:
        raise UserInputError(f"Radicand must be an integer, got {text!r}") from None
    try:
        return QuadraticRing(d)
    except ValueError as e:
        raise UserInputError(str(e)) from None


def _split_terms(body: str, original: str) -> list[tuple[int, int | None]]:
    """Return [(coefficient, radicand or None)] for each term of body."""
    terms: list[tuple[int, int | None]] = []
    pos = 0
    while pos < len(body):
        m = _TERM_RE.match(body, pos)
        if m is None or m.end() == pos:
            raise UserInputError(f"Cannot read {original!r} near {body[pos:]!r}")
        sign, coef = m.group("sign"), m.group("coef")
        if terms and sign is None:
            raise UserInputError(f"Missing + or - before {body[pos:]!r} in {original!r}")
        if m.group("i"):
            radicand: int | None = -1
        else:
            raw = m.group("r1") or m.group("r2") or m.group("r3")
            radicand = int(raw) if raw is not None else None
        if coef is None and radicand is None:
            raise UserInputError(f"Dangling sign in {original!r}")
        value = int(coef) if coef is not None else 1
        terms.append((-value if sign == "-" else value, radicand))
        pos = m.end()
    if not terms:
        raise UserInputError("Empty input is not a number")
    return terms


def ring_hint(text: str) -> QuadraticRing | None:
    """Ring named by the first surd in text, or None for a plain integer."""
    s = _normalize(text)
    m = _HALF_RE.match(s) or _TEX_HALF_RE.match(s)
    if m is not None:
        s = m.group("inner")
    for _, radicand in _split_terms(s, text):
        if radicand is not None:
            return parse_ring(radicand)
    return None


def parse_quadratic(text: str, ring: QuadraticRing | None = None) -> QuadraticInteger:
    """
    Parse text into a QuadraticInteger of `ring`. Without a ring, the surd in
    the text decides it; a plain integer then needs an explicit ring.
    """
    s = _normalize(text)
    den = 1
    m = _HALF_RE.match(s) or _TEX_HALF_RE.match(s)
    if m is not None:
        s, den = m.group("inner"), int(m.group("den"))

    reg = 0
    surd = 0
    for coef, radicand in _split_terms(s, text):
        if radicand is None:
            reg += coef
            continue
        if ring is None:
            ring = parse_ring(radicand)
        elif radicand != ring.radicand:
            raise UserInputError(
                f"{text!r} uses √{radicand}, which is not in {ring.to_ascii()}"
            )
        surd += coef

    if ring is None:
        raise UserInputError(f"{text!r} does not name a ring; pass one explicitly")
    try:
        return QuadraticInteger(reg, surd, ring, den)
    except ValueError as e:
        raise UserInputError(f"{text!r} is not an algebraic integer of {ring.to_ascii()}: {e}") from None
