# src/numfields/fmt.py
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

from numfields.runtime import CFG

if TYPE_CHECKING:
    # Type-only; no runtime import → avoids circulars
    from numfields.fraction import BigFraction, Fraction
    from numfields.quadratics import QuadraticInteger
    from numfields.rings import QuadraticRing

STYLES = ("unicode", "ascii", "tex", "html")

_MINUS = {"unicode": "−", "ascii": "-", "tex": "-", "html": "&minus;"}


@dataclass(frozen=True)
class FormatOptions:
    blackboard_bold: bool = False
    style: str = "unicode"

    def __post_init__(self) -> None:
        if self.style not in STYLES:
            raise ValueError(f"Unknown style {self.style!r}; expected one of {', '.join(STYLES)}")

    @classmethod
    def from_runtime(cls) -> FormatOptions:
        """Options from the active profile ([DISPLAY] STYLE / BLACKBOARD_BOLD)."""
        return cls(
            blackboard_bold=bool(CFG("DISPLAY.BLACKBOARD_BOLD", False)),
            style=str(CFG("DISPLAY.STYLE", "unicode")).lower(),
        )


def _resolve(options: FormatOptions | None, style: str | None) -> FormatOptions:
    opts = options or FormatOptions()
    if style is not None and style != opts.style:
        opts = replace(opts, style=style)
    return opts


def _signed(n: int, style: str) -> str:
    return f"{_MINUS[style]}{abs(n)}" if n < 0 else str(n)


# --- fractions ---------------------------------------------------------------


def format_fraction(f: Fraction | BigFraction, style: str = "unicode") -> str:
    if style == "tex":
        return f.to_tex()
    if style == "html":
        return f.to_html()
    if style == "unicode":
        return str(f).replace("-", _MINUS["unicode"])
    return str(f)


# --- rings -------------------------------------------------------------------


def format_ring(ring: QuadraticRing, style: str | None = None, *, options: FormatOptions | None = None) -> str:
    """
    Name of the ring, e.g. Z[i], Z[omega], Z[sqrt(2)], O_(Q(sqrt(13))) in ASCII.
    Blackboard bold only changes the TeX and HTML forms.
    """
    opts = _resolve(options, style)
    s = opts.style
    d = ring.radicand

    if s == "ascii":
        z, q, i, omega, phi = "Z", "Q", "i", "omega", "phi"
        root = f"sqrt({d})"
    elif s == "unicode":
        z, q, i, omega, phi = "ℤ", "ℚ", "i", "ω", "φ"
        root = "√" + _signed(d, s)
    elif s == "tex":
        z = "\\mathbb Z" if opts.blackboard_bold else "\\mathbf Z"
        q = "\\mathbb Q" if opts.blackboard_bold else "\\mathbf Q"
        i, omega, phi = "i", "\\omega", "\\phi"
        root = f"\\sqrt{{{d}}}"
    else:
        z = "&#x2124;" if opts.blackboard_bold else "<b>Z</b>"
        q = "&#x211A;" if opts.blackboard_bold else "<b>Q</b>"
        i, omega, phi = "<i>i</i>", "&omega;", "&phi;"
        root = "&radic;" + _signed(d, s)

    if d == -1:
        return f"{z}[{i}]"
    if d == -3:
        return f"{z}[{omega}]"
    if d == 5:
        return f"{z}[{phi}]"
    if not ring.has_half_integers:
        return f"{z}[{root}]"
    if s == "ascii":
        return f"O_({q}({root}))"
    if s == "unicode":
        return f"O_{q}({root})"
    if s == "tex":
        return f"\\mathcal O_{{{q}({root})}}"
    return f"<i>O</i><sub>{q}({root})</sub>"


def ring_filename(ring: QuadraticRing) -> str:
    """Short token for file names: ZI, ZW, ZPHI, Z2, ZI2, OQ13, OQI7."""
    d = ring.radicand
    if d == -1:
        return "ZI"
    if d == -3:
        return "ZW"
    if d == 5:
        return "ZPHI"
    prefix = "OQ" if ring.has_half_integers else "Z"
    return f"{prefix}{'I' if d < 0 else ''}{abs(d)}"


# --- quadratic integers -----------------------------------------------------


def _surd_symbol(ring: QuadraticRing, style: str) -> str:
    d = ring.radicand
    if d == -1:
        return "<i>i</i>" if style == "html" else "i"
    if style == "ascii":
        return f"sqrt({d})"
    if style == "tex":
        return f"\\sqrt{{{d}}}"
    if style == "html":
        return "&radic;" + _signed(d, style)
    return "√" + _signed(d, style)


def _surd_term(coef: int, sym: str, style: str) -> str:
    if coef == 1:
        return sym
    if style == "tex" and sym.startswith("\\"):
        return f"{coef} {sym}"
    return f"{coef}{sym}"


def _binomial(a: int, b: int, sym: str, style: str) -> str:
    minus = _MINUS[style]
    if b == 0:
        return _signed(a, style)
    surd = _surd_term(abs(b), sym, style)
    if a == 0:
        return minus + surd if b < 0 else surd
    op = f" {minus} " if b < 0 else " + "
    return _signed(a, style) + op + surd


def format_quadratic(
    n: QuadraticInteger, style: str | None = None, *, options: FormatOptions | None = None
) -> str:
    """
    (a + b√d)/n in the requested style. Gaussian integers use i; coefficients
    of ±1 are left out; half-integers print as (a + b√d)/2, or as a sum of
    two \\frac terms in TeX.
    """
    s = _resolve(options, style).style
    a, b = n.reg_part_mult, n.surd_part_mult
    sym = _surd_symbol(n.ring, s)
    if n.denominator == 1:
        return _binomial(a, b, sym, s)
    if s != "tex":
        return f"({_binomial(a, b, sym, s)})/{n.denominator}"

    reg = f"\\frac{{{abs(a)}}}{{{n.denominator}}}"
    surd = f"\\frac{{{_surd_term(abs(b), sym, s)}}}{{{n.denominator}}}"
    lead = "-" if a < 0 else ""
    op = " - " if b < 0 else " + "
    return f"{lead}{reg}{op}{surd}"


# --- minimal polynomial -----------------------------------------------------

_POWERS = {
    "unicode": ("", "x", "x²"),
    "ascii": ("", "x", "x^2"),
    "tex": ("", "x", "x^2"),
    "html": ("", "<i>x</i>", "<i>x</i><sup>2</sup>"),
}


def format_min_polynomial(
    n: QuadraticInteger, style: str | None = None, *, options: FormatOptions | None = None
) -> str:
    s = _resolve(options, style).style
    minus = _MINUS[s]
    powers = _POWERS[s]
    coeffs = n.min_polynomial_coeffs()

    out = ""
    for degree in (2, 1, 0):
        c = coeffs[degree]
        if c == 0:
            continue
        var = powers[degree]
        body = var if (abs(c) == 1 and var) else f"{abs(c)}{var}"
        if not out:
            out = (minus if c < 0 else "") + body
        else:
            out += f" {minus} " if c < 0 else " + "
            out += body
    return out
