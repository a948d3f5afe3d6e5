# src/numfields/display.py
from __future__ import annotations

from colorama import Fore, Style

from numfields.config import list_profiles_with_descriptions
from numfields.division import Divided, DivisionResult
from numfields.fmt import (
    FormatOptions,
    format_fraction,
    format_min_polynomial,
    format_quadratic,
    format_ring,
    ring_filename,
)
from numfields.quadratics import QuadraticInteger, by_abs, by_norm
from numfields.rings import QuadraticRing
from numfields.runtime import CFG
from numfields.utility import get_terminal_width

ALIGN_WIDTH = 22  # label column


def _header(text: str) -> str:
    return f"{Fore.CYAN + Style.BRIGHT}{text}{Style.RESET_ALL}"


def _row(label: str, value: str) -> str:
    return f"  {label:<{ALIGN_WIDTH}}{value}"


def _list_row(label: str, items: list[str]) -> str:
    """Like _row, but breaks only between items when the line gets too long."""
    width = max(get_terminal_width() - ALIGN_WIDTH - 2, 20)
    lines: list[str] = []
    line = ""
    for item in items:
        piece = f"{line}, {item}" if line else item
        if line and len(piece) > width:
            lines.append(line + ",")
            line = item
        else:
            line = piece
    lines.append(line)
    return _row(label, ("\n" + " " * (ALIGN_WIDTH + 2)).join(lines))


def sorted_bounds(points: list[QuadraticInteger], order: str | None = None) -> list[QuadraticInteger]:
    """Order bounding integers per DISPLAY.SORT_BOUNDS: none, norm or abs."""
    if order is None:
        order = str(CFG("DISPLAY.SORT_BOUNDS", "none"))
    if order == "norm":
        return sorted(points, key=by_norm)
    if order == "abs":
        return sorted(points, key=by_abs)
    return list(points)


def print_ring_report(ring: QuadraticRing, opts: FormatOptions) -> None:
    print(_header(f"Ring {format_ring(ring, options=opts)}"))
    kind = "real" if ring.is_real else "imaginary"
    print(_row("Radicand:", str(ring.radicand)))
    print(_row("Kind:", kind))
    print(_row("Discriminant:", str(ring.discriminant)))
    print(_row("Half-integers:", "yes" if ring.has_half_integers else "no"))
    print(_row("File token:", ring_filename(ring)))


def print_number_report(n: QuadraticInteger, opts: FormatOptions) -> None:
    num = format_quadratic(n, options=opts)
    print(_header(f"Number {Fore.YELLOW}{num}{Style.RESET_ALL}"))
    print(_row("Ring:", format_ring(n.ring, options=opts)))
    print(_row("Norm:", str(n.norm())))
    print(_row("Trace:", str(n.trace())))
    print(_row("Conjugate:", format_quadratic(n.conjugate(), options=opts)))
    print(_row("Algebraic degree:", str(n.algebraic_degree())))
    print(_row("Minimal polynomial:", format_min_polynomial(n, options=opts)))
    print(_row("Absolute value:", f"{n.abs():.6g}"))


def print_division_report(result: DivisionResult, opts: FormatOptions, *, order: str | None = None) -> None:
    if isinstance(result, Divided):
        q = format_quadratic(result.quotient, options=opts)
        print(f"{Fore.GREEN}{Style.BRIGHT}Exact:{Style.RESET_ALL} {q}")
        return

    failure = result.failure
    dividend = format_quadratic(failure.causing_dividend, options=opts)
    divisor = format_quadratic(failure.causing_divisor, options=opts)
    print(f"{Fore.YELLOW}{Style.BRIGHT}Not divisible:{Style.RESET_ALL} {dividend} by {divisor}")
    p, q = failure.fractions
    print(_row("Ring:", format_ring(failure.causing_ring, options=opts)))
    print(_row("Regular part:", format_fraction(p, opts.style)))
    print(_row("Surd part:", format_fraction(q, opts.style)))
    value = f"{failure.numeric_real_part():.6g}"
    if failure.causing_ring.is_imaginary:
        im = failure.numeric_imag_part()
        value += f" {'-' if im < 0 else '+'} {abs(im):.6g}i"
    print(_row("Numeric value:", value))
    bounds = sorted_bounds(failure.bounding_integers(), order)
    print(_list_row("Bounding integers:", [format_quadratic(b, options=opts) for b in bounds]))


def print_rounding_report(result: DivisionResult, opts: FormatOptions, *, towards_zero: bool | None) -> None:
    """towards_zero=None prints both policies."""
    if isinstance(result, Divided):
        print_division_report(result, opts)
        return
    failure = result.failure
    if towards_zero is None or towards_zero:
        print(_row("Towards zero:", format_quadratic(failure.round_towards_zero(), options=opts)))
    if towards_zero is None or not towards_zero:
        print(_row("Away from zero:", format_quadratic(failure.round_away_from_zero(), options=opts)))


def print_profiles_with_descriptions(current: str | None = None) -> None:
    pairs = list_profiles_with_descriptions()
    if not pairs:
        print("\nAvailable profiles: (none)")
        return
    lines = []
    for name, desc in pairs:
        mark = "*" if current and name == current else " "
        lines.append(f"{mark} {name:13} {desc}")
    print("\nAvailable profiles:\n  " + "\n  ".join(lines))


def print_gcd_report(a: QuadraticInteger, b: QuadraticInteger, g: QuadraticInteger, opts: FormatOptions) -> None:
    fa = format_quadratic(a, options=opts)
    fb = format_quadratic(b, options=opts)
    print(_header(f"gcd({fa}, {fb})"))
    print(_row("Ring:", format_ring(g.ring, options=opts)))
    print(_row("GCD:", format_quadratic(g, options=opts)))
    print(_row("Norm:", str(g.norm())))
