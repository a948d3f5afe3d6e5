# src/numfields/cli.py

"""
numfields - exact division and rounding in quadratic rings of integers

usage: numfields -h

Examples:
    numfields divide "5+i" "3+i"
    numfields round 61 "1+9sqrt(-3)" --towards-zero
    numfields --style tex norm "(1+sqrt(5))/2"
    numfields gcd 5 "3+4i"
    numfields ring 13
"""

from __future__ import annotations

import argparse
import faulthandler
import os
import platform
import sys
import textwrap
import traceback
from importlib.resources import files as pkg_files

from colorama import Fore, Style
from colorama import init as colorama_init

from numfields import __version__ as _ver
from numfields.config import STYLES, has_profile, load_settings
from numfields.display import (
    print_division_report,
    print_gcd_report,
    print_number_report,
    print_profiles_with_descriptions,
    print_ring_report,
    print_rounding_report,
)
from numfields.division import divide, euclidean_gcd
from numfields.errors import (
    AlgebraicDegreeOverflowError,
    NonEuclideanDomainError,
    UnsupportedNumberDomainError,
    UserInputError,
)
from numfields.fmt import FormatOptions
from numfields.parsing import parse_quadratic, parse_ring, ring_hint
from numfields.quadratics import QuadraticInteger
from numfields.runtime import APPLY, CFG
from numfields.runtime import current as _rt_current
from numfields.utility import flatten_dotted, typename
from numfields.workspace import ensure_workspace_seeded, seed_workspace, workspace_dir


def _install_loud_error_handlers(debug: bool) -> None:
    if not debug:
        return
    # Always show full Python tracebacks
    faulthandler.enable()

    def _excepthook(exc_type, exc, tb):
        sys.stderr.write("\n[UNCAUGHT EXCEPTION]\n")
        traceback.print_exception(exc_type, exc, tb, file=sys.stderr)
        sys.stderr.flush()
    sys.excepthook = _excepthook


def _print_user_error(msg: str) -> None:
    """Uniform, one-line friendly error."""
    prefix = f"{Fore.RED}Error:{Style.RESET_ALL}"
    if not msg.startswith("Error:"):
        msg = f"{prefix} {msg}"
    print(msg, file=sys.stderr)


def _debug(msg: str) -> None:
    if _rt_current().debug:
        print(f"[debug] {msg}", file=sys.stderr)


def _configure_text_streams() -> None:
    # Respect explicit user choice
    if os.environ.get("PYTHONIOENCODING"):
        return
    # Only touch redirected output (pipes/files), leave TTY as-is
    if sys.stdout.isatty():
        return
    enc = (getattr(sys.stdout, "encoding", "") or "").lower()
    if platform.system() == "Windows" or enc in ("", "ascii", "us-ascii"):
        if hasattr(sys.stdout, "reconfigure"):
            sys.stdout.reconfigure(encoding="utf-8", errors="replace")
            sys.stderr.reconfigure(encoding="utf-8", errors="replace")


# ---- argparse ----
def _build_parser() -> argparse.ArgumentParser:

    epilog = textwrap.dedent("""\
    numbers:
      Integers, i, sqrt(d), √d or √(d) with an optional coefficient, and
      half-integers written as (a + b√d)/2. Without --ring the surd in the
      input decides the ring.
    """)

    p = argparse.ArgumentParser(
        prog="numfields",
        description="Exact division and rounding in quadratic rings of integers",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=epilog,
    )
    p.add_argument("--version", action="version", version=f"numfields {_ver}")
    p.add_argument("--profile", default=None, help="Profile name from <workspace>/profiles (default: default)")
    p.add_argument("--style", choices=STYLES, default=None, help="Override DISPLAY.STYLE")
    p.add_argument("--blackboard-bold", action="store_true", help="Use blackboard bold ring names in TeX/HTML")
    p.add_argument("--debug", action="store_true", help="Show [debug] lines and full tracebacks")

    sub = p.add_subparsers(dest="command", required=True)

    def _ring_arg(sp: argparse.ArgumentParser) -> None:
        sp.add_argument("--ring", default=None, metavar="D", help="Radicand d of the ring, e.g. -1, 5, -3")

    sp = sub.add_parser("divide", help="Divide A by B and report the exact quotient or its bounds")
    sp.add_argument("dividend", metavar="A")
    sp.add_argument("divisor", metavar="B")
    _ring_arg(sp)

    sp = sub.add_parser("round", help="Round A / B towards or away from zero")
    sp.add_argument("dividend", metavar="A")
    sp.add_argument("divisor", metavar="B")
    _ring_arg(sp)
    direction = sp.add_mutually_exclusive_group()
    direction.add_argument("--towards-zero", dest="towards_zero", action="store_true", default=None)
    direction.add_argument("--away-from-zero", dest="towards_zero", action="store_false", default=None)

    sp = sub.add_parser("gcd", help="Greatest common divisor of A and B in a norm-Euclidean ring")
    sp.add_argument("dividend", metavar="A")
    sp.add_argument("divisor", metavar="B")
    _ring_arg(sp)

    sp = sub.add_parser("norm", help="Describe a quadratic integer: norm, trace, minimal polynomial")
    sp.add_argument("number", metavar="A")
    _ring_arg(sp)

    sp = sub.add_parser("ring", help="Describe the ring with radicand D")
    sp.add_argument("radicand", metavar="D")

    sp = sub.add_parser("init", help="Create the workspace and copy packaged profiles if missing")
    sp.add_argument("--force", action="store_true", help="Overwrite existing packaged profiles")

    sub.add_parser("where", help="Show the workspace and package paths")
    sub.add_parser("profiles", help="List available profiles")

    return p


def main(argv=None) -> int:
    """Thin wrapper: catch friendly errors, hide tracebacks unless debug."""
    try:
        return _main_impl(argv)
    except UserInputError as e:
        _print_user_error(str(e))
        return 2
    except (
        UnsupportedNumberDomainError,
        AlgebraicDegreeOverflowError,
        NonEuclideanDomainError,
        ZeroDivisionError,
    ) as e:
        _print_user_error(str(e))
        return 2
    except KeyboardInterrupt:
        print("Aborted by user.", file=sys.stderr)
        return 130
    except Exception as e:
        # Only show traceback in debug mode
        debug = "--debug" in (argv if argv is not None else sys.argv) or _rt_current().debug
        if debug:
            raise
        print(f"Unexpected error: {e.__class__.__name__}: {e}", file=sys.stderr)
        print("Run with --debug for a full traceback.", file=sys.stderr)
        return 1


def _apply_profile(args) -> None:
    # Ensure a first-run workspace seed silently
    ensure_workspace_seeded()
    name = args.profile or "default"
    if not has_profile(name):
        raise UserInputError(f"Unknown profile: '{name}'")
    selected = load_settings(name)
    APPLY(selected)
    if args.debug:
        _rt_current().debug = True
    _install_loud_error_handlers(_rt_current().debug)

    if _rt_current().debug:
        print(f"[debug] active profile: {selected.name}", file=sys.stderr)
        if selected._source:
            print(f"[debug] profile file: {selected._source}", file=sys.stderr)
        flat = flatten_dotted(_rt_current().settings)
        for k in sorted(flat, key=str.lower):
            v = flat[k]
            print(f"        {k:.<40} {v!r} ({typename(v)})", file=sys.stderr)


def _format_options(args) -> FormatOptions:
    opts = FormatOptions.from_runtime()
    if args.style:
        opts = FormatOptions(blackboard_bold=opts.blackboard_bold, style=args.style)
    if args.blackboard_bold:
        opts = FormatOptions(blackboard_bold=True, style=opts.style)
    return opts


def _parse_operands(a: str, b: str, ring_text: str | None) -> tuple[QuadraticInteger, QuadraticInteger]:
    if ring_text is not None:
        ring = parse_ring(ring_text)
        return parse_quadratic(a, ring), parse_quadratic(b, ring)
    ring_a, ring_b = ring_hint(a), ring_hint(b)
    if ring_a is None and ring_b is None:
        raise UserInputError("Neither operand names a ring; pass --ring D")
    return parse_quadratic(a, ring_a or ring_b), parse_quadratic(b, ring_b or ring_a)


# ---- main ----
def _main_impl(argv=None) -> int:

    colorama_init(autoreset=True)
    _configure_text_streams()

    parser = _build_parser()
    args = parser.parse_args(argv)
    rt = _rt_current()
    rt.debug = bool(args.debug)
    _install_loud_error_handlers(args.debug)

    if args.command == "init":
        if args.force:
            ws, copied = seed_workspace(overwrite=True)
            print(f"Workspace ready at: {ws} (overwrote existing files)")
        else:
            ws, _, copied = ensure_workspace_seeded()
            print(f"Workspace ready at: {ws}")
        print(f"Copied -> profiles: {copied.get('profiles', 0)}")
        return 0

    if args.command == "where":
        print(f"Workspace: {workspace_dir()}")
        print(f"Package:   {pkg_files('numfields')}")
        return 0

    _apply_profile(args)

    if args.command == "profiles":
        print_profiles_with_descriptions(_rt_current().profile_name)
        return 0

    opts = _format_options(args)
    _debug(f"format options: {opts}")

    if args.command == "ring":
        print_ring_report(parse_ring(args.radicand), opts)
        return 0

    if args.command == "norm":
        ring = parse_ring(args.ring) if args.ring is not None else ring_hint(args.number)
        n = parse_quadratic(args.number, ring)
        _debug(f"parsed {args.number!r} as {n!r}")
        print_number_report(n, opts)
        return 0

    dividend, divisor = _parse_operands(args.dividend, args.divisor, args.ring)
    _debug(f"dividend {dividend!r}, divisor {divisor!r}")

    if args.command == "gcd":
        print_gcd_report(dividend, divisor, euclidean_gcd(dividend, divisor), opts)
        return 0

    result = divide(dividend, divisor)

    if args.command == "divide":
        print_division_report(result, opts, order=str(CFG("DISPLAY.SORT_BOUNDS", "none")))
        return 0

    print_rounding_report(result, opts, towards_zero=args.towards_zero)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
