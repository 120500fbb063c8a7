#!/usr/bin/env python3
"""gridslice/main.py — CLI entry-point.

Usage examples
--------------
    # Second field of every line
    gridslice f1 data.txt

    # First two fields of the first two lines
    gridslice l0f0:l1f1 data.txt

    # Last field, reading standard input
    some-command | gridslice f-1

    # Lines in reverse order
    gridslice ::l-1 data.txt

    # Show how an expression resolves, without reading input
    gridslice --explain 'L2f1:f3'

Exit codes
----------
    0   Success.
    1   The expression failed to parse or resolve.
    2   Input or output failure (file cannot be opened, strict read error).

The module doubles as ``python -m gridslice`` via the companion
``gridslice/__main__.py`` which simply calls :func:`main`.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence, TextIO

from . import __version__
from .ast import AXES
from .errors import GridSliceError, IoError, SyntaxError_
from .executor import GridSlice, read_records, write_records
from .normalize import needs_buffering
from .ranges import GridSliceFilter, compile_slice

_log = logging.getLogger("gridslice")

# Exit codes ----------------------------------------------------------------

EXIT_OK: int = 0
EXIT_ERROR: int = 1
EXIT_INFRA: int = 2
EXIT_INTERRUPT: int = 130

_handler: Optional[logging.Handler] = None


# ===========================================================================
# Utility helpers
# ===========================================================================

def _configure_logging(verbosity: int) -> None:
    """Set up the ``gridslice`` logger.

    Parameters
    ----------
    verbosity:
        0 → WARNING, 1 → INFO, 2+ → DEBUG.
    """
    global _handler

    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG

    root = logging.getLogger("gridslice")
    if _handler is not None:
        root.removeHandler(_handler)
    _handler = logging.StreamHandler(sys.stderr)
    _handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s [%(levelname)-5.5s] %(name)s: %(message)s",
            datefmt="%H:%M:%S",
        )
    )
    root.setLevel(level)
    root.addHandler(_handler)


def _open_input(raw: Optional[str]) -> TextIO:
    """*raw* ``None`` or ``"-"`` → ``sys.stdin``; otherwise open the path."""
    if raw is None or raw == "-":
        return sys.stdin
    path = Path(raw).expanduser()
    try:
        return open(path, "r", encoding="utf-8")
    except OSError as exc:
        raise IoError(f"unable to open {raw}: {exc.strerror}", path=raw, cause=exc) from exc


def _open_output(dest: Optional[str]) -> TextIO:
    """*dest* ``None`` or ``"-"`` → ``sys.stdout``; otherwise open the path."""
    if dest is None or dest == "-":
        return sys.stdout
    p = Path(dest).expanduser().resolve()
    try:
        p.parent.mkdir(parents=True, exist_ok=True)
        return open(p, "w", encoding="utf-8")
    except OSError as exc:
        raise IoError(f"unable to write {dest}: {exc.strerror}", path=dest, cause=exc) from exc


def _report(prog: str, exc: GridSliceError) -> None:
    print(f"{prog}: error: {exc}", file=sys.stderr)
    if isinstance(exc, SyntaxError_) and exc.column is not None:
        for line in exc.pointer().splitlines():
            print(f"    {line}", file=sys.stderr)


def explain(gsf: GridSliceFilter, out: TextIO) -> None:
    """Print the resolved range of every axis."""
    for axis in AXES:
        out.write(f"{axis.label + ':':<11}{gsf.get(axis)}\n")
    strategy = "buffered" if needs_buffering(gsf.line) else "streaming"
    out.write(f"{'input:':<11}{strategy}\n")


# ===========================================================================
# Argument parser
# ===========================================================================

def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gridslice",
        description="Select lines, fields and characters of tabular text.",
        epilog=(
            "EXPRESSION is START[:STOP[:STEP]] where each part combines "
            "lN fN cN (bounds, '!' to exclude) or LN FN CN (pins). "
            "Without ':' the expression selects single indices."
        ),
    )
    parser.add_argument("expression", metavar="EXPRESSION", help="The slice expression.")
    parser.add_argument(
        "file",
        metavar="FILE",
        nargs="?",
        default=None,
        help='Input file ("-" or omit for stdin).',
    )
    parser.add_argument(
        "-o", "--output",
        default=None,
        metavar="FILE",
        help='Output file ("-" or omit for stdout).',
    )
    parser.add_argument(
        "--parser",
        choices=["descent", "peg"],
        default="descent",
        help="Expression parser to use (default: descent).",
    )
    parser.add_argument(
        "--strict-io",
        action="store_true",
        help="Fail on read errors instead of ending the output early.",
    )
    parser.add_argument(
        "--explain",
        action="store_true",
        help="Print the resolved ranges and exit without reading input.",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase log verbosity (-v info, -vv debug).",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def run(args: argparse.Namespace) -> int:
    # The expression is fully checked before any input is touched.
    gsf = compile_slice(args.expression, parser=args.parser)
    if args.explain:
        explain(gsf, sys.stdout)
        return EXIT_OK

    source = _open_input(args.file)
    name = "<stdin>" if source is sys.stdin else args.file
    try:
        records = read_records(source, strict=args.strict_io, name=name)
        out = _open_output(args.output)
        try:
            written = write_records(GridSlice(gsf, records), out)
        finally:
            if out is not sys.stdout:
                out.close()
    finally:
        if source is not sys.stdin:
            source.close()
    _log.info("wrote %d records", written)
    return EXIT_OK


# ===========================================================================
# Main entry point
# ===========================================================================

def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the CLI.

    Parameters
    ----------
    argv:
        Command-line arguments.  ``None`` → ``sys.argv[1:]``.

    Returns
    -------
    int
        Exit code (see module docstring for semantics).
    """
    parser = _build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    try:
        return run(args)
    except IoError as exc:
        _report(parser.prog, exc)
        return EXIT_INFRA
    except GridSliceError as exc:
        _report(parser.prog, exc)
        return EXIT_ERROR
    except BrokenPipeError:
        _log.debug("output closed early")
        return EXIT_OK
    except KeyboardInterrupt:
        _log.info("Interrupted by user.")
        return EXIT_INTERRUPT


if __name__ == "__main__":
    raise SystemExit(main())
