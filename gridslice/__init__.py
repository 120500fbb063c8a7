"""gridslice — slice tabular text by line, field and character.

An expression such as ``l1f0:l3f2`` or ``F-1`` selects lines of the
input, whitespace-delimited fields within each kept line, and characters
within each kept field.  Negative indices count from the end and a
negative step walks an axis backwards.

Submodules
----------
ast
    ``Axis``, ``Endpoint``, ``AxisGroup`` and ``ParsedSlice``.

parser
    Recursive-descent parser: expression string → ``ParsedSlice``.

grammar
    The same grammar as a Parsimonious PEG.

ranges
    Resolution of a parsed slice into one ``CanonicalRange`` per axis.

normalize
    Concrete bounds for a known sequence length.

executor
    The ``GridSlice`` line → field → character filter.

errors
    ``GridSliceError`` hierarchy and ``GS-NNNN`` error codes.

main
    Command-line entry point.

Usage
-----
Command-line::

    gridslice f1 data.txt
    printf 'a b c\\n' | python -m gridslice f-1

Programmatic::

    from gridslice import slice_lines

    slice_lines("l0f0:l1f1", ["a b c", "d e f", "g h i"])
    # ['a b', 'd e']
"""

from __future__ import annotations

__version__: str = "0.1.0"
__all__: list[str] = [
    "__version__",
    "parse",
    "parse_peg",
    "resolve",
    "compile_slice",
    "normalize",
    "GridSlice",
    "GridSliceFilter",
    "CanonicalRange",
    "slice_lines",
    "GridSliceError",
    "AmbiguousRangeError",
    "InvalidStepError",
    "IoError",
]

from .errors import AmbiguousRangeError, GridSliceError, InvalidStepError, IoError
from .executor import GridSlice, slice_lines
from .grammar import parse_peg
from .normalize import normalize
from .parser import parse
from .ranges import CanonicalRange, GridSliceFilter, compile_slice, resolve
