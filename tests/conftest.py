# tests/conftest.py
"""
Shared sample inputs and helpers for the gridslice test-suite.
"""

import pytest

from gridslice.executor import GridSlice, format_record, split_fields
from gridslice.ranges import compile_slice


# ═══════════════════════════════════════════════════════════════════════
#  Sample inputs
# ═══════════════════════════════════════════════════════════════════════

GRID_3X3 = ["a b c", "d e f", "g h i"]

FIVE_LINES = ["L0", "L1", "L2", "L3", "L4"]

WORDS = ["alpha beta gamma delta", "one two", "", "x"]

TABLE_TEXT = """\
name   size  owner
init   12    root
kernel 4096  root
shell  220   user
"""

# Expressions both parsers accept.
VALID_EXPRESSIONS = [
    "l1", "f2", "c3", "L1", "F-1", "C0",
    "l1f2c3", "c3f2l1", "f2c3l1", "l1c3f2", "c3l1f2", "f2l1c3",
    "!l1", "!f-2c1", "L2!c1",
    ":", "::", "l1:", ":l1", "l1:l5:l2", "f0:f-1:f-1",
    "L2f1:c3", "l-3::l-1", "::c-1", "l0f0:l1f1", "!f1::f2",
]

# Expressions both parsers reject, with the expected error class name.
INVALID_EXPRESSIONS = [
    ("", "SyntaxError"),
    ("x", "SyntaxError"),
    ("l", "SyntaxError"),
    ("l-", "SyntaxError"),
    ("l--1", "SyntaxError"),
    ("!L1", "SyntaxError"),
    (" l1", "SyntaxError"),
    ("l1 ", "SyntaxError"),
    ("l1-2", "SyntaxError"),
    ("l1l2", "SyntaxError"),
    (":::", "SyntaxError"),
    ("l1:l2:l3:l4", "SyntaxError"),
    ("l1:x", "SyntaxError"),
    ("l1L2", "AmbiguousRangeError"),
    ("L1f2F3", "AmbiguousRangeError"),
    ("f0:c1C2", "AmbiguousRangeError"),
]


# ═══════════════════════════════════════════════════════════════════════
#  Helpers
# ═══════════════════════════════════════════════════════════════════════

def run_slice(expression, lines, parser="descent"):
    """Apply *expression* to raw lines; return formatted output lines."""
    gsf = compile_slice(expression, parser=parser)
    return [format_record(r) for r in GridSlice(gsf, [split_fields(line) for line in lines])]


class CountingSource:
    """Iterable of records that remembers how many were pulled."""

    def __init__(self, lines):
        self._lines = [split_fields(line) for line in lines]
        self.pulled = 0

    def __iter__(self):
        for record in self._lines:
            self.pulled += 1
            yield record


def failing_stream(lines, exc):
    """Yield *lines*, then raise *exc* as a broken reader would."""
    yield from lines
    raise exc


@pytest.fixture
def table_file(tmp_path):
    path = tmp_path / "table.txt"
    path.write_text(TABLE_TEXT, encoding="utf-8")
    return path


@pytest.fixture
def grid_file(tmp_path):
    path = tmp_path / "grid.txt"
    path.write_text("\n".join(GRID_3X3) + "\n", encoding="utf-8")
    return path
