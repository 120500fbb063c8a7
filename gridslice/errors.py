# gridslice/errors.py
"""
Grid-slice Error Types

Every failure the tool can report is a :class:`GridSliceError` carrying a
structured :class:`ErrorCode`.  Parse and resolution errors are detected
once, before any input is read; I/O errors come from opening or reading
the input.

Error Hierarchy:
────────────────
  GridSliceError (base)
  ├── SyntaxError          - expression does not match the grammar
  ├── RangeError           - a parsed expression cannot be resolved
  │   ├── AmbiguousRangeError  - pin collides with another bound
  │   └── InvalidStepError     - pinned or zero step
  └── IoError              - input cannot be opened or read

Error Codes:
────────────
Codes follow the pattern GS-NNNN:
  - 1000-1999: Syntax errors
  - 2000-2999: Resolution errors
  - 5000-5999: I/O errors
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional


class ErrorPhase(Enum):
    """Pipeline phase an error was raised in."""

    SYNTAX = "syntax"
    RESOLUTION = "resolution"
    IO = "io"


class ErrorCode:
    """A ``GS-NNNN`` error code."""

    __slots__ = ("prefix", "number", "phase", "summary")

    def __init__(self, number: int, phase: ErrorPhase, summary: str, prefix: str = "GS") -> None:
        self.prefix = prefix
        self.number = number
        self.phase = phase
        self.summary = summary

    @property
    def code(self) -> str:
        return f"{self.prefix}-{self.number:04d}"

    def __str__(self) -> str:
        return self.code

    def __repr__(self) -> str:
        return f"ErrorCode({self.code!r}, {self.phase.name})"

    def __hash__(self) -> int:
        return hash((self.prefix, self.number))

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ErrorCode):
            return self.prefix == other.prefix and self.number == other.number
        if isinstance(other, str):
            return self.code == other
        return False


class ErrorCodes:
    """Predefined error codes."""

    # Syntax (1000-1999)
    UNABLE_TO_PARSE = ErrorCode(1001, ErrorPhase.SYNTAX, "unable to parse")
    INCOMPLETE_PARSE = ErrorCode(1002, ErrorPhase.SYNTAX, "failed to fully parse")

    # Resolution (2000-2999)
    AMBIGUOUS_RANGE = ErrorCode(2001, ErrorPhase.RESOLUTION, "ambiguous range")
    PINNED_STEP = ErrorCode(2002, ErrorPhase.RESOLUTION, "pinned step")
    ZERO_STEP = ErrorCode(2003, ErrorPhase.RESOLUTION, "zero step")

    # I/O (5000-5999)
    OPEN_FAILED = ErrorCode(5001, ErrorPhase.IO, "unable to open input")
    READ_FAILED = ErrorCode(5002, ErrorPhase.IO, "unable to read input")


class GridSliceError(Exception):
    """Base exception for all grid-slice errors."""

    default_code: ErrorCode = ErrorCodes.UNABLE_TO_PARSE

    def __init__(
        self,
        message: str,
        code: Optional[ErrorCode] = None,
        column: Optional[int] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.column = column
        self.cause = cause

    @property
    def phase(self) -> ErrorPhase:
        return self.code.phase

    def __str__(self) -> str:
        text = f"{self.code}: {self.message}"
        if self.column is not None:
            text += f" (column {self.column})"
        return text


# ───────────────────────────────────────────────────────────────────────────────
# SYNTAX ERRORS
# ───────────────────────────────────────────────────────────────────────────────

class SyntaxError(GridSliceError):  # noqa: A001
    """The expression does not match the grammar."""

    default_code = ErrorCodes.UNABLE_TO_PARSE

    def __init__(self, message: str, code: Optional[ErrorCode] = None,
                 column: Optional[int] = None, expression: str = "", **kwargs: Any) -> None:
        super().__init__(message, code=code, column=column, **kwargs)
        self.expression = expression

    def pointer(self) -> str:
        """Render the expression with a caret under the failing column."""
        if self.column is None or not self.expression:
            return self.expression
        return f"{self.expression}\n{' ' * self.column}^"


#: Alias for importers that must not shadow the builtin.
SyntaxError_ = SyntaxError


# ───────────────────────────────────────────────────────────────────────────────
# RESOLUTION ERRORS
# ───────────────────────────────────────────────────────────────────────────────

class RangeError(GridSliceError):
    """A syntactically valid expression describes an invalid range."""

    default_code = ErrorCodes.AMBIGUOUS_RANGE

    def __init__(self, message: str, axis: str = "", **kwargs: Any) -> None:
        super().__init__(message, **kwargs)
        self.axis = axis


class AmbiguousRangeError(RangeError):
    """A lowercase bound and an uppercase pin collide on the same axis."""

    default_code = ErrorCodes.AMBIGUOUS_RANGE


class InvalidStepError(RangeError):
    """A step endpoint is pinned (uppercase) or zero."""

    default_code = ErrorCodes.PINNED_STEP


# ───────────────────────────────────────────────────────────────────────────────
# I/O ERRORS
# ───────────────────────────────────────────────────────────────────────────────

class IoError(GridSliceError):
    """The input cannot be opened, or a read failed mid-stream."""

    default_code = ErrorCodes.OPEN_FAILED

    def __init__(self, message: str, path: str = "", **kwargs: Any) -> None:
        super().__init__(message, **kwargs)
        self.path = path


__all__ = [
    "ErrorPhase",
    "ErrorCode",
    "ErrorCodes",
    "GridSliceError",
    "SyntaxError",
    "SyntaxError_",
    "RangeError",
    "AmbiguousRangeError",
    "InvalidStepError",
    "IoError",
]
