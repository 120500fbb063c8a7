"""gridslice/parser.py – Grid-slice expression → :class:`ParsedSlice`.

Design principles
-----------------
* **Recursive descent with try/commit** – every ``_parse_*`` method takes
  a start index and returns ``(result, end_index)`` on success or
  ``None`` on failure.  A failed attempt never moves anybody's position;
  only the caller that accepts a result continues from its end index.
* **Full backtracking** – alternatives are tried from the same start
  index, so a partial match in one branch cannot leak into the next.
* **Whole-input contract** – after a successful top-level parse any
  unconsumed character is fatal.

Grammar
-------
::

    exclude     := "!"
    lower(P)    := [exclude] P integer          ; P in l f c
    upper(P)    := P integer                    ; P in L F C
    endpoint(P) := lower(p) | upper(P)
    integer     := ['-'] digit+
    grid_index  := endpoint(l) | endpoint(f) | endpoint(c), in any order,
                   each at most once, at least one
    slice       := [grid_index] ':' [grid_index] [':' [grid_index]]
                 | grid_index

Public API
----------
``parse(text: str) -> ParsedSlice``
"""

from __future__ import annotations

import logging
from typing import NoReturn, Optional, Tuple, TypeVar

from .ast import AXES, Axis, AxisGroup, Endpoint, ParsedSlice
from .errors import AmbiguousRangeError, ErrorCodes, SyntaxError_

logger = logging.getLogger(__name__)

T = TypeVar("T")
#: ``(value, end_index)`` or ``None``.
Match = Optional[Tuple[T, int]]

SEPARATOR = ":"
EXCLUDE = "!"
MINUS = "-"
_DIGITS = frozenset("0123456789")


class SliceParser:
    """Parses one expression string."""

    def __init__(self, text: str) -> None:
        self.text = text

    def parse(self) -> ParsedSlice:
        match = self._parse_slice(0)
        if match is None:
            raise SyntaxError_(
                "unable to parse the expression",
                code=ErrorCodes.UNABLE_TO_PARSE,
                column=0,
                expression=self.text,
            )
        parsed, pos = match
        if pos < len(self.text):
            raise_trailing_error(self.text, parsed, pos)
        logger.debug("parsed %r as %s", self.text, parsed)
        return parsed

    # ── terminals ───────────────────────────────────────────────────────

    def _parse_char(self, pos: int, char: str) -> Optional[int]:
        if self.text.startswith(char, pos):
            return pos + 1
        return None

    def _parse_integer(self, pos: int) -> Match[int]:
        end = pos
        if self.text.startswith(MINUS, end):
            end += 1
        digits_at = end
        while end < len(self.text) and self.text[end] in _DIGITS:
            end += 1
        if end == digits_at:
            return None
        return int(self.text[pos:end]), end

    # ── endpoints ───────────────────────────────────────────────────────

    def _parse_lower(self, pos: int, axis: Axis) -> Match[Endpoint]:
        after_bang = self._parse_char(pos, EXCLUDE)
        exclude = after_bang is not None
        after_prefix = self._parse_char(after_bang if exclude else pos, axis.lower)
        if after_prefix is None:
            return None
        number = self._parse_integer(after_prefix)
        if number is None:
            return None
        value, end = number
        return Endpoint(axis, value, pinned=False, exclude=exclude), end

    def _parse_upper(self, pos: int, axis: Axis) -> Match[Endpoint]:
        after_prefix = self._parse_char(pos, axis.upper)
        if after_prefix is None:
            return None
        number = self._parse_integer(after_prefix)
        if number is None:
            return None
        value, end = number
        return Endpoint(axis, value, pinned=True), end

    def parse_endpoint(self, pos: int, axis: Axis) -> Match[Endpoint]:
        return self._parse_lower(pos, axis) or self._parse_upper(pos, axis)

    def _parse_endpoints(self, pos: int, axes: Tuple[Axis, ...]) -> Tuple[Tuple[Endpoint, ...], int]:
        """Longest run of endpoints drawn from *axes*, each used once.

        Always succeeds, possibly with an empty run.
        """
        for axis in axes:
            match = self.parse_endpoint(pos, axis)
            if match is None:
                continue
            endpoint, end = match
            remaining = tuple(a for a in axes if a is not axis)
            rest, end = self._parse_endpoints(end, remaining)
            return (endpoint,) + rest, end
        return (), pos

    # ── groups and slices ───────────────────────────────────────────────

    def _parse_grid_index(self, pos: int) -> Match[AxisGroup]:
        endpoints, end = self._parse_endpoints(pos, AXES)
        if not endpoints:
            return None
        return AxisGroup.of(*endpoints), end

    def _parse_optional_grid_index(self, pos: int) -> Tuple[AxisGroup, int]:
        match = self._parse_grid_index(pos)
        if match is None:
            return AxisGroup(), pos
        return match

    def _parse_ranged(self, pos: int) -> Match[ParsedSlice]:
        start, end = self._parse_optional_grid_index(pos)
        after_sep = self._parse_char(end, SEPARATOR)
        if after_sep is None:
            return None
        stop, end = self._parse_optional_grid_index(after_sep)
        after_sep = self._parse_char(end, SEPARATOR)
        if after_sep is None:
            return ParsedSlice(start=start, stop=stop), end
        step, end = self._parse_optional_grid_index(after_sep)
        return ParsedSlice(start=start, stop=stop, step=step), end

    def _parse_slice(self, pos: int) -> Match[ParsedSlice]:
        ranged = self._parse_ranged(pos)
        if ranged is not None:
            return ranged
        single = self._parse_grid_index(pos)
        if single is None:
            return None
        group, end = single
        return ParsedSlice(start=group, ranged=False), end


def raise_trailing_error(text: str, parsed: ParsedSlice, pos: int) -> NoReturn:
    """Report unconsumed text at *pos* after a structurally valid parse.

    An endpoint that repeats an axis of the group right before it, in the
    other form (``l1L2``), is an ambiguous range; anything else is a
    syntax error.
    """
    adjacent = parsed.last_group() if pos > 0 and text[pos - 1] != SEPARATOR else None
    if adjacent is not None:
        lookahead = SliceParser(text)
        for axis in AXES:
            match = lookahead.parse_endpoint(pos, axis)
            if match is None:
                continue
            existing = adjacent.get(axis)
            if existing is not None and existing.conflicts_with(match[0]):
                raise AmbiguousRangeError(
                    f"ambiguous range: '{axis.upper}' was used in conjunction "
                    f"with '{axis.lower}' for the same {axis.label} range",
                    axis=axis.label,
                    column=pos,
                )
            break
    raise SyntaxError_(
        f"failed to fully parse the expression, stopped at {text[pos:]!r}",
        code=ErrorCodes.INCOMPLETE_PARSE,
        column=pos,
        expression=text,
    )


def parse(text: str) -> ParsedSlice:
    """Parse a grid-slice expression."""
    return SliceParser(text).parse()
