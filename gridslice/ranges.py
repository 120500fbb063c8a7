"""gridslice/ranges.py – Range resolution.

Folds the start/stop/step endpoints of a :class:`ParsedSlice` into one
:class:`CanonicalRange` per axis.

Rules, per axis
---------------
* lowercase start sets the start bound only;
* lowercase stop sets the stop bound only;
* an uppercase endpoint in either position is a *pin* and sets both;
* a pin combined with any other bound of the same pair is ambiguous;
* the step endpoint must be lowercase and non-zero;
* ``exclude`` is the OR of the flags on start, stop and step.

An expression without a separator uses its start as its stop as well, so
``f1`` resolves like ``f1:f1``.

Bounds are inclusive.  ``stop is None`` means "open to the end"; every
integer stop, ``-1`` included, is a real bound counted from the end when
negative.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from .ast import Axis, Endpoint, ParsedSlice
from .errors import AmbiguousRangeError, ErrorCodes, InvalidStepError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CanonicalRange:
    """Resolved ``(start, stop, step, exclude)`` for one axis."""

    start: int = 0
    stop: Optional[int] = None
    step: int = 1
    exclude: bool = False

    @property
    def unbounded(self) -> bool:
        return self.stop is None

    def __str__(self) -> str:
        stop = "end" if self.stop is None else str(self.stop)
        text = f"[{self.start}..{stop}] step {self.step}"
        return f"not {text}" if self.exclude else text


#: Selects everything.
FULL_RANGE = CanonicalRange()


@dataclass(frozen=True)
class GridSliceFilter:
    """The three resolved axis ranges of one expression."""

    line: CanonicalRange = FULL_RANGE
    field: CanonicalRange = FULL_RANGE
    character: CanonicalRange = FULL_RANGE

    def get(self, axis: Axis) -> CanonicalRange:
        return getattr(self, axis.label)

    def is_identity(self) -> bool:
        return self.line == self.field == self.character == FULL_RANGE


def _ambiguous(axis: Axis) -> AmbiguousRangeError:
    return AmbiguousRangeError(
        f"ambiguous range specified: '{axis.upper}' was used in conjunction "
        f"with '{axis.lower}'/'{axis.upper}' for the same {axis.label} range",
        axis=axis.label,
    )


def extract_bounds(
    axis: Axis, start: Optional[Endpoint], stop: Optional[Endpoint]
) -> Tuple[Optional[int], Optional[int]]:
    """Combine the start and stop endpoints of one axis into bounds."""
    first: Optional[int] = None
    last: Optional[int] = None

    if start is not None:
        first = start.value
        if start.pinned:
            last = start.value

    if stop is not None:
        if stop.pinned:
            if first is not None or last is not None:
                raise _ambiguous(axis)
            first = last = stop.value
        else:
            if last is not None:
                raise _ambiguous(axis)
            last = stop.value

    return first, last


def extract_step(axis: Axis, step: Optional[Endpoint]) -> int:
    if step is None:
        return 1
    if step.pinned:
        raise InvalidStepError(
            f"step {axis.label} cannot be '{axis.upper}'",
            axis=axis.label,
            code=ErrorCodes.PINNED_STEP,
        )
    if step.value == 0:
        raise InvalidStepError(
            f"step {axis.label} cannot be zero",
            axis=axis.label,
            code=ErrorCodes.ZERO_STEP,
        )
    return step.value


def resolve_axis(parsed: ParsedSlice, axis: Axis) -> CanonicalRange:
    start = parsed.start.get(axis)
    stop = parsed.stop.get(axis)
    step = parsed.step.get(axis)

    first, last = extract_bounds(axis, start, stop)
    if not parsed.ranged and first is not None:
        # no separator: the start group is also the stop group
        last = first
    exclude = any(ep is not None and ep.exclude for ep in (start, stop, step))
    return CanonicalRange(
        start=0 if first is None else first,
        stop=last,
        step=extract_step(axis, step),
        exclude=exclude,
    )


def resolve(parsed: ParsedSlice) -> GridSliceFilter:
    """Resolve every axis of *parsed*; the first error found is raised."""
    gsf = GridSliceFilter(
        line=resolve_axis(parsed, Axis.LINE),
        field=resolve_axis(parsed, Axis.FIELD),
        character=resolve_axis(parsed, Axis.CHARACTER),
    )
    logger.debug("resolved %s: line %s, field %s, character %s",
                 parsed, gsf.line, gsf.field, gsf.character)
    return gsf


def compile_slice(text: str, parser: str = "descent") -> GridSliceFilter:
    """Parse and resolve an expression.

    *parser* selects ``"descent"`` (:mod:`gridslice.parser`) or ``"peg"``
    (:mod:`gridslice.grammar`).
    """
    if parser == "descent":
        from .parser import parse
    elif parser == "peg":
        from .grammar import parse_peg as parse
    else:
        raise ValueError(f"unknown parser {parser!r}")
    return resolve(parse(text))
