"""gridslice/ast.py – Parsed form of a grid-slice expression.

A grid-slice expression names up to three positions (start, stop, step),
and each position may carry one endpoint per axis (line, field,
character).  The parser produces a :class:`ParsedSlice`; the resolver in
:mod:`gridslice.ranges` consumes it.

Design invariants
-----------------
* Every node is a frozen dataclass (immutable after construction).
* An :class:`AxisGroup` holds at most one endpoint per axis.
* A pinned (uppercase) endpoint never carries the exclude flag.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Optional, Tuple


class Axis(Enum):
    """The three selection dimensions, with their endpoint prefixes."""

    LINE = ("l", "L")
    FIELD = ("f", "F")
    CHARACTER = ("c", "C")

    @property
    def lower(self) -> str:
        return self.value[0]

    @property
    def upper(self) -> str:
        return self.value[1]

    @property
    def label(self) -> str:
        return self.name.lower()

    @classmethod
    def from_prefix(cls, prefix: str) -> "Axis":
        for axis in cls:
            if prefix in axis.value:
                return axis
        raise ValueError(f"unknown axis prefix {prefix!r}")


#: Axes in output order.
AXES: Tuple[Axis, ...] = (Axis.LINE, Axis.FIELD, Axis.CHARACTER)


@dataclass(frozen=True)
class Endpoint:
    """One integer bound for one axis.

    ``pinned`` marks the uppercase form, which sets both start and stop
    of its axis to ``value``.
    """

    axis: Axis
    value: int
    pinned: bool = False
    exclude: bool = False

    def __post_init__(self) -> None:
        if self.pinned and self.exclude:
            raise ValueError("a pinned endpoint cannot carry the exclude flag")

    def __str__(self) -> str:
        if self.pinned:
            return f"{self.axis.upper}{self.value}"
        return f"{'!' if self.exclude else ''}{self.axis.lower}{self.value}"

    def conflicts_with(self, other: "Endpoint") -> bool:
        """True when both target the same axis with different forms."""
        return self.axis is other.axis and self.pinned != other.pinned


@dataclass(frozen=True)
class AxisGroup:
    """The endpoints written at one position of the expression."""

    line: Optional[Endpoint] = None
    field: Optional[Endpoint] = None
    character: Optional[Endpoint] = None

    @classmethod
    def of(cls, *endpoints: Endpoint) -> "AxisGroup":
        slots = {}
        for ep in endpoints:
            key = ep.axis.label
            if key in slots:
                raise ValueError(f"duplicate {key} endpoint in group")
            slots[key] = ep
        return cls(**slots)

    def get(self, axis: Axis) -> Optional[Endpoint]:
        return getattr(self, axis.label)

    def endpoints(self) -> Iterator[Endpoint]:
        for axis in AXES:
            ep = self.get(axis)
            if ep is not None:
                yield ep

    def is_empty(self) -> bool:
        return self.line is None and self.field is None and self.character is None

    def __str__(self) -> str:
        return "".join(str(ep) for ep in self.endpoints())


EMPTY_GROUP = AxisGroup()


@dataclass(frozen=True)
class ParsedSlice:
    """``start:stop:step``: three axis groups, each possibly empty.

    ``ranged`` is false for an expression written without a separator,
    which selects single indices (``f1`` is ``f1:f1``).
    """

    start: AxisGroup = EMPTY_GROUP
    stop: AxisGroup = EMPTY_GROUP
    step: AxisGroup = EMPTY_GROUP
    ranged: bool = True

    def is_empty(self) -> bool:
        return self.start.is_empty() and self.stop.is_empty() and self.step.is_empty()

    def last_group(self) -> Optional[AxisGroup]:
        """The right-most non-empty group, or ``None``."""
        for group in (self.step, self.stop, self.start):
            if not group.is_empty():
                return group
        return None

    def __str__(self) -> str:
        if not self.ranged:
            return str(self.start)
        return f"{self.start}:{self.stop}:{self.step}"
