"""gridslice/normalize.py – Concrete bounds for a known sequence length.

A :class:`CanonicalRange` may hold negative (from-the-end) bounds and a
negative step.  Neither can be tested until the length of the sequence
is known.  :func:`normalize` turns it into a :class:`NormalizedRange`
whose bounds are concrete indices along the *walk order*: forward for a
positive step, reversed for a negative one.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .ranges import CanonicalRange


@dataclass(frozen=True)
class NormalizedRange:
    """Concrete bounds ready for membership testing.

    ``stop is None`` stays open to the end.  When ``reverse`` is set the
    sequence must be walked backwards before indices are tested.
    """

    start: int
    stop: Optional[int]
    step: int
    exclude: bool = False

    @property
    def reverse(self) -> bool:
        return self.step < 0

    def selects(self, index: int) -> bool:
        """Plain range membership, ignoring ``exclude``."""
        return (
            index >= self.start
            and (self.stop is None or index <= self.stop)
            and (self.start - index) % self.step == 0
        )

    def contains(self, index: int) -> bool:
        """Membership with ``exclude`` inverting the result."""
        return self.selects(index) != self.exclude


def needs_length(rng: CanonicalRange) -> bool:
    """True when *rng* cannot be tested without the sequence length."""
    return rng.start < 0 or (rng.stop is not None and rng.stop < 0) or rng.step < 0


#: The line axis has to be buffered exactly when it needs the line count.
needs_buffering = needs_length


def normalize(rng: CanonicalRange, length: Optional[int] = None) -> NormalizedRange:
    """Resolve negative bounds and reflect for a negative step.

    *length* may be omitted only for ranges that do not need it.
    """
    if length is None:
        if needs_length(rng):
            raise ValueError(f"range {rng} needs a sequence length")
        return NormalizedRange(rng.start, rng.stop, rng.step, rng.exclude)

    start = rng.start
    if start < 0:
        start = max(length + start, 0)
    stop = rng.stop
    if stop is not None and stop < 0:
        stop = max(length + stop, 0)

    if rng.step > 0:
        return NormalizedRange(start, stop, rng.step, rng.exclude)

    # Mirror the bounds onto the reversed sequence.
    upper = length - 1 if stop is None else stop
    return NormalizedRange(length - upper - 1, length - start - 1, rng.step, rng.exclude)
