"""gridslice/executor.py – Apply a :class:`GridSliceFilter` to input.

The executor is a three-level filter: lines, then the fields of each
kept line, then the characters of each kept field.  Field and character
ranges are normalized afresh for every record since their lengths vary.
The line range is normalized once:

* **streaming** – when the line range has no negative bound and a
  positive step, lines are pulled and tested one at a time;
* **buffered** – otherwise every line is read up front so the total
  count is known, and the buffer is reversed for a negative step.

The choice is made once, when :class:`GridSlice` is constructed.
"""

from __future__ import annotations

import logging
from typing import Iterable, Iterator, List, Optional, Sequence, TextIO, TypeVar

from .errors import ErrorCodes, IoError
from .normalize import NormalizedRange, needs_buffering, normalize
from .ranges import CanonicalRange, GridSliceFilter, compile_slice

logger = logging.getLogger(__name__)

T = TypeVar("T")
Record = List[str]


def filter_sequence(rng: CanonicalRange, items: Sequence[T]) -> List[T]:
    """Keep the items of *items* selected by *rng*, in walk order."""
    normalized = normalize(rng, len(items))
    walk = reversed(items) if normalized.reverse else items
    return [item for index, item in enumerate(walk) if normalized.contains(index)]


def filter_field(rng: CanonicalRange, field: str) -> str:
    return "".join(filter_sequence(rng, field))


# ═══════════════════════════════════════════════════════════════════════
#  Line sources
# ═══════════════════════════════════════════════════════════════════════

class StreamingSource:
    """Passes records through as they are read."""

    buffered = False

    def __init__(self, records: Iterable[Record]) -> None:
        self._records = iter(records)

    def next_line(self) -> Optional[Record]:
        return next(self._records, None)


class BufferedSource:
    """Reads every record up front, optionally reversed."""

    buffered = True

    def __init__(self, records: Iterable[Record], reverse: bool = False) -> None:
        self._lines = list(records)
        if reverse:
            self._lines.reverse()
        self._cursor = 0

    def __len__(self) -> int:
        return len(self._lines)

    def next_line(self) -> Optional[Record]:
        if self._cursor >= len(self._lines):
            return None
        line = self._lines[self._cursor]
        self._cursor += 1
        return line


# ═══════════════════════════════════════════════════════════════════════
#  Executor
# ═══════════════════════════════════════════════════════════════════════

class GridSlice:
    """Iterator of filtered records.

    One pass only: each input record is pulled once and yields at most
    one output record.
    """

    def __init__(self, grid_slice: GridSliceFilter, records: Iterable[Record]) -> None:
        self.grid_slice = grid_slice
        self.num_line = 0
        if needs_buffering(grid_slice.line):
            source = BufferedSource(records, reverse=grid_slice.line.step < 0)
            self.line_range: NormalizedRange = normalize(grid_slice.line, len(source))
            logger.debug("buffered %d lines for line range %s", len(source), grid_slice.line)
        else:
            source = StreamingSource(records)
            self.line_range = normalize(grid_slice.line)
            logger.debug("streaming lines for line range %s", grid_slice.line)
        self._source = source

    @property
    def buffered(self) -> bool:
        return self._source.buffered

    def __iter__(self) -> "GridSlice":
        return self

    def __next__(self) -> Record:
        while True:
            fields = self._source.next_line()
            if fields is None:
                raise StopIteration
            index = self.num_line
            self.num_line += 1
            if self.line_range.contains(index):
                return self.filter_record(fields)

    def filter_record(self, fields: Sequence[str]) -> Record:
        kept = filter_sequence(self.grid_slice.field, fields)
        return [filter_field(self.grid_slice.character, f) for f in kept]


# ═══════════════════════════════════════════════════════════════════════
#  Input / output helpers
# ═══════════════════════════════════════════════════════════════════════

def split_fields(line: str) -> Record:
    return line.split()


def read_records(stream: Iterable[str], strict: bool = False, name: str = "<input>") -> Iterator[Record]:
    """Split each line of *stream* into whitespace-delimited fields.

    A read failure ends the sequence (logged as a warning), or raises
    :class:`IoError` when *strict* is set.
    """
    lines = iter(stream)
    count = 0
    while True:
        try:
            line = next(lines)
        except StopIteration:
            return
        except (OSError, UnicodeDecodeError) as exc:
            if strict:
                raise IoError(
                    f"read failed after {count} lines of {name}: {exc}",
                    path=name,
                    code=ErrorCodes.READ_FAILED,
                    cause=exc,
                ) from exc
            logger.warning("read failed after %d lines of %s, ending input: %s", count, name, exc)
            return
        count += 1
        yield split_fields(line)


def format_record(fields: Sequence[str], separator: str = " ") -> str:
    return separator.join(fields)


def slice_lines(expression: str, lines: Iterable[str], parser: str = "descent") -> List[str]:
    """Apply *expression* to raw text lines and return the output lines."""
    gsf = compile_slice(expression, parser=parser)
    return [format_record(r) for r in GridSlice(gsf, (split_fields(line) for line in lines))]


def write_records(records: Iterable[Record], out: TextIO) -> int:
    written = 0
    for record in records:
        out.write(format_record(record))
        out.write("\n")
        written += 1
    return written
