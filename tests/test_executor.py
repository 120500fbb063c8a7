# tests/test_executor.py
"""
Tests for the slice executor: line sources, the three-level filter and
the input helpers.
"""

import logging

import pytest

from gridslice.errors import ErrorCodes, IoError
from gridslice.executor import (
    BufferedSource,
    GridSlice,
    StreamingSource,
    filter_field,
    filter_sequence,
    format_record,
    read_records,
    write_records,
)
from gridslice.ranges import CanonicalRange, GridSliceFilter, compile_slice
from tests.conftest import (
    FIVE_LINES,
    GRID_3X3,
    CountingSource,
    failing_stream,
    run_slice,
)


class TestFilterSequence:

    def test_forward(self):
        assert filter_sequence(CanonicalRange(1, 2, 1), list("abcd")) == ["b", "c"]

    def test_reverse_walk(self):
        assert filter_sequence(CanonicalRange(0, None, -1), list("abcd")) == list("dcba")

    def test_reverse_with_bounds(self):
        # fields 1..3 walked from the high end
        assert filter_sequence(CanonicalRange(1, 3, -1), list("abcde")) == ["d", "c", "b"]

    def test_reverse_every_other(self):
        assert filter_sequence(CanonicalRange(0, None, -2), list("abcde")) == ["e", "c", "a"]

    def test_exclude(self):
        assert filter_sequence(CanonicalRange(1, 1, 1, exclude=True), list("abc")) == ["a", "c"]

    def test_empty(self):
        assert filter_sequence(CanonicalRange(-1, None, 1), []) == []

    def test_filter_field_characters(self):
        assert filter_field(CanonicalRange(0, 1, 1), "hello") == "he"
        assert filter_field(CanonicalRange(0, None, -1), "hello") == "olleh"


class TestSources:

    def test_streaming_source(self):
        src = StreamingSource(iter([["a"], ["b"]]))
        assert src.next_line() == ["a"]
        assert src.next_line() == ["b"]
        assert src.next_line() is None

    def test_buffered_source_reversed(self):
        src = BufferedSource([["a"], ["b"], ["c"]], reverse=True)
        assert len(src) == 3
        assert [src.next_line() for _ in range(4)] == [["c"], ["b"], ["a"], None]


class TestGridSlice:

    def test_identity(self):
        assert run_slice(":", GRID_3X3) == GRID_3X3

    def test_identity_normalises_whitespace(self):
        assert run_slice("::", ["a   b\tc", ""]) == ["a b c", ""]

    def test_field_column(self):
        assert run_slice("f1", GRID_3X3) == ["b", "e", "h"]

    def test_sub_grid(self):
        assert run_slice("l0f0:l1f1", GRID_3X3) == ["a b", "d e"]

    def test_last_field(self):
        assert run_slice("f-1", ["a b c"]) == ["c"]

    def test_pin_selects_one_line(self):
        assert run_slice("L2", FIVE_LINES) == ["L2"]

    def test_reverse_lines(self):
        assert run_slice("::l-1", FIVE_LINES) == ["L4", "L3", "L2", "L1", "L0"]

    def test_reverse_lines_with_bounds(self):
        assert run_slice("l1:l3:l-1", FIVE_LINES) == ["L3", "L2", "L1"]

    def test_every_other_line(self):
        assert run_slice("::l2", FIVE_LINES) == ["L0", "L2", "L4"]

    def test_negative_line_stop(self):
        assert run_slice("l0:l-2", FIVE_LINES) == ["L0", "L1", "L2", "L3"]

    def test_last_line_pin(self):
        assert run_slice("L-1", FIVE_LINES) == ["L4"]

    def test_reverse_fields(self):
        assert run_slice("::f-1", GRID_3X3) == ["c b a", "f e d", "i h g"]

    def test_characters(self):
        assert run_slice("c0:c1", ["hello world"]) == ["he wo"]

    def test_reverse_characters(self):
        assert run_slice("::c-1", ["abc def"]) == ["cba fed"]

    def test_all_three_axes(self):
        assert run_slice("L1F-1C0", ["ab cd", "ef gh ij"]) == ["i"]

    def test_field_beyond_length_yields_empty_record(self):
        assert run_slice("F5", ["a b"]) == [""]

    def test_exclude_field(self):
        assert run_slice("!f1", ["a b c"]) == ["a c"]

    def test_exclude_line(self):
        assert run_slice("!l0:l0", FIVE_LINES) == ["L1", "L2", "L3", "L4"]

    def test_exclude_single_line(self):
        assert run_slice("!l1", FIVE_LINES) == ["L0", "L2", "L3", "L4"]

    def test_single_field_per_line(self):
        assert run_slice("f0", GRID_3X3) == ["a", "d", "g"]

    def test_exclude_characters(self):
        assert run_slice("!c0:c1", ["hello"]) == ["llo"]

    def test_empty_input(self):
        assert run_slice("::l-1", []) == []


class TestStrategy:

    def test_streaming_is_lazy(self):
        src = CountingSource(FIVE_LINES)
        gs = GridSlice(compile_slice("l1"), src)
        assert not gs.buffered
        assert next(gs) == ["L1"]
        assert src.pulled == 2

    def test_buffered_reads_everything(self):
        src = CountingSource(FIVE_LINES)
        gs = GridSlice(compile_slice("L-1"), src)
        assert gs.buffered
        assert src.pulled == 5
        assert list(gs) == [["L4"]]

    def test_negative_field_range_does_not_buffer(self):
        assert not GridSlice(compile_slice("f-1::c-1"), []).buffered

    def test_single_pass(self):
        gs = GridSlice(GridSliceFilter(), [["a"], ["b"]])
        assert list(gs) == [["a"], ["b"]]
        assert list(gs) == []

    def test_line_counter(self):
        gs = GridSlice(compile_slice("L0"), [["a"], ["b"], ["c"]])
        list(gs)
        assert gs.num_line == 3


class TestReadRecords:

    def test_splits_lines(self):
        assert list(read_records(["a b\n", "  c  \n", "\n"])) == [["a", "b"], ["c"], []]

    def test_read_error_ends_input(self, caplog):
        stream = failing_stream(["a b\n", "c\n"], OSError(5, "Input/output error"))
        with caplog.at_level(logging.WARNING, logger="gridslice"):
            records = list(read_records(stream, name="data.txt"))
        assert records == [["a", "b"], ["c"]]
        assert "read failed after 2 lines of data.txt" in caplog.text

    def test_decode_error_ends_input(self):
        exc = UnicodeDecodeError("utf-8", b"\xff", 0, 1, "invalid start byte")
        assert list(read_records(failing_stream(["x\n"], exc))) == [["x"]]

    def test_strict_read_error_raises(self):
        stream = failing_stream(["a\n"], OSError(5, "Input/output error"))
        records = read_records(stream, strict=True)
        assert next(records) == ["a"]
        with pytest.raises(IoError) as info:
            next(records)
        assert info.value.code == ErrorCodes.READ_FAILED
        assert isinstance(info.value.cause, OSError)

    def test_strict_error_surfaces_while_buffering(self):
        stream = failing_stream(["a\n"], OSError(5, "Input/output error"))
        with pytest.raises(IoError):
            GridSlice(compile_slice("::l-1"), read_records(stream, strict=True))


class TestOutput:

    def test_format_record(self):
        assert format_record(["a", "b"]) == "a b"
        assert format_record([]) == ""
        assert format_record(["a", "b"], separator="\t") == "a\tb"

    def test_write_records(self, tmp_path):
        path = tmp_path / "out.txt"
        with open(path, "w", encoding="utf-8") as out:
            assert write_records([["a", "b"], [], ["c"]], out) == 3
        assert path.read_text(encoding="utf-8") == "a b\n\nc\n"
