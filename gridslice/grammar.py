"""
Grid-slice PEG grammar (Parsimonious).

The same language as :mod:`gridslice.parser`, written as a PEG.  Ordered
choice with full backtracking is what a PEG does natively, so the rule
set reads almost exactly like the abstract grammar.  ``parse_peg`` builds
the same :class:`ParsedSlice` the descent parser does and maps
Parsimonious failures onto the package's own error classes.

Dependencies:
    - parsimonious (PEG parser)
"""

from __future__ import annotations

import logging
from typing import Any, Iterator, List

from parsimonious.exceptions import IncompleteParseError, ParseError
from parsimonious.grammar import Grammar
from parsimonious.nodes import Node, NodeVisitor

from .ast import Axis, AxisGroup, Endpoint, ParsedSlice
from .errors import ErrorCodes, SyntaxError_
from .parser import raise_trailing_error

logger = logging.getLogger(__name__)


GRID_SLICE_GRAMMAR_TEXT = r'''
    slice        = ranged / grid_index
    ranged       = grid_index? sep grid_index? step_part?
    step_part    = sep grid_index?
    sep          = ":"

    grid_index   = line_first / field_first / char_first
    line_first   = line_ep ((field_ep char_ep?) / (char_ep field_ep?))?
    field_first  = field_ep ((line_ep char_ep?) / (char_ep line_ep?))?
    char_first   = char_ep ((line_ep field_ep?) / (field_ep line_ep?))?

    line_ep      = lower_line / upper_line
    field_ep     = lower_field / upper_field
    char_ep      = lower_char / upper_char

    lower_line   = exclude? "l" integer
    upper_line   = "L" integer
    lower_field  = exclude? "f" integer
    upper_field  = "F" integer
    lower_char   = exclude? "c" integer
    upper_char   = "C" integer

    exclude      = "!"
    integer      = ~r"-?[0-9]+"
'''

GRID_SLICE_GRAMMAR = Grammar(GRID_SLICE_GRAMMAR_TEXT)


def _collect(value: Any, kind: type) -> Iterator[Any]:
    """Yield every instance of *kind* in a nest of visited children."""
    if isinstance(value, kind):
        yield value
    elif isinstance(value, list):
        for item in value:
            yield from _collect(item, kind)


def _first(value: Any, kind: type, default: Any = None) -> Any:
    return next(_collect(value, kind), default)


class SliceBuilder(NodeVisitor):
    """Transforms the Parsimonious parse tree into a :class:`ParsedSlice`."""

    def generic_visit(self, node: Node, visited_children: List[Any]) -> Any:
        return visited_children or node

    # ── endpoints ───────────────────────────────────────────────────

    @staticmethod
    def _endpoint(node: Node, pinned: bool) -> Endpoint:
        text = node.text
        exclude = text.startswith("!")
        body = text[1:] if exclude else text
        return Endpoint(Axis.from_prefix(body[0]), int(body[1:]), pinned=pinned, exclude=exclude)

    def visit_lower_line(self, node, visited_children):
        return self._endpoint(node, pinned=False)

    visit_lower_field = visit_lower_line
    visit_lower_char = visit_lower_line

    def visit_upper_line(self, node, visited_children):
        return self._endpoint(node, pinned=True)

    visit_upper_field = visit_upper_line
    visit_upper_char = visit_upper_line

    # ── groups and slices ───────────────────────────────────────────

    def visit_grid_index(self, node, visited_children):
        return AxisGroup.of(*_collect(visited_children, Endpoint))

    def visit_step_part(self, node, visited_children):
        _, step = visited_children
        return [_first(step, AxisGroup, AxisGroup())]

    def visit_ranged(self, node, visited_children):
        start, _, stop, step = visited_children
        return ParsedSlice(
            start=_first(start, AxisGroup, AxisGroup()),
            stop=_first(stop, AxisGroup, AxisGroup()),
            step=_first(step, AxisGroup, AxisGroup()),
        )

    def visit_slice(self, node, visited_children):
        result = visited_children[0]
        if isinstance(result, AxisGroup):
            return ParsedSlice(start=result, ranged=False)
        return result


_BUILDER = SliceBuilder()


def parse_peg(text: str) -> ParsedSlice:
    """Parse *text* with the PEG grammar."""
    try:
        tree = GRID_SLICE_GRAMMAR.parse(text)
    except IncompleteParseError as exc:
        prefix = GRID_SLICE_GRAMMAR.parse(text[:exc.pos])
        raise_trailing_error(text, _BUILDER.visit(prefix), exc.pos)
    except ParseError as exc:
        raise SyntaxError_(
            "unable to parse the expression",
            code=ErrorCodes.UNABLE_TO_PARSE,
            column=0,
            expression=text,
            cause=exc,
        ) from exc
    parsed = _BUILDER.visit(tree)
    logger.debug("peg parsed %r as %s", text, parsed)
    return parsed
