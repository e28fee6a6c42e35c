"""Line parser for the `A->B` / `A<-B` edge-list notation."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Iterator, Optional

from .constants import BACKWARD_ARROW, BIDIRECTIONAL_ARROW, FORWARD_ARROW
from .errors import (
    BidirectionalNotSupported,
    EmptyEndpoint,
    GraphSyntaxError,
    InvalidNotation,
    MultipleTransitionsPerLine,
    NameContainsSpace,
    NoArrowFound,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Edge:
    source: str
    target: str


def split_lines(text: str) -> list[str]:
    """Split editor text into lines, keeping blank lines so numbering matches."""
    return text.split("\n")


def _split_pair(line: str, divider: str) -> Optional[tuple[str, str]]:
    parts = [part.strip() for part in line.split(divider)]
    if len(parts) == 2:
        return parts[0], parts[1]
    return None


def _has_whitespace(name: str) -> bool:
    return any(ch.isspace() for ch in name)


def _parse(line: str, line_number: int) -> Edge:
    if BIDIRECTIONAL_ARROW in line:
        raise BidirectionalNotSupported(line, line_number)
    if FORWARD_ARROW in line and BACKWARD_ARROW in line:
        raise MultipleTransitionsPerLine(line, line_number)

    forward = _split_pair(line, FORWARD_ARROW)
    if forward is not None:
        source, target = forward
    else:
        backward = _split_pair(line, BACKWARD_ARROW)
        if backward is None:
            raise NoArrowFound(line, line_number)
        # `A<-B` points from the right-hand operand to the left-hand one.
        target, source = backward

    if _has_whitespace(source) or _has_whitespace(target):
        raise NameContainsSpace(line, line_number)
    if not source or not target:
        raise EmptyEndpoint(line, line_number)

    return Edge(source, target)


def parse_line(line: str, line_number: int) -> Optional[Edge]:
    """Parse one line of the edge list.

    Returns None for a blank line. Raises a GraphSyntaxError subclass carrying
    the raw line and its 1-based number for anything that is not an edge.
    """
    if not line.strip():
        return None
    try:
        return _parse(line, line_number)
    except GraphSyntaxError:
        raise
    except Exception as e:
        raise InvalidNotation(line, line_number) from e


def iter_edges(lines: Iterable[str], *, strict: bool = True) -> Iterator[tuple[int, Edge]]:
    """Yield (line_number, edge) for every edge line.

    In strict mode the first syntax error propagates. In lenient mode lines
    that fail to parse are skipped.
    """
    for line_number, line in enumerate(lines, start=1):
        try:
            edge = parse_line(line, line_number)
        except GraphSyntaxError as e:
            if strict:
                raise
            logger.debug("Skipping line %d (%s): %r", line_number, e.code, line)
            continue
        if edge is not None:
            yield line_number, edge
