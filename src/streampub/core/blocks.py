"""Fold classified lines into typed blocks, aggregating consecutive list items"""

from dataclasses import dataclass, field
from functools import reduce
from typing import Optional

from streampub.core.models import (
    ClassifiedLine, Highlight, ImagePlaceholder, LineKind, ListGroup,
    Paragraph, Quote, Spacer, Table, Title,
)
from streampub.core.tokenize import ESCAPED_NEWLINE


@dataclass
class BuildState:
    """Fold accumulator: emitted blocks plus list items awaiting a flush."""
    blocks:  list = field(default_factory=list)
    pending: list[str] = field(default_factory=list)


def parse_table(payload: str) -> Table:
    """Split a TABLE payload into header and rows; blank rows are skipped, ragged rows kept."""
    raw_rows = payload.replace(ESCAPED_NEWLINE, '\n').split('\n')
    rows = [[cell.strip() for cell in r.split('|')] for r in raw_rows if r.strip()]
    if not rows:
        return Table(header=[], rows=[])
    return Table(header=rows[0], rows=rows[1:])


def _single(line: ClassifiedLine):
    """Return the block for any non-list line."""
    text = line.payload.strip()
    if line.kind is LineKind.title:
        return Title(text=text)
    if line.kind is LineKind.quote:
        return Quote(text=text)
    if line.kind is LineKind.highlight:
        return Highlight(text=text)
    if line.kind is LineKind.table:
        return parse_table(line.payload)
    if line.kind is LineKind.image:
        return ImagePlaceholder(index=int(line.payload) - 1)
    if line.kind is LineKind.blank:
        return Spacer()
    return Paragraph(text=text)


def _step(state: BuildState, pair: tuple[ClassifiedLine, Optional[ClassifiedLine]]) -> BuildState:
    line, nxt = pair
    if line.kind is not LineKind.list:
        state.blocks.append(_single(line))
        return state

    state.pending.append(line.payload.strip())
    if nxt is None or nxt.kind is not LineKind.list:
        state.blocks.append(ListGroup(items=state.pending))
        state.pending = []
    return state


def build_blocks(lines: list[ClassifiedLine]) -> list:
    """Fold lines into blocks; a list run is flushed at its last line (lookahead-by-one)."""
    pairs = zip(lines, [*lines[1:], None])
    return reduce(_step, pairs, BuildState()).blocks
