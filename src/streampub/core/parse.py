"""Full-buffer parse: anchor extraction, line tokenization, block building"""

from streampub.core.anchors import extract_anchors
from streampub.core.blocks import build_blocks
from streampub.core.models import ParsedBuffer
from streampub.core.tokenize import tokenize


def parse_buffer(raw: str) -> ParsedBuffer:
    """Parse the whole raw buffer from scratch. Never raises for malformed markup."""
    anchors, filtered = extract_anchors(raw)
    lines = tokenize(filtered)
    return ParsedBuffer(anchors=anchors, lines=lines, blocks=build_blocks(lines))
