"""Anchor directive extraction: cover and visual image anchors"""

import re

from streampub.core.models import COVER, AnchorSet


COVER_KEYWORDS = ("封面锚点", "COVER")
VISUAL_KEYWORDS = ("视觉锚点", "VISUAL")

_SEP = r"[:：]"
COVER_RE = re.compile(
    rf"^\[\s*(?:{'|'.join(COVER_KEYWORDS)})\s*{_SEP}\s*([^\]]*)\]\s*$", re.IGNORECASE,
)
VISUAL_RE = re.compile(
    rf"^\[\s*(?:{'|'.join(VISUAL_KEYWORDS)})\s*([1-3])\s*{_SEP}\s*([^\]]*)\]\s*$", re.IGNORECASE,
)


def match_anchor(line: str) -> tuple | None:
    """Return (slot, description) if line is an anchor directive, else None."""
    stripped = line.strip()
    if m := COVER_RE.match(stripped):
        return COVER, m.group(1).strip()
    if m := VISUAL_RE.match(stripped):
        return int(m.group(1)), m.group(2).strip()
    return None


def extract_anchors(text: str) -> tuple[AnchorSet, str]:
    """Collect anchors from text and return (anchors, text with anchor lines removed)."""
    anchors = AnchorSet()
    kept: list[str] = []
    for line in text.split('\n'):
        found = match_anchor(line)
        if found is None:
            kept.append(line)
        else:
            anchors.record(*found)
    return anchors, '\n'.join(kept)
