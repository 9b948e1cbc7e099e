"""Line splitting, inline cleanup, and ordered tag classification"""

import re

from streampub.core.models import ClassifiedLine, LineKind


ESCAPED_NEWLINE = "\\n"

_SEP = r"[:：]"
BOLD_RE = re.compile(r"\*\*(.*?)\*\*")
# Continuation lines must carry a cell separator; a blank or pipe-less line ends the span.
TABLE_SPAN_RE = re.compile(
    rf"\[[ \t]*TABLE[ \t]*{_SEP}[^\[\]\n]*(?:\n[^\[\]\n|]*\|[^\[\]\n]*)*(?:\n[ \t]*)?\]", re.IGNORECASE,
)


def _tag_re(keyword: str, body: str = r"([^\]]*)") -> re.Pattern:
    """Match '[KEYWORD<sep>body]' at line start; group 2 captures any trailing text."""
    return re.compile(rf"^\[\s*{keyword}\s*{_SEP}\s*{body}\](.*)$", re.IGNORECASE)


# Classification priority: first match wins. Blank and paragraph are checked after these.
PRIORITY: tuple[tuple[LineKind, re.Pattern], ...] = (
    (LineKind.title,     _tag_re("TITLE")),
    (LineKind.quote,     _tag_re("QUOTE")),
    (LineKind.highlight, _tag_re("HIGHLIGHT")),
    (LineKind.table,     _tag_re("TABLE")),
    (LineKind.image,     _tag_re("IMAGE", r"([0-9]{1,3})\s*")),
    (LineKind.list,      _tag_re("LIST")),
)
_TRAILING_KINDS = {LineKind.title, LineKind.quote, LineKind.highlight, LineKind.list}


def clean_text(line: str) -> str:
    """Collapse **bold** markers to their inner text and drop every '#'."""
    return BOLD_RE.sub(r"\1", line).replace('#', '')


def fold_tables(text: str) -> str:
    """Put each closed TABLE directive on one line, escaping its inner newlines."""
    def _fold(m: re.Match) -> str:
        return m.group(0).replace('\r\n', '\n').replace('\n', ESCAPED_NEWLINE)
    return TABLE_SPAN_RE.sub(_fold, text)


def split_lines(text: str) -> list[str]:
    """Split on newlines (dropping a trailing CR); empty text has no lines."""
    if not text:
        return []
    return [line.rstrip('\r') for line in fold_tables(text).split('\n')]


def classify(line: str) -> ClassifiedLine:
    """Clean a single line and classify it against the tag grammar in priority order."""
    cleaned = clean_text(line).strip()
    for kind, pattern in PRIORITY:
        m = pattern.match(cleaned)
        if m is None:
            continue
        payload, trailing = m.group(1), m.group(2).strip()
        if kind is LineKind.image and int(payload) < 1:
            break
        if kind in _TRAILING_KINDS and trailing:
            payload = f"{payload.strip()} {trailing}"
        return ClassifiedLine(kind, payload)
    if not cleaned:
        return ClassifiedLine(LineKind.blank, "")
    return ClassifiedLine(LineKind.paragraph, cleaned)


def tokenize(text: str) -> list[ClassifiedLine]:
    """Split filtered text into classified lines, preserving order."""
    return [classify(line) for line in split_lines(text)]
