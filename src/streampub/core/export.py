"""Frame export: sidecar JSON, standardized Markdown, and an HTML preview"""

import base64
import json
from pathlib import Path

import yaml
from markdown_it import MarkdownIt

from streampub.core.models import (
    BoundImage, Frame, Highlight, ImageStatus, ListGroup, Paragraph, Quote, Spacer, Table, Title,
)
from streampub.core.utils.hashing import sha256


FORMATS = ('json', 'md', 'html')


def sniff_mime(data: bytes) -> str:
    """Guess an image MIME type from magic bytes."""
    if data.startswith(b'\x89PNG\r\n\x1a\n'):
        return 'image/png'
    if data.startswith(b'\xff\xd8\xff'):
        return 'image/jpeg'
    if data[:6] in (b'GIF87a', b'GIF89a'):
        return 'image/gif'
    if data[:4] == b'RIFF' and data[8:12] == b'WEBP':
        return 'image/webp'
    head = data[:256].lstrip()
    if head.startswith(b'<svg') or (head.startswith(b'<?xml') and b'<svg' in data[:1024]):
        return 'image/svg+xml'
    return 'application/octet-stream'


def data_uri(data: bytes) -> str:
    return f"data:{sniff_mime(data)};base64,{base64.b64encode(data).decode('ascii')}"


def _image_entry(image: BoundImage) -> dict:
    ready = image.status == ImageStatus.ready
    return {
        "kind": image.kind,
        "index": image.index,
        "status": image.status.value,
        "src": data_uri(image.data) if ready else None,
        "sha256": sha256(image.data) if ready else None,
    }


def _entry(entry) -> dict:
    if isinstance(entry, BoundImage):
        return _image_entry(entry)
    return entry.model_dump(mode='json')


def build_sidecar(frame: Frame) -> dict:
    """Build the JSON-ready dict for a frame: run, anchors, cover and bound entries."""
    return {
        "run_id": frame.run_id,
        "status": frame.status.value,
        "anchors": frame.anchors.as_dict(),
        "cover": _image_entry(frame.cover),
        "blocks": [_entry(e) for e in frame.entries],
    }


def _table_md(table: Table) -> str:
    if not table.header:
        return ""
    lines = [
        "| " + " | ".join(table.header) + " |",
        "| " + " | ".join("---" for _ in table.header) + " |",
    ]
    lines += ["| " + " | ".join(row) + " |" for row in table.rows]
    return "\n".join(lines)


def _block_md(entry) -> str:
    """Render one bound entry as Markdown; Spacers render as nothing."""
    if isinstance(entry, Title):
        return f"## {entry.text}"
    if isinstance(entry, Quote):
        return f"> {entry.text}"
    if isinstance(entry, Highlight):
        return f"> **Highlight:** {entry.text}"
    if isinstance(entry, Table):
        return _table_md(entry)
    if isinstance(entry, ListGroup):
        return "\n".join(f"{i}. {item}" for i, item in enumerate(entry.items, start=1))
    if isinstance(entry, BoundImage):
        n = entry.index + 1
        if entry.status == ImageStatus.ready:
            return f"![Image {n}]({data_uri(entry.data)})"
        return f"<!-- image {n} pending -->"
    if isinstance(entry, Spacer):
        return ""
    if isinstance(entry, Paragraph):
        return entry.text
    raise TypeError(f"Unknown render entry: {type(entry).__name__}")


def build_body(frame: Frame) -> str:
    """Markdown body: one chunk per non-empty block, separated by blank lines."""
    parts = [_block_md(e) for e in frame.entries]
    return "\n\n".join(p for p in parts if p)


def build_markdown(frame: Frame) -> str:
    """Return the body with a YAML frontmatter block (title, cover) prepended."""
    title = next((e.text for e in frame.entries if isinstance(e, Title)), None)
    fm = {"title": title, "cover": frame.anchors.cover, "cover_status": frame.cover.status.value}
    fm = {k: v for k, v in fm.items() if v is not None}
    header = yaml.dump(fm, default_flow_style=False, allow_unicode=True, sort_keys=False)
    return f"---\n{header}---\n\n{build_body(frame)}\n"


def build_html(frame: Frame) -> str:
    """Render the Markdown body with markdown-it's gfm-like preset."""
    parser = MarkdownIt("gfm-like", options_update={"linkify": False, "html": False})
    return parser.render(build_body(frame))


def write_frame(frame: Frame, output_dir: Path, slug: str, fmt: str = 'json') -> Path:
    """Write a frame as <output_dir>/<slug>.<fmt> and return the path."""
    if fmt not in FORMATS:
        raise ValueError(f"Unknown output format '{fmt}'; expected one of {', '.join(FORMATS)}")
    output_dir.mkdir(parents=True, exist_ok=True)
    path = output_dir / f"{slug}.{fmt}"
    if fmt == 'json':
        content = json.dumps(build_sidecar(frame), indent=2, ensure_ascii=False)
    elif fmt == 'md':
        content = build_markdown(frame)
    else:
        content = build_html(frame)
    path.write_text(content, encoding='utf-8')
    return path
