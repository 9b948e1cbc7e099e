"""Archived run persistence: upsert by slug, lookup, listing"""

from datetime import datetime

from sqlmodel import Session, select

from streampub.core.models import ParsedBuffer, Title
from streampub.core.utils.hashing import sha256
from streampub.crud.models import Document
from streampub.errors import ArchiveError


def get_by_slug(session: Session, slug: str) -> Document | None:
    """Return the Document with the given slug, or None if not found."""
    return session.exec(select(Document).where(Document.slug == slug)).one_or_none()


def require_by_slug(session: Session, slug: str) -> Document:
    """Return the Document with the given slug; raise ArchiveError if missing."""
    doc = get_by_slug(session, slug)
    if doc is None:
        raise ArchiveError(f"No archived document with slug '{slug}'")
    return doc


def list_documents(session: Session) -> list[Document]:
    """Return all archived documents ordered by slug."""
    return list(session.exec(select(Document).order_by(Document.slug)).all())


def _fields(raw: str, parsed: ParsedBuffer) -> dict:
    return {
        "raw": raw,
        "hash": sha256(raw),
        "title": next((b.text for b in parsed.blocks if isinstance(b, Title)), None),
        "anchors": parsed.anchors.as_dict(),
        "blocks": [b.model_dump(mode='json') for b in parsed.blocks],
    }


def commit_doc(session: Session, slug: str, raw: str, parsed: ParsedBuffer) -> tuple[Document, str]:
    """Upsert a finished run by slug.

    Returns (doc, status) where status is 'created', 'updated', or 'unchanged'.
    Flushes but does not commit; caller controls the transaction.
    """
    fields = _fields(raw, parsed)
    doc = get_by_slug(session, slug)

    if doc:
        if doc.hash == fields['hash']:
            return doc, 'unchanged'
        for name, value in fields.items():
            setattr(doc, name, value)
        doc.updated_at = datetime.now()
        session.add(doc)
        session.flush()
        return doc, 'updated'

    doc = Document(slug=slug, **fields)
    session.add(doc)
    session.flush()
    return doc, 'created'
