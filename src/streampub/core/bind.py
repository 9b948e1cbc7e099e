"""Bind image placeholders to the current image table"""

from streampub.core.models import COVER, BoundImage, ImagePlaceholder, ImageStatus, ImageTable


def _bound(data: bytes | None, index: int | None = None) -> BoundImage:
    if data is None:
        return BoundImage(index=index, status=ImageStatus.pending)
    return BoundImage(index=index, status=ImageStatus.ready, data=data)


def bind(blocks: list, table: ImageTable) -> list:
    """Replace each ImagePlaceholder with a BoundImage; other blocks pass through as-is."""
    return [
        _bound(table.get(b.slot), b.index) if isinstance(b, ImagePlaceholder) else b
        for b in blocks
    ]


def bind_cover(table: ImageTable) -> BoundImage:
    return _bound(table.get(COVER))
