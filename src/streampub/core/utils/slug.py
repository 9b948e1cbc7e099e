"""Slugs for archived documents and image file lookup"""

import re


MAX_SLUG_LENGTH = 80


def slugify(text: str, fallback: str = "") -> str:
    """Lowercase, hyphen-separated slug; CJK word characters are kept.

    Anchor descriptions can run to a full sentence, so the result is cut to
    MAX_SLUG_LENGTH at a hyphen boundary where possible.
    """
    text = re.sub(r'[^\w\s-]', '', text.lower())
    slug = re.sub(r'[\s_-]+', '-', text).strip('-')
    if len(slug) > MAX_SLUG_LENGTH:
        cut = slug[:MAX_SLUG_LENGTH]
        slug = cut.rsplit('-', 1)[0] if '-' in cut else cut
    return slug or fallback
