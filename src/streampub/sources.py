"""Generation source adapters: text chunk streams, image fetchers, credential capability"""

from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import AsyncIterator
from pathlib import Path
from typing import Optional, Protocol, runtime_checkable

from streampub.core.utils.slug import slugify
from streampub.errors import ConfigError, GenerationSourceError, ImageFetchError

logger = logging.getLogger("streampub.sources")

IMAGE_EXTENSIONS = ('.png', '.jpg', '.jpeg', '.gif', '.webp', '.svg')


@runtime_checkable
class ImageFetcher(Protocol):
    async def fetch(self, description: str) -> Optional[bytes]:
        """Return image bytes for a description; None or an exception means no image."""
        ...


@runtime_checkable
class CredentialProvider(Protocol):
    def has_credential(self) -> bool: ...

    def request_credential(self) -> None: ...


async def stream_text(text: str, chunk_size: int = 64, delay: float = 0.0) -> AsyncIterator[str]:
    """Yield text in fixed-size chunks, optionally sleeping between chunks."""
    if chunk_size < 1:
        raise ValueError(f"chunk_size must be >= 1, got {chunk_size}")
    for start in range(0, len(text), chunk_size):
        if delay and start:
            await asyncio.sleep(delay)
        yield text[start:start + chunk_size]


async def stream_file(path: Path, chunk_size: int = 64, delay: float = 0.0) -> AsyncIterator[str]:
    """Stream a UTF-8 file as chunks; read failures surface as GenerationSourceError."""
    try:
        text = Path(path).read_text(encoding='utf-8')
    except (OSError, UnicodeDecodeError) as e:
        raise GenerationSourceError(f"Cannot read {path}: {e}") from e
    async for chunk in stream_text(text, chunk_size, delay):
        yield chunk


class DirectoryImageFetcher:
    """Resolve a description to '<root>/<slug>.<ext>' and return the file bytes."""

    def __init__(self, root: Path) -> None:
        self.root = Path(root)

    def resolve(self, description: str) -> Path | None:
        slug = slugify(description)
        if not slug:
            return None
        for ext in IMAGE_EXTENSIONS:
            p = self.root / f"{slug}{ext}"
            if p.is_file():
                return p
        return None

    async def fetch(self, description: str) -> bytes:
        path = self.resolve(description)
        if path is None:
            raise ImageFetchError(f"No image for '{description}' under {self.root}")
        logger.debug("Serving %s for '%s'", path, description)
        return await asyncio.to_thread(path.read_bytes)


class EnvCredential:
    """Credential capability backed by an environment variable."""

    def __init__(self, var: str) -> None:
        self.var = var

    def has_credential(self) -> bool:
        return bool((os.environ.get(self.var) or "").strip())

    def request_credential(self) -> None:
        raise ConfigError(f"Missing API key: {self.var}. Set it in the environment.")
