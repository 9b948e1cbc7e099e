"""Unit tests for sources.py"""

import asyncio

import pytest

from streampub.errors import ConfigError, GenerationSourceError, ImageFetchError
from streampub.sources import (
    CredentialProvider, DirectoryImageFetcher, EnvCredential, ImageFetcher, stream_file, stream_text,
)


async def _collect(source):
    return [chunk async for chunk in source]


def test_stream_text_chunks():
    """Chunks are fixed-size slices that concatenate back to the text."""
    chunks = asyncio.run(_collect(stream_text("abcdefg", chunk_size=3)))
    assert chunks == ["abc", "def", "g"]


def test_stream_text_empty():
    assert asyncio.run(_collect(stream_text(""))) == []


def test_stream_text_rejects_bad_chunk_size():
    with pytest.raises(ValueError, match="chunk_size"):
        asyncio.run(_collect(stream_text("abc", chunk_size=0)))


def test_stream_file(tmp_path):
    path = tmp_path / "doc.txt"
    path.write_text("[TITLE: 标题]\nbody", encoding="utf-8")
    chunks = asyncio.run(_collect(stream_file(path, chunk_size=5)))
    assert "".join(chunks) == "[TITLE: 标题]\nbody"


def test_stream_file_missing(tmp_path):
    """A file that cannot be read is a source failure."""
    with pytest.raises(GenerationSourceError, match="Cannot read"):
        asyncio.run(_collect(stream_file(tmp_path / "nope.txt")))


def test_directory_fetcher_resolves_slug(tmp_path):
    """Descriptions map to slug-named files under the image directory."""
    (tmp_path / "golden-city-skyline.png").write_bytes(b"png-bytes")
    fetcher = DirectoryImageFetcher(tmp_path)
    assert isinstance(fetcher, ImageFetcher)
    assert fetcher.resolve("Golden city skyline") == tmp_path / "golden-city-skyline.png"
    assert asyncio.run(fetcher.fetch("Golden city skyline")) == b"png-bytes"


def test_directory_fetcher_missing_image(tmp_path):
    fetcher = DirectoryImageFetcher(tmp_path)
    assert fetcher.resolve("???") is None
    with pytest.raises(ImageFetchError, match="No image"):
        asyncio.run(fetcher.fetch("Nothing here"))


def test_env_credential(monkeypatch):
    """The credential is present only when the variable holds a non-blank value."""
    cred = EnvCredential("STREAMPUB_TEST_KEY")
    assert isinstance(cred, CredentialProvider)
    monkeypatch.setenv("STREAMPUB_TEST_KEY", "  ")
    assert not cred.has_credential()
    monkeypatch.setenv("STREAMPUB_TEST_KEY", "secret")
    assert cred.has_credential()


def test_env_credential_request_raises():
    with pytest.raises(ConfigError, match="Missing API key: STREAMPUB_TEST_KEY"):
        EnvCredential("STREAMPUB_TEST_KEY").request_credential()
