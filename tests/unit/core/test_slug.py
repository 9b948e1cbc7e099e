"""Unit tests for core/utils/slug.py"""

import pytest

from streampub.core.utils.slug import MAX_SLUG_LENGTH, slugify


@pytest.mark.parametrize("text,expected", [
    ("Hello World", "hello-world"),
    ("my_file_name", "my-file-name"),
    ("  leading and trailing  ", "leading-and-trailing"),
    ("multiple---hyphens", "multiple-hyphens"),
    ("Special! Ch@rs#", "special-chrs"),
    ("Golden city skyline, at dawn.", "golden-city-skyline-at-dawn"),
    ("服务器 机房", "服务器-机房"),
    ("", ""),
])
def test_slugify_basic(text, expected):
    """slugify converts text to lowercase hyphenated slug."""
    assert slugify(text) == expected


def test_slugify_fallback():
    """An empty slug falls back to the given default."""
    assert slugify("!!!", fallback="document") == "document"
    assert slugify("ok", fallback="document") == "ok"


def test_slugify_truncates_at_hyphen():
    """Long descriptions are cut at a word boundary within MAX_SLUG_LENGTH."""
    slug = slugify(" ".join(["word"] * 40))
    assert len(slug) <= MAX_SLUG_LENGTH
    assert not slug.endswith("-")
    assert slug.endswith("word")


def test_slugify_truncates_unbroken_text():
    assert slugify("x" * 200) == "x" * MAX_SLUG_LENGTH
