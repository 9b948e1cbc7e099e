"""SHA-256 hashing for run change detection and image fingerprints"""

import hashlib


def sha256(content: str | bytes) -> str:
    """Hex SHA-256 of text (UTF-8 encoded) or raw bytes; 64 chars, matches String(64) column."""
    if isinstance(content, str):
        content = content.encode("utf-8")
    return hashlib.sha256(content).hexdigest()
