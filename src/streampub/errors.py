"""streampub exception hierarchy.

Malformed markup never raises; these are for configuration, source and
archive failures only.
"""


class StreamPubError(Exception):
    """Base exception for all streampub errors."""


class ConfigError(StreamPubError):
    """Raised for invalid configuration or a missing credential."""


class GenerationSourceError(StreamPubError):
    """Raised when the text source breaks mid-run (terminal run failure)."""


class ImageFetchError(StreamPubError):
    """Raised by image fetchers; the driver logs it and leaves the slot pending."""


class ArchiveError(StreamPubError):
    """Raised when an archived document lookup fails."""
