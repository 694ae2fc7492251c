"""Errors raised while serving byte ranges."""

from vod.modules.storage.exceptions import BlobNotFoundError, StoreUnavailableError


class StreamingError(Exception):
    """Base class for range delivery errors."""


class MalformedRangeError(StreamingError):
    """Raised when a Range header cannot be parsed."""


class RangeNotSatisfiableError(StreamingError):
    """Raised when a parsed range falls outside the blob."""

    def __init__(self, length: int, header: str) -> None:
        super().__init__(f"Range {header!r} not satisfiable for length {length}")
        self.length = length
        self.header = header


__all__ = [
    "BlobNotFoundError",
    "MalformedRangeError",
    "RangeNotSatisfiableError",
    "StoreUnavailableError",
    "StreamingError",
]
