"""Range-based media delivery."""

from .exceptions import (
    BlobNotFoundError,
    MalformedRangeError,
    RangeNotSatisfiableError,
    StoreUnavailableError,
    StreamingError,
)
from .manifest import ManifestBuilder, ManifestEntry, ManifestResult
from .ranges import RangeRequest, parse_range_header
from .service import PlaybackService
from .streamer import PASSTHROUGH, BlobBody, BlobHandle, RangeStreamer, StreamOutcome, StreamStatus

__all__ = [
    "PASSTHROUGH",
    "BlobBody",
    "BlobHandle",
    "BlobNotFoundError",
    "MalformedRangeError",
    "ManifestBuilder",
    "ManifestEntry",
    "ManifestResult",
    "PlaybackService",
    "RangeNotSatisfiableError",
    "RangeRequest",
    "RangeStreamer",
    "StoreUnavailableError",
    "StreamOutcome",
    "StreamStatus",
    "StreamingError",
    "parse_range_header",
]
