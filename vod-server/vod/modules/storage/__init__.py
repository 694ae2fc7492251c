"""Blob storage abstractions."""

from .exceptions import BlobNotFoundError, StorageError, StoreUnavailableError
from .models import BlobInfo
from .probe import BlobSignature, probe_blob
from .store import BlobReader, BlobStore, BlobWriter

__all__ = [
    "BlobInfo",
    "BlobNotFoundError",
    "BlobReader",
    "BlobSignature",
    "BlobStore",
    "BlobWriter",
    "StorageError",
    "StoreUnavailableError",
    "probe_blob",
]
