"""Blob storage specific exceptions."""


class StorageError(Exception):
    """Base class for blob storage errors."""


class BlobNotFoundError(StorageError):
    """Raised when a storage key does not resolve to a stored blob."""


class StoreUnavailableError(StorageError):
    """Raised when the backing store cannot be read from or written to."""
