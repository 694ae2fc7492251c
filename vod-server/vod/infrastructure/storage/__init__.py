"""Blob store implementations."""

from .filesystem import FileSystemBlobStore, new_storage_key

__all__ = ["FileSystemBlobStore", "new_storage_key"]
