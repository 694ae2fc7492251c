"""Protocols for key-addressed binary storage."""

from __future__ import annotations

from typing import AsyncIterator, Optional, Protocol

from .models import BlobInfo


class BlobReader(Protocol):
    """Ranged read over one blob; yields chunks until the range is exhausted."""

    def __aiter__(self) -> AsyncIterator[bytes]:
        ...

    async def __anext__(self) -> bytes:
        ...

    async def aclose(self) -> None:
        ...


class BlobWriter(Protocol):
    """Append-only writer for a new key; nothing is visible before ``commit``."""

    @property
    def key(self) -> str:
        ...

    async def write(self, chunk: bytes) -> None:
        ...

    async def commit(self) -> BlobInfo:
        ...

    async def abort(self) -> None:
        ...


class BlobStore(Protocol):
    async def stat(self, key: str) -> BlobInfo:
        ...

    async def open_range(self, key: str, start: int, end: int) -> BlobReader:
        """Open an independent reader over bytes ``[start, end]`` inclusive."""
        ...

    async def open_writer(self, *, filename: Optional[str], content_type: Optional[str]) -> BlobWriter:
        ...

    async def delete(self, key: str) -> None:
        ...
