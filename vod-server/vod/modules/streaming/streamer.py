"""Byte-range delivery of stored blobs with partial-content semantics."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Optional

from vod.core.config import Settings
from vod.modules.storage import BlobReader, BlobStore, StoreUnavailableError

from .ranges import RangeRequest, parse_range_header

logger = logging.getLogger(__name__)

PASSTHROUGH = "passthrough"


class StreamStatus(IntEnum):
    FULL = 200
    PARTIAL = 206


@dataclass(slots=True)
class BlobHandle:
    """Request-scoped view of one stored blob."""

    key: str
    length: int
    content_type: Optional[str]
    store: BlobStore = field(repr=False)

    async def open(self, start: int, end: int) -> BlobReader:
        return await self.store.open_range(self.key, start, end)


@dataclass(slots=True)
class StreamOutcome:
    status: StreamStatus
    headers: dict[str, str]
    body: Optional[BlobBody] = None
    byte_range: Optional[RangeRequest] = None

    @property
    def status_code(self) -> int:
        return int(self.status)


class RangeStreamer:
    """Serves whole blobs or single byte ranges from a :class:`BlobStore`.

    Every call opens its own reader, so concurrent requests for the same key
    never share a cursor or buffer. The reader is opened before the outcome is
    returned; failures past that point can only abort the body.
    """

    def __init__(
        self,
        store: BlobStore,
        *,
        content_type: str = PASSTHROUGH,
        default_content_type: str = "video/mp4",
        cache_max_age: int = 3600,
    ) -> None:
        self._store = store
        self._content_type = content_type
        self._default_content_type = default_content_type
        self._cache_control = f"public, max-age={cache_max_age}"

    @classmethod
    def from_settings(cls, store: BlobStore, settings: Settings) -> "RangeStreamer":
        streaming = settings.streaming
        return cls(
            store,
            content_type=streaming.content_type,
            default_content_type=streaming.default_content_type,
            cache_max_age=streaming.cache_max_age,
        )

    async def resolve(self, key: str) -> BlobHandle:
        info = await self._store.stat(key)
        return BlobHandle(key=key, length=info.length, content_type=info.content_type, store=self._store)

    async def stream(self, key: str, range_header: Optional[str] = None, *, head: bool = False) -> StreamOutcome:
        handle = await self.resolve(key)
        headers = {
            "Accept-Ranges": "bytes",
            "Content-Type": self._content_type_for(handle),
            "Cache-Control": self._cache_control,
        }

        if range_header is None or not range_header.strip():
            headers["Content-Length"] = str(handle.length)
            outcome = StreamOutcome(status=StreamStatus.FULL, headers=headers)
            if head or handle.length == 0:
                return outcome
            outcome.body = await self._open_body(handle, 0, handle.length - 1)
            return outcome

        byte_range = parse_range_header(range_header, handle.length)
        headers["Content-Range"] = byte_range.content_range(handle.length)
        headers["Content-Length"] = str(byte_range.size)
        outcome = StreamOutcome(status=StreamStatus.PARTIAL, headers=headers, byte_range=byte_range)
        if not head:
            outcome.body = await self._open_body(handle, byte_range.start, byte_range.end)
        return outcome

    def _content_type_for(self, handle: BlobHandle) -> str:
        if self._content_type != PASSTHROUGH:
            return self._content_type
        return handle.content_type or self._default_content_type

    async def _open_body(self, handle: BlobHandle, start: int, end: int) -> "BlobBody":
        reader = await handle.open(start, end)
        return BlobBody(reader, handle.key, end - start + 1)


class BlobBody:
    """Response body pulling one chunk from the reader per iteration.

    The reader is released on exhaustion, on read failure, and on ``aclose``,
    whichever comes first; ``aclose`` is safe on a body that never started.
    """

    def __init__(self, reader: BlobReader, key: str, expected: int) -> None:
        self._reader = reader
        self._key = key
        self._expected = expected
        self._sent = 0
        self._closed = False

    @property
    def sent(self) -> int:
        return self._sent

    @property
    def closed(self) -> bool:
        return self._closed

    def __aiter__(self) -> "BlobBody":
        return self

    async def __anext__(self) -> bytes:
        if self._closed:
            raise StopAsyncIteration
        try:
            chunk = await self._reader.__anext__()
        except StopAsyncIteration:
            await self.aclose()
            raise
        except StoreUnavailableError:
            logger.exception("Stream of blob %s aborted after %d of %d bytes", self._key, self._sent, self._expected)
            await self.aclose()
            raise
        self._sent += len(chunk)
        return chunk

    async def aclose(self) -> None:
        if self._closed:
            return
        self._closed = True
        await self._reader.aclose()
        if self._sent < self._expected:
            logger.info("Blob %s closed early after %d of %d bytes", self._key, self._sent, self._expected)
        else:
            logger.debug("Blob %s delivered (%d bytes)", self._key, self._sent)


__all__ = ["BlobBody", "BlobHandle", "PASSTHROUGH", "RangeStreamer", "StreamOutcome", "StreamStatus"]
