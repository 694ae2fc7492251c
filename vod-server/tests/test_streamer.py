import asyncio
import os
from typing import Optional

import pytest

from conftest import put_blob
from vod.modules.storage import BlobInfo, BlobNotFoundError, StoreUnavailableError
from vod.modules.streaming import (
    MalformedRangeError,
    RangeNotSatisfiableError,
    RangeStreamer,
    StreamStatus,
)

MIB = 1_048_576


async def drain(outcome) -> bytes:
    assert outcome.body is not None
    return b"".join([chunk async for chunk in outcome.body])


class FakeReader:
    def __init__(self, data: bytes, chunk_size: int, fail_after: Optional[int] = None) -> None:
        self._data = data
        self._chunk_size = chunk_size
        self._offset = 0
        self._fail_after = fail_after
        self.closed = False

    def __aiter__(self):
        return self

    async def __anext__(self) -> bytes:
        if self.closed or self._offset >= len(self._data):
            raise StopAsyncIteration
        if self._fail_after is not None and self._offset >= self._fail_after:
            raise StoreUnavailableError("disk went away")
        chunk = self._data[self._offset:self._offset + self._chunk_size]
        self._offset += len(chunk)
        return chunk

    async def aclose(self) -> None:
        self.closed = True


class FakeStore:
    """In-memory store that records every reader it hands out."""

    def __init__(self, data: bytes, content_type: Optional[str] = None, fail_after: Optional[int] = None) -> None:
        self.data = data
        self.content_type = content_type
        self.fail_after = fail_after
        self.readers: list[FakeReader] = []

    async def stat(self, key: str) -> BlobInfo:
        if key != "k":
            raise BlobNotFoundError(key)
        return BlobInfo(key=key, length=len(self.data), content_type=self.content_type)

    async def open_range(self, key: str, start: int, end: int) -> FakeReader:
        reader = FakeReader(self.data[start:end + 1], 100, self.fail_after)
        self.readers.append(reader)
        return reader

    async def open_writer(self, *, filename=None, content_type=None):
        raise NotImplementedError

    async def delete(self, key: str) -> None:
        raise NotImplementedError


async def test_example_partial_request(blob_store):
    data = os.urandom(MIB)
    key = await put_blob(blob_store, data)
    streamer = RangeStreamer(blob_store)

    outcome = await streamer.stream(key, "bytes=1000-1999")

    assert outcome.status is StreamStatus.PARTIAL
    assert outcome.status_code == 206
    assert outcome.headers["Content-Range"] == "bytes 1000-1999/1048576"
    assert outcome.headers["Content-Length"] == "1000"
    assert outcome.headers["Accept-Ranges"] == "bytes"
    assert outcome.headers["Cache-Control"] == "public, max-age=3600"
    assert await drain(outcome) == data[1000:2000]


@pytest.mark.parametrize("start,end", [(0, 0), (0, 4095), (4096, 4096), (12345, 99999), (MIB - 10, MIB - 1)])
async def test_slices_are_exact(blob_store, start, end):
    data = os.urandom(MIB)
    key = await put_blob(blob_store, data)

    outcome = await RangeStreamer(blob_store).stream(key, f"bytes={start}-{end}")

    body = await drain(outcome)
    assert body == data[start:end + 1]
    assert len(body) == int(outcome.headers["Content-Length"])


async def test_no_range_returns_whole_blob(blob_store):
    data = os.urandom(70_000)
    key = await put_blob(blob_store, data)

    outcome = await RangeStreamer(blob_store).stream(key)

    assert outcome.status_code == 200
    assert "Content-Range" not in outcome.headers
    assert outcome.headers["Content-Length"] == str(len(data))
    assert outcome.headers["Accept-Ranges"] == "bytes"
    assert await drain(outcome) == data


async def test_blank_range_header_is_treated_as_absent(blob_store):
    key = await put_blob(blob_store, b"0123456789")
    outcome = await RangeStreamer(blob_store).stream(key, "   ")
    assert outcome.status_code == 200
    assert await drain(outcome) == b"0123456789"


async def test_open_ended_and_clamped_ranges(blob_store):
    data = bytes(range(256)) * 4
    key = await put_blob(blob_store, data)
    streamer = RangeStreamer(blob_store)

    tail = await streamer.stream(key, "bytes=1000-")
    assert tail.headers["Content-Range"] == "bytes 1000-1023/1024"
    assert await drain(tail) == data[1000:]

    clamped = await streamer.stream(key, "bytes=1020-9999")
    assert clamped.headers["Content-Range"] == "bytes 1020-1023/1024"
    assert await drain(clamped) == data[1020:]


async def test_start_past_end_is_unsatisfiable():
    store = FakeStore(b"x" * 100)
    with pytest.raises(RangeNotSatisfiableError) as excinfo:
        await RangeStreamer(store).stream("k", "bytes=100-")
    assert excinfo.value.length == 100
    assert store.readers == []


@pytest.mark.parametrize("header", ["bytes=abc-", "bytes=-10", "bytes=0-1,4-5", "pages=1-2"])
async def test_malformed_range_opens_no_reader(header):
    store = FakeStore(b"x" * 100)
    with pytest.raises(MalformedRangeError):
        await RangeStreamer(store).stream("k", header)
    assert store.readers == []


async def test_unknown_key_is_not_found():
    with pytest.raises(BlobNotFoundError):
        await RangeStreamer(FakeStore(b"x")).stream("missing", "bytes=0-0")


async def test_head_returns_headers_without_reader():
    store = FakeStore(b"x" * 500)
    streamer = RangeStreamer(store)

    full = await streamer.stream("k", head=True)
    partial = await streamer.stream("k", "bytes=10-19", head=True)

    assert full.body is None and full.headers["Content-Length"] == "500"
    assert partial.body is None and partial.headers["Content-Range"] == "bytes 10-19/500"
    assert store.readers == []


async def test_zero_length_blob_has_no_body():
    store = FakeStore(b"")
    outcome = await RangeStreamer(store).stream("k")
    assert outcome.status_code == 200
    assert outcome.headers["Content-Length"] == "0"
    assert outcome.body is None


async def test_content_type_passthrough_and_forced():
    typed = FakeStore(b"x", content_type="video/webm")
    untyped = FakeStore(b"x")

    assert (await RangeStreamer(typed).stream("k", head=True)).headers["Content-Type"] == "video/webm"
    assert (await RangeStreamer(untyped).stream("k", head=True)).headers["Content-Type"] == "video/mp4"
    forced = RangeStreamer(typed, content_type="application/octet-stream")
    assert (await forced.stream("k", head=True)).headers["Content-Type"] == "application/octet-stream"


async def test_reader_closed_after_full_delivery():
    store = FakeStore(os.urandom(1000))
    outcome = await RangeStreamer(store).stream("k", "bytes=0-499")
    await drain(outcome)
    assert outcome.body.closed
    assert store.readers[0].closed
    assert outcome.body.sent == 500


async def test_reader_closed_when_client_goes_away():
    store = FakeStore(os.urandom(1000))
    outcome = await RangeStreamer(store).stream("k")

    first = await outcome.body.__anext__()
    assert len(first) == 100
    await outcome.body.aclose()

    assert store.readers[0].closed
    with pytest.raises(StopAsyncIteration):
        await outcome.body.__anext__()


async def test_unstarted_body_can_be_closed():
    store = FakeStore(os.urandom(1000))
    outcome = await RangeStreamer(store).stream("k")
    await outcome.body.aclose()
    await outcome.body.aclose()
    assert store.readers[0].closed


async def test_store_failure_mid_stream_aborts_and_closes():
    store = FakeStore(os.urandom(1000), fail_after=300)
    outcome = await RangeStreamer(store).stream("k")

    with pytest.raises(StoreUnavailableError):
        await drain(outcome)
    assert store.readers[0].closed
    assert outcome.body.sent == 300


async def test_concurrent_disjoint_ranges(blob_store):
    data = os.urandom(MIB)
    key = await put_blob(blob_store, data)
    streamer = RangeStreamer(blob_store)
    windows = [(i * 65536, i * 65536 + 65535) for i in range(16)]

    async def fetch(start: int, end: int) -> bytes:
        return await drain(await streamer.stream(key, f"bytes={start}-{end}"))

    results = await asyncio.gather(*(fetch(start, end) for start, end in windows))

    assert b"".join(results) == data
    for (start, end), body in zip(windows, results):
        assert body == data[start:end + 1]


async def test_from_settings_uses_streaming_section():
    from vod.core.config import get_settings

    settings = get_settings()
    streamer = RangeStreamer.from_settings(FakeStore(b"x"), settings)
    outcome = await streamer.stream("k", head=True)
    assert outcome.headers["Cache-Control"] == f"public, max-age={settings.streaming.cache_max_age}"
