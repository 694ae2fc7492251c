import asyncio
import hashlib
import os

import pytest

from conftest import put_blob
from vod.modules.storage import BlobNotFoundError, StoreUnavailableError, probe_blob


async def read_all(reader) -> bytes:
    try:
        return b"".join([chunk async for chunk in reader])
    finally:
        await reader.aclose()


async def test_commit_makes_blob_visible_with_metadata(blob_store):
    data = os.urandom(10_000)
    writer = await blob_store.open_writer(filename="a.mp4", content_type="video/mp4")
    await writer.write(data[:4000])
    await writer.write(data[4000:])

    with pytest.raises(BlobNotFoundError):
        await blob_store.stat(writer.key)

    info = await writer.commit()
    assert info.length == len(data)
    assert info.checksum_sha256 == hashlib.sha256(data).hexdigest()

    stat = await blob_store.stat(writer.key)
    assert stat.length == len(data)
    assert stat.content_type == "video/mp4"
    assert stat.filename == "a.mp4"


async def test_open_range_returns_exact_slice(blob_store):
    data = os.urandom(20_000)
    key = await put_blob(blob_store, data)

    assert await read_all(await blob_store.open_range(key, 0, len(data) - 1)) == data
    assert await read_all(await blob_store.open_range(key, 4095, 8192)) == data[4095:8193]
    assert await read_all(await blob_store.open_range(key, 19_999, 19_999)) == data[-1:]


async def test_abort_leaves_nothing_behind(blob_store):
    writer = await blob_store.open_writer(filename="b.mp4", content_type="video/mp4")
    await writer.write(b"partial")
    await writer.abort()

    with pytest.raises(BlobNotFoundError):
        await blob_store.stat(writer.key)
    assert not list(blob_store.root.rglob(f"{writer.key}*"))


async def test_keys_are_unique(blob_store):
    keys = {await put_blob(blob_store, b"x") for _ in range(20)}
    assert len(keys) == 20


@pytest.mark.parametrize("key", ["../../etc/passwd", "short", "G" * 32, ""])
async def test_malformed_keys_are_not_found(blob_store, key):
    with pytest.raises(BlobNotFoundError):
        await blob_store.stat(key)
    with pytest.raises(BlobNotFoundError):
        await blob_store.open_range(key, 0, 0)


async def test_unknown_key_is_not_found(blob_store):
    with pytest.raises(BlobNotFoundError):
        await blob_store.stat("0" * 32)


async def test_truncated_blob_raises_store_unavailable(blob_store):
    key = await put_blob(blob_store, b"a" * 1000)
    blob_store.data_path(key).write_bytes(b"a" * 10)

    reader = await blob_store.open_range(key, 0, 999)
    with pytest.raises(StoreUnavailableError):
        await read_all(reader)
    assert reader.closed


async def test_concurrent_readers_are_independent(blob_store):
    data = os.urandom(50_000)
    key = await put_blob(blob_store, data)
    windows = [(0, 9_999), (10_000, 29_999), (30_000, 49_999), (5, 44_444)]

    async def read_window(start: int, end: int) -> bytes:
        return await read_all(await blob_store.open_range(key, start, end))

    results = await asyncio.gather(*(read_window(start, end) for start, end in windows))
    for (start, end), chunk in zip(windows, results):
        assert chunk == data[start:end + 1]


async def test_delete_removes_blob(blob_store):
    key = await put_blob(blob_store, b"bytes")
    await blob_store.delete(key)
    with pytest.raises(BlobNotFoundError):
        await blob_store.stat(key)


async def test_probe_detects_iso_media_signature(blob_store):
    mp4_head = b"\x00\x00\x00\x18ftypmp42\x00\x00\x00\x00mp42isom"
    mp4_key = await put_blob(blob_store, mp4_head + os.urandom(100))
    other_key = await put_blob(blob_store, b"RIFF\x00\x00\x00\x00AVI LIST", filename="x.avi")

    mp4 = await probe_blob(blob_store, mp4_key)
    assert mp4.is_iso_media
    assert mp4.box_type == "ftyp"
    assert mp4.head_hex == mp4_head[:16].hex()

    other = await probe_blob(blob_store, other_key)
    assert not other.is_iso_media
