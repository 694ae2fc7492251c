"""Filesystem-backed blob store with non-blocking ranged reads."""

from __future__ import annotations

import asyncio
import hashlib
import json
import logging
import os
import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

import aiofiles
import aiofiles.os

from vod.modules.storage import BlobInfo, BlobNotFoundError, StoreUnavailableError

logger = logging.getLogger(__name__)

_KEY_PATTERN = re.compile(r"^[0-9a-f]{32}$")


def new_storage_key() -> str:
    return os.urandom(16).hex()


class FileBlobReader:
    """Reads ``[start, end]`` of one blob in bounded chunks."""

    def __init__(self, handle, key: str, start: int, end: int, chunk_size: int, read_timeout: float) -> None:
        self._handle = handle
        self._key = key
        self._remaining = end - start + 1
        self._chunk_size = chunk_size
        self._read_timeout = read_timeout
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def __aiter__(self) -> "FileBlobReader":
        return self

    async def __anext__(self) -> bytes:
        if self._closed or self._remaining <= 0:
            raise StopAsyncIteration
        read_size = min(self._chunk_size, self._remaining)
        try:
            chunk = await asyncio.wait_for(self._handle.read(read_size), timeout=self._read_timeout)
        except asyncio.TimeoutError as exc:
            raise StoreUnavailableError(f"Read timed out for blob {self._key}") from exc
        except OSError as exc:
            raise StoreUnavailableError(f"Read failed for blob {self._key}: {exc}") from exc
        if not chunk:
            raise StoreUnavailableError(f"Blob {self._key} ended {self._remaining} bytes early")
        self._remaining -= len(chunk)
        return chunk

    async def aclose(self) -> None:
        if self._closed:
            return
        self._closed = True
        await self._handle.close()


class FileBlobWriter:
    def __init__(self, store: "FileSystemBlobStore", key: str, handle, temp_path: Path,
                 filename: Optional[str], content_type: Optional[str]) -> None:
        self._store = store
        self._key = key
        self._handle = handle
        self._temp_path = temp_path
        self._filename = filename
        self._content_type = content_type
        self._hasher = hashlib.sha256()
        self._size = 0
        self._finished = False

    @property
    def key(self) -> str:
        return self._key

    @property
    def size(self) -> int:
        return self._size

    async def write(self, chunk: bytes) -> None:
        if self._finished:
            raise StoreUnavailableError(f"Writer for blob {self._key} is already closed")
        try:
            await self._handle.write(chunk)
        except OSError as exc:
            raise StoreUnavailableError(f"Write failed for blob {self._key}: {exc}") from exc
        self._hasher.update(chunk)
        self._size += len(chunk)

    async def commit(self) -> BlobInfo:
        if self._finished:
            raise StoreUnavailableError(f"Writer for blob {self._key} is already closed")
        self._finished = True
        info = BlobInfo(
            key=self._key,
            length=self._size,
            content_type=self._content_type,
            filename=self._filename,
            checksum_sha256=self._hasher.hexdigest(),
            created_at=datetime.now(timezone.utc).isoformat(),
        )
        try:
            await self._handle.close()
            data_path = self._store.data_path(self._key)
            await aiofiles.os.replace(self._temp_path, data_path)
            await self._store.write_meta(info)
        except OSError as exc:
            await self._store.discard(self._key, self._temp_path)
            raise StoreUnavailableError(f"Commit failed for blob {self._key}: {exc}") from exc
        logger.info("Stored blob %s (%d bytes)", self._key, self._size)
        return info

    async def abort(self) -> None:
        if self._finished:
            return
        self._finished = True
        await self._handle.close()
        await self._store.discard(self._key, self._temp_path)


class FileSystemBlobStore:
    """Blob store keeping bytes and a JSON sidecar per key under ``root``."""

    def __init__(self, root: Path, *, chunk_size: int = 256 * 1024, read_timeout: float = 30.0) -> None:
        self._root = root
        self._chunk_size = chunk_size
        self._read_timeout = read_timeout

    @property
    def root(self) -> Path:
        return self._root

    def ensure_storage(self) -> None:
        self._root.mkdir(parents=True, exist_ok=True)

    def data_path(self, key: str) -> Path:
        return self._root / key[:2] / key

    def meta_path(self, key: str) -> Path:
        return self._root / key[:2] / f"{key}.json"

    async def stat(self, key: str) -> BlobInfo:
        self._check_key(key)
        try:
            async with aiofiles.open(self.meta_path(key), "r", encoding="utf-8") as fh:
                payload = json.loads(await fh.read())
            exists = await aiofiles.os.path.isfile(self.data_path(key))
        except FileNotFoundError as exc:
            raise BlobNotFoundError(key) from exc
        except (OSError, json.JSONDecodeError, KeyError, TypeError, ValueError) as exc:
            raise StoreUnavailableError(f"Cannot read metadata for blob {key}: {exc}") from exc
        if not exists:
            raise BlobNotFoundError(key)
        try:
            return BlobInfo.from_mapping(key, payload)
        except (KeyError, TypeError, ValueError) as exc:
            raise StoreUnavailableError(f"Invalid metadata for blob {key}") from exc

    async def open_range(self, key: str, start: int, end: int) -> FileBlobReader:
        self._check_key(key)
        if start < 0 or end < start:
            raise ValueError(f"invalid byte window {start}-{end}")
        try:
            handle = await aiofiles.open(self.data_path(key), "rb")
        except FileNotFoundError as exc:
            raise BlobNotFoundError(key) from exc
        except OSError as exc:
            raise StoreUnavailableError(f"Cannot open blob {key}: {exc}") from exc
        try:
            await handle.seek(start)
        except OSError as exc:
            await handle.close()
            raise StoreUnavailableError(f"Cannot seek blob {key}: {exc}") from exc
        logger.debug("Opened blob %s for bytes %d-%d", key, start, end)
        return FileBlobReader(handle, key, start, end, self._chunk_size, self._read_timeout)

    async def open_writer(self, *, filename: Optional[str] = None, content_type: Optional[str] = None) -> FileBlobWriter:
        key = new_storage_key()
        target_dir = self._root / key[:2]
        temp_path = target_dir / f"{key}.upload"
        try:
            await aiofiles.os.makedirs(target_dir, exist_ok=True)
            handle = await aiofiles.open(temp_path, "wb")
        except OSError as exc:
            raise StoreUnavailableError(f"Cannot create blob {key}: {exc}") from exc
        return FileBlobWriter(self, key, handle, temp_path, filename, content_type)

    async def delete(self, key: str) -> None:
        self._check_key(key)
        for path in (self.meta_path(key), self.data_path(key)):
            try:
                await aiofiles.os.remove(path)
            except FileNotFoundError:
                continue
            except OSError as exc:
                raise StoreUnavailableError(f"Cannot delete blob {key}: {exc}") from exc

    async def write_meta(self, info: BlobInfo) -> None:
        meta_path = self.meta_path(info.key)
        temp_path = meta_path.with_suffix(".json.tmp")
        async with aiofiles.open(temp_path, "w", encoding="utf-8") as fh:
            await fh.write(json.dumps(info.to_mapping(), ensure_ascii=False))
        await aiofiles.os.replace(temp_path, meta_path)

    async def discard(self, key: str, temp_path: Path) -> None:
        for path in (temp_path, self.data_path(key), self.meta_path(key)):
            try:
                await aiofiles.os.remove(path)
            except FileNotFoundError:
                continue
            except OSError as exc:
                logger.warning("Failed to discard %s: %s", path, exc)

    @staticmethod
    def _check_key(key: str) -> None:
        if not _KEY_PATTERN.match(key):
            raise BlobNotFoundError(key)


__all__ = ["FileBlobReader", "FileBlobWriter", "FileSystemBlobStore", "new_storage_key"]
