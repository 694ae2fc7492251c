"""Ingest uploaded video files into the blob store and the catalog."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Optional, Protocol

from vod.core.config import Settings
from vod.modules.catalog import (
    QUALITY_SPECS,
    Asset,
    AssetCreateInput,
    CatalogService,
    InvalidVariantError,
    VariantConflictError,
    VariantCreateInput,
)
from vod.modules.storage import BlobInfo, BlobStore

from .exceptions import UploadRejectedError, UploadTooLargeError

logger = logging.getLogger(__name__)


class UploadSource(Protocol):
    """Anything that yields the uploaded bytes in chunks (``fastapi.UploadFile`` fits)."""

    filename: Optional[str]
    content_type: Optional[str]

    async def read(self, size: int = -1) -> bytes:
        ...


@dataclass(slots=True)
class UploadPolicy:
    max_file_size: int
    allowed_extensions: tuple[str, ...]
    default_quality: str
    chunk_size: int

    @classmethod
    def from_settings(cls, settings: Settings) -> "UploadPolicy":
        return cls(
            max_file_size=settings.upload.max_file_size,
            allowed_extensions=tuple(ext.lower() for ext in settings.upload.allowed_extensions),
            default_quality=settings.upload.default_quality,
            chunk_size=settings.storage.chunk_size,
        )

    def accepts(self, filename: Optional[str], content_type: Optional[str]) -> bool:
        extension = os.path.splitext(filename or "")[1].lower()
        return extension in self.allowed_extensions or (content_type or "").startswith("video/")


class UploadService:
    def __init__(self, catalog: CatalogService, store: BlobStore, policy: UploadPolicy) -> None:
        self._catalog = catalog
        self._store = store
        self._policy = policy

    async def store_file(self, source: UploadSource) -> BlobInfo:
        """Copy the upload into a new blob; nothing is left behind on failure."""
        if not self._policy.accepts(source.filename, source.content_type):
            raise UploadRejectedError(
                "Only video files are allowed (" + ", ".join(self._policy.allowed_extensions) + ")"
            )
        writer = await self._store.open_writer(filename=source.filename, content_type=source.content_type)
        committed = False
        try:
            received = 0
            while True:
                chunk = await source.read(self._policy.chunk_size)
                if not chunk:
                    break
                received += len(chunk)
                if received > self._policy.max_file_size:
                    raise UploadTooLargeError(self._policy.max_file_size)
                await writer.write(chunk)
            if received == 0:
                raise UploadRejectedError("Uploaded file is empty")
            info = await writer.commit()
            committed = True
            return info
        finally:
            if not committed:
                await writer.abort()

    async def upload_video(
        self,
        source: UploadSource,
        payload: AssetCreateInput,
        *,
        quality: Optional[str] = None,
    ) -> Asset:
        quality = quality or self._policy.default_quality
        if quality not in QUALITY_SPECS:
            raise InvalidVariantError(f"unsupported quality: {quality}")
        info = await self.store_file(source)
        try:
            asset = await self._catalog.create_asset(payload, [self._variant(quality, info.key)])
        except Exception:
            await self._store.delete(info.key)
            raise
        logger.info("Uploaded %s as asset %s (%s, %d bytes)", source.filename, asset.id, quality, info.length)
        return asset

    async def add_variant(self, video_id: str, source: UploadSource, quality: str) -> Asset:
        if quality not in QUALITY_SPECS:
            raise InvalidVariantError(f"unsupported quality: {quality}")
        # duplicates are rejected before any bytes are written
        asset = await self._catalog.get_managed(video_id)
        if asset.has_quality(quality):
            raise VariantConflictError(f"{video_id} already has a {quality} variant")
        info = await self.store_file(source)
        try:
            updated = await self._catalog.add_variant(video_id, self._variant(quality, info.key))
        except Exception:
            await self._store.delete(info.key)
            raise
        logger.info("Added %s variant to asset %s", quality, video_id)
        return updated

    @staticmethod
    def _variant(quality: str, storage_key: str) -> VariantCreateInput:
        bitrate, resolution = QUALITY_SPECS[quality]
        return VariantCreateInput(quality=quality, storage_key=storage_key, bitrate=bitrate, resolution=resolution)
