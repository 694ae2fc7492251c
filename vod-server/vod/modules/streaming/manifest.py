"""Quality-variant listings handed to players before playback."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from vod.modules.catalog import Asset, CatalogResolver, Variant, sort_variants


@dataclass(slots=True)
class ManifestEntry:
    quality: str
    bitrate: int
    resolution: str
    url: str
    storage_key: Optional[str] = None


@dataclass(slots=True)
class ManifestResult:
    asset_id: str
    title: str
    duration: float
    qualities: list[ManifestEntry] = field(default_factory=list)


class ManifestBuilder:
    """Lists an active asset's variants in ``240p < 480p < 720p < 1080p`` order.

    Authorization is the caller's job. Storage keys are only copied onto the
    entries when ``include_storage_keys`` is set; the playback url always
    carries the key as its last path segment.
    """

    def __init__(self, resolver: CatalogResolver, stream_path: str = "/api/stream") -> None:
        self._resolver = resolver
        self._stream_path = stream_path.rstrip("/")

    def stream_url(self, storage_key: str) -> str:
        return f"{self._stream_path}/{storage_key}"

    async def build(self, asset_id: str, *, include_storage_keys: bool = False) -> ManifestResult:
        asset = await self._resolver.find_asset(asset_id)
        return self.from_asset(asset, include_storage_keys=include_storage_keys)

    def from_asset(self, asset: Asset, *, include_storage_keys: bool = False) -> ManifestResult:
        return ManifestResult(
            asset_id=asset.id,
            title=asset.title,
            duration=asset.duration,
            qualities=[self._entry(variant, include_storage_keys) for variant in sort_variants(asset.variants)],
        )

    def _entry(self, variant: Variant, include_storage_key: bool) -> ManifestEntry:
        return ManifestEntry(
            quality=variant.quality,
            bitrate=variant.bitrate,
            resolution=variant.resolution,
            url=self.stream_url(variant.storage_key),
            storage_key=variant.storage_key if include_storage_key else None,
        )
