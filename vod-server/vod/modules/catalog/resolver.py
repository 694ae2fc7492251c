"""Resolution of asset ids and storage keys to active catalog entries."""

from __future__ import annotations

from .exceptions import AssetNotFoundError
from .models import Asset
from .repository import VideoRepository


class CatalogResolver:
    """Maps asset ids and storage keys to active assets; inactive counts as missing."""

    def __init__(self, repository: VideoRepository) -> None:
        self._repository = repository

    async def find_asset(self, asset_id: str) -> Asset:
        asset = await self._repository.get_by_id(asset_id)
        if asset is None or not asset.is_active:
            raise AssetNotFoundError(asset_id)
        return asset

    async def find_owning_asset(self, storage_key: str) -> Asset:
        asset = await self._repository.get_by_storage_key(storage_key)
        if asset is None or not asset.is_active:
            raise AssetNotFoundError(storage_key)
        return asset
