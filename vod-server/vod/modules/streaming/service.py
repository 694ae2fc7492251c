"""Playback use cases combining access control, catalog lookup and delivery."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from vod.core.config import Settings
from vod.modules.catalog import CatalogResolver, CatalogService
from vod.modules.storage import BlobStore
from vod.modules.users import AccessGuard, Principal

from .manifest import ManifestBuilder, ManifestResult
from .streamer import RangeStreamer, StreamOutcome


@dataclass(slots=True)
class PlaybackService:
    """Gatekeeper for manifests and byte delivery.

    The caller is authenticated and admitted before the catalog is consulted,
    so a rejected request cannot learn whether an asset or key exists.
    """

    resolver: CatalogResolver
    guard: Optional[AccessGuard]
    manifests: ManifestBuilder
    streamer: RangeStreamer

    @classmethod
    def with_session(cls, session: AsyncSession, store: BlobStore, settings: Settings) -> "PlaybackService":
        from vod.infrastructure.database.repositories.user_repository import SqlUserRepository

        resolver = CatalogService.with_session(session).resolver
        guard = AccessGuard(SqlUserRepository(session)) if settings.streaming.require_auth else None
        return cls(
            resolver=resolver,
            guard=guard,
            manifests=ManifestBuilder(resolver, stream_path=f"{settings.api_prefix.rstrip('/')}/stream"),
            streamer=RangeStreamer.from_settings(store, settings),
        )

    async def manifest(
        self,
        credential: Optional[str],
        asset_id: str,
        *,
        include_storage_keys: bool = False,
    ) -> ManifestResult:
        await self._admit(credential)
        asset = await self.resolver.find_asset(asset_id)
        return self.manifests.from_asset(asset, include_storage_keys=include_storage_keys)

    async def stream(
        self,
        credential: Optional[str],
        storage_key: str,
        range_header: Optional[str] = None,
        *,
        head: bool = False,
    ) -> StreamOutcome:
        await self._admit(credential)
        await self.resolver.find_owning_asset(storage_key)
        return await self.streamer.stream(storage_key, range_header, head=head)

    async def _admit(self, credential: Optional[str]) -> Optional[Principal]:
        if self.guard is None:
            return None
        principal = await self.guard.authenticate(credential)
        self.guard.admit(principal)
        return principal
