"""Repository protocol for catalog persistence."""

from __future__ import annotations

from typing import Protocol, Sequence

from .models import Asset, AssetCreateInput, CategoryStat, SortField, SortOrder, VariantCreateInput, VideoFilter


class VideoRepository(Protocol):
    async def get_by_id(self, video_id: str) -> Asset | None:
        ...

    async def get_by_storage_key(self, storage_key: str) -> Asset | None:
        ...

    async def list_videos(
        self,
        filters: VideoFilter,
        *,
        sort_by: SortField,
        sort_order: SortOrder,
        offset: int,
        limit: int,
    ) -> tuple[Sequence[Asset], int]:
        ...

    async def increment_views(self, video_id: str) -> None:
        ...

    async def create_video(self, payload: AssetCreateInput, variants: Sequence[VariantCreateInput]) -> Asset:
        ...

    async def add_variant(self, video_id: str, variant: VariantCreateInput) -> Asset:
        ...

    async def set_active(self, video_id: str, is_active: bool) -> Asset | None:
        ...

    async def title_suggestions(self, pattern: str, limit: int) -> Sequence[str]:
        ...

    async def categories_matching(self, pattern: str | None) -> Sequence[str]:
        ...

    async def category_stats(self, limit: int | None = None) -> Sequence[CategoryStat]:
        ...
