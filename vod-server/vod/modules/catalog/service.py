"""Catalog use cases: listing, search, view counting and variant management."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from .exceptions import AssetNotFoundError, InvalidVariantError, VariantConflictError
from .models import (
    QUALITY_ORDER,
    Asset,
    AssetCreateInput,
    CatalogPage,
    CategoryStat,
    SearchResult,
    SortField,
    SortOrder,
    Suggestion,
    VariantCreateInput,
    VideoFilter,
)
from .repository import VideoRepository
from .resolver import CatalogResolver

MAX_SEARCH_LIMIT = 50
RELATED_CATEGORY_LIMIT = 5


def _page_window(page: int, limit: int) -> tuple[int, int, int]:
    page = max(page, 1)
    limit = max(limit, 1)
    return page, limit, (page - 1) * limit


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    stripped = value.strip()
    return stripped or None


@dataclass(slots=True)
class CatalogService:
    repository: VideoRepository

    @classmethod
    def with_session(cls, session: AsyncSession) -> "CatalogService":
        # deferred: the SQL repository imports this package's models
        from vod.infrastructure.database.repositories.video_repository import SqlVideoRepository

        return cls(SqlVideoRepository(session))

    @property
    def resolver(self) -> CatalogResolver:
        return CatalogResolver(self.repository)

    async def list_videos(
        self,
        *,
        category: Optional[str] = None,
        search: Optional[str] = None,
        page: int = 1,
        limit: int = 20,
    ) -> CatalogPage:
        page, limit, offset = _page_window(page, limit)
        filters = VideoFilter(text=_clean(search), category=_clean(category))
        items, total = await self.repository.list_videos(
            filters, sort_by="date", sort_order="desc", offset=offset, limit=limit
        )
        return CatalogPage(items=items, total=total, page=page, limit=limit)

    async def get_video(self, video_id: str, *, count_view: bool = True) -> Asset:
        asset = await self.resolver.find_asset(video_id)
        if count_view:
            await self.repository.increment_views(video_id)
            asset.views += 1
        return asset

    async def search(
        self,
        *,
        query: Optional[str] = None,
        category: Optional[str] = None,
        sort_by: SortField = "relevance",
        sort_order: SortOrder = "desc",
        page: int = 1,
        limit: int = 20,
        min_views: Optional[int] = None,
        max_views: Optional[int] = None,
        min_duration: Optional[float] = None,
        max_duration: Optional[float] = None,
    ) -> SearchResult:
        query = _clean(query)
        category = _clean(category)
        page, limit, offset = _page_window(page, min(limit, MAX_SEARCH_LIMIT))
        filters = VideoFilter(
            text=query,
            category_pattern=None if category in (None, "all") else category,
            min_views=min_views,
            max_views=max_views,
            min_duration=min_duration,
            max_duration=max_duration,
        )
        items, total = await self.repository.list_videos(
            filters, sort_by=sort_by, sort_order=sort_order, offset=offset, limit=limit
        )

        suggestions: list[str] = []
        if query and len(items) < 3:
            suggestions = list(await self.repository.categories_matching(query))

        related = await self.repository.category_stats(RELATED_CATEGORY_LIMIT)
        return SearchResult(
            page=CatalogPage(items=items, total=total, page=page, limit=limit),
            suggestions=suggestions,
            related_categories=list(related),
        )

    async def suggestions(self, query: Optional[str]) -> list[Suggestion]:
        query = _clean(query)
        if not query or len(query) < 2:
            return []
        titles = await self.repository.title_suggestions(query, 5)
        categories = await self.repository.categories_matching(query)
        combined = [Suggestion(type="video", text=title) for title in titles]
        combined.extend(Suggestion(type="category", text=name) for name in list(categories)[:3])
        return combined[:8]

    async def trending(self, limit: int = 10) -> Sequence[Asset]:
        items, _ = await self.repository.list_videos(
            VideoFilter(), sort_by="relevance", sort_order="desc", offset=0, limit=max(limit, 1)
        )
        return items

    async def categories(self) -> Sequence[CategoryStat]:
        return await self.repository.category_stats()

    async def create_asset(self, payload: AssetCreateInput, variants: Sequence[VariantCreateInput]) -> Asset:
        qualities = [variant.quality for variant in variants]
        for variant in variants:
            self._validate_variant(variant)
        if len(set(qualities)) != len(qualities):
            raise VariantConflictError("duplicate quality in upload")
        return await self.repository.create_video(payload, variants)

    async def get_managed(self, video_id: str) -> Asset:
        """Fetch an asset for administration; inactive assets are included."""
        asset = await self.repository.get_by_id(video_id)
        if asset is None:
            raise AssetNotFoundError(video_id)
        return asset

    async def add_variant(self, video_id: str, variant: VariantCreateInput) -> Asset:
        self._validate_variant(variant)
        asset = await self.get_managed(video_id)
        if asset.has_quality(variant.quality):
            raise VariantConflictError(f"{video_id} already has a {variant.quality} variant")
        return await self.repository.add_variant(video_id, variant)

    async def set_active(self, video_id: str, is_active: bool) -> Asset:
        asset = await self.repository.set_active(video_id, is_active)
        if asset is None:
            raise AssetNotFoundError(video_id)
        return asset

    @staticmethod
    def _validate_variant(variant: VariantCreateInput) -> None:
        if variant.quality not in QUALITY_ORDER:
            raise InvalidVariantError(f"unsupported quality: {variant.quality}")
        if variant.bitrate <= 0:
            raise InvalidVariantError("bitrate must be positive")
        width, sep, height = variant.resolution.partition("x")
        if not sep or not width.isdigit() or not height.isdigit():
            raise InvalidVariantError(f"resolution must look like WxH: {variant.resolution}")
