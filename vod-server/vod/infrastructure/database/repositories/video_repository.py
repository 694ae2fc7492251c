"""SQLAlchemy implementation of the video catalog repository."""

from __future__ import annotations

from typing import Sequence

from sqlalchemy import Select, distinct, func, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from vod.infrastructure.database.models import Video as VideoModel
from vod.infrastructure.database.models import VideoVariant as VideoVariantModel
from vod.modules.catalog.exceptions import VariantConflictError
from vod.modules.catalog.models import (
    Asset,
    AssetCreateInput,
    CategoryStat,
    SortField,
    SortOrder,
    Variant,
    VariantCreateInput,
    VideoFilter,
)
from vod.modules.catalog.repository import VideoRepository

from ._time import as_utc


def _like(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class SqlVideoRepository(VideoRepository):
    """Video repository backed by SQLAlchemy models."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_id(self, video_id: str) -> Asset | None:
        model = await self._load(video_id)
        return self._to_domain(model) if model else None

    async def get_by_storage_key(self, storage_key: str) -> Asset | None:
        stmt = (
            select(VideoModel)
            .join(VideoVariantModel, VideoVariantModel.video_id == VideoModel.id)
            .where(VideoVariantModel.storage_key == storage_key)
        )
        result = await self._session.execute(stmt)
        model = result.scalars().first()
        return self._to_domain(model) if model else None

    async def list_videos(
        self,
        filters: VideoFilter,
        *,
        sort_by: SortField,
        sort_order: SortOrder,
        offset: int,
        limit: int,
    ) -> tuple[Sequence[Asset], int]:
        conditions = self._conditions(filters)

        count_stmt = select(func.count()).select_from(VideoModel).where(*conditions)
        total = (await self._session.execute(count_stmt)).scalar_one()

        stmt = self._apply_sort(select(VideoModel).where(*conditions), sort_by, sort_order)
        result = await self._session.execute(stmt.offset(offset).limit(limit))
        return [self._to_domain(model) for model in result.scalars().all()], int(total)

    async def increment_views(self, video_id: str) -> None:
        stmt = (
            update(VideoModel)
            .where(VideoModel.id == video_id)
            .values(views=VideoModel.views + 1)
            .execution_options(synchronize_session=False)
        )
        await self._session.execute(stmt)

    async def create_video(self, payload: AssetCreateInput, variants: Sequence[VariantCreateInput]) -> Asset:
        model = VideoModel(
            title=payload.title,
            description=payload.description,
            thumbnail=payload.thumbnail,
            duration=payload.duration,
            category=payload.category,
            variants=[
                VideoVariantModel(
                    quality=variant.quality,
                    storage_key=variant.storage_key,
                    bitrate=variant.bitrate,
                    resolution=variant.resolution,
                )
                for variant in variants
            ],
        )
        self._session.add(model)
        await self._session.flush()
        loaded = await self._load(model.id)
        assert loaded is not None
        return self._to_domain(loaded)

    async def add_variant(self, video_id: str, variant: VariantCreateInput) -> Asset:
        self._session.add(
            VideoVariantModel(
                video_id=video_id,
                quality=variant.quality,
                storage_key=variant.storage_key,
                bitrate=variant.bitrate,
                resolution=variant.resolution,
            )
        )
        try:
            await self._session.flush()
        except IntegrityError as exc:
            raise self._variant_conflict(exc, video_id, variant) from exc
        loaded = await self._load(video_id)
        assert loaded is not None
        return self._to_domain(loaded)

    async def set_active(self, video_id: str, is_active: bool) -> Asset | None:
        stmt = (
            update(VideoModel)
            .where(VideoModel.id == video_id)
            .values(is_active=is_active)
            .execution_options(synchronize_session=False)
        )
        await self._session.execute(stmt)
        model = await self._load(video_id)
        return self._to_domain(model) if model else None

    async def title_suggestions(self, pattern: str, limit: int) -> Sequence[str]:
        stmt = (
            select(VideoModel.title)
            .where(VideoModel.is_active.is_(True))
            .where(VideoModel.title.ilike(_like(pattern), escape="\\"))
            .order_by(VideoModel.views.desc())
            .limit(limit)
        )
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def categories_matching(self, pattern: str | None) -> Sequence[str]:
        stmt = select(distinct(VideoModel.category)).where(VideoModel.is_active.is_(True))
        if pattern:
            stmt = stmt.where(VideoModel.category.ilike(_like(pattern), escape="\\"))
        result = await self._session.execute(stmt.order_by(VideoModel.category))
        return list(result.scalars().all())

    async def category_stats(self, limit: int | None = None) -> Sequence[CategoryStat]:
        count = func.count(VideoModel.id)
        stmt = (
            select(VideoModel.category, count, func.coalesce(func.sum(VideoModel.views), 0))
            .where(VideoModel.is_active.is_(True))
            .group_by(VideoModel.category)
            .order_by(count.desc(), VideoModel.category)
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await self._session.execute(stmt)
        return [
            CategoryStat(name=name, count=int(total), total_views=int(views))
            for name, total, views in result.all()
        ]

    async def _load(self, video_id: str) -> VideoModel | None:
        stmt = (
            select(VideoModel)
            .where(VideoModel.id == video_id)
            .options(selectinload(VideoModel.variants))
            .execution_options(populate_existing=True)
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    def _variant_conflict(exc: IntegrityError, video_id: str, variant: VariantCreateInput) -> VariantConflictError:
        # both the storage_key index and the (video_id, quality) constraint are unique
        if "storage_key" in str(exc.orig):
            return VariantConflictError(f"storage key {variant.storage_key} is already in use")
        return VariantConflictError(f"{video_id} already has a {variant.quality} variant")

    @staticmethod
    def _conditions(filters: VideoFilter) -> list:
        conditions: list = [VideoModel.is_active.is_(True)]
        if filters.text:
            pattern = _like(filters.text)
            conditions.append(
                or_(
                    VideoModel.title.ilike(pattern, escape="\\"),
                    VideoModel.description.ilike(pattern, escape="\\"),
                    VideoModel.category.ilike(pattern, escape="\\"),
                )
            )
        if filters.category:
            conditions.append(VideoModel.category == filters.category)
        if filters.category_pattern:
            conditions.append(VideoModel.category.ilike(_like(filters.category_pattern), escape="\\"))
        if filters.min_views is not None:
            conditions.append(VideoModel.views >= filters.min_views)
        if filters.max_views is not None:
            conditions.append(VideoModel.views <= filters.max_views)
        if filters.min_duration is not None:
            conditions.append(VideoModel.duration >= filters.min_duration)
        if filters.max_duration is not None:
            conditions.append(VideoModel.duration <= filters.max_duration)
        return conditions

    @staticmethod
    def _apply_sort(stmt: Select, sort_by: SortField, sort_order: SortOrder) -> Select:
        if sort_by == "relevance":
            return stmt.order_by(VideoModel.views.desc(), VideoModel.upload_date.desc())
        column = {
            "date": VideoModel.upload_date,
            "views": VideoModel.views,
            "title": VideoModel.title,
        }[sort_by]
        ordered = column.asc() if sort_order == "asc" else column.desc()
        return stmt.order_by(ordered, VideoModel.id)

    @staticmethod
    def _to_domain(model: VideoModel) -> Asset:
        return Asset(
            id=str(model.id),
            title=model.title,
            description=model.description or "",
            thumbnail=model.thumbnail or "",
            duration=float(model.duration or 0),
            category=model.category or "general",
            views=int(model.views or 0),
            is_active=bool(model.is_active),
            upload_date=as_utc(model.upload_date),
            created_at=as_utc(model.created_at),
            variants=[
                Variant(
                    quality=variant.quality,
                    storage_key=variant.storage_key,
                    bitrate=variant.bitrate,
                    resolution=variant.resolution,
                )
                for variant in model.variants
            ],
        )
