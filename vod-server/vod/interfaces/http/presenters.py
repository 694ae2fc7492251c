"""Conversions from domain objects to response schemas."""

from vod.modules.catalog import Asset, CatalogPage, sort_variants
from vod.modules.streaming import ManifestResult
from vod.schemas import (
    AdminVariantInfo,
    AdminVideoResponse,
    ManifestQuality,
    ManifestResponse,
    PaginationInfo,
    QualityInfo,
    StreamInfoQuality,
    StreamInfoResponse,
    VideoResponse,
)


def video_response(asset: Asset) -> VideoResponse:
    """Public view of an asset; storage keys are never included."""
    return VideoResponse(
        id=asset.id,
        title=asset.title,
        description=asset.description,
        thumbnail=asset.thumbnail,
        duration=asset.duration,
        category=asset.category,
        views=asset.views,
        upload_date=asset.upload_date,
        created_at=asset.created_at,
        qualities=[
            QualityInfo(quality=variant.quality, bitrate=variant.bitrate, resolution=variant.resolution)
            for variant in sort_variants(asset.variants)
        ],
    )


def admin_video_response(asset: Asset) -> AdminVideoResponse:
    return AdminVideoResponse(
        id=asset.id,
        title=asset.title,
        description=asset.description,
        thumbnail=asset.thumbnail,
        duration=asset.duration,
        category=asset.category,
        views=asset.views,
        is_active=asset.is_active,
        upload_date=asset.upload_date,
        variants=[
            AdminVariantInfo(
                quality=variant.quality,
                bitrate=variant.bitrate,
                resolution=variant.resolution,
                storage_key=variant.storage_key,
            )
            for variant in sort_variants(asset.variants)
        ],
    )


def pagination(page: CatalogPage) -> PaginationInfo:
    return PaginationInfo(
        page=page.page,
        limit=page.limit,
        total=page.total,
        pages=page.pages,
        has_more=page.has_more,
    )


def manifest_response(result: ManifestResult) -> ManifestResponse:
    return ManifestResponse(
        asset_id=result.asset_id,
        title=result.title,
        duration=result.duration,
        qualities=[
            ManifestQuality(quality=entry.quality, bitrate=entry.bitrate, resolution=entry.resolution, url=entry.url)
            for entry in result.qualities
        ],
    )


def stream_info_response(result: ManifestResult) -> StreamInfoResponse:
    return StreamInfoResponse(
        video_id=result.asset_id,
        title=result.title,
        duration=result.duration,
        qualities=[
            StreamInfoQuality(
                quality=entry.quality,
                bitrate=entry.bitrate,
                resolution=entry.resolution,
                url=entry.url,
                storage_key=entry.storage_key or "",
            )
            for entry in result.qualities
        ],
    )
