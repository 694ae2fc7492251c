"""Public catalog browsing."""
from typing import Optional

from fastapi import APIRouter, Depends, Query

from vod.interfaces.http.deps import get_catalog_service, get_credential, get_playback_service
from vod.interfaces.http.errors import http_error
from vod.interfaces.http.presenters import pagination, stream_info_response, video_response
from vod.modules.catalog import AssetNotFoundError, CatalogService
from vod.modules.streaming import PlaybackService
from vod.modules.users import AccessDeniedError, AuthenticationError
from vod.schemas import StreamInfoResponse, VideoDetailResponse, VideoListResponse

router = APIRouter()


@router.get("", response_model=VideoListResponse, summary="List active videos")
async def list_videos(
    category: Optional[str] = None,
    search: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    catalog: CatalogService = Depends(get_catalog_service),
) -> VideoListResponse:
    result = await catalog.list_videos(category=category, search=search, page=page, limit=limit)
    return VideoListResponse(
        videos=[video_response(asset) for asset in result.items],
        pagination=pagination(result),
    )


@router.get("/{video_id}", response_model=VideoDetailResponse, summary="Video details (counts a view)")
async def get_video(
    video_id: str,
    catalog: CatalogService = Depends(get_catalog_service),
) -> VideoDetailResponse:
    try:
        asset = await catalog.get_video(video_id)
    except AssetNotFoundError as exc:
        raise http_error(exc) from exc
    return VideoDetailResponse(video=video_response(asset))


@router.get("/{video_id}/stream-info", response_model=StreamInfoResponse, summary="Qualities with storage keys")
async def get_stream_info(
    video_id: str,
    credential: Optional[str] = Depends(get_credential),
    playback: PlaybackService = Depends(get_playback_service),
) -> StreamInfoResponse:
    try:
        result = await playback.manifest(credential, video_id, include_storage_keys=True)
    except (AuthenticationError, AccessDeniedError, AssetNotFoundError) as exc:
        raise http_error(exc) from exc
    return stream_info_response(result)
