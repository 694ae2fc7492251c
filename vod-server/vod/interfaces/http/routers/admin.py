"""Administrator endpoints for uploads and catalog maintenance."""
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile, status

from vod.interfaces.http.deps import get_blob_store, get_catalog_service, get_current_admin, get_upload_service
from vod.interfaces.http.errors import http_error
from vod.interfaces.http.presenters import admin_video_response
from vod.modules.catalog import (
    AssetCreateInput,
    AssetNotFoundError,
    CatalogService,
    InvalidVariantError,
    VariantConflictError,
)
from vod.modules.storage import BlobNotFoundError, BlobStore, StoreUnavailableError, probe_blob
from vod.modules.uploads import UploadRejectedError, UploadService
from vod.modules.users import Principal
from vod.schemas import AdminVideoResponse, BlobProbeResponse, UploadVideoResponse, VideoStatusUpdate

router = APIRouter()

_UPLOAD_ERRORS = (
    AssetNotFoundError,
    InvalidVariantError,
    VariantConflictError,
    UploadRejectedError,
    StoreUnavailableError,
)


@router.post(
    "/upload-video",
    response_model=UploadVideoResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Upload a video as a new catalog entry",
)
async def upload_video(
    video: UploadFile = File(...),
    title: str = Form(..., min_length=1, max_length=255),
    description: str = Form(""),
    category: str = Form("general"),
    duration: float = Form(0, ge=0),
    thumbnail: str = Form(""),
    quality: Optional[str] = Form(None),
    _: Principal = Depends(get_current_admin),
    uploads: UploadService = Depends(get_upload_service),
) -> UploadVideoResponse:
    payload = AssetCreateInput(
        title=title.strip(),
        description=description,
        category=category.strip() or "general",
        duration=duration,
        thumbnail=thumbnail,
    )
    try:
        asset = await uploads.upload_video(video, payload, quality=quality)
    except _UPLOAD_ERRORS as exc:
        raise http_error(exc) from exc
    finally:
        await video.close()
    return UploadVideoResponse(message="Video uploaded successfully", video=admin_video_response(asset))


@router.post(
    "/videos/{video_id}/variants",
    response_model=AdminVideoResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Attach another quality to a video",
)
async def add_variant(
    video_id: str,
    video: UploadFile = File(...),
    quality: str = Form(...),
    _: Principal = Depends(get_current_admin),
    uploads: UploadService = Depends(get_upload_service),
) -> AdminVideoResponse:
    try:
        asset = await uploads.add_variant(video_id, video, quality)
    except _UPLOAD_ERRORS as exc:
        raise http_error(exc) from exc
    finally:
        await video.close()
    return admin_video_response(asset)


@router.patch("/videos/{video_id}", response_model=AdminVideoResponse, summary="Activate or hide a video")
async def update_video_status(
    video_id: str,
    payload: VideoStatusUpdate,
    _: Principal = Depends(get_current_admin),
    catalog: CatalogService = Depends(get_catalog_service),
) -> AdminVideoResponse:
    try:
        asset = await catalog.set_active(video_id, payload.is_active)
    except AssetNotFoundError as exc:
        raise http_error(exc) from exc
    return admin_video_response(asset)


@router.get("/blobs/{storage_key}/probe", response_model=BlobProbeResponse, summary="Inspect a blob's file signature")
async def probe_stored_blob(
    storage_key: str,
    _: Principal = Depends(get_current_admin),
    store: BlobStore = Depends(get_blob_store),
) -> BlobProbeResponse:
    try:
        signature = await probe_blob(store, storage_key)
    except (BlobNotFoundError, StoreUnavailableError) as exc:
        raise http_error(exc) from exc
    return BlobProbeResponse(
        key=signature.key,
        length=signature.length,
        content_type=signature.content_type,
        head_hex=signature.head_hex,
        box_type=signature.box_type,
        is_iso_media=signature.is_iso_media,
    )
