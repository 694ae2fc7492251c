"""Manifest and byte-range delivery endpoints."""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request, Response

from vod.interfaces.http.deps import get_credential, get_playback_service
from vod.interfaces.http.errors import http_error
from vod.interfaces.http.presenters import manifest_response
from vod.interfaces.http.responses import BlobStreamingResponse
from vod.modules.catalog import AssetNotFoundError
from vod.modules.storage import BlobNotFoundError, StoreUnavailableError
from vod.modules.streaming import MalformedRangeError, PlaybackService, RangeNotSatisfiableError
from vod.modules.users import AccessDeniedError, AuthenticationError
from vod.schemas import ManifestResponse

logger = logging.getLogger(__name__)

router = APIRouter()

_STREAM_ERRORS = (
    AuthenticationError,
    AccessDeniedError,
    AssetNotFoundError,
    BlobNotFoundError,
    MalformedRangeError,
    RangeNotSatisfiableError,
    StoreUnavailableError,
)


@router.get("/assets/{asset_id}/manifest", response_model=ManifestResponse, summary="Playable qualities of a video")
async def get_manifest(
    asset_id: str,
    credential: Optional[str] = Depends(get_credential),
    playback: PlaybackService = Depends(get_playback_service),
) -> ManifestResponse:
    try:
        result = await playback.manifest(credential, asset_id)
    except (AuthenticationError, AccessDeniedError, AssetNotFoundError) as exc:
        raise http_error(exc) from exc
    return manifest_response(result)


@router.api_route("/stream/{variant_ref}", methods=["GET", "HEAD"], summary="Stream a variant with Range support")
async def stream_variant(
    variant_ref: str,
    request: Request,
    credential: Optional[str] = Depends(get_credential),
    playback: PlaybackService = Depends(get_playback_service),
) -> Response:
    range_header = request.headers.get("range")
    try:
        outcome = await playback.stream(
            credential,
            variant_ref,
            range_header,
            head=request.method == "HEAD",
        )
    except MalformedRangeError as exc:
        logger.debug("Rejected Range header %r for %s", range_header, variant_ref)
        raise http_error(exc) from exc
    except _STREAM_ERRORS as exc:
        raise http_error(exc) from exc

    if outcome.body is None:
        return Response(status_code=outcome.status_code, headers=outcome.headers)
    return BlobStreamingResponse(outcome.body, status_code=outcome.status_code, headers=outcome.headers)
