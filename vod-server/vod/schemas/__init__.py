"""Pydantic schemas used across the HTTP surface.

Wire names are camelCase (``assetId``, ``devOtp``); requests accept either
spelling.
"""
from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class MessageResponse(CamelModel):
    success: bool = True
    message: str


class StatusResponse(CamelModel):
    message: str
    version: str
    status: str = "running"
    environment: str


# --- catalog -----------------------------------------------------------------


class QualityInfo(CamelModel):
    quality: str
    bitrate: int
    resolution: str


class VideoResponse(CamelModel):
    id: str
    title: str
    description: str
    thumbnail: str
    duration: float
    category: str
    views: int
    upload_date: Optional[datetime] = None
    created_at: Optional[datetime] = None
    qualities: list[QualityInfo] = Field(default_factory=list)


class PaginationInfo(CamelModel):
    page: int
    limit: int
    total: int
    pages: int
    has_more: bool


class VideoListResponse(CamelModel):
    videos: list[VideoResponse]
    pagination: PaginationInfo


class VideoDetailResponse(CamelModel):
    video: VideoResponse


class SearchFilters(CamelModel):
    min_views: Optional[int] = None
    max_views: Optional[int] = None
    min_duration: Optional[float] = None
    max_duration: Optional[float] = None


class SearchMeta(CamelModel):
    query: str
    category: str
    sort_by: str
    sort_order: str
    filters: SearchFilters


class CategoryCount(CamelModel):
    name: str
    count: int


class SearchResponse(CamelModel):
    success: bool = True
    videos: list[VideoResponse]
    pagination: PaginationInfo
    meta: SearchMeta
    suggestions: list[str]
    related_categories: list[CategoryCount]


class SuggestionItem(CamelModel):
    type: Literal["video", "category"]
    text: str


class SuggestionsResponse(CamelModel):
    success: bool = True
    suggestions: list[SuggestionItem]


class TrendingResponse(CamelModel):
    success: bool = True
    videos: list[VideoResponse]


class CategoryInfo(CamelModel):
    name: str
    count: int
    total_views: int


class CategoriesResponse(CamelModel):
    success: bool = True
    categories: list[CategoryInfo]


# --- playback ----------------------------------------------------------------


class ManifestQuality(QualityInfo):
    url: str


class ManifestResponse(CamelModel):
    asset_id: str
    title: str
    duration: float
    qualities: list[ManifestQuality]


class StreamInfoQuality(ManifestQuality):
    storage_key: str


class StreamInfoResponse(CamelModel):
    video_id: str
    title: str
    duration: float
    qualities: list[StreamInfoQuality]


# --- auth & users --------------------------------------------------------------


class SendOtpRequest(CamelModel):
    phone_number: str = Field(..., min_length=3, max_length=20)


class SendOtpResponse(CamelModel):
    success: bool = True
    message: str = "OTP sent successfully"
    expires_in: int
    dev_otp: Optional[str] = None


class VerifyOtpRequest(CamelModel):
    phone_number: str = Field(..., min_length=3, max_length=20)
    otp: str = Field(..., min_length=4, max_length=10)
    device_info: Optional[str] = Field(default=None, max_length=255)


class RefreshTokenRequest(CamelModel):
    refresh_token: str = Field(..., min_length=1)


class TokenPair(CamelModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class UserSummary(CamelModel):
    id: str
    phone_number: str
    is_verified: bool
    role: str


class SessionSummary(CamelModel):
    session_id: str
    device_info: str


class VerifyOtpResponse(CamelModel):
    success: bool = True
    is_new_user: bool
    user: UserSummary
    tokens: TokenPair
    session: SessionSummary


class RefreshTokenResponse(CamelModel):
    tokens: TokenPair


class UserProfileInfo(UserSummary):
    active_sessions: int
    created_at: Optional[datetime] = None


class ProfileResponse(CamelModel):
    user: UserProfileInfo


class SessionInfo(CamelModel):
    session_id: str
    device_info: str
    ip_address: str
    last_active: Optional[datetime] = None
    current: bool = False


class SessionListResponse(CamelModel):
    sessions: list[SessionInfo]


# --- admin -------------------------------------------------------------------


class AdminVariantInfo(QualityInfo):
    storage_key: str


class AdminVideoResponse(CamelModel):
    id: str
    title: str
    description: str
    thumbnail: str
    duration: float
    category: str
    views: int
    is_active: bool
    upload_date: Optional[datetime] = None
    variants: list[AdminVariantInfo]


class UploadVideoResponse(CamelModel):
    success: bool = True
    message: str
    video: AdminVideoResponse


class VideoStatusUpdate(CamelModel):
    is_active: bool


class BlobProbeResponse(CamelModel):
    key: str
    length: int
    content_type: Optional[str] = None
    head_hex: str
    box_type: Optional[str] = None
    is_iso_media: bool
