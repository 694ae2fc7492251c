"""Service dependency providers."""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from vod.core.config import Settings, get_settings
from vod.core.container import ApplicationContainer, get_container
from vod.modules.catalog import CatalogService
from vod.modules.otp import OtpService
from vod.modules.storage import BlobStore
from vod.modules.streaming import PlaybackService
from vod.modules.uploads import UploadPolicy, UploadService
from vod.modules.users import UserService

from .database import get_db_session


def get_app_container() -> ApplicationContainer:
    return get_container()


def get_blob_store(container: ApplicationContainer = Depends(get_app_container)) -> BlobStore:
    return container.blob_store


def get_catalog_service(db: AsyncSession = Depends(get_db_session)) -> CatalogService:
    return CatalogService.with_session(db)


def get_user_service(db: AsyncSession = Depends(get_db_session)) -> UserService:
    return UserService.with_session(db)


def get_otp_service(db: AsyncSession = Depends(get_db_session)) -> OtpService:
    return OtpService.with_session(db)


def get_playback_service(
    db: AsyncSession = Depends(get_db_session),
    store: BlobStore = Depends(get_blob_store),
    settings: Settings = Depends(get_settings),
) -> PlaybackService:
    return PlaybackService.with_session(db, store, settings)


def get_upload_service(
    catalog: CatalogService = Depends(get_catalog_service),
    store: BlobStore = Depends(get_blob_store),
    settings: Settings = Depends(get_settings),
) -> UploadService:
    return UploadService(catalog, store, UploadPolicy.from_settings(settings))


__all__ = [
    "get_app_container",
    "get_blob_store",
    "get_catalog_service",
    "get_otp_service",
    "get_playback_service",
    "get_upload_service",
    "get_user_service",
]
