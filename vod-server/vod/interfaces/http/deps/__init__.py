"""Reusable FastAPI dependencies."""

from .auth import get_access_guard, get_credential, get_current_admin, get_current_principal
from .database import get_db_session
from .services import (
    get_app_container,
    get_blob_store,
    get_catalog_service,
    get_otp_service,
    get_playback_service,
    get_upload_service,
    get_user_service,
)

__all__ = [
    "get_access_guard",
    "get_app_container",
    "get_blob_store",
    "get_catalog_service",
    "get_credential",
    "get_current_admin",
    "get_current_principal",
    "get_db_session",
    "get_otp_service",
    "get_playback_service",
    "get_upload_service",
    "get_user_service",
]
