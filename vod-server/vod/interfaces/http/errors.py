"""Translation of domain errors into HTTP responses."""

from __future__ import annotations

import logging

from fastapi import HTTPException, status

from vod.modules.catalog import AssetNotFoundError, InvalidVariantError, VariantConflictError
from vod.modules.otp import InvalidOtpError, InvalidPhoneNumberError, OtpAttemptsExceededError
from vod.modules.storage import BlobNotFoundError, StoreUnavailableError
from vod.modules.streaming import MalformedRangeError, RangeNotSatisfiableError
from vod.modules.uploads import UploadRejectedError, UploadTooLargeError
from vod.modules.users import (
    AccessDeniedError,
    AuthenticationError,
    SessionNotFoundError,
    UserNotFoundError,
)

logger = logging.getLogger(__name__)

# first match wins; subclasses precede their bases
_STATUS_MAP: tuple[tuple[type[Exception], int, str | None], ...] = (
    (AssetNotFoundError, status.HTTP_404_NOT_FOUND, "Video not found"),
    (BlobNotFoundError, status.HTTP_404_NOT_FOUND, "Video not found"),
    (UserNotFoundError, status.HTTP_404_NOT_FOUND, "User not found"),
    (SessionNotFoundError, status.HTTP_404_NOT_FOUND, "Session not found"),
    (AuthenticationError, status.HTTP_401_UNAUTHORIZED, None),
    (AccessDeniedError, status.HTTP_403_FORBIDDEN, None),
    (MalformedRangeError, status.HTTP_400_BAD_REQUEST, "Invalid Range header"),
    (RangeNotSatisfiableError, 416, "Range not satisfiable"),
    (StoreUnavailableError, status.HTTP_500_INTERNAL_SERVER_ERROR, "Error streaming video"),
    (VariantConflictError, status.HTTP_409_CONFLICT, None),
    (UploadTooLargeError, 413, None),
    (UploadRejectedError, status.HTTP_400_BAD_REQUEST, None),
    (InvalidVariantError, status.HTTP_400_BAD_REQUEST, None),
    (InvalidPhoneNumberError, status.HTTP_400_BAD_REQUEST, None),
    (OtpAttemptsExceededError, status.HTTP_429_TOO_MANY_REQUESTS, None),
    (InvalidOtpError, status.HTTP_400_BAD_REQUEST, None),
)

DOMAIN_ERRORS: tuple[type[Exception], ...] = tuple(error for error, _, _ in _STATUS_MAP)


def http_error(exc: Exception) -> HTTPException:
    """Build the ``HTTPException`` a router raises for a domain error."""
    for error_type, status_code, detail in _STATUS_MAP:
        if isinstance(exc, error_type):
            break
    else:
        raise TypeError(f"no HTTP mapping for {type(exc).__name__}") from exc

    headers: dict[str, str] | None = None
    if isinstance(exc, RangeNotSatisfiableError):
        headers = {"Content-Range": f"bytes */{exc.length}"}
    elif isinstance(exc, AuthenticationError):
        headers = {"WWW-Authenticate": "Bearer"}
    elif isinstance(exc, StoreUnavailableError):
        logger.error("Blob store failure: %s", exc)

    return HTTPException(status_code=status_code, detail=detail or str(exc), headers=headers)


__all__ = ["DOMAIN_ERRORS", "http_error"]
