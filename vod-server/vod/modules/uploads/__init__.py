"""Video upload exports."""

from .exceptions import UploadRejectedError, UploadTooLargeError
from .service import UploadPolicy, UploadService, UploadSource

__all__ = [
    "UploadPolicy",
    "UploadRejectedError",
    "UploadService",
    "UploadSource",
    "UploadTooLargeError",
]
