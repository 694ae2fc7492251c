"""SQLAlchemy-backed repository implementations."""

from .otp_repository import SqlOtpRepository
from .user_repository import SqlUserRepository
from .video_repository import SqlVideoRepository

__all__ = [
    "SqlOtpRepository",
    "SqlUserRepository",
    "SqlVideoRepository",
]
