"""User, session and access control exports."""

from .exceptions import (
    AccessDeniedError,
    AuthenticationError,
    SessionNotFoundError,
    UserError,
    UserNotFoundError,
)
from .guard import AccessGuard, extract_credential
from .models import AuthTokens, LoginResult, Principal, Session, User, UserProfile
from .service import UserService

__all__ = [
    "AccessDeniedError",
    "AccessGuard",
    "AuthTokens",
    "AuthenticationError",
    "LoginResult",
    "Principal",
    "Session",
    "SessionNotFoundError",
    "User",
    "UserError",
    "UserNotFoundError",
    "UserProfile",
    "UserService",
    "extract_credential",
]
