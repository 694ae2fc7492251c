"""Domain models for phone-number users and their sessions."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass(slots=True)
class User:
    id: str
    phone_number: str
    role: str = "user"
    is_verified: bool = False
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def is_admin(self) -> bool:
        return self.role == "admin"


@dataclass(slots=True)
class Session:
    session_id: str
    user_id: str
    device_info: str
    ip_address: str
    last_active: Optional[datetime] = None
    created_at: Optional[datetime] = None
    refresh_token_hash: Optional[str] = field(default=None, repr=False)


@dataclass(slots=True)
class Principal:
    """Authenticated caller: a user bound to one live session."""

    user: User
    session_id: str

    @property
    def user_id(self) -> str:
        return self.user.id


@dataclass(slots=True)
class AuthTokens:
    access_token: str
    refresh_token: str


@dataclass(slots=True)
class LoginResult:
    user: User
    session: Session
    tokens: AuthTokens
    is_new_user: bool


@dataclass(slots=True)
class UserProfile:
    user: User
    active_sessions: int
