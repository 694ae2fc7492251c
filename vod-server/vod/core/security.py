"""JWT helpers for access and refresh tokens."""

from __future__ import annotations

import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Literal, Optional

from jose import JWTError, jwt

from vod.core.config import get_settings

TokenType = Literal["access", "refresh"]


class TokenError(Exception):
    """Raised when a token cannot be decoded or carries unexpected claims."""


@dataclass(slots=True, frozen=True)
class TokenPayload:
    user_id: str
    phone_number: str
    session_id: str
    token_type: TokenType


def _signing_key(token_type: TokenType) -> str:
    security = get_settings().security
    return security.secret_key if token_type == "access" else security.refresh_secret_key


def _default_lifetime(token_type: TokenType) -> timedelta:
    security = get_settings().security
    minutes = (
        security.access_token_expire_minutes
        if token_type == "access"
        else security.refresh_token_expire_minutes
    )
    return timedelta(minutes=minutes)


def create_token(
    token_type: TokenType,
    *,
    user_id: str,
    phone_number: str,
    session_id: str,
    expires_delta: Optional[timedelta] = None,
) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        "sub": user_id,
        "phone": phone_number,
        "sid": session_id,
        "type": token_type,
        "jti": secrets.token_hex(8),
        "iat": now,
        "exp": now + (expires_delta or _default_lifetime(token_type)),
    }
    return jwt.encode(payload, _signing_key(token_type), algorithm=get_settings().algorithm)


def create_access_token(user_id: str, phone_number: str, session_id: str, expires_delta: Optional[timedelta] = None) -> str:
    return create_token(
        "access", user_id=user_id, phone_number=phone_number, session_id=session_id, expires_delta=expires_delta
    )


def create_refresh_token(user_id: str, phone_number: str, session_id: str, expires_delta: Optional[timedelta] = None) -> str:
    return create_token(
        "refresh", user_id=user_id, phone_number=phone_number, session_id=session_id, expires_delta=expires_delta
    )


def decode_token(token: str, token_type: TokenType = "access") -> TokenPayload:
    try:
        payload = jwt.decode(token, _signing_key(token_type), algorithms=[get_settings().algorithm])
    except JWTError as exc:
        raise TokenError("Invalid or expired token") from exc

    user_id = payload.get("sub")
    phone_number = payload.get("phone")
    session_id = payload.get("sid")
    if not all([user_id, phone_number, session_id]) or payload.get("type") != token_type:
        raise TokenError("Invalid token claims")
    return TokenPayload(
        user_id=user_id,
        phone_number=phone_number,
        session_id=session_id,
        token_type=token_type,
    )


__all__ = [
    "TokenError",
    "TokenPayload",
    "create_access_token",
    "create_refresh_token",
    "create_token",
    "decode_token",
]
