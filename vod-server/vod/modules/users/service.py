"""User use cases: phone login, token rotation and session management."""

from __future__ import annotations

import secrets
from datetime import datetime, timezone
from typing import Optional, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from vod.core.crypto import fingerprint_token, token_matches
from vod.core.security import TokenError, create_access_token, create_refresh_token, decode_token

from .exceptions import AuthenticationError, SessionNotFoundError, UserNotFoundError
from .models import AuthTokens, LoginResult, Session, User, UserProfile
from .repository import UserRepository


def generate_session_id() -> str:
    return secrets.token_hex(32)


class UserService:
    """Encapsulates user, session and token use cases."""

    def __init__(self, repository: UserRepository) -> None:
        self._repository = repository

    @classmethod
    def with_session(cls, session: AsyncSession) -> "UserService":
        from vod.infrastructure.database.repositories.user_repository import SqlUserRepository

        return cls(SqlUserRepository(session))

    async def get_by_id(self, user_id: str) -> User | None:
        return await self._repository.get_by_id(user_id)

    async def get_by_phone(self, phone_number: str) -> User | None:
        return await self._repository.get_by_phone(phone_number)

    async def login_verified_phone(
        self,
        phone_number: str,
        *,
        device_info: Optional[str] = None,
        ip_address: Optional[str] = None,
    ) -> LoginResult:
        """Open a new session for a phone number whose OTP was just verified."""
        user = await self._repository.get_by_phone(phone_number)
        is_new_user = user is None
        if user is None:
            user = await self._repository.create_user(phone_number=phone_number, is_verified=True)
        elif not user.is_verified:
            await self._repository.mark_verified(user.id)
            user.is_verified = True

        session = await self._repository.create_session(
            user_id=user.id,
            session_id=generate_session_id(),
            device_info=(device_info or "Unknown Device")[:255],
            ip_address=ip_address or "",
        )
        tokens = await self._issue_tokens(user, session.session_id)
        return LoginResult(user=user, session=session, tokens=tokens, is_new_user=is_new_user)

    async def refresh_tokens(self, refresh_token: str) -> AuthTokens:
        try:
            payload = decode_token(refresh_token, "refresh")
        except TokenError as exc:
            raise AuthenticationError(str(exc)) from exc

        user = await self._repository.get_by_id(payload.user_id)
        if user is None:
            raise AuthenticationError("User not found")
        session = await self._repository.get_session(user.id, payload.session_id)
        if session is None or not token_matches(refresh_token, session.refresh_token_hash):
            raise AuthenticationError("Invalid refresh token")
        return await self._issue_tokens(user, session.session_id)

    async def get_profile(self, user_id: str) -> UserProfile:
        user = await self._repository.get_by_id(user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        sessions = await self._repository.list_sessions(user_id)
        return UserProfile(user=user, active_sessions=len(sessions))

    async def list_sessions(self, user_id: str) -> Sequence[Session]:
        return await self._repository.list_sessions(user_id)

    async def logout(self, user_id: str, session_id: str) -> None:
        if not await self._repository.delete_session(user_id, session_id):
            raise SessionNotFoundError(session_id)

    async def logout_all(self, user_id: str) -> int:
        return await self._repository.delete_all_sessions(user_id)

    async def grant_admin(self, phone_number: str) -> User:
        user = await self._repository.get_by_phone(phone_number)
        if user is None:
            user = await self._repository.create_user(phone_number=phone_number, is_verified=True, role="admin")
            return user
        return await self._repository.set_role(user.id, "admin")

    async def _issue_tokens(self, user: User, session_id: str) -> AuthTokens:
        access_token = create_access_token(user.id, user.phone_number, session_id)
        refresh_token = create_refresh_token(user.id, user.phone_number, session_id)
        await self._repository.set_refresh_token(
            session_id, fingerprint_token(refresh_token), datetime.now(timezone.utc)
        )
        return AuthTokens(access_token=access_token, refresh_token=refresh_token)
