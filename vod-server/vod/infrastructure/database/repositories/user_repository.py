"""SQLAlchemy implementation of the user and session repository."""

from __future__ import annotations

from datetime import datetime
from typing import Sequence

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from vod.infrastructure.database.models import User as UserModel
from vod.infrastructure.database.models import UserSession as UserSessionModel
from vod.modules.users.exceptions import UserNotFoundError
from vod.modules.users.models import Session, User
from vod.modules.users.repository import UserRepository

from ._time import as_utc


class SqlUserRepository(UserRepository):
    """User repository backed by SQLAlchemy models."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_id(self, user_id: str) -> User | None:
        model = await self._session.get(UserModel, user_id)
        return self._to_domain(model) if model else None

    async def get_by_phone(self, phone_number: str) -> User | None:
        stmt = select(UserModel).where(UserModel.phone_number == phone_number)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_domain(model) if model else None

    async def create_user(self, *, phone_number: str, is_verified: bool, role: str = "user") -> User:
        model = UserModel(phone_number=phone_number, is_verified=is_verified, role=role, is_active=True)
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_domain(model)

    async def mark_verified(self, user_id: str) -> None:
        await self._session.execute(
            update(UserModel).where(UserModel.id == user_id).values(is_verified=True)
        )

    async def set_role(self, user_id: str, role: str) -> User:
        model = await self._session.get(UserModel, user_id)
        if model is None:
            raise UserNotFoundError(user_id)
        model.role = role
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_domain(model)

    async def create_session(
        self,
        *,
        user_id: str,
        session_id: str,
        device_info: str,
        ip_address: str,
    ) -> Session:
        model = UserSessionModel(
            user_id=user_id,
            session_id=session_id,
            device_info=device_info,
            ip_address=ip_address,
        )
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._session_to_domain(model)

    async def get_session(self, user_id: str, session_id: str) -> Session | None:
        stmt = select(UserSessionModel).where(
            UserSessionModel.user_id == user_id,
            UserSessionModel.session_id == session_id,
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._session_to_domain(model) if model else None

    async def list_sessions(self, user_id: str) -> Sequence[Session]:
        stmt = (
            select(UserSessionModel)
            .where(UserSessionModel.user_id == user_id)
            .order_by(UserSessionModel.last_active.desc(), UserSessionModel.id.desc())
        )
        result = await self._session.execute(stmt)
        return [self._session_to_domain(model) for model in result.scalars().all()]

    async def touch_session(self, session_id: str, timestamp: datetime) -> None:
        await self._session.execute(
            update(UserSessionModel)
            .where(UserSessionModel.session_id == session_id)
            .values(last_active=timestamp)
        )

    async def set_refresh_token(self, session_id: str, token_hash: str, timestamp: datetime) -> None:
        await self._session.execute(
            update(UserSessionModel)
            .where(UserSessionModel.session_id == session_id)
            .values(refresh_token_hash=token_hash, last_active=timestamp)
        )

    async def delete_session(self, user_id: str, session_id: str) -> bool:
        result = await self._session.execute(
            delete(UserSessionModel).where(
                UserSessionModel.user_id == user_id,
                UserSessionModel.session_id == session_id,
            )
        )
        return bool(result.rowcount)

    async def delete_all_sessions(self, user_id: str) -> int:
        result = await self._session.execute(
            delete(UserSessionModel).where(UserSessionModel.user_id == user_id)
        )
        return int(result.rowcount or 0)

    @staticmethod
    def _to_domain(model: UserModel) -> User:
        return User(
            id=str(model.id),
            phone_number=model.phone_number,
            role=model.role or "user",
            is_verified=bool(model.is_verified),
            is_active=bool(model.is_active),
            created_at=as_utc(model.created_at),
            updated_at=as_utc(model.updated_at),
        )

    @staticmethod
    def _session_to_domain(model: UserSessionModel) -> Session:
        return Session(
            session_id=model.session_id,
            user_id=str(model.user_id),
            device_info=model.device_info or "Unknown Device",
            ip_address=model.ip_address or "",
            last_active=as_utc(model.last_active),
            created_at=as_utc(model.created_at),
            refresh_token_hash=model.refresh_token_hash,
        )
