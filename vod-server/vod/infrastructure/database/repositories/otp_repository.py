"""SQLAlchemy implementation of the one-time code repository."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from vod.infrastructure.database.models import OtpCode as OtpCodeModel
from vod.modules.otp.models import OtpRecord
from vod.modules.otp.repository import OtpRepository

from ._time import as_utc


class SqlOtpRepository(OtpRepository):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def replace_code(self, phone_number: str, *, code_hash: str, expires_at: datetime) -> OtpRecord:
        await self._session.execute(delete(OtpCodeModel).where(OtpCodeModel.phone_number == phone_number))
        model = OtpCodeModel(phone_number=phone_number, code_hash=code_hash, expires_at=expires_at)
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_domain(model)

    async def latest_pending(self, phone_number: str, now: datetime) -> OtpRecord | None:
        stmt = (
            select(OtpCodeModel)
            .where(OtpCodeModel.phone_number == phone_number, OtpCodeModel.is_verified.is_(False))
            .order_by(OtpCodeModel.id.desc())
        )
        result = await self._session.execute(stmt)
        # expiry is compared in Python; SQLite stores naive timestamps
        for model in result.scalars():
            record = self._to_domain(model)
            if not record.is_expired(now):
                return record
        return None

    async def increment_attempts(self, otp_id: int) -> None:
        await self._session.execute(
            update(OtpCodeModel)
            .where(OtpCodeModel.id == otp_id)
            .values(attempts=OtpCodeModel.attempts + 1)
        )

    async def mark_verified(self, otp_id: int) -> None:
        await self._session.execute(
            update(OtpCodeModel).where(OtpCodeModel.id == otp_id).values(is_verified=True)
        )

    @staticmethod
    def _to_domain(model: OtpCodeModel) -> OtpRecord:
        return OtpRecord(
            id=int(model.id),
            phone_number=model.phone_number,
            expires_at=as_utc(model.expires_at),
            attempts=int(model.attempts or 0),
            is_verified=bool(model.is_verified),
            created_at=as_utc(model.created_at),
            code_hash=model.code_hash,
        )
