"""Issue and verify phone-number one-time codes."""

from __future__ import annotations

import logging
import re
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from vod.core.config import Settings, get_settings
from vod.core.crypto import hash_code, verify_code

from .exceptions import InvalidOtpError, InvalidPhoneNumberError, OtpAttemptsExceededError
from .models import OtpDispatch
from .repository import OtpRepository
from .sender import LoggingSmsSender, SmsSender

logger = logging.getLogger(__name__)

E164_PATTERN = re.compile(r"^\+[1-9]\d{1,14}$")


def normalize_phone_number(phone_number: str) -> str:
    candidate = re.sub(r"[\s\-()]", "", phone_number or "")
    if not E164_PATTERN.match(candidate):
        raise InvalidPhoneNumberError("Phone number must be in E.164 format, e.g. +15551234567")
    return candidate


def generate_code(length: int) -> str:
    return f"{secrets.randbelow(10 ** length):0{length}d}"


class OtpService:
    def __init__(
        self,
        repository: OtpRepository,
        *,
        sender: Optional[SmsSender] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        self._repository = repository
        self._sender = sender or LoggingSmsSender()
        self._settings = settings or get_settings()

    @classmethod
    def with_session(cls, session: AsyncSession, *, sender: Optional[SmsSender] = None) -> "OtpService":
        from vod.infrastructure.database.repositories.otp_repository import SqlOtpRepository

        return cls(SqlOtpRepository(session), sender=sender)

    async def send_otp(self, phone_number: str) -> OtpDispatch:
        phone_number = normalize_phone_number(phone_number)
        otp = self._settings.otp
        code = generate_code(otp.code_length)
        expires_at = datetime.now(timezone.utc) + timedelta(minutes=otp.expiry_minutes)

        await self._repository.replace_code(phone_number, code_hash=hash_code(code), expires_at=expires_at)
        await self._sender.send(
            phone_number,
            f"Your verification code is {code}. It expires in {otp.expiry_minutes} minutes.",
        )
        logger.info("Issued login code for %s", phone_number)

        return OtpDispatch(
            phone_number=phone_number,
            expires_in_seconds=otp.expiry_minutes * 60,
            code=code if self._settings.expose_otp_code else None,
        )

    async def verify_otp(self, phone_number: str, code: str) -> str:
        """Consume a pending code and return the normalized phone number."""
        phone_number = normalize_phone_number(phone_number)
        record = await self._repository.latest_pending(phone_number, datetime.now(timezone.utc))
        if record is None:
            raise InvalidOtpError("OTP expired or not found")

        if record.attempts >= self._settings.otp.max_attempts:
            logger.warning("Login code for %s locked after %d attempts", phone_number, record.attempts)
            raise OtpAttemptsExceededError("Too many failed attempts. Please request a new OTP")

        if not verify_code((code or "").strip(), record.code_hash):
            await self._repository.increment_attempts(record.id)
            logger.info("Wrong login code for %s (attempt %d)", phone_number, record.attempts + 1)
            raise InvalidOtpError("Invalid OTP")

        await self._repository.mark_verified(record.id)
        logger.info("Login code verified for %s", phone_number)
        return phone_number
