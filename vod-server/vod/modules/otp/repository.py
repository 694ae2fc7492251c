"""Repository protocol for one-time codes."""

from __future__ import annotations

from datetime import datetime
from typing import Protocol

from .models import OtpRecord


class OtpRepository(Protocol):
    async def replace_code(self, phone_number: str, *, code_hash: str, expires_at: datetime) -> OtpRecord:
        """Delete every earlier code for the number and store a new one."""
        ...

    async def latest_pending(self, phone_number: str, now: datetime) -> OtpRecord | None:
        """Most recent unverified, unexpired code for the number."""
        ...

    async def increment_attempts(self, otp_id: int) -> None:
        ...

    async def mark_verified(self, otp_id: int) -> None:
        ...
