"""Domain models for one-time login codes."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass(slots=True)
class OtpRecord:
    id: int
    phone_number: str
    expires_at: datetime
    attempts: int = 0
    is_verified: bool = False
    created_at: Optional[datetime] = None
    code_hash: str = field(default="", repr=False)

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at


@dataclass(slots=True)
class OtpDispatch:
    """Outcome of issuing a code; ``code`` is only set when it may be shown to the caller."""

    phone_number: str
    expires_in_seconds: int
    code: Optional[str] = None
