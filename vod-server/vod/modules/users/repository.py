"""Repository protocol for users and sessions."""

from __future__ import annotations

from datetime import datetime
from typing import Protocol, Sequence

from .models import Session, User


class UserRepository(Protocol):
    async def get_by_id(self, user_id: str) -> User | None:
        ...

    async def get_by_phone(self, phone_number: str) -> User | None:
        ...

    async def create_user(self, *, phone_number: str, is_verified: bool, role: str = "user") -> User:
        ...

    async def mark_verified(self, user_id: str) -> None:
        ...

    async def set_role(self, user_id: str, role: str) -> User:
        ...

    async def create_session(
        self,
        *,
        user_id: str,
        session_id: str,
        device_info: str,
        ip_address: str,
    ) -> Session:
        ...

    async def get_session(self, user_id: str, session_id: str) -> Session | None:
        ...

    async def list_sessions(self, user_id: str) -> Sequence[Session]:
        ...

    async def touch_session(self, session_id: str, timestamp: datetime) -> None:
        ...

    async def set_refresh_token(self, session_id: str, token_hash: str, timestamp: datetime) -> None:
        ...

    async def delete_session(self, user_id: str, session_id: str) -> bool:
        ...

    async def delete_all_sessions(self, user_id: str) -> int:
        ...
