"""Authentication dependencies shared by protected routers."""

from typing import Optional

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from vod.infrastructure.database.repositories.user_repository import SqlUserRepository
from vod.interfaces.http.errors import http_error
from vod.modules.users import AccessDeniedError, AccessGuard, AuthenticationError, Principal, extract_credential

from .database import get_db_session


def get_credential(request: Request) -> Optional[str]:
    return extract_credential(request)


def get_access_guard(db: AsyncSession = Depends(get_db_session)) -> AccessGuard:
    return AccessGuard(SqlUserRepository(db))


async def get_current_principal(
    credential: Optional[str] = Depends(get_credential),
    guard: AccessGuard = Depends(get_access_guard),
) -> Principal:
    try:
        return await guard.authenticate(credential)
    except AuthenticationError as exc:
        raise http_error(exc) from exc


async def get_current_admin(principal: Principal = Depends(get_current_principal)) -> Principal:
    try:
        AccessGuard.require_admin(principal)
    except AccessDeniedError as exc:
        raise http_error(exc) from exc
    return principal


__all__ = [
    "get_access_guard",
    "get_credential",
    "get_current_admin",
    "get_current_principal",
]
