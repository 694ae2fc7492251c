"""Credential extraction and per-asset access decisions."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Optional

from vod.core.security import TokenError, decode_token
from vod.modules.catalog import Asset

from .exceptions import AccessDeniedError, AuthenticationError
from .models import Principal
from .repository import UserRepository

logger = logging.getLogger(__name__)

BEARER_PREFIX = "bearer "


def extract_credential(request: Any) -> Optional[str]:
    """Token from ``Authorization: Bearer``, falling back to the ``token`` query parameter.

    The query form exists for players that cannot attach headers, such as a
    plain ``<video src>``.
    """
    authorization = request.headers.get("authorization")
    if authorization and authorization[: len(BEARER_PREFIX)].lower() == BEARER_PREFIX:
        token = authorization[len(BEARER_PREFIX):].strip()
        if token:
            return token
    token = request.query_params.get("token")
    return token.strip() if token and token.strip() else None


class AccessGuard:
    def __init__(self, repository: UserRepository) -> None:
        self._repository = repository

    async def authenticate(self, credential: Optional[str]) -> Principal:
        if not credential:
            raise AuthenticationError("Authentication token required")
        try:
            payload = decode_token(credential, "access")
        except TokenError as exc:
            raise AuthenticationError(str(exc)) from exc

        user = await self._repository.get_by_id(payload.user_id)
        if user is None:
            raise AuthenticationError("User not found")
        session = await self._repository.get_session(user.id, payload.session_id)
        if session is None:
            raise AuthenticationError("Invalid session")

        await self._repository.touch_session(session.session_id, datetime.now(timezone.utc))
        return Principal(user=user, session_id=session.session_id)

    @staticmethod
    def admit(principal: Principal) -> None:
        """Reject accounts that may not play anything.

        Every active, verified account may watch every active asset, so this
        decision never depends on the asset and runs before any catalog lookup.
        """
        if not principal.user.is_active or not principal.user.is_verified:
            logger.info("User %s denied playback", principal.user_id)
            raise AccessDeniedError("Account is not allowed to play videos")

    def check_access(self, principal: Principal, asset: Asset) -> None:
        self.admit(principal)

    async def authorize(self, credential: Optional[str], asset: Asset) -> Principal:
        principal = await self.authenticate(credential)
        self.check_access(principal, asset)
        return principal

    @staticmethod
    def require_admin(principal: Principal) -> None:
        if not principal.user.is_admin():
            raise AccessDeniedError("Administrator role required")
