"""Profile and session management for the signed-in user."""
from fastapi import APIRouter, Depends

from vod.interfaces.http.deps import get_current_principal, get_user_service
from vod.interfaces.http.errors import http_error
from vod.modules.users import Principal, SessionNotFoundError, UserNotFoundError, UserService
from vod.schemas import (
    MessageResponse,
    ProfileResponse,
    SessionInfo,
    SessionListResponse,
    UserProfileInfo,
)

router = APIRouter()


@router.get("/profile", response_model=ProfileResponse, summary="Current user profile")
async def get_profile(
    principal: Principal = Depends(get_current_principal),
    user_service: UserService = Depends(get_user_service),
) -> ProfileResponse:
    try:
        profile = await user_service.get_profile(principal.user_id)
    except UserNotFoundError as exc:
        raise http_error(exc) from exc
    user = profile.user
    return ProfileResponse(
        user=UserProfileInfo(
            id=user.id,
            phone_number=user.phone_number,
            is_verified=user.is_verified,
            role=user.role,
            active_sessions=profile.active_sessions,
            created_at=user.created_at,
        )
    )


@router.get("/sessions", response_model=SessionListResponse, summary="Active sessions")
async def list_sessions(
    principal: Principal = Depends(get_current_principal),
    user_service: UserService = Depends(get_user_service),
) -> SessionListResponse:
    sessions = await user_service.list_sessions(principal.user_id)
    return SessionListResponse(
        sessions=[
            SessionInfo(
                session_id=session.session_id,
                device_info=session.device_info,
                ip_address=session.ip_address,
                last_active=session.last_active,
                current=session.session_id == principal.session_id,
            )
            for session in sessions
        ]
    )


@router.post("/logout", response_model=MessageResponse, summary="End the current session")
async def logout(
    principal: Principal = Depends(get_current_principal),
    user_service: UserService = Depends(get_user_service),
) -> MessageResponse:
    try:
        await user_service.logout(principal.user_id, principal.session_id)
    except SessionNotFoundError as exc:
        raise http_error(exc) from exc
    return MessageResponse(message="Logged out successfully")


@router.post("/logout/{session_id}", response_model=MessageResponse, summary="End one session")
async def logout_session(
    session_id: str,
    principal: Principal = Depends(get_current_principal),
    user_service: UserService = Depends(get_user_service),
) -> MessageResponse:
    try:
        await user_service.logout(principal.user_id, session_id)
    except SessionNotFoundError as exc:
        raise http_error(exc) from exc
    return MessageResponse(message="Session logged out successfully")


@router.post("/logout-all", response_model=MessageResponse, summary="End every session")
async def logout_all(
    principal: Principal = Depends(get_current_principal),
    user_service: UserService = Depends(get_user_service),
) -> MessageResponse:
    await user_service.logout_all(principal.user_id)
    return MessageResponse(message="Logged out from all devices")
