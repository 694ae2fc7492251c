"""Phone-number login with one-time codes."""
from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from vod.interfaces.http.deps import get_db_session, get_otp_service, get_user_service
from vod.interfaces.http.errors import http_error
from vod.modules.otp import InvalidOtpError, InvalidPhoneNumberError, OtpAttemptsExceededError, OtpService
from vod.modules.users import AuthenticationError, UserService
from vod.schemas import (
    RefreshTokenRequest,
    RefreshTokenResponse,
    SendOtpRequest,
    SendOtpResponse,
    SessionSummary,
    TokenPair,
    UserSummary,
    VerifyOtpRequest,
    VerifyOtpResponse,
)

router = APIRouter()


@router.post("/send-otp", response_model=SendOtpResponse, summary="Send a login code")
async def send_otp(
    payload: SendOtpRequest,
    otp_service: OtpService = Depends(get_otp_service),
) -> SendOtpResponse:
    try:
        dispatch = await otp_service.send_otp(payload.phone_number)
    except InvalidPhoneNumberError as exc:
        raise http_error(exc) from exc
    return SendOtpResponse(expires_in=dispatch.expires_in_seconds, dev_otp=dispatch.code)


@router.post("/verify-otp", response_model=VerifyOtpResponse, summary="Verify a login code and open a session")
async def verify_otp(
    payload: VerifyOtpRequest,
    request: Request,
    db: AsyncSession = Depends(get_db_session),
    otp_service: OtpService = Depends(get_otp_service),
    user_service: UserService = Depends(get_user_service),
) -> VerifyOtpResponse:
    try:
        phone_number = await otp_service.verify_otp(payload.phone_number, payload.otp)
    except InvalidOtpError as exc:
        # keep the failed-attempt counter
        await db.commit()
        raise http_error(exc) from exc
    except (InvalidPhoneNumberError, OtpAttemptsExceededError) as exc:
        raise http_error(exc) from exc

    result = await user_service.login_verified_phone(
        phone_number,
        device_info=payload.device_info or request.headers.get("user-agent"),
        ip_address=request.client.host if request.client else None,
    )
    return VerifyOtpResponse(
        is_new_user=result.is_new_user,
        user=UserSummary(
            id=result.user.id,
            phone_number=result.user.phone_number,
            is_verified=result.user.is_verified,
            role=result.user.role,
        ),
        tokens=TokenPair(
            access_token=result.tokens.access_token,
            refresh_token=result.tokens.refresh_token,
        ),
        session=SessionSummary(session_id=result.session.session_id, device_info=result.session.device_info),
    )


@router.post("/refresh-token", response_model=RefreshTokenResponse, summary="Rotate the token pair")
async def refresh_token(
    payload: RefreshTokenRequest,
    user_service: UserService = Depends(get_user_service),
) -> RefreshTokenResponse:
    try:
        tokens = await user_service.refresh_tokens(payload.refresh_token)
    except AuthenticationError as exc:
        raise http_error(exc) from exc
    return RefreshTokenResponse(
        tokens=TokenPair(access_token=tokens.access_token, refresh_token=tokens.refresh_token)
    )
