"""One-time code exports."""

from .exceptions import InvalidOtpError, InvalidPhoneNumberError, OtpAttemptsExceededError, OtpError
from .models import OtpDispatch, OtpRecord
from .sender import LoggingSmsSender, SmsSender
from .service import OtpService, normalize_phone_number

__all__ = [
    "InvalidOtpError",
    "InvalidPhoneNumberError",
    "LoggingSmsSender",
    "OtpAttemptsExceededError",
    "OtpDispatch",
    "OtpError",
    "OtpRecord",
    "OtpService",
    "SmsSender",
    "normalize_phone_number",
]
