"""One-time code specific exceptions."""


class OtpError(Exception):
    """Base class for one-time code errors."""


class InvalidPhoneNumberError(OtpError):
    """Raised when a phone number is not in E.164 form."""


class InvalidOtpError(OtpError):
    """Raised when a code is wrong, expired or was never issued."""


class OtpAttemptsExceededError(OtpError):
    """Raised once a code has absorbed the maximum number of failed attempts."""
