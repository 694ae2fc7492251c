"""User and access specific exceptions."""


class UserError(Exception):
    """Base class for user domain errors."""


class UserNotFoundError(UserError):
    """Raised when the requested user cannot be found."""


class SessionNotFoundError(UserError):
    """Raised when a session id does not belong to the user."""


class AuthenticationError(UserError):
    """Raised when a credential is missing, invalid, expired or revoked."""


class AccessDeniedError(UserError):
    """Raised when an authenticated caller may not perform the operation."""
