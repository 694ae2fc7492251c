"""Domain modules and their public exports."""

from . import storage, catalog, users, otp, streaming, uploads

__all__ = [
    "storage",
    "catalog",
    "users",
    "otp",
    "streaming",
    "uploads",
]
