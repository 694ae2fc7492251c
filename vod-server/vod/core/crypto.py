"""Utilities for hashing and verifying short-lived secrets."""

from __future__ import annotations

import hashlib
import hmac

import bcrypt


def hash_code(code: str) -> str:
    """Hash a one-time code using bcrypt."""
    return bcrypt.hashpw(code.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_code(plain_code: str, hashed_code: str) -> bool:
    """Verify a one-time code against a stored bcrypt hash."""
    try:
        return bcrypt.checkpw(plain_code.encode("utf-8"), hashed_code.encode("utf-8"))
    except ValueError:
        return False


def fingerprint_token(token: str) -> str:
    """SHA-256 digest of a token; JWTs exceed bcrypt's 72 byte input limit."""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def token_matches(token: str, fingerprint: str | None) -> bool:
    if not fingerprint:
        return False
    return hmac.compare_digest(fingerprint_token(token), fingerprint)


__all__ = ["hash_code", "verify_code", "fingerprint_token", "token_matches"]
