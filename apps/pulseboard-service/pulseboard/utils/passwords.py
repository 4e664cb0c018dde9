"""
Password hashing and session token utilities.

Responsibilities:
- Hash account passwords with Argon2id and verify them
- Enforce the password policy used by sign-up and password resets
- Generate opaque session and verification tokens
"""
from __future__ import annotations

import re
import secrets
from typing import Optional

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError
from argon2.low_level import Type

_hasher = PasswordHasher(time_cost=2, memory_cost=102400, parallelism=8, hash_len=32, type=Type.ID)

MIN_PASSWORD_LENGTH = 8


def hash_password(password: str) -> str:
    return _hasher.hash(password)


def verify_password(password: str, encoded_hash: Optional[str]) -> bool:
    if not password or not encoded_hash:
        return False
    try:
        return _hasher.verify(encoded_hash, password)
    except (VerificationError, InvalidHashError):
        return False


def password_policy_error(password: Optional[str]) -> Optional[str]:
    """Return a human readable reason the password is rejected, or None."""
    if not password or len(password) < MIN_PASSWORD_LENGTH:
        return f"Password must be at least {MIN_PASSWORD_LENGTH} characters long"
    if not re.search(r"[A-Z]", password):
        return "Password must contain at least one uppercase letter"
    if not re.search(r"[a-z]", password):
        return "Password must contain at least one lowercase letter"
    if not re.search(r"[0-9]", password):
        return "Password must contain at least one number"
    return None


def generate_session_token(length: int = 32) -> str:
    """Return a high-entropy url-safe token for bearer sessions."""
    return secrets.token_urlsafe(length)


def generate_verification_value() -> str:
    return secrets.token_hex(16)
