"""
Internal authentication: password hashing (bcrypt), JWT issuance, and the
admin-user field rules applied on signup and profile updates.
Uses bcrypt directly to avoid passlib/bcrypt 4.x compatibility issues.
"""
import re
from datetime import datetime, timezone, timedelta
from typing import Optional
from uuid import uuid4

import bcrypt
from jose import jwt

from app.config import settings
from app.models import USER_ROLES

# Bcrypt max password length (bytes)
BCRYPT_MAX_PASSWORD_BYTES = 72
DEFAULT_BCRYPT_ROUNDS = 12

# JWT claim names
CLAIM_SUB = "sub"
CLAIM_ROLE = "role"
CLAIM_TYPE = "type"
CLAIM_EXP = "exp"
CLAIM_ISS = "iss"
CLAIM_JTI = "jti"

TYPE_ACCESS = "access"
ISSUER_INTERNAL = "procureqa-internal"

PASSWORD_SPECIAL_CHARACTERS = "!@#$%^&*"
USERNAME_PATTERN = re.compile(r"^[a-zA-Z0-9]{3,20}$")
PHONE_NUMBER_PATTERN = re.compile(r"^\+974\s\d{8}$")
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def _password_bytes(password: str, max_bytes: int = BCRYPT_MAX_PASSWORD_BYTES) -> bytes:
    """Encode password to bytes and truncate to bcrypt limit (72 bytes) to avoid ValueError."""
    raw = password.encode("utf-8")
    return raw[:max_bytes] if len(raw) > max_bytes else raw


def hash_password(password: str) -> str:
    """Return bcrypt hash of password."""
    pw = _password_bytes(password)
    return bcrypt.hashpw(pw, bcrypt.gensalt(rounds=DEFAULT_BCRYPT_ROUNDS)).decode("ascii")


def verify_password(plain_password: str, password_hash: Optional[str]) -> bool:
    """Return True if plain_password matches password_hash. False if hash is None or malformed."""
    if not password_hash:
        return False
    try:
        return bcrypt.checkpw(_password_bytes(plain_password), password_hash.encode("ascii"))
    except ValueError:
        return False


def validate_new_password(password: str) -> Optional[str]:
    """
    Validate a password before hashing it.
    Returns None if valid, or an error message string if invalid.
    Policy: 8-15 characters with at least one uppercase, one lowercase,
    one digit and one of !@#$%^&*.
    """
    if not password or not 8 <= len(password) <= 15:
        return "Password must be between 8 and 15 characters."
    if not any(c.isupper() for c in password):
        return "Password must contain at least one uppercase letter."
    if not any(c.islower() for c in password):
        return "Password must contain at least one lowercase letter."
    if not any(c.isdigit() for c in password):
        return "Password must contain at least one digit."
    if not any(c in PASSWORD_SPECIAL_CHARACTERS for c in password):
        return "Password must contain at least one special character (!@#$%^&*)."
    return None


def validate_username(username: str) -> Optional[str]:
    if not username or not USERNAME_PATTERN.match(username):
        return "Username must be 3-20 characters long and contain only letters and numbers."
    return None


def validate_email(email: str) -> Optional[str]:
    if not email or not EMAIL_PATTERN.match(email):
        return "Invalid email format."
    return None


def validate_role(role: str) -> Optional[str]:
    if role not in USER_ROLES:
        return f"Role must be one of: {', '.join(USER_ROLES)}."
    return None


def validate_phone_number(phone_number: str) -> Optional[str]:
    if not phone_number or not PHONE_NUMBER_PATTERN.match(phone_number):
        return "Phone number must be in the format +974 XXXXXXXX."
    return None


def _internal_encode(
    payload: dict,
    expires_delta: timedelta,
    token_type: str = TYPE_ACCESS,
) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        **payload,
        CLAIM_JTI: str(uuid4()),
        CLAIM_TYPE: token_type,
        CLAIM_ISS: ISSUER_INTERNAL,
        CLAIM_EXP: now + expires_delta,
    }
    return jwt.encode(
        payload,
        settings.SECRET_KEY,
        algorithm=settings.ALGORITHM,
    )


def create_access_token(user_id: str, role: str) -> str:
    """Create access token for an admin-panel user. Verification happens outside this service."""
    payload = {
        CLAIM_SUB: str(user_id),
        CLAIM_ROLE: role,
    }
    delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    return _internal_encode(payload, delta, token_type=TYPE_ACCESS)
