"""
Security Service

Signs and verifies the bearer tokens handed out by the login mutation,
and checks the shared login password.

Security Features:
==================
1. HS256 JWTs signed with settings.secret_key (python-jose)
2. Every token carries an expiry and a token type
3. Constant-time comparison for the shared password

Usage:
    from library_api.services.security import create_user_token, decode_token

    token = create_user_token(user)
    payload = decode_token(token)  # None if tampered with or expired
"""

import logging
import secrets
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

from jose import JWTError, jwt

from library_api.config import get_settings

if TYPE_CHECKING:
    from library_api.models.user import User

logger = logging.getLogger(__name__)
settings = get_settings()

ALGORITHM = "HS256"
ACCESS_TOKEN_TYPE = "access"


# -------------------------------------------------------------------------
# Shared Password
# -------------------------------------------------------------------------
def check_shared_password(password: str) -> bool:
    """
    Check a login password against the shared password from settings.

    Uses constant-time comparison to prevent timing attacks.

    Args:
        password: Password supplied to the login mutation

    Returns:
        True if it matches, False otherwise
    """
    return secrets.compare_digest(
        password.encode("utf-8"),
        settings.shared_password.encode("utf-8"),
    )


# -------------------------------------------------------------------------
# JWT Tokens
# -------------------------------------------------------------------------
def create_access_token(
    data: dict,
    expires_delta: timedelta | None = None,
) -> str:
    """
    Create a JWT access token.

    Args:
        data: Claims to encode in the token
        expires_delta: Optional custom lifetime
            (defaults to settings.access_token_expire_minutes)

    Returns:
        Encoded JWT token string

    Example:
        >>> token = create_access_token({"sub": "1"})
        >>> token.count(".") == 2  # header.payload.signature
        True
    """
    to_encode = data.copy()

    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.access_token_expire_minutes)

    to_encode.update({
        "exp": datetime.now(UTC) + expires_delta,
        "type": ACCESS_TOKEN_TYPE,
    })

    return jwt.encode(
        to_encode,
        settings.secret_key,
        algorithm=ALGORITHM,
    )


def create_user_token(user: "User", expires_delta: timedelta | None = None) -> str:
    """
    Issue a token identifying a user by id and username.

    Args:
        user: The user who just logged in
        expires_delta: Optional custom lifetime

    Returns:
        Encoded JWT token string
    """
    return create_access_token(
        {"sub": str(user.id), "username": user.username},
        expires_delta=expires_delta,
    )


def decode_token(token: str) -> dict | None:
    """
    Decode and validate a JWT token.

    Signature and expiry are both checked by python-jose.

    Args:
        token: The JWT token string

    Returns:
        Decoded payload if valid, None if invalid or expired
    """
    try:
        return jwt.decode(
            token,
            settings.secret_key,
            algorithms=[ALGORITHM],
        )
    except JWTError as e:
        logger.warning(f"JWT decode error: {e}")
        return None


def verify_token_type(token: str, expected_type: str = ACCESS_TOKEN_TYPE) -> dict | None:
    """
    Decode a token and verify its type.

    Args:
        token: The JWT token string
        expected_type: Expected value of the "type" claim

    Returns:
        Decoded payload if valid and correct type, None otherwise
    """
    payload = decode_token(token)

    if payload is None:
        return None

    if payload.get("type") != expected_type:
        logger.warning(f"Token type mismatch: expected {expected_type}")
        return None

    return payload
