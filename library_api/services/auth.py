"""
Authentication Service

Turns the Authorization header of an incoming GraphQL request into an
explicit authentication result.

Resolution never fails the request. A missing header, a bad signature,
an expired token or a user that no longer exists all produce an anonymous
AuthResult, and the resolvers that need a user reject it themselves.
"""

import logging
from dataclasses import dataclass
from enum import StrEnum

from sqlalchemy import select
from sqlalchemy.orm import Session

from library_api.models.user import User
from library_api.services.security import verify_token_type

logger = logging.getLogger(__name__)

BEARER_PREFIX = "bearer "


class AnonymousReason(StrEnum):
    """Why a request ended up without a current user."""

    MISSING = "missing"
    INVALID_TOKEN = "invalid_token"
    UNKNOWN_USER = "unknown_user"


@dataclass(frozen=True)
class AuthResult:
    """
    Outcome of authenticating one request.

    Exactly one of user / reason is set.

    Attributes:
        user: The authenticated user, or None
        reason: Why the request is anonymous, or None when authenticated
    """

    user: User | None = None
    reason: AnonymousReason | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    @classmethod
    def authenticated(cls, user: User) -> "AuthResult":
        return cls(user=user)

    @classmethod
    def anonymous(cls, reason: AnonymousReason) -> "AuthResult":
        return cls(reason=reason)


def extract_bearer_token(auth_header: str | None) -> str | None:
    """
    Extract the token from an Authorization header.

    The scheme prefix is matched case-insensitively, so "Bearer x",
    "bearer x" and "BEARER x" all yield "x".

    Args:
        auth_header: Raw header value (may be None)

    Returns:
        The token, or None if the header is absent or not a bearer header
    """
    if not auth_header or not auth_header.lower().startswith(BEARER_PREFIX):
        return None
    token = auth_header[len(BEARER_PREFIX):].strip()
    return token or None


def resolve_auth(db: Session, auth_header: str | None) -> AuthResult:
    """
    Resolve an Authorization header to the current user.

    Args:
        db: Database session
        auth_header: Raw Authorization header value

    Returns:
        AuthResult, authenticated if the token is valid and its user exists
    """
    token = extract_bearer_token(auth_header)
    if token is None:
        return AuthResult.anonymous(AnonymousReason.MISSING)

    payload = verify_token_type(token)
    if payload is None:
        return AuthResult.anonymous(AnonymousReason.INVALID_TOKEN)

    try:
        user_id = int(payload.get("sub"))
    except (TypeError, ValueError):
        logger.warning("Token without a usable subject claim")
        return AuthResult.anonymous(AnonymousReason.INVALID_TOKEN)

    user = db.execute(select(User).where(User.id == user_id)).scalar_one_or_none()

    # A token outliving its user (or issued for a different username) is stale
    if user is None or user.username != payload.get("username"):
        logger.info(f"Token refers to unknown user id={user_id}")
        return AuthResult.anonymous(AnonymousReason.UNKNOWN_USER)

    return AuthResult.authenticated(user)
