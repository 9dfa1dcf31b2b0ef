"""
Security utilities: password hashing and bearer credentials.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional
import logging

import bcrypt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from app.core.exceptions import ForbiddenError, UnauthorizedError
from app.core.settings import settings
from app.models.enums import UserRole
from app.models.user import CurrentUser

logger = logging.getLogger(__name__)

# auto_error=False so a missing header is reported as 401 by us, not by FastAPI
bearer_scheme = HTTPBearer(auto_error=False)


def get_password_hash(password: str) -> str:
    """Hash password with configurable rounds (BCRYPT_ROUNDS)"""
    # Bcrypt has a 72 byte limit
    password_bytes = password.encode("utf-8")[:72]
    hashed = bcrypt.hashpw(password_bytes, bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS))
    return hashed.decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    password_bytes = plain_password.encode("utf-8")[:72]
    try:
        return bcrypt.checkpw(password_bytes, hashed_password.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash
        logger.warning("Stored password hash is malformed")
        return False


def create_access_token(
    user_id: int,
    email: str,
    role: str,
    ward_id: Optional[int],
    expires_delta: Optional[timedelta] = None,
) -> str:
    """
    Issue a signed, time-limited bearer token embedding the identity claims.

    Args:
        user_id: Store id of the user
        email: Login email
        role: One of the UserRole values
        ward_id: Assigned ward (None for users without one)
        expires_delta: Override for the default 24h lifetime

    Returns:
        Encoded JWT string
    """
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(hours=settings.ACCESS_TOKEN_EXPIRE_HOURS))
    payload = {
        "sub": str(user_id),
        "id": user_id,
        "email": email,
        "role": role,
        "ward_id": ward_id,
        "iat": now,
        "exp": expire,
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str) -> Dict[str, Any]:
    """Verify signature and expiry. Raises ForbiddenError on any failure."""
    try:
        return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except JWTError as e:
        logger.info(f"Rejected bearer token: {e}")
        raise ForbiddenError("Invalid token")


def resolve_identity(token: Optional[str]) -> CurrentUser:
    """
    Turn a raw bearer token into identity claims.

    Missing token -> UnauthorizedError (401).
    Bad signature, expired or malformed claims -> ForbiddenError (403).
    """
    if not token:
        raise UnauthorizedError("Not logged in")

    claims = decode_token(token)

    try:
        return CurrentUser(
            id=int(claims["id"]),
            email=claims["email"],
            role=UserRole(claims["role"]),
            ward_id=claims.get("ward_id"),
        )
    except (KeyError, TypeError, ValueError):
        raise ForbiddenError("Invalid token")


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> CurrentUser:
    """FastAPI dependency for bearer-protected endpoints."""
    token = credentials.credentials if credentials else None
    return resolve_identity(token)
