import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from jose import jwt as jose_jwt

from .config import ACCESS_TOKEN_EXPIRE_MINUTES, JWT_ALGORITHM, SECRET_KEY
from .exceptions import ForbiddenError, UnauthorizedError
from .models import ROLE_ADMIN

logger = logging.getLogger(__name__)

# Missing credentials are reported by get_current_user with the error envelope
security = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class CurrentUser:
    """Identity of the caller as asserted by the token"""

    id: int
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN


def create_access_token(data: dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a JWT access token

    Args:
        data: Claims to encode (expects ``user_id`` and ``role``)
        expires_delta: Token lifetime (defaults to ACCESS_TOKEN_EXPIRE_MINUTES)
    """
    to_encode = data.copy()
    expire = datetime.utcnow() + (expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire})
    return jose_jwt.encode(to_encode, SECRET_KEY, algorithm=JWT_ALGORITHM)


def decode_access_token(token: str) -> CurrentUser:
    """Verify a token and extract the caller identity"""
    try:
        payload = jose_jwt.decode(token, SECRET_KEY, algorithms=[JWT_ALGORITHM])
    except JWTError as e:
        logger.warning(f"JWT verification failed: {e}")
        raise UnauthorizedError("Invalid or expired token") from e

    user_id = payload.get("user_id")
    role = payload.get("role")
    if user_id is None or not role:
        logger.error(f"❌ Token missing claims. Available claims: {list(payload.keys())}")
        raise UnauthorizedError("Invalid token claims")

    try:
        return CurrentUser(id=int(user_id), role=str(role))
    except (TypeError, ValueError) as e:
        raise UnauthorizedError("Invalid token claims") from e


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> CurrentUser:
    """Require an authenticated caller"""
    if not credentials:
        raise UnauthorizedError(
            "Not authenticated. Please provide a valid Bearer token in the Authorization header."
        )
    return decode_access_token(credentials.credentials)


async def require_admin(current_user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    """Require a staff caller"""
    if not current_user.is_admin:
        logger.warning(f"⚠️ User {current_user.id} attempted an admin operation")
        raise ForbiddenError("Admin access required")
    return current_user
