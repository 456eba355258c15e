"""
Password hashing and session token authentication.
"""
import logging
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional, Dict, Any

import bcrypt
from fastapi import Depends, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import ExpiredSignatureError, JWTError, jwt
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.database import get_async_session
from app.core.errors import AuthError
from app.models.user import User

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CurrentUser:
    """Identity decoded from a verified session token."""
    user_id: int
    email: str


@dataclass(frozen=True)
class PasswordResetToken:
    token: str
    expires_at: datetime


class AuthService:
    """Service for credential hashing and JWT session tokens."""

    def __init__(self, secret: str, algorithm: str = "HS256", token_ttl: timedelta = timedelta(days=7)):
        self.secret = secret
        self.algorithm = algorithm
        self.token_ttl = token_ttl

        if secret == "your-secret-key":
            logger.warning("JWT_SECRET is not configured - using the insecure development default")

    @staticmethod
    def hash_password(password: str) -> str:
        return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")

    @staticmethod
    def verify_password(password: str, hashed_password: str) -> bool:
        try:
            return bcrypt.checkpw(password.encode("utf-8"), hashed_password.encode("utf-8"))
        except ValueError:
            # Malformed stored hash or over-long input
            logger.warning("Password verification failed on malformed input")
            return False

    def create_token(self, user_id: int, email: str) -> str:
        """
        Issue a signed session token.

        Args:
            user_id: The user's primary key
            email: The user's email, embedded for convenience

        Returns:
            Encoded JWT valid for ``token_ttl``
        """
        expire = datetime.utcnow() + self.token_ttl
        payload = {"userId": user_id, "email": email, "exp": expire}
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def verify_token(self, token: str) -> CurrentUser:
        """
        Verify a session token.

        Raises:
            AuthError: 403 if the token is invalid, expired or incomplete
        """
        try:
            payload: Dict[str, Any] = jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except ExpiredSignatureError:
            logger.info("Expired session token provided")
            raise AuthError("Token has expired", status_code=status.HTTP_403_FORBIDDEN)
        except JWTError as e:
            logger.info(f"Invalid session token: {e}")
            raise AuthError("Invalid token", status_code=status.HTTP_403_FORBIDDEN)

        user_id = payload.get("userId")
        if not isinstance(user_id, int):
            raise AuthError("Invalid token", status_code=status.HTTP_403_FORBIDDEN)
        return CurrentUser(user_id=user_id, email=payload.get("email") or "")

    @staticmethod
    def create_reset_token(ttl: timedelta) -> PasswordResetToken:
        return PasswordResetToken(token=secrets.token_hex(32), expires_at=datetime.utcnow() + ttl)


# HTTP Bearer token scheme; missing credentials are reported by get_current_user
security = HTTPBearer(auto_error=False)

# Global auth service instance
_auth_service = None


def get_auth_service() -> AuthService:
    """Get the shared authentication service."""
    global _auth_service
    if _auth_service is None:
        _auth_service = AuthService(
            secret=settings.JWT_SECRET,
            algorithm=settings.JWT_ALGORITHM,
            token_ttl=timedelta(days=settings.ACCESS_TOKEN_EXPIRE_DAYS),
        )
    return _auth_service


# FastAPI dependency for authentication
async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    auth_service: AuthService = Depends(get_auth_service),
    session: AsyncSession = Depends(get_async_session),
) -> CurrentUser:
    """
    FastAPI dependency to get the current authenticated user.

    Raises:
        AuthError: 401 when no bearer token is sent or its user is gone,
            403 when it does not verify
    """
    if credentials is None or not credentials.credentials:
        raise AuthError("Access token missing")
    current_user = auth_service.verify_token(credentials.credentials)

    # Tokens outlive deleted accounts
    if await session.get(User, current_user.user_id) is None:
        raise AuthError("User no longer exists")
    return current_user
