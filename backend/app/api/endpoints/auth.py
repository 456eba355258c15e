import logging
from datetime import timedelta

from fastapi import APIRouter, Depends

from app.core.config import settings
from app.core.errors import AuthError, ConflictError
from app.schemas.auth import AuthResponse, ForgotPasswordRequest, LoginRequest, RegisterRequest
from app.schemas.common import MessageResponse
from app.schemas.user import UserPublic
from app.services.auth import AuthService, PasswordResetToken, get_auth_service
from app.services.storage import DatabaseStorage, get_storage

router = APIRouter()

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"
RESET_REQUESTED = "If an account with that email exists, password reset instructions have been sent"


def notify_password_reset(email: str, reset: PasswordResetToken) -> None:
    """Hand-off point for reset delivery; mail sending is not wired up."""
    logger.info(f"Password reset requested for {email}, token valid until {reset.expires_at.isoformat()}")


@router.post("/register", response_model=AuthResponse)
async def register(
    payload: RegisterRequest,
    storage: DatabaseStorage = Depends(get_storage),
    auth_service: AuthService = Depends(get_auth_service),
):
    """Create an account and return a session token."""
    if await storage.get_user_by_email(payload.email):
        raise ConflictError("A user with this email already exists")

    user = await storage.create_user(
        email=payload.email,
        password_hash=auth_service.hash_password(payload.password),
        first_name=payload.first_name,
        last_name=payload.last_name,
    )
    logger.info(f"Registered user {user.id}")

    return AuthResponse(
        token=auth_service.create_token(user.id, user.email),
        user=UserPublic.model_validate(user),
    )


@router.post("/login", response_model=AuthResponse)
async def login(
    payload: LoginRequest,
    storage: DatabaseStorage = Depends(get_storage),
    auth_service: AuthService = Depends(get_auth_service),
):
    """Exchange email and password for a session token."""
    user = await storage.get_user_by_email(payload.email)
    # Same answer for unknown email and wrong password
    if user is None or not auth_service.verify_password(payload.password, user.password):
        raise AuthError(INVALID_CREDENTIALS)

    return AuthResponse(
        token=auth_service.create_token(user.id, user.email),
        user=UserPublic.model_validate(user),
    )


@router.post("/forgot-password", response_model=MessageResponse)
async def forgot_password(
    payload: ForgotPasswordRequest,
    storage: DatabaseStorage = Depends(get_storage),
    auth_service: AuthService = Depends(get_auth_service),
):
    """Start a password reset. The answer never reveals whether the account exists."""
    email = payload.email.strip().lower()
    user = await storage.get_user_by_email(email)
    if user is not None:
        reset = auth_service.create_reset_token(timedelta(minutes=settings.PASSWORD_RESET_EXPIRE_MINUTES))
        try:
            notify_password_reset(user.email, reset)
        except Exception as e:
            logger.error(f"Failed to dispatch password reset for user {user.id}: {e}")
    return MessageResponse(message=RESET_REQUESTED)
