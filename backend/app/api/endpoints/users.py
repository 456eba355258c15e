import logging

from fastapi import APIRouter, Depends, Response, status

from app.core.errors import ConflictError, NotFoundError, ValidationError
from app.schemas.common import MessageResponse
from app.schemas.user import PasswordChange, ProfileUpdate, UserPublic, UserStats
from app.services.auth import AuthService, CurrentUser, get_auth_service, get_current_user
from app.services.storage import DatabaseStorage, get_storage

router = APIRouter()

logger = logging.getLogger(__name__)


async def _load_user(storage: DatabaseStorage, current_user: CurrentUser):
    user = await storage.get_user(current_user.user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


@router.get("/profile", response_model=UserPublic)
async def get_profile(
    current_user: CurrentUser = Depends(get_current_user),
    storage: DatabaseStorage = Depends(get_storage),
):
    return await _load_user(storage, current_user)


@router.patch("/profile", response_model=UserPublic)
async def update_profile(
    payload: ProfileUpdate,
    current_user: CurrentUser = Depends(get_current_user),
    storage: DatabaseStorage = Depends(get_storage),
):
    """Update name and/or email; only the fields sent are changed."""
    user = await _load_user(storage, current_user)
    changes = payload.model_dump(exclude_unset=True, exclude_none=True)

    if "email" in changes and changes["email"] != user.email:
        existing = await storage.get_user_by_email(changes["email"])
        if existing is not None and existing.id != user.id:
            raise ConflictError("A user with this email already exists")

    return await storage.update_user(user, **changes)


@router.patch("/password", response_model=MessageResponse)
async def change_password(
    payload: PasswordChange,
    current_user: CurrentUser = Depends(get_current_user),
    storage: DatabaseStorage = Depends(get_storage),
    auth_service: AuthService = Depends(get_auth_service),
):
    user = await _load_user(storage, current_user)
    if not auth_service.verify_password(payload.current_password, user.password):
        raise ValidationError("Current password is incorrect")

    await storage.update_user(user, password=auth_service.hash_password(payload.new_password))
    logger.info(f"Password changed for user {user.id}")
    return MessageResponse(message="Password changed successfully")


@router.get("/stats", response_model=UserStats)
async def get_user_stats(
    current_user: CurrentUser = Depends(get_current_user),
    storage: DatabaseStorage = Depends(get_storage),
):
    user = await _load_user(storage, current_user)
    return await storage.get_user_stats(user)


@router.delete("", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
async def delete_account(
    current_user: CurrentUser = Depends(get_current_user),
    storage: DatabaseStorage = Depends(get_storage),
):
    """Delete the caller's account together with their transactions, categories and goals."""
    await storage.delete_user(current_user.user_id)
    logger.info(f"Deleted user {current_user.user_id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
