import logging
from typing import List

from fastapi import APIRouter, Depends, Response, status

from app.api.deps import load_owned
from app.schemas.goal import Goal as GoalSchema, GoalCreate, GoalUpdate
from app.services.auth import CurrentUser, get_current_user
from app.services.storage import DatabaseStorage, get_storage

router = APIRouter()

logger = logging.getLogger(__name__)


@router.get("/", response_model=List[GoalSchema])
@router.get("", response_model=List[GoalSchema])
async def list_goals(
    current_user: CurrentUser = Depends(get_current_user),
    storage: DatabaseStorage = Depends(get_storage),
):
    return await storage.get_user_goals(current_user.user_id)


@router.post("/", response_model=GoalSchema, status_code=status.HTTP_201_CREATED)
@router.post("", response_model=GoalSchema, status_code=status.HTTP_201_CREATED)
async def create_goal(
    payload: GoalCreate,
    current_user: CurrentUser = Depends(get_current_user),
    storage: DatabaseStorage = Depends(get_storage),
):
    return await storage.create_goal(
        user_id=current_user.user_id,
        name=payload.name,
        description=payload.description,
        target_amount=payload.target_amount,
        target_date=payload.target_date,
    )


@router.get("/active", response_model=List[GoalSchema])
async def list_active_goals(
    current_user: CurrentUser = Depends(get_current_user),
    storage: DatabaseStorage = Depends(get_storage),
):
    """Goals not yet funded whose deadline (if any) has not passed."""
    return await storage.get_active_goals(current_user.user_id)


@router.get("/{goal_id}", response_model=GoalSchema)
async def get_goal(
    goal_id: int,
    current_user: CurrentUser = Depends(get_current_user),
    storage: DatabaseStorage = Depends(get_storage),
):
    return await load_owned(storage.get_goal, goal_id, current_user, name="Goal")


@router.patch("/{goal_id}", response_model=GoalSchema)
async def update_goal(
    goal_id: int,
    payload: GoalUpdate,
    current_user: CurrentUser = Depends(get_current_user),
    storage: DatabaseStorage = Depends(get_storage),
):
    """Partial update. ``completed`` is only ever changed here, by the client."""
    goal = await load_owned(storage.get_goal, goal_id, current_user, name="Goal")

    changes = payload.model_dump(exclude_unset=True)
    # name, targetAmount and completed are NOT NULL; null means "leave as is"
    for column in ("name", "target_amount", "completed"):
        if changes.get(column, ...) is None:
            changes.pop(column)

    return await storage.update_goal(goal, **changes)


@router.delete("/{goal_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
async def delete_goal(
    goal_id: int,
    current_user: CurrentUser = Depends(get_current_user),
    storage: DatabaseStorage = Depends(get_storage),
):
    await load_owned(storage.get_goal, goal_id, current_user, name="Goal")
    await storage.delete_goal(goal_id)
    logger.info(f"Deleted goal {goal_id} for user {current_user.user_id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
