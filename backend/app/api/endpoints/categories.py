from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status

from app.api.deps import load_owned
from app.models.transaction import EntryType
from app.schemas.category import Category as CategorySchema, CategoryCreate
from app.services.auth import CurrentUser, get_current_user
from app.services.storage import DatabaseStorage, get_storage

router = APIRouter()


@router.get("/", response_model=List[CategorySchema])
@router.get("", response_model=List[CategorySchema])
async def list_categories(
    type: Optional[EntryType] = Query(None, description="Only income or only expense categories"),
    current_user: CurrentUser = Depends(get_current_user),
    storage: DatabaseStorage = Depends(get_storage),
):
    return await storage.get_user_categories(current_user.user_id, type)


@router.post("/", response_model=CategorySchema)
@router.post("", response_model=CategorySchema)
async def create_category(
    payload: CategoryCreate,
    current_user: CurrentUser = Depends(get_current_user),
    storage: DatabaseStorage = Depends(get_storage),
):
    return await storage.create_category(current_user.user_id, payload.name, payload.type)


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
async def delete_category(
    category_id: int,
    current_user: CurrentUser = Depends(get_current_user),
    storage: DatabaseStorage = Depends(get_storage),
):
    """Delete a category. Transactions keep their category label."""
    await load_owned(storage.get_category, category_id, current_user, name="Category")
    await storage.delete_category(category_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
