"""
Shared route dependencies and the ownership guard.
"""
from operator import attrgetter
from typing import Any, Awaitable, Callable, Optional, TypeVar

from app.core.errors import ForbiddenError, NotFoundError
from app.services.auth import CurrentUser

T = TypeVar("T")


async def load_owned(
    loader: Callable[[int], Awaitable[Optional[T]]],
    entity_id: int,
    current_user: CurrentUser,
    *,
    owner_of: Callable[[T], Any] = attrgetter("user_id"),
    name: str = "Resource",
) -> T:
    """
    Load an entity and make sure the caller owns it.

    Raises:
        NotFoundError: the loader found nothing
        ForbiddenError: the entity belongs to another user
    """
    entity = await loader(entity_id)
    if entity is None:
        raise NotFoundError(f"{name} not found")
    if owner_of(entity) != current_user.user_id:
        raise ForbiddenError("Access denied")
    return entity
