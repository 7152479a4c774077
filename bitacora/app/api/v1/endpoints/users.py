# bitacora/app/api/v1/endpoints/users.py
import logging
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from bitacora.app.api.deps import ensure_object_id, get_user_repository, require_admin
from bitacora.app.core.exceptions import BadRequest, NotFound
from bitacora.app.db.session import get_db
from bitacora.app.repositories import UserStats
from bitacora.app.repositories.interfaces import UserStore
from bitacora.app.schemas.common import Envelope
from bitacora.app.schemas.user import CurrentUser, UserResponse, UserStatusUpdate, UserSummary

logger = logging.getLogger(__name__)

router = APIRouter()


def _summary(stats: UserStats) -> UserSummary:
    user = stats.user
    return UserSummary(
        id=user.id,
        name=user.name,
        email=user.email,
        created_at=user.created_at,
        posts_count=stats.posts_count,
        activities_count=stats.activities_count,
    )


@router.get("", response_model=Envelope[List[UserSummary]])
async def list_users(users: UserStore = Depends(get_user_repository)):
    """Directory of active users with their content counts, newest first."""
    rows = await users.list_active_with_stats()
    return Envelope[List[UserSummary]](data=[_summary(row) for row in rows])


@router.get("/{user_id}", response_model=Envelope[UserSummary])
async def get_user(user_id: str, users: UserStore = Depends(get_user_repository)):
    stats = await users.get_active_with_stats(ensure_object_id(user_id, "user"))
    if stats is None:
        raise NotFound("User not found")
    return Envelope[UserSummary](data=_summary(stats))


@router.put("/{user_id}/status", response_model=Envelope[UserResponse])
async def update_user_status(
        user_id: str,
        status_in: UserStatusUpdate,
        admin: CurrentUser = Depends(require_admin),
        users: UserStore = Depends(get_user_repository),
        db: AsyncSession = Depends(get_db),
):
    user_id = ensure_object_id(user_id, "user")
    if user_id == admin.id and not status_in.is_active:
        raise BadRequest("Administrators cannot disable their own account")

    user = await users.get_by_id(user_id)
    if user is None:
        raise NotFound("User not found")

    user = await users.update(user, {"is_active": status_in.is_active})
    await db.commit()
    logger.info("User %s set active=%s by admin %s", user.id, user.is_active, admin.id)
    return Envelope[UserResponse](message="User status updated successfully", data=UserResponse.model_validate(user))
