# bitacora/app/repositories/activity.py
from typing import Any, Dict, Optional, Sequence, Tuple

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from bitacora.app.db.utils import apply_dict_updates
from bitacora.app.models import Activity, ActivityAttachment
from bitacora.app.repositories.interfaces import ListFilters

PROTECTED_FIELDS = {"id", "user_id", "created_at", "updated_at", "attachments", "documents", "images"}


class ActivityRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    def _filtered(self, stmt, filters: ListFilters, category: Optional[str]):
        if filters.user_id:
            stmt = stmt.where(Activity.user_id == filters.user_id)
        if category:
            stmt = stmt.where(Activity.category == category)
        if filters.search:
            stmt = stmt.where(
                or_(
                    Activity.title.icontains(filters.search, autoescape=True),
                    Activity.description.icontains(filters.search, autoescape=True),
                )
            )
        return stmt

    async def list(self, filters: ListFilters, category: Optional[str] = None) -> Tuple[Sequence[Activity], int]:
        stmt = (
            self._filtered(select(Activity), filters, category)
            .order_by(Activity.created_at.desc(), Activity.id.desc())
            .offset(filters.offset)
            .limit(filters.limit)
        )
        activities = (await self.session.scalars(stmt)).all()
        total = await self.session.scalar(self._filtered(select(func.count(Activity.id)), filters, category))
        return activities, total or 0

    async def get(self, activity_id: str) -> Optional[Activity]:
        stmt = select(Activity).where(Activity.id == activity_id).execution_options(populate_existing=True)
        return (await self.session.scalars(stmt)).one_or_none()

    async def get_owned(self, activity_id: str, owner_id: str) -> Optional[Activity]:
        stmt = select(Activity).where(Activity.id == activity_id, Activity.user_id == owner_id)
        return (await self.session.scalars(stmt)).one_or_none()

    async def create(self, owner_id: str, create_data: Dict[str, Any]) -> Activity:
        activity = Activity(user_id=owner_id, links=[])
        apply_dict_updates(activity, create_data, PROTECTED_FIELDS)
        self.session.add(activity)
        await self.session.flush()
        return await self.get(activity.id)

    async def update(self, activity: Activity, update_data: Dict[str, Any]) -> Activity:
        apply_dict_updates(activity, update_data, PROTECTED_FIELDS)
        await self.session.flush()
        return await self.get(activity.id)

    async def delete(self, activity: Activity) -> None:
        await self.session.delete(activity)
        await self.session.flush()

    async def add_attachment(self, activity: Activity, attachment: ActivityAttachment) -> ActivityAttachment:
        activity.attachments.append(attachment)
        await self.session.flush()
        return attachment

    async def remove_attachment(self, activity: Activity, attachment_id: str, kind: str) -> bool:
        attachment = next(
            (a for a in activity.attachments if a.id == attachment_id and a.kind == kind),
            None,
        )
        if attachment is None:
            return False
        activity.attachments.remove(attachment)
        await self.session.flush()
        return True
