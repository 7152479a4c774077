# bitacora/app/repositories/user.py
from typing import Any, Dict, List, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from bitacora.app.db.utils import apply_dict_updates
from bitacora.app.models import Activity, Post, User
from bitacora.app.repositories.interfaces import UserStats

PROTECTED_FIELDS = {"id", "password_hash", "created_at", "updated_at"}


class UserRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, user_id: str) -> Optional[User]:
        return await self.session.get(User, user_id)

    async def get_by_email(self, email: str) -> Optional[User]:
        """Emails are stored lowercased, so the lookup key is lowercased too."""
        stmt = select(User).where(User.email == email.strip().lower())
        return (await self.session.scalars(stmt)).one_or_none()

    async def create(self, create_data: Dict[str, Any]) -> User:
        user = User()
        apply_dict_updates(user, create_data, {"id", "created_at", "updated_at"})
        self.session.add(user)
        await self.session.flush()
        return user

    async def update(self, user: User, update_data: Dict[str, Any]) -> User:
        apply_dict_updates(user, update_data, PROTECTED_FIELDS)
        await self.session.flush()
        return user

    def _stats_query(self):
        posts_count = (
            select(func.count(Post.id)).where(Post.user_id == User.id).correlate(User).scalar_subquery()
        )
        activities_count = (
            select(func.count(Activity.id)).where(Activity.user_id == User.id).correlate(User).scalar_subquery()
        )
        return select(User, posts_count, activities_count).where(User.is_active.is_(True))

    async def list_active_with_stats(self) -> List[UserStats]:
        stmt = self._stats_query().order_by(User.created_at.desc())
        rows = (await self.session.execute(stmt)).all()
        return [UserStats(user, posts, activities) for user, posts, activities in rows]

    async def get_active_with_stats(self, user_id: str) -> Optional[UserStats]:
        stmt = self._stats_query().where(User.id == user_id)
        row = (await self.session.execute(stmt)).first()
        if row is None:
            return None
        user, posts, activities = row
        return UserStats(user, posts, activities)
