# bitacora/app/repositories/site_settings.py
from typing import Any, Dict, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from bitacora.app.db.utils import apply_dict_updates
from bitacora.app.models import SiteSettings


class SiteSettingsRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_for_user(self, user_id: str) -> Optional[SiteSettings]:
        stmt = select(SiteSettings).where(SiteSettings.user_id == user_id)
        return (await self.session.scalars(stmt)).one_or_none()

    async def get_or_create(self, user_id: str) -> SiteSettings:
        """Settings rows are created lazily, with defaults, on first access."""
        settings = await self.get_for_user(user_id)
        if settings is None:
            settings = SiteSettings(user_id=user_id)
            self.session.add(settings)
            await self.session.flush()
        return settings

    async def upsert(self, user_id: str, update_data: Dict[str, Any]) -> SiteSettings:
        settings = await self.get_or_create(user_id)
        apply_dict_updates(settings, update_data, {"id", "user_id", "created_at", "updated_at"})
        await self.session.flush()
        return settings
