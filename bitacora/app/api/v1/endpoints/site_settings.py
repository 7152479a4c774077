# bitacora/app/api/v1/endpoints/site_settings.py
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from bitacora.app.api.deps import get_current_user, get_site_settings_repository
from bitacora.app.db.base import is_object_id
from bitacora.app.db.session import get_db
from bitacora.app.models.site_settings import DEFAULT_HERO_DESCRIPTION, DEFAULT_HERO_TITLE
from bitacora.app.repositories.interfaces import SiteSettingsStore
from bitacora.app.schemas.common import Envelope
from bitacora.app.schemas.site_settings import PublicSiteSettings, SiteSettingsResponse, SiteSettingsUpdate
from bitacora.app.schemas.user import CurrentUser

router = APIRouter()


@router.get("/public", response_model=Envelope[PublicSiteSettings])
async def get_public_settings(
        user_id: Optional[str] = Query(None, alias="userId"),
        site_settings: SiteSettingsStore = Depends(get_site_settings_repository),
):
    """Never fails: unknown, missing or malformed ids get the defaults."""
    stored = None
    if is_object_id(user_id):
        stored = await site_settings.get_for_user(user_id.lower())
    if stored is None:
        return Envelope[PublicSiteSettings](
            data=PublicSiteSettings(hero_title=DEFAULT_HERO_TITLE, hero_description=DEFAULT_HERO_DESCRIPTION)
        )
    return Envelope[PublicSiteSettings](data=PublicSiteSettings.model_validate(stored))


@router.get("", response_model=Envelope[SiteSettingsResponse])
async def get_settings(
        current_user: CurrentUser = Depends(get_current_user),
        site_settings: SiteSettingsStore = Depends(get_site_settings_repository),
        db: AsyncSession = Depends(get_db),
):
    settings = await site_settings.get_or_create(current_user.id)
    await db.commit()
    return Envelope[SiteSettingsResponse](data=SiteSettingsResponse.model_validate(settings))


@router.put("", response_model=Envelope[SiteSettingsResponse])
async def update_settings(
        settings_in: SiteSettingsUpdate,
        current_user: CurrentUser = Depends(get_current_user),
        site_settings: SiteSettingsStore = Depends(get_site_settings_repository),
        db: AsyncSession = Depends(get_db),
):
    settings = await site_settings.upsert(current_user.id, settings_in.model_dump(exclude_unset=True, exclude_none=True))
    await db.commit()
    return Envelope[SiteSettingsResponse](
        message="Settings updated successfully",
        data=SiteSettingsResponse.model_validate(settings),
    )
