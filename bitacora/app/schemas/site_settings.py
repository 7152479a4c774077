# bitacora/app/schemas/site_settings.py
from datetime import datetime
from typing import Optional

from pydantic import Field

from bitacora.app.schemas.common import CamelModel, RequestModel


class SiteSettingsUpdate(RequestModel):
    hero_title: Optional[str] = Field(default=None, max_length=100)
    hero_description: Optional[str] = Field(default=None, max_length=500)


class PublicSiteSettings(CamelModel):
    hero_title: str
    hero_description: str


class SiteSettingsResponse(PublicSiteSettings):
    id: str
    user_id: str
    created_at: datetime
    updated_at: datetime
