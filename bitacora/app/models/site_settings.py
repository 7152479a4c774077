# bitacora/app/models/site_settings.py
from sqlalchemy import Column, ForeignKey, String

from bitacora.app.db.base import Base, ObjectIdMixin, TimestampMixin

DEFAULT_HERO_TITLE = "Bienvenidos a Mi Mundo"
DEFAULT_HERO_DESCRIPTION = (
    "Un espacio donde comparto mis pensamientos, experiencias y momentos especiales. "
    "Cada historia es una ventana a mi corazón y mis reflexiones sobre la vida."
)


class SiteSettings(ObjectIdMixin, TimestampMixin, Base):
    __tablename__ = "site_settings"

    # One row per user
    user_id = Column(String(24), ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)

    hero_title = Column(String(100), nullable=False, default=DEFAULT_HERO_TITLE)
    hero_description = Column(String(500), nullable=False, default=DEFAULT_HERO_DESCRIPTION)
