from .activity import ActivityRepository
from .image import ImageRepository
from .interfaces import ListFilters, UserStats
from .post import PostRepository
from .site_settings import SiteSettingsRepository
from .user import UserRepository

__all__ = [
    "ActivityRepository",
    "ImageRepository",
    "ListFilters",
    "PostRepository",
    "SiteSettingsRepository",
    "UserRepository",
    "UserStats",
]
