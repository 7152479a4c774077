from bitacora.app.models.activity import Activity, ActivityAttachment
from bitacora.app.models.image import Image
from bitacora.app.models.post import Post, PostAttachment, PostComment, PostLike
from bitacora.app.models.site_settings import SiteSettings
from bitacora.app.models.user import User

__all__ = [
    "Activity",
    "ActivityAttachment",
    "Image",
    "Post",
    "PostAttachment",
    "PostComment",
    "PostLike",
    "SiteSettings",
    "User",
]
