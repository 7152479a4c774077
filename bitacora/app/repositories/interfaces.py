# bitacora/app/repositories/interfaces.py
"""
Storage contracts, one per entity.

Endpoints and services are written against these protocols; the SQLAlchemy
classes in this package are the implementation wired in by ``api.deps``.
Every method that writes only flushes; committing is the caller's job.
"""
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol, Sequence, Tuple

from bitacora.app.models import Activity, ActivityAttachment, Image, Post, PostAttachment, PostComment, SiteSettings, User


@dataclass
class ListFilters:
    page: int = 1
    limit: int = 10
    search: Optional[str] = None
    user_id: Optional[str] = None

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


@dataclass
class UserStats:
    user: User
    posts_count: int
    activities_count: int


class UserStore(Protocol):
    async def get_by_id(self, user_id: str) -> Optional[User]: ...

    async def get_by_email(self, email: str) -> Optional[User]: ...

    async def create(self, create_data: Dict[str, Any]) -> User: ...

    async def update(self, user: User, update_data: Dict[str, Any]) -> User: ...

    async def list_active_with_stats(self) -> List[UserStats]: ...

    async def get_active_with_stats(self, user_id: str) -> Optional[UserStats]: ...


class PostStore(Protocol):
    async def list(self, filters: ListFilters) -> Tuple[Sequence[Post], int]: ...

    async def get(self, post_id: str) -> Optional[Post]: ...

    async def get_owned(self, post_id: str, owner_id: str) -> Optional[Post]: ...

    async def increment_views(self, post_id: str) -> Optional[Post]: ...

    async def create(self, owner_id: str, create_data: Dict[str, Any]) -> Post: ...

    async def update(self, post: Post, update_data: Dict[str, Any]) -> Post: ...

    async def delete(self, post: Post) -> None: ...

    async def toggle_like(self, post: Post, user_id: str) -> bool: ...

    async def add_comment(self, post: Post, user_id: str, content: str) -> PostComment: ...

    async def remove_comment(self, post: Post, comment: PostComment) -> None: ...

    async def add_attachment(self, post: Post, attachment: PostAttachment) -> PostAttachment: ...

    async def remove_attachment(self, post: Post, attachment_id: str) -> bool: ...


class ActivityStore(Protocol):
    async def list(self, filters: ListFilters, category: Optional[str] = None) -> Tuple[Sequence[Activity], int]: ...

    async def get(self, activity_id: str) -> Optional[Activity]: ...

    async def get_owned(self, activity_id: str, owner_id: str) -> Optional[Activity]: ...

    async def create(self, owner_id: str, create_data: Dict[str, Any]) -> Activity: ...

    async def update(self, activity: Activity, update_data: Dict[str, Any]) -> Activity: ...

    async def delete(self, activity: Activity) -> None: ...

    async def add_attachment(self, activity: Activity, attachment: ActivityAttachment) -> ActivityAttachment: ...

    async def remove_attachment(self, activity: Activity, attachment_id: str, kind: str) -> bool: ...


class ImageStore(Protocol):
    async def list_owned(self, owner_id: str, filters: ListFilters, is_public: Optional[bool] = None) -> Tuple[Sequence[Image], int]: ...

    async def list_public(self, filters: ListFilters, tags: Optional[List[str]] = None) -> Tuple[Sequence[Image], int]: ...

    async def get_owned(self, image_id: str, owner_id: str) -> Optional[Image]: ...

    async def create(self, owner_id: str, create_data: Dict[str, Any]) -> Image: ...

    async def update(self, image: Image, update_data: Dict[str, Any]) -> Image: ...

    async def delete(self, image: Image) -> None: ...


class SiteSettingsStore(Protocol):
    async def get_for_user(self, user_id: str) -> Optional[SiteSettings]: ...

    async def get_or_create(self, user_id: str) -> SiteSettings: ...

    async def upsert(self, user_id: str, update_data: Dict[str, Any]) -> SiteSettings: ...
