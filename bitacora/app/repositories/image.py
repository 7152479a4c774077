# bitacora/app/repositories/image.py
import json
from typing import Any, Dict, List, Optional, Sequence, Tuple

from sqlalchemy import Text, cast, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import defer

from bitacora.app.db.utils import apply_dict_updates
from bitacora.app.models import Image
from bitacora.app.repositories.interfaces import ListFilters

PROTECTED_FIELDS = {"id", "user_id", "data", "size", "mime_type", "name", "created_at", "updated_at"}


def _has_tag(tag: str):
    # Tags are a JSON list; its serialized text contains the quoted tag
    return cast(Image.tags, Text).contains(json.dumps(tag), autoescape=True)


def _matches_search(filters: ListFilters) -> list:
    if not filters.search:
        return []
    return [
        or_(
            Image.name.icontains(filters.search, autoescape=True),
            Image.description.icontains(filters.search, autoescape=True),
        )
    ]


class ImageRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def _page(self, stmt, count_stmt, filters: ListFilters) -> Tuple[Sequence[Image], int]:
        stmt = stmt.order_by(Image.created_at.desc(), Image.id.desc()).offset(filters.offset).limit(filters.limit)
        images = (await self.session.scalars(stmt)).all()
        total = await self.session.scalar(count_stmt)
        return images, total or 0

    async def list_owned(
        self, owner_id: str, filters: ListFilters, is_public: Optional[bool] = None
    ) -> Tuple[Sequence[Image], int]:
        conditions = [Image.user_id == owner_id, *_matches_search(filters)]
        if is_public is not None:
            conditions.append(Image.is_public.is_(is_public))
        return await self._page(
            select(Image).where(*conditions),
            select(func.count(Image.id)).where(*conditions),
            filters,
        )

    async def list_public(
        self, filters: ListFilters, tags: Optional[List[str]] = None
    ) -> Tuple[Sequence[Image], int]:
        conditions = [Image.is_public.is_(True), *_matches_search(filters)]
        if filters.user_id:
            conditions.append(Image.user_id == filters.user_id)
        if tags:
            conditions.append(or_(*[_has_tag(tag) for tag in tags]))
        return await self._page(
            select(Image).options(defer(Image.data)).where(*conditions),
            select(func.count(Image.id)).where(*conditions),
            filters,
        )

    async def get_owned(self, image_id: str, owner_id: str) -> Optional[Image]:
        stmt = select(Image).where(Image.id == image_id, Image.user_id == owner_id)
        return (await self.session.scalars(stmt)).one_or_none()

    async def create(self, owner_id: str, create_data: Dict[str, Any]) -> Image:
        image = Image(user_id=owner_id, **create_data)
        self.session.add(image)
        await self.session.flush()
        return image

    async def update(self, image: Image, update_data: Dict[str, Any]) -> Image:
        apply_dict_updates(image, update_data, PROTECTED_FIELDS)
        await self.session.flush()
        return image

    async def delete(self, image: Image) -> None:
        await self.session.delete(image)
        await self.session.flush()
