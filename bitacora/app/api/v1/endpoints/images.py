# bitacora/app/api/v1/endpoints/images.py
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from bitacora.app.api.deps import (
    character_image_upload,
    ensure_object_id,
    get_current_user,
    get_image_repository,
    get_list_filters,
    get_page_filters,
)
from bitacora.app.core.exceptions import NotFoundOrUnauthorized, ValidationError
from bitacora.app.db.session import get_db
from bitacora.app.repositories import ListFilters
from bitacora.app.repositories.interfaces import ImageStore
from bitacora.app.schemas.common import Envelope, MessageEnvelope, PageEnvelope, Pagination
from bitacora.app.schemas.image import ImageResponse, ImageSummary, ImageUpdate, parse_flag, split_tags
from bitacora.app.schemas.user import CurrentUser
from bitacora.app.security.upload import AcceptedUpload

logger = logging.getLogger(__name__)

router = APIRouter()

MAX_DESCRIPTION_LENGTH = 500


async def _get_owned_or_404(images: ImageStore, image_id: str, owner_id: str):
    image = await images.get_owned(ensure_object_id(image_id, "image"), owner_id)
    if image is None:
        raise NotFoundOrUnauthorized("Image")
    return image


@router.get("/public", response_model=PageEnvelope[ImageSummary])
async def list_public_images(
        filters: ListFilters = Depends(get_list_filters),
        tags: Optional[str] = Query(None, description="Comma-separated, matches any"),
        images: ImageStore = Depends(get_image_repository),
):
    """Public gallery. Payloads are left out; fetch an image by id for its data."""
    items, total = await images.list_public(filters, split_tags(tags))
    return PageEnvelope[ImageSummary](
        data=[ImageSummary.model_validate(image) for image in items],
        pagination=Pagination.build(filters.page, filters.limit, total),
    )


@router.get("", response_model=PageEnvelope[ImageResponse])
async def list_my_images(
        current_user: CurrentUser = Depends(get_current_user),
        filters: ListFilters = Depends(get_page_filters),
        is_public: Optional[bool] = Query(None, alias="isPublic"),
        images: ImageStore = Depends(get_image_repository),
):
    items, total = await images.list_owned(current_user.id, filters, is_public)
    return PageEnvelope[ImageResponse](
        data=[ImageResponse.model_validate(image) for image in items],
        pagination=Pagination.build(filters.page, filters.limit, total),
    )


@router.get("/{image_id}", response_model=Envelope[ImageResponse])
async def get_image(
        image_id: str,
        current_user: CurrentUser = Depends(get_current_user),
        images: ImageStore = Depends(get_image_repository),
):
    image = await _get_owned_or_404(images, image_id, current_user.id)
    return Envelope[ImageResponse](data=ImageResponse.model_validate(image))


@router.post("/upload", response_model=Envelope[ImageSummary], status_code=status.HTTP_201_CREATED)
async def upload_image(
        current_user: CurrentUser = Depends(get_current_user),
        upload: AcceptedUpload = Depends(character_image_upload),
        images: ImageStore = Depends(get_image_repository),
        db: AsyncSession = Depends(get_db),
):
    # Metadata arrives as plain multipart fields next to the file
    description = (upload.fields.get("description") or "").strip()
    if len(description) > MAX_DESCRIPTION_LENGTH:
        raise ValidationError(
            "Invalid input data",
            [{"field": "description", "message": f"At most {MAX_DESCRIPTION_LENGTH} characters"}],
        )

    image = await images.create(
        current_user.id,
        {
            "name": upload.filename,
            "data": upload.to_data_uri(),
            "size": upload.size,
            "mime_type": upload.content_type,
            "description": description,
            "tags": split_tags(upload.fields.get("tags")),
            "is_public": parse_flag(upload.fields.get("isPublic")),
        },
    )
    await db.commit()
    logger.info("Image %s uploaded by %s (%d bytes)", image.id, current_user.id, image.size)
    return Envelope[ImageSummary](message="Image uploaded successfully", data=ImageSummary.model_validate(image))


@router.put("/{image_id}", response_model=Envelope[ImageResponse])
async def update_image(
        image_id: str,
        image_in: ImageUpdate,
        current_user: CurrentUser = Depends(get_current_user),
        images: ImageStore = Depends(get_image_repository),
        db: AsyncSession = Depends(get_db),
):
    image = await _get_owned_or_404(images, image_id, current_user.id)
    image = await images.update(image, image_in.model_dump(exclude_unset=True, exclude_none=True))
    await db.commit()
    return Envelope[ImageResponse](message="Image updated successfully", data=ImageResponse.model_validate(image))


@router.delete("/{image_id}", response_model=MessageEnvelope)
async def delete_image(
        image_id: str,
        current_user: CurrentUser = Depends(get_current_user),
        images: ImageStore = Depends(get_image_repository),
        db: AsyncSession = Depends(get_db),
):
    image = await _get_owned_or_404(images, image_id, current_user.id)
    await images.delete(image)
    await db.commit()
    return MessageEnvelope(message="Image deleted successfully")
