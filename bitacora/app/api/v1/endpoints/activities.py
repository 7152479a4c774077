# bitacora/app/api/v1/endpoints/activities.py
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from bitacora.app.api.deps import (
    character_image_upload,
    document_upload,
    ensure_object_id,
    get_activity_repository,
    get_current_user,
    get_list_filters,
)
from bitacora.app.core.exceptions import BadRequest, NotFound, NotFoundOrUnauthorized
from bitacora.app.db.session import get_db
from bitacora.app.models import ActivityAttachment
from bitacora.app.models.activity import CATEGORIES, KIND_DOCUMENT, KIND_IMAGE, MAX_DOCUMENTS, MAX_IMAGES
from bitacora.app.repositories import ListFilters
from bitacora.app.repositories.interfaces import ActivityStore
from bitacora.app.schemas.activity import ActivityCreate, ActivityResponse, ActivityUpdate, CategoriesEnvelope, Category
from bitacora.app.schemas.common import (
    AttachmentEnvelope,
    AttachmentResponse,
    Envelope,
    MessageEnvelope,
    PageEnvelope,
    Pagination,
)
from bitacora.app.schemas.user import CurrentUser
from bitacora.app.security.upload import AcceptedUpload

logger = logging.getLogger(__name__)

router = APIRouter()


async def _get_owned_or_404(activities: ActivityStore, activity_id: str, owner_id: str):
    activity = await activities.get_owned(ensure_object_id(activity_id, "activity"), owner_id)
    if activity is None:
        raise NotFoundOrUnauthorized("Activity")
    return activity


async def _attach(
        activities: ActivityStore,
        db: AsyncSession,
        activity,
        upload: AcceptedUpload,
        kind: str,
) -> ActivityAttachment:
    attachment = await activities.add_attachment(
        activity,
        ActivityAttachment(
            kind=kind,
            name=upload.filename,
            data=upload.to_data_uri(),
            size=upload.size,
            mime_type=upload.content_type,
        ),
    )
    await db.commit()
    logger.info("%s %s attached to activity %s", kind.capitalize(), attachment.id, activity.id)
    return attachment


@router.get("", response_model=PageEnvelope[ActivityResponse])
async def list_activities(
        filters: ListFilters = Depends(get_list_filters),
        category: Optional[Category] = Query(None),
        activities: ActivityStore = Depends(get_activity_repository),
):
    items, total = await activities.list(filters, category)
    return PageEnvelope[ActivityResponse](
        data=[ActivityResponse.model_validate(activity) for activity in items],
        pagination=Pagination.build(filters.page, filters.limit, total),
    )


@router.get("/categories", response_model=CategoriesEnvelope)
async def list_categories():
    return CategoriesEnvelope(data=list(CATEGORIES))


@router.get("/{activity_id}", response_model=Envelope[ActivityResponse])
async def get_activity(activity_id: str, activities: ActivityStore = Depends(get_activity_repository)):
    activity = await activities.get(ensure_object_id(activity_id, "activity"))
    if activity is None:
        raise NotFound("Activity not found")
    return Envelope[ActivityResponse](data=ActivityResponse.model_validate(activity))


@router.post("", response_model=Envelope[ActivityResponse], status_code=status.HTTP_201_CREATED)
async def create_activity(
        activity_in: ActivityCreate,
        current_user: CurrentUser = Depends(get_current_user),
        activities: ActivityStore = Depends(get_activity_repository),
        db: AsyncSession = Depends(get_db),
):
    create_data = activity_in.model_dump(exclude_none=True)
    activity = await activities.create(current_user.id, create_data)
    await db.commit()
    logger.info("Activity %s created by %s", activity.id, current_user.id)
    return Envelope[ActivityResponse](
        message="Activity created successfully",
        data=ActivityResponse.model_validate(activity),
    )


@router.put("/{activity_id}", response_model=Envelope[ActivityResponse])
async def update_activity(
        activity_id: str,
        activity_in: ActivityUpdate,
        current_user: CurrentUser = Depends(get_current_user),
        activities: ActivityStore = Depends(get_activity_repository),
        db: AsyncSession = Depends(get_db),
):
    activity = await _get_owned_or_404(activities, activity_id, current_user.id)
    activity = await activities.update(activity, activity_in.model_dump(exclude_unset=True, exclude_none=True))
    await db.commit()
    return Envelope[ActivityResponse](
        message="Activity updated successfully",
        data=ActivityResponse.model_validate(activity),
    )


@router.delete("/{activity_id}", response_model=MessageEnvelope)
async def delete_activity(
        activity_id: str,
        current_user: CurrentUser = Depends(get_current_user),
        activities: ActivityStore = Depends(get_activity_repository),
        db: AsyncSession = Depends(get_db),
):
    activity = await _get_owned_or_404(activities, activity_id, current_user.id)
    await activities.delete(activity)
    await db.commit()
    return MessageEnvelope(message="Activity deleted successfully")


@router.post("/{activity_id}/upload-document", response_model=AttachmentEnvelope, status_code=status.HTTP_201_CREATED)
async def upload_document(
        activity_id: str,
        current_user: CurrentUser = Depends(get_current_user),
        upload: AcceptedUpload = Depends(document_upload),
        activities: ActivityStore = Depends(get_activity_repository),
        db: AsyncSession = Depends(get_db),
):
    activity = await _get_owned_or_404(activities, activity_id, current_user.id)
    if len(activity.documents) >= MAX_DOCUMENTS:
        raise BadRequest(f"An activity cannot have more than {MAX_DOCUMENTS} documents")

    attachment = await _attach(activities, db, activity, upload, KIND_DOCUMENT)
    return AttachmentEnvelope(
        message="Document uploaded successfully",
        data=AttachmentResponse.model_validate(attachment),
    )


@router.post("/{activity_id}/upload-image", response_model=AttachmentEnvelope, status_code=status.HTTP_201_CREATED)
async def upload_image(
        activity_id: str,
        current_user: CurrentUser = Depends(get_current_user),
        upload: AcceptedUpload = Depends(character_image_upload),
        activities: ActivityStore = Depends(get_activity_repository),
        db: AsyncSession = Depends(get_db),
):
    activity = await _get_owned_or_404(activities, activity_id, current_user.id)
    if len(activity.images) >= MAX_IMAGES:
        raise BadRequest(f"An activity cannot have more than {MAX_IMAGES} images")

    attachment = await _attach(activities, db, activity, upload, KIND_IMAGE)
    return AttachmentEnvelope(
        message="Image uploaded successfully",
        data=AttachmentResponse.model_validate(attachment),
    )


@router.delete("/{activity_id}/documents/{document_id}", response_model=MessageEnvelope)
async def delete_document(
        activity_id: str,
        document_id: str,
        current_user: CurrentUser = Depends(get_current_user),
        activities: ActivityStore = Depends(get_activity_repository),
        db: AsyncSession = Depends(get_db),
):
    document_id = ensure_object_id(document_id, "document")
    activity = await _get_owned_or_404(activities, activity_id, current_user.id)
    if not await activities.remove_attachment(activity, document_id, KIND_DOCUMENT):
        raise NotFound("Document not found")
    await db.commit()
    return MessageEnvelope(message="Document deleted successfully")


@router.delete("/{activity_id}/images/{image_id}", response_model=MessageEnvelope)
async def delete_image(
        activity_id: str,
        image_id: str,
        current_user: CurrentUser = Depends(get_current_user),
        activities: ActivityStore = Depends(get_activity_repository),
        db: AsyncSession = Depends(get_db),
):
    image_id = ensure_object_id(image_id, "image")
    activity = await _get_owned_or_404(activities, activity_id, current_user.id)
    if not await activities.remove_attachment(activity, image_id, KIND_IMAGE):
        raise NotFound("Image not found")
    await db.commit()
    return MessageEnvelope(message="Image deleted successfully")
