# bitacora/app/api/v1/endpoints/posts.py
import logging
from datetime import date

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from bitacora.app.api.deps import (
    ensure_object_id,
    general_upload,
    get_current_user,
    get_list_filters,
    get_post_repository,
)
from bitacora.app.core.exceptions import BadRequest, Forbidden, NotFound, NotFoundOrUnauthorized
from bitacora.app.db.session import get_db
from bitacora.app.models import PostAttachment
from bitacora.app.models.post import MAX_DOCUMENTS, MAX_IMAGES
from bitacora.app.repositories import ListFilters
from bitacora.app.repositories.interfaces import PostStore
from bitacora.app.schemas.common import (
    AttachmentEnvelope,
    AttachmentResponse,
    Envelope,
    MessageEnvelope,
    PageEnvelope,
    Pagination,
)
from bitacora.app.schemas.post import (
    CommentCreate,
    CommentResponse,
    CommentsEnvelope,
    LikeToggleResponse,
    PostCreate,
    PostResponse,
    PostUpdate,
    long_date_label,
)
from bitacora.app.schemas.user import CurrentUser
from bitacora.app.security.upload import AcceptedUpload

logger = logging.getLogger(__name__)

router = APIRouter()


async def _get_post_or_404(posts: PostStore, post_id: str):
    post = await posts.get(ensure_object_id(post_id, "post"))
    if post is None:
        raise NotFound("Post not found")
    return post


async def _get_owned_or_404(posts: PostStore, post_id: str, owner_id: str):
    post = await posts.get_owned(ensure_object_id(post_id, "post"), owner_id)
    if post is None:
        raise NotFoundOrUnauthorized("Post")
    return post


@router.get("", response_model=PageEnvelope[PostResponse])
async def list_posts(
        filters: ListFilters = Depends(get_list_filters),
        posts: PostStore = Depends(get_post_repository),
):
    items, total = await posts.list(filters)
    return PageEnvelope[PostResponse](
        data=[PostResponse.model_validate(post) for post in items],
        pagination=Pagination.build(filters.page, filters.limit, total),
    )


@router.get("/{post_id}", response_model=Envelope[PostResponse])
async def get_post(
        post_id: str,
        posts: PostStore = Depends(get_post_repository),
        db: AsyncSession = Depends(get_db),
):
    # Every read counts as a view
    post = await posts.increment_views(ensure_object_id(post_id, "post"))
    if post is None:
        raise NotFound("Post not found")
    await db.commit()
    return Envelope[PostResponse](data=PostResponse.model_validate(post))


@router.post("", response_model=Envelope[PostResponse], status_code=status.HTTP_201_CREATED)
async def create_post(
        post_in: PostCreate,
        current_user: CurrentUser = Depends(get_current_user),
        posts: PostStore = Depends(get_post_repository),
        db: AsyncSession = Depends(get_db),
):
    create_data = post_in.model_dump()
    create_data["date"] = post_in.date or long_date_label(date.today())
    create_data["image"] = post_in.image or ""
    post = await posts.create(current_user.id, create_data)
    await db.commit()
    logger.info("Post %s created by %s", post.id, current_user.id)
    return Envelope[PostResponse](message="Post created successfully", data=PostResponse.model_validate(post))


@router.put("/{post_id}", response_model=Envelope[PostResponse])
async def update_post(
        post_id: str,
        post_in: PostUpdate,
        current_user: CurrentUser = Depends(get_current_user),
        posts: PostStore = Depends(get_post_repository),
        db: AsyncSession = Depends(get_db),
):
    post = await _get_owned_or_404(posts, post_id, current_user.id)
    post = await posts.update(post, post_in.model_dump(exclude_unset=True, exclude_none=True))
    await db.commit()
    return Envelope[PostResponse](message="Post updated successfully", data=PostResponse.model_validate(post))


@router.delete("/{post_id}", response_model=MessageEnvelope)
async def delete_post(
        post_id: str,
        current_user: CurrentUser = Depends(get_current_user),
        posts: PostStore = Depends(get_post_repository),
        db: AsyncSession = Depends(get_db),
):
    post = await _get_owned_or_404(posts, post_id, current_user.id)
    await posts.delete(post)
    await db.commit()
    logger.info("Post %s deleted by %s", post_id, current_user.id)
    return MessageEnvelope(message="Post deleted successfully")


@router.post("/{post_id}/like", response_model=LikeToggleResponse)
async def toggle_like(
        post_id: str,
        current_user: CurrentUser = Depends(get_current_user),
        posts: PostStore = Depends(get_post_repository),
        db: AsyncSession = Depends(get_db),
):
    post = await _get_post_or_404(posts, post_id)
    liked = await posts.toggle_like(post, current_user.id)
    await db.commit()
    return LikeToggleResponse(message="Like updated successfully", liked=liked, likes_count=len(post.likes))


@router.post("/{post_id}/comments", response_model=CommentsEnvelope, status_code=status.HTTP_201_CREATED)
async def add_comment(
        post_id: str,
        comment_in: CommentCreate,
        current_user: CurrentUser = Depends(get_current_user),
        posts: PostStore = Depends(get_post_repository),
        db: AsyncSession = Depends(get_db),
):
    post = await _get_post_or_404(posts, post_id)
    await posts.add_comment(post, current_user.id, comment_in.content)
    await db.commit()
    return CommentsEnvelope(
        message="Comment added successfully",
        data=[CommentResponse.model_validate(comment) for comment in post.comments],
    )


@router.delete("/{post_id}/comments/{comment_id}", response_model=MessageEnvelope)
async def delete_comment(
        post_id: str,
        comment_id: str,
        current_user: CurrentUser = Depends(get_current_user),
        posts: PostStore = Depends(get_post_repository),
        db: AsyncSession = Depends(get_db),
):
    comment_id = ensure_object_id(comment_id, "comment")
    post = await _get_post_or_404(posts, post_id)

    comment = next((c for c in post.comments if c.id == comment_id), None)
    if comment is None:
        raise NotFound("Comment not found")

    # The comment's author and the post's owner may delete it
    if current_user.id not in (comment.user_id, post.user_id):
        raise Forbidden("Not authorized to delete this comment")

    await posts.remove_comment(post, comment)
    await db.commit()
    return MessageEnvelope(message="Comment deleted successfully")


@router.post("/{post_id}/attachments", response_model=AttachmentEnvelope, status_code=status.HTTP_201_CREATED)
async def upload_attachment(
        post_id: str,
        current_user: CurrentUser = Depends(get_current_user),
        upload: AcceptedUpload = Depends(general_upload),
        posts: PostStore = Depends(get_post_repository),
        db: AsyncSession = Depends(get_db),
):
    """Attach an image or a document to a post; the MIME type decides which."""
    post = await _get_owned_or_404(posts, post_id, current_user.id)

    kind = "image" if upload.content_type.startswith("image/") else "document"
    if kind == "image" and len(post.images) >= MAX_IMAGES:
        raise BadRequest(f"A post cannot have more than {MAX_IMAGES} images")
    if kind == "document" and len(post.documents) >= MAX_DOCUMENTS:
        raise BadRequest(f"A post cannot have more than {MAX_DOCUMENTS} documents")

    attachment = await posts.add_attachment(
        post,
        PostAttachment(
            kind=kind,
            name=upload.filename,
            data=upload.to_data_uri(),
            size=upload.size,
            mime_type=upload.content_type,
        ),
    )
    await db.commit()
    return AttachmentEnvelope(
        message=f"{kind.capitalize()} uploaded successfully",
        data=AttachmentResponse.model_validate(attachment),
    )


@router.delete("/{post_id}/attachments/{attachment_id}", response_model=MessageEnvelope)
async def delete_attachment(
        post_id: str,
        attachment_id: str,
        current_user: CurrentUser = Depends(get_current_user),
        posts: PostStore = Depends(get_post_repository),
        db: AsyncSession = Depends(get_db),
):
    attachment_id = ensure_object_id(attachment_id, "attachment")
    post = await _get_owned_or_404(posts, post_id, current_user.id)
    if not await posts.remove_attachment(post, attachment_id):
        raise NotFound("Attachment not found")
    await db.commit()
    return MessageEnvelope(message="Attachment deleted successfully")
