# bitacora/app/repositories/post.py
from typing import Any, Dict, Optional, Sequence, Tuple

from sqlalchemy import func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from bitacora.app.db.utils import apply_dict_updates
from bitacora.app.models import Post, PostAttachment, PostComment, PostLike
from bitacora.app.repositories.interfaces import ListFilters

PROTECTED_FIELDS = {"id", "user_id", "views", "created_at", "updated_at"}


class PostRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    def _filtered(self, stmt, filters: ListFilters):
        if filters.user_id:
            stmt = stmt.where(Post.user_id == filters.user_id)
        if filters.search:
            stmt = stmt.where(
                or_(
                    Post.title.icontains(filters.search, autoescape=True),
                    Post.content.icontains(filters.search, autoescape=True),
                )
            )
        return stmt

    async def list(self, filters: ListFilters) -> Tuple[Sequence[Post], int]:
        """Newest first, one page, plus the unpaginated total."""
        stmt = (
            self._filtered(select(Post), filters)
            .order_by(Post.created_at.desc(), Post.id.desc())
            .offset(filters.offset)
            .limit(filters.limit)
        )
        posts = (await self.session.scalars(stmt)).all()
        total = await self.session.scalar(self._filtered(select(func.count(Post.id)), filters))
        return posts, total or 0

    async def get(self, post_id: str) -> Optional[Post]:
        stmt = select(Post).where(Post.id == post_id).execution_options(populate_existing=True)
        return (await self.session.scalars(stmt)).one_or_none()

    async def get_owned(self, post_id: str, owner_id: str) -> Optional[Post]:
        """Single lookup on id AND owner; someone else's post comes back as None."""
        stmt = select(Post).where(Post.id == post_id, Post.user_id == owner_id)
        return (await self.session.scalars(stmt)).one_or_none()

    async def increment_views(self, post_id: str) -> Optional[Post]:
        # Single UPDATE so concurrent readers don't lose increments
        result = await self.session.execute(
            update(Post)
            .where(Post.id == post_id)
            .values(views=Post.views + 1)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            return None
        await self.session.flush()
        return await self.get(post_id)

    async def create(self, owner_id: str, create_data: Dict[str, Any]) -> Post:
        post = Post(user_id=owner_id, views=0, tags=[], image="")
        apply_dict_updates(post, create_data, PROTECTED_FIELDS)
        self.session.add(post)
        await self.session.flush()
        return await self.get(post.id)

    async def update(self, post: Post, update_data: Dict[str, Any]) -> Post:
        apply_dict_updates(post, update_data, PROTECTED_FIELDS)
        await self.session.flush()
        return await self.get(post.id)

    async def delete(self, post: Post) -> None:
        await self.session.delete(post)
        await self.session.flush()

    async def toggle_like(self, post: Post, user_id: str) -> bool:
        """
        Remove the caller's like if present, otherwise add one.

        Returns True when the post ends up liked by ``user_id``. The
        read-then-write is not atomic against a concurrent toggle by the
        same user; the unique constraint keeps it to one row per user.
        """
        existing = next((like for like in post.likes if like.user_id == user_id), None)
        if existing is not None:
            post.likes.remove(existing)
            liked = False
        else:
            post.likes.append(PostLike(user_id=user_id))
            liked = True
        await self.session.flush()
        return liked

    async def add_comment(self, post: Post, user_id: str, content: str) -> PostComment:
        comment = PostComment(user_id=user_id, content=content)
        post.comments.append(comment)
        await self.session.flush()
        # New rows have no eager-loaded author yet
        await self.session.refresh(comment, ["author"])
        return comment

    async def remove_comment(self, post: Post, comment: PostComment) -> None:
        post.comments.remove(comment)
        await self.session.flush()

    async def add_attachment(self, post: Post, attachment: PostAttachment) -> PostAttachment:
        post.attachments.append(attachment)
        await self.session.flush()
        return attachment

    async def remove_attachment(self, post: Post, attachment_id: str) -> bool:
        attachment = next((a for a in post.attachments if a.id == attachment_id), None)
        if attachment is None:
            return False
        post.attachments.remove(attachment)
        await self.session.flush()
        return True
