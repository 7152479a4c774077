# bitacora/app/models/post.py
from sqlalchemy import JSON, Boolean, Column, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from bitacora.app.db.base import Base, ObjectIdMixin, TimestampMixin, utcnow

MAX_IMAGES = 5
MAX_DOCUMENTS = 3


class Post(ObjectIdMixin, TimestampMixin, Base):
    __tablename__ = "posts"

    title = Column(String(200), nullable=False)
    content = Column(Text, nullable=False)

    # Free-form date label shown by the frontend, e.g. "19 de octubre de 2026"
    date = Column(String(100), nullable=False)

    # Cover image, either a URL or a data URI
    image = Column(Text, nullable=False, default="")

    user_id = Column(String(24), ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    is_published = Column(Boolean, nullable=False, default=True)
    tags = Column(JSON, nullable=False, default=list)

    # Incremented on every read by id, no per-viewer dedup
    views = Column(Integer, nullable=False, default=0)

    author = relationship("User", lazy="selectin")
    likes = relationship(
        "PostLike",
        lazy="selectin",
        cascade="all, delete-orphan",
        order_by="PostLike.created_at",
    )
    comments = relationship(
        "PostComment",
        lazy="selectin",
        cascade="all, delete-orphan",
        order_by="PostComment.created_at",
    )
    attachments = relationship(
        "PostAttachment",
        lazy="selectin",
        cascade="all, delete-orphan",
        order_by="PostAttachment.uploaded_at",
    )

    @property
    def images(self):
        return [a for a in self.attachments if a.kind == "image"]

    @property
    def documents(self):
        return [a for a in self.attachments if a.kind == "document"]


class PostLike(Base):
    __tablename__ = "post_likes"
    __table_args__ = (UniqueConstraint("post_id", "user_id", name="uq_post_likes_post_user"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    post_id = Column(String(24), ForeignKey("posts.id", ondelete="CASCADE"), index=True, nullable=False)
    user_id = Column(String(24), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)


class PostComment(ObjectIdMixin, Base):
    __tablename__ = "post_comments"

    post_id = Column(String(24), ForeignKey("posts.id", ondelete="CASCADE"), index=True, nullable=False)
    user_id = Column(String(24), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    content = Column(String(500), nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    author = relationship("User", lazy="selectin")


class PostAttachment(ObjectIdMixin, Base):
    """An image or document attached to a post, stored as a data URI."""
    __tablename__ = "post_attachments"

    post_id = Column(String(24), ForeignKey("posts.id", ondelete="CASCADE"), index=True, nullable=False)

    # "image" | "document"
    kind = Column(String(16), nullable=False)

    name = Column(String(255), nullable=False)
    data = Column(Text, nullable=False)
    size = Column(Integer, nullable=False)
    mime_type = Column(String(128), nullable=False)
    uploaded_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
