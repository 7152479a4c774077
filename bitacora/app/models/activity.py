# bitacora/app/models/activity.py
from sqlalchemy import JSON, Boolean, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from bitacora.app.db.base import Base, ObjectIdMixin, TimestampMixin, utcnow

CATEGORIES = ("academic", "personal", "professional", "creative", "other")
DIFFICULTIES = ("beginner", "intermediate", "advanced")

KIND_DOCUMENT = "document"
KIND_IMAGE = "image"

MAX_DOCUMENTS = 3
MAX_IMAGES = 5


class Activity(ObjectIdMixin, TimestampMixin, Base):
    __tablename__ = "activities"

    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)

    # Path of the illustration shown next to the activity
    character = Column(String(255), nullable=False, default="/12.png")

    # Absolute http(s) URLs, validated at the API boundary
    links = Column(JSON, nullable=False, default=list)

    user_id = Column(String(24), ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    is_published = Column(Boolean, nullable=False, default=True)
    category = Column(String(32), nullable=False, default="academic", index=True)
    difficulty = Column(String(32), nullable=False, default="beginner")

    # Minutes
    estimated_time = Column(Integer, nullable=True)

    author = relationship("User", lazy="selectin")
    attachments = relationship(
        "ActivityAttachment",
        lazy="selectin",
        cascade="all, delete-orphan",
        order_by="ActivityAttachment.uploaded_at",
    )

    @property
    def documents(self):
        return [a for a in self.attachments if a.kind == KIND_DOCUMENT]

    @property
    def images(self):
        return [a for a in self.attachments if a.kind == KIND_IMAGE]


class ActivityAttachment(ObjectIdMixin, Base):
    """A document or image attached to an activity, stored as a data URI."""
    __tablename__ = "activity_attachments"

    activity_id = Column(String(24), ForeignKey("activities.id", ondelete="CASCADE"), index=True, nullable=False)
    kind = Column(String(16), nullable=False)
    name = Column(String(255), nullable=False)
    data = Column(Text, nullable=False)
    size = Column(Integer, nullable=False)
    mime_type = Column(String(128), nullable=False)
    uploaded_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
