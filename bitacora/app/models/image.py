# bitacora/app/models/image.py
from sqlalchemy import JSON, Boolean, Column, ForeignKey, Integer, String, Text

from bitacora.app.db.base import Base, ObjectIdMixin, TimestampMixin


class Image(ObjectIdMixin, TimestampMixin, Base):
    __tablename__ = "images"

    # Original filename
    name = Column(String(255), nullable=False)

    # data:<mime>;base64,<payload>
    data = Column(Text, nullable=False)

    # Byte count of the decoded payload
    size = Column(Integer, nullable=False)
    mime_type = Column(String(128), nullable=False)

    user_id = Column(String(24), ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    is_public = Column(Boolean, nullable=False, default=False, index=True)
    tags = Column(JSON, nullable=False, default=list)
    description = Column(String(500), nullable=False, default="")
