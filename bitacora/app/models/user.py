# bitacora/app/models/user.py
from sqlalchemy import Boolean, Column, DateTime, String, Text

from bitacora.app.db.base import Base, ObjectIdMixin, TimestampMixin

ROLE_USER = "user"
ROLE_ADMIN = "admin"


class User(ObjectIdMixin, TimestampMixin, Base):
    __tablename__ = "users"

    name = Column(String(50), nullable=False)

    # Always stored lowercased and trimmed, so equality is case-insensitive
    email = Column(String(255), unique=True, index=True, nullable=False)

    # bcrypt hash; never leaves the server
    password_hash = Column(String(255), nullable=False)

    role = Column(String(16), nullable=False, default=ROLE_USER)
    is_active = Column(Boolean, nullable=False, default=True)
    last_login = Column(DateTime(timezone=True), nullable=True)
    profile_image = Column(Text, nullable=False, default="")
