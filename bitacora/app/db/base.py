# bitacora/app/db/base.py
"""
SQLAlchemy declarative base and shared column helpers.

Record ids are ObjectId-shaped strings: 8 hex digits of creation time
followed by 16 random hex digits, so they sort roughly by creation.
"""
import re
import secrets
import time
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, String
from sqlalchemy.orm import DeclarativeBase

OBJECT_ID_PATTERN = re.compile(r"^[0-9a-fA-F]{24}$")


def new_object_id() -> str:
    return f"{int(time.time()):08x}{secrets.token_hex(8)}"


def is_object_id(value: object) -> bool:
    return isinstance(value, str) and bool(OBJECT_ID_PATTERN.match(value))


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """
    Base class for all ORM models.

    Usage:
        class Post(ObjectIdMixin, TimestampMixin, Base):
            __tablename__ = "posts"
            title = Column(String(200), nullable=False)
    """
    pass


class ObjectIdMixin:
    id = Column(String(24), primary_key=True, default=new_object_id)


class TimestampMixin:
    # Python-side defaults keep the values loaded after flush (no lazy refresh)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)


__all__ = [
    "Base",
    "ObjectIdMixin",
    "TimestampMixin",
    "new_object_id",
    "is_object_id",
    "utcnow",
]
