# bitacora/app/schemas/common.py
"""
Shared schema plumbing.

JSON on the wire is camelCase (``userId``, ``isPublic``), Python code is
snake_case. Every response is wrapped in an envelope with ``success``.
"""
import math
from datetime import datetime
from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class RequestModel(CamelModel):
    # Strings are trimmed before length checks
    model_config = ConfigDict(str_strip_whitespace=True)


class Pagination(CamelModel):
    page: int
    limit: int
    total: int
    pages: int

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "Pagination":
        return cls(page=page, limit=limit, total=total, pages=math.ceil(total / limit) if limit else 0)


class Envelope(CamelModel, Generic[T]):
    success: bool = True
    message: Optional[str] = None
    data: Optional[T] = None


class PageEnvelope(CamelModel, Generic[T]):
    success: bool = True
    data: List[T] = Field(default_factory=list)
    pagination: Pagination


class MessageEnvelope(CamelModel):
    success: bool = True
    message: str


class AuthorSummary(CamelModel):
    id: str
    name: str
    email: str


class AttachmentResponse(CamelModel):
    id: str
    name: str
    data: str
    size: int
    mime_type: str
    uploaded_at: datetime


class AttachmentEnvelope(CamelModel):
    success: bool = True
    message: str
    data: AttachmentResponse
