# bitacora/app/schemas/post.py
from datetime import date, datetime
from typing import List, Optional

from pydantic import Field, computed_field, field_validator

from bitacora.app.schemas.common import AttachmentResponse, AuthorSummary, CamelModel, RequestModel


def normalize_tags(tags: Optional[List[str]]) -> Optional[List[str]]:
    """Trim, drop blanks and de-duplicate, keeping first occurrence order."""
    if tags is None:
        return None
    seen = []
    for tag in tags:
        tag = tag.strip()
        if tag and tag not in seen:
            seen.append(tag)
    return seen


class PostCreate(RequestModel):
    title: str = Field(..., min_length=3, max_length=200)
    content: str = Field(..., min_length=10, max_length=5000)
    date: Optional[str] = Field(default=None, max_length=100)
    image: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    is_published: bool = True

    @field_validator("tags")
    @classmethod
    def clean_tags(cls, value):
        return normalize_tags(value)


class PostUpdate(PostCreate):
    pass


class CommentCreate(RequestModel):
    content: str = Field(..., min_length=1, max_length=500)


class LikeResponse(CamelModel):
    user_id: str
    created_at: datetime


class CommentResponse(CamelModel):
    id: str
    content: str
    created_at: datetime
    author: AuthorSummary


class PostResponse(CamelModel):
    id: str
    title: str
    content: str
    date: str
    image: str
    tags: List[str]
    is_published: bool
    views: int
    user_id: str
    author: AuthorSummary
    likes: List[LikeResponse] = Field(default_factory=list)
    comments: List[CommentResponse] = Field(default_factory=list)
    images: List[AttachmentResponse] = Field(default_factory=list)
    documents: List[AttachmentResponse] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime

    @computed_field(alias="likesCount")
    @property
    def likes_count(self) -> int:
        return len(self.likes)


class LikeToggleResponse(CamelModel):
    success: bool = True
    message: str
    liked: bool
    likes_count: int


class CommentsEnvelope(CamelModel):
    success: bool = True
    message: str
    data: List[CommentResponse]


SPANISH_MONTHS = (
    "enero", "febrero", "marzo", "abril", "mayo", "junio",
    "julio", "agosto", "septiembre", "octubre", "noviembre", "diciembre",
)


def long_date_label(day: date) -> str:
    """Default post date, e.g. ``19 de octubre de 2026``."""
    return f"{day.day} de {SPANISH_MONTHS[day.month - 1]} de {day.year}"
