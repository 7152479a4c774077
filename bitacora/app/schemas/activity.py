# bitacora/app/schemas/activity.py
import re
from datetime import datetime
from typing import List, Literal, Optional

from pydantic import Field, field_validator

from bitacora.app.schemas.common import AttachmentResponse, AuthorSummary, CamelModel, RequestModel

LINK_PATTERN = re.compile(r"^https?://.+", re.IGNORECASE)

Category = Literal["academic", "personal", "professional", "creative", "other"]
Difficulty = Literal["beginner", "intermediate", "advanced"]


class ActivityCreate(RequestModel):
    title: str = Field(..., min_length=3, max_length=200)
    description: str = Field(..., min_length=10, max_length=2000)
    character: Optional[str] = Field(default=None, max_length=255)
    links: List[str] = Field(default_factory=list)
    category: Category = "academic"
    difficulty: Difficulty = "beginner"
    estimated_time: Optional[int] = Field(default=None, ge=0)
    is_published: bool = True

    @field_validator("links")
    @classmethod
    def check_links(cls, links: List[str]) -> List[str]:
        cleaned = [link.strip() for link in links if link and link.strip()]
        for link in cleaned:
            if not LINK_PATTERN.match(link):
                raise ValueError(f"Link must be an absolute http(s) URL: {link}")
        return cleaned


class ActivityUpdate(ActivityCreate):
    pass


class ActivityResponse(CamelModel):
    id: str
    title: str
    description: str
    character: str
    links: List[str]
    documents: List[AttachmentResponse] = Field(default_factory=list)
    images: List[AttachmentResponse] = Field(default_factory=list)
    category: str
    difficulty: str
    estimated_time: Optional[int] = None
    is_published: bool
    user_id: str
    author: AuthorSummary
    created_at: datetime
    updated_at: datetime


class CategoriesEnvelope(CamelModel):
    success: bool = True
    data: List[str]
