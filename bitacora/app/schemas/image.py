# bitacora/app/schemas/image.py
from datetime import datetime
from typing import List, Optional, Union

from pydantic import Field, field_validator

from bitacora.app.schemas.common import CamelModel, RequestModel


def split_tags(raw: Optional[str]) -> List[str]:
    """Comma-separated form value → list of trimmed, non-empty tags."""
    if not raw:
        return []
    tags = []
    for tag in raw.split(","):
        tag = tag.strip()
        if tag and tag not in tags:
            tags.append(tag)
    return tags


def parse_flag(raw: Optional[str]) -> bool:
    return (raw or "").strip().lower() == "true"


class ImageUpdate(RequestModel):
    description: Optional[str] = Field(default=None, max_length=500)
    # Accepts a list or the comma-separated form the upload endpoint uses
    tags: Optional[Union[List[str], str]] = None
    is_public: Optional[bool] = None

    @field_validator("tags")
    @classmethod
    def normalize(cls, value):
        if value is None:
            return None
        if isinstance(value, str):
            return split_tags(value)
        return split_tags(",".join(value))


class ImageSummary(CamelModel):
    """Image metadata without the binary payload."""
    id: str
    name: str
    size: int
    mime_type: str
    description: str
    tags: List[str]
    is_public: bool
    user_id: str
    created_at: datetime
    updated_at: datetime


class ImageResponse(ImageSummary):
    data: str
