from datetime import datetime
from typing import Optional
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

INVALID_URL_MESSAGE = "Please enter a valid URL"


class PreviewMetadata(BaseModel):
    """Fields extracted from a page; every value is a trimmed string."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    title: str = ""
    description: str = ""
    image: str = ""
    favicon: str = ""
    site_name: str = ""


class LinkPreview(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: int
    url: str
    title: Optional[str] = None
    description: Optional[str] = None
    image: Optional[str] = None
    favicon: Optional[str] = None
    site_name: Optional[str] = None
    created_at: datetime


class LinkPreviewRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    url: str
    force_refresh: bool = Field(default=False)

    @field_validator("url")
    @classmethod
    def validate_url(cls, value: str) -> str:
        # The raw string is the cache key, so it is checked but never rewritten
        parsed = urlparse(value)
        if parsed.scheme not in ("http", "https") or not parsed.hostname:
            raise ValueError(INVALID_URL_MESSAGE)
        if any(ch.isspace() for ch in value):
            raise ValueError(INVALID_URL_MESSAGE)
        return value
