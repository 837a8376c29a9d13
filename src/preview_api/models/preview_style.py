from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

HEX_COLOR_PATTERN = r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$"
CSS_LENGTH_PATTERN = r"^\d+(?:\.\d+)?(?:px|rem|em|%)$"


class PreviewLayout(str, Enum):
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"
    COMPACT = "compact"


class PreviewStyleCreate(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        str_strip_whitespace=True,
    )

    name: str = Field(min_length=1, max_length=100)
    border_radius: str = Field(pattern=CSS_LENGTH_PATTERN)
    border_color: str = Field(pattern=HEX_COLOR_PATTERN)
    background_color: str = Field(pattern=HEX_COLOR_PATTERN)
    text_color: str = Field(pattern=HEX_COLOR_PATTERN)
    accent_color: str = Field(pattern=HEX_COLOR_PATTERN)
    show_image: bool = True
    show_favicon: bool = True
    layout: PreviewLayout = PreviewLayout.HORIZONTAL


class PreviewStyle(PreviewStyleCreate):
    id: int
    created_at: datetime
