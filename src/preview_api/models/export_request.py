from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ExportFormat(str, Enum):
    PNG = "png"
    JPEG = "jpeg"
    WEBP = "webp"

    @property
    def content_type(self) -> str:
        return f"image/{self.value}"


class ExportRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    preview_id: int
    format: ExportFormat = ExportFormat.PNG
    width: int = Field(default=800, ge=200, le=2000)
    height: int = Field(default=400, ge=100, le=1000)
    quality: float = Field(default=0.9, ge=0.1, le=1.0)
    style_id: int = 1
