"""Pydantic models for the download image operation."""

from pydantic import BaseModel, ConfigDict, Field, StrictStr

from core.models.image import ImageRecord
from core.utils.constants import IMAGE_ID_PATTERN


class DownloadImageRequest(BaseModel):
    """Validation model for a download request body."""

    model_config = ConfigDict(str_strip_whitespace=True, populate_by_name=True)

    image_id: StrictStr = Field(
        ...,
        alias="imageId",
        min_length=1,
        max_length=100,
        pattern=IMAGE_ID_PATTERN,
        description="Identifier returned by the upload operation",
    )


class DownloadedImage(BaseModel):
    """Image binary resolved through its metadata entry."""

    record: ImageRecord
    content: bytes = Field(..., repr=False)
    content_type: str

    @property
    def content_disposition(self) -> str:
        filename = self.record.filename.replace('"', "").replace("\\", "")
        return f'attachment; filename="{filename}"'
