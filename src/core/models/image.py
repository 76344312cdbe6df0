"""Shared image record model."""

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictInt, StrictStr, field_validator

from core.utils.constants import DEFAULT_CATEGORY, DEFAULT_LICENSE


class ImageRecord(BaseModel):
    """Metadata entry describing one stored image.

    Records are written once by the upload service and never updated in
    place. Field names on the wire are camelCase (``aiTool``) to match the
    metadata documents already sitting in the store.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: StrictStr = Field(..., min_length=1, description="Unique image identifier")
    filename: StrictStr = Field(..., min_length=1, description="Store-relative binary name")

    title: StrictStr = Field(..., description="User supplied title")
    description: StrictStr = Field("", description="User supplied description")
    tags: list[StrictStr] = Field(default_factory=list, description="Ordered tags")

    category: StrictStr = Field(DEFAULT_CATEGORY, description="Category label")
    ai_tool: StrictStr = Field("", alias="aiTool", description="Tool used to generate the image")
    license: StrictStr = Field(DEFAULT_LICENSE, description="License identifier")

    date: datetime = Field(..., description="ISO-8601 creation timestamp (UTC)")
    url: StrictStr = Field(..., description="Public retrieval URL for the binary")

    dimensions: StrictStr | None = Field(None, description="Optional display dimensions")
    format: StrictStr | None = Field(None, description="Optional display format")
    downloads: StrictInt | None = Field(None, ge=0, description="Optional download counter")

    @field_validator("date")
    @classmethod
    def ensure_timezone(cls, value: datetime) -> datetime:
        # Naive timestamps are treated as UTC so every record sorts together
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    def to_document(self) -> dict[str, Any]:
        """Serialize the record the way it is stored and served."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class ListImagesResponse(BaseModel):
    """Aggregate list of every metadata entry that resolved successfully."""

    success: StrictBool = Field(True, description="Always true on a 200 response")
    count: StrictInt = Field(..., description="Number of images in this response")
    images: list[ImageRecord] = Field(..., description="Resolved image records")

    def to_body(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "count": self.count,
            "images": [image.to_document() for image in self.images],
        }
