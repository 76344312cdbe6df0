"""
Pydantic models for the list images operation.
"""

from pydantic import BaseModel, Field

from core.models.image import ImageRecord


class ListResult(BaseModel):
    """Outcome of one aggregate listing."""

    images: list[ImageRecord] = Field(default_factory=list, description="Resolved records")
    dropped: int = Field(0, ge=0, description="Entries skipped because they failed to load")
