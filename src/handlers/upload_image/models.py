"""Pydantic models for image upload request/response."""

from typing import Any

from aws_lambda_powertools import Logger
from pydantic import BaseModel, ConfigDict, Field, field_validator

from core.utils.constants import (
    ALLOWED_LICENSES,
    DEFAULT_CATEGORY,
    DEFAULT_LICENSE,
    DESCRIPTION_MAX_LENGTH,
    MAX_TAGS,
    TAG_MAX_LENGTH,
    TITLE_MAX_LENGTH,
)

logger = Logger(utc=True)


class ImageUploadRequest(BaseModel):
    """Validation model for the text fields of an upload form."""

    model_config = ConfigDict(str_strip_whitespace=True, populate_by_name=True)

    title: str = Field(..., min_length=1, max_length=TITLE_MAX_LENGTH, description="Image title")
    description: str = Field("", max_length=DESCRIPTION_MAX_LENGTH, description="Image description")
    tags: list[str] = Field(default_factory=list, description=f"Comma separated tags (max {MAX_TAGS})")
    category: str = Field(DEFAULT_CATEGORY, description="Category label")
    ai_tool: str = Field("", alias="aiTool", max_length=100, description="Generating tool")
    license: str = Field(DEFAULT_LICENSE, description="License identifier")

    @field_validator("tags", mode="before")
    @classmethod
    def validate_tags(cls, value: Any) -> list[str]:
        """
        Normalize and validate tags.

        Accepts:
        - comma-separated string
        - list of strings

        Returns:
        - list[str], empty when no tags were given
        """
        if value is None:
            return []

        if isinstance(value, str):
            raw_tags = [t.strip() for t in value.split(",")]
        elif isinstance(value, list):
            raw_tags = [str(t).strip() for t in value]
        else:
            raise ValueError("tags must be a string or list of strings")

        # remove empty + deduplicate while preserving order
        tags: list[str] = list(dict.fromkeys(t for t in raw_tags if t))

        if len(tags) > MAX_TAGS:
            logger.error(f"Tag validation error: Maximum {MAX_TAGS} tags allowed")
            raise ValueError(f"Maximum {MAX_TAGS} tags allowed")

        if any(len(t) > TAG_MAX_LENGTH for t in tags):
            raise ValueError(f"Tags must be at most {TAG_MAX_LENGTH} characters")

        return tags

    @field_validator("category", mode="before")
    @classmethod
    def default_blank_category(cls, value: Any) -> Any:
        # Unknown categories pass through; only a blank one falls back
        if value is None or (isinstance(value, str) and not value.strip()):
            return DEFAULT_CATEGORY
        return value

    @field_validator("license", mode="before")
    @classmethod
    def default_blank_license(cls, value: Any) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            return DEFAULT_LICENSE
        return value

    @field_validator("license")
    @classmethod
    def validate_license(cls, value: str) -> str:
        license_id = value.lower()
        if license_id not in ALLOWED_LICENSES:
            raise ValueError(
                f"Invalid license '{value}'. Allowed licenses: {', '.join(sorted(ALLOWED_LICENSES))}"
            )
        return license_id


class ImageUploadResponse(BaseModel):
    """Response model for successful image upload."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool = Field(True, description="Always true on success")
    image_id: str = Field(..., alias="imageId", description="Identifier of the new image")
    message: str = Field("Image uploaded successfully", description="Success message")
