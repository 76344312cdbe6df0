"""
Business logic for image download.

Resolves an image id to its metadata entry, then reads the binary the
entry points at.
"""

import json

from aws_lambda_powertools import Logger
from pydantic import ValidationError as PydanticValidationError

from core.infrastructure.github.github_content_store import build_content_store
from core.models.errors import (
    ContentStoreError,
    MetadataOperationFailedError,
    NotFoundError,
)
from core.models.image import ImageRecord
from core.models.store import StoredFile
from core.repositories.content_repository import ContentStoreRepository
from core.utils.config import GitHubSettings
from core.utils.constants import (
    BINARY_FALLBACK_CONTENT_TYPE,
    ERROR_CODE_IMAGE_DOWNLOAD_FAILED,
    ERROR_CODE_IMAGE_NOT_FOUND,
    ERROR_CODE_METADATA_INVALID_FORMAT,
    IMAGES_DIR,
    METADATA_DIR,
    METADATA_EXTENSION,
)
from core.utils.mime import detect_mime_type, mime_type_for_filename

from .models import DownloadedImage

logger = Logger(utc=True)


class DownloadService:
    """Application service responsible for image downloads.

    This service orchestrates:
    - Fetching and validating the metadata entry
    - Reading the image binary from the store
    - Working out the content type to serve
    """

    def __init__(
        self,
        store: ContentStoreRepository | None = None,
        settings: GitHubSettings | None = None,
    ) -> None:
        self.settings = settings or GitHubSettings.from_env()
        self.store = store or build_content_store(self.settings)

    def get_record(self, image_id: str) -> ImageRecord:
        """Load the metadata entry for ``image_id``.

        Raises:
            NotFoundError: If no metadata entry exists
            MetadataOperationFailedError: If the entry is not a valid record
            ContentStoreError: If the store read fails
        """
        path = f"{METADATA_DIR}/{image_id}{METADATA_EXTENSION}"

        try:
            stored = self.store.read_file(path=path)
        except NotFoundError as exc:
            logger.warning("Image metadata not found", extra={"image_id": image_id})
            raise NotFoundError(
                message="Image not found",
                error_code=ERROR_CODE_IMAGE_NOT_FOUND,
                details={"image_id": image_id},
            ) from exc

        try:
            return ImageRecord.model_validate(json.loads(stored.content))
        except (PydanticValidationError, ValueError) as exc:
            logger.error("Invalid metadata format", extra={"image_id": image_id})
            raise MetadataOperationFailedError(
                message="Invalid image metadata format",
                error_code=ERROR_CODE_METADATA_INVALID_FORMAT,
                details={"image_id": image_id},
            ) from exc

    def download_image(self, image_id: str) -> DownloadedImage:
        """Return the binary and record for ``image_id``.

        Raises:
            NotFoundError: If no metadata entry exists (no binary read is attempted)
            MetadataOperationFailedError: If the entry is not a valid record
            ContentStoreError: If the binary cannot be read
        """
        record = self.get_record(image_id)
        path = f"{IMAGES_DIR}/{record.filename}"

        try:
            stored = self.store.read_file(path=path)
        except (NotFoundError, ContentStoreError) as exc:
            logger.exception(
                "Failed to fetch image",
                extra={"image_id": image_id, "path": path},
            )
            raise ContentStoreError(
                message="Failed to fetch image",
                error_code=ERROR_CODE_IMAGE_DOWNLOAD_FAILED,
                details={"image_id": image_id},
            ) from exc

        return DownloadedImage(
            record=record,
            content=stored.content,
            content_type=self.resolve_content_type(stored, record),
        )

    @staticmethod
    def resolve_content_type(stored: StoredFile, record: ImageRecord) -> str:
        """Served type if it is an image type, else the file signature, else the extension."""
        served = (stored.content_type or "").split(";")[0].strip().lower()
        if served.startswith("image/"):
            return served

        try:
            return detect_mime_type(stored.content)
        except ValueError:
            return mime_type_for_filename(record.filename) or BINARY_FALLBACK_CONTENT_TYPE
