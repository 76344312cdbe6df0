"""Business logic for image upload operations.

An upload is a two step saga over the content store: the binary is
committed first, then its metadata entry. The steps succeed or fail
independently; a failed second step leaves an orphaned binary behind,
which is logged and reported but never rolled back.
"""

import json
import uuid
from pathlib import PurePosixPath
from typing import cast

from aws_lambda_powertools import Logger

from core.infrastructure.github.github_content_store import build_content_store
from core.models.errors import (
    ContentStoreError,
    FileSizeError,
    MetadataOperationFailedError,
    MIMETypeError,
    ValidationError,
)
from core.models.image import ImageRecord
from core.repositories.content_repository import ContentStoreRepository
from core.utils.config import GitHubSettings
from core.utils.constants import (
    ALLOWED_EXTENSIONS,
    ALLOWED_MIME_TYPES,
    BINARY_FALLBACK_CONTENT_TYPE,
    ERROR_CODE_METADATA_CREATE_FAILED,
    ERROR_CODE_MISSING_IMAGE,
    IMAGE_COMMIT_MESSAGE,
    IMAGES_DIR,
    MAX_FILE_SIZE,
    METADATA_COMMIT_MESSAGE,
    METADATA_DIR,
    METADATA_EXTENSION,
    format_file_size,
    get_max_file_size_mb,
)
from core.utils.mime import detect_mime_type, extension_for_mime_type
from core.utils.multipart import UploadedFile
from core.utils.time import epoch_millis, utc_now

from .models import ImageUploadRequest

logger = Logger(utc=True)


class UploadService:
    """Application service responsible for image uploads.

    This service orchestrates:
    - Image part validation (presence, size, type)
    - Committing the binary to the store
    - Committing the generated metadata entry
    """

    def __init__(
        self,
        store: ContentStoreRepository | None = None,
        settings: GitHubSettings | None = None,
    ) -> None:
        """Initialize the upload service with the content store."""
        self.settings = settings or GitHubSettings.from_env()
        self.store = store or build_content_store(self.settings)

    @staticmethod
    def generate_image_id() -> str:
        """Generate a creation-time identifier with a random suffix.

        The millisecond prefix keeps ids roughly ordered; the suffix keeps
        concurrent uploads in the same millisecond apart.
        """
        return f"{epoch_millis()}-{uuid.uuid4().hex[:8]}"

    @staticmethod
    def validate_image(image: UploadedFile | None) -> str:
        """Check the image part and return its MIME type.

        Raises:
            ValidationError: If the part is missing or empty
            FileSizeError: If the part exceeds MAX_FILE_SIZE
            MIMETypeError: If the type is not an allowed image type
        """
        if image is None:
            raise ValidationError(
                message="No image provided",
                error_code=ERROR_CODE_MISSING_IMAGE,
            )

        if image.size == 0:
            raise ValidationError(
                message="Image file is empty",
                error_code=ERROR_CODE_MISSING_IMAGE,
            )

        if image.size > MAX_FILE_SIZE:
            logger.warning(
                "Rejected oversized image",
                extra={"size": image.size, "max_size": MAX_FILE_SIZE},
            )
            raise FileSizeError(
                message=f"File is too large (max {get_max_file_size_mb()}MB)",
                details={"size": format_file_size(image.size)},
            )

        declared = (image.content_type or "").split(";")[0].strip().lower()

        if declared and declared != BINARY_FALLBACK_CONTENT_TYPE:
            if declared not in ALLOWED_MIME_TYPES:
                raise MIMETypeError(
                    message="Invalid file format. Use JPG, PNG, WebP, or GIF.",
                    details={"mime_type": declared},
                )
            return declared

        # No usable declared type: trust the file signature instead
        try:
            return detect_mime_type(image.content)
        except ValueError as exc:
            raise MIMETypeError(
                message="Invalid file format. Use JPG, PNG, WebP, or GIF.",
                details={"mime_type": declared or None},
            ) from exc

    @staticmethod
    def build_filename(image_id: str, original_filename: str | None, mime_type: str) -> str:
        """Store filename for an image, keeping the uploaded extension when it is an image one."""
        suffix = PurePosixPath(original_filename or "").suffix.lower().lstrip(".")
        if suffix not in ALLOWED_EXTENSIONS:
            suffix = extension_for_mime_type(mime_type)
        return f"{image_id}.{suffix}"

    def upload_image(self, *, request: ImageUploadRequest, image: UploadedFile | None) -> ImageRecord:
        """Validate the image, then commit binary and metadata in that order.

        Args:
            request: Validated form fields
            image: The uploaded image part

        Returns:
            The persisted ImageRecord

        Raises:
            ValidationError: If the image part is invalid (no store write happened)
            ContentStoreError: If the binary commit fails (nothing was written)
            MetadataOperationFailedError: If the metadata commit fails after the
                binary was committed; the binary is left orphaned
        """
        mime_type = self.validate_image(image)
        image = cast(UploadedFile, image)

        image_id = self.generate_image_id()
        filename = self.build_filename(image_id, image.filename, mime_type)
        image_path = f"{IMAGES_DIR}/{filename}"
        metadata_path = f"{METADATA_DIR}/{image_id}{METADATA_EXTENSION}"

        logger.debug(
            "Starting image upload",
            extra={"image_id": image_id, "mime_type": mime_type, "size": image.size},
        )

        # Step 1: commit the binary
        try:
            self.store.write_file(
                path=image_path,
                content=image.content,
                message=IMAGE_COMMIT_MESSAGE.format(filename=filename),
            )
        except ContentStoreError:
            logger.exception("Image commit failed", extra={"image_id": image_id, "path": image_path})
            raise

        # Step 2: build and commit the metadata entry
        record = ImageRecord(
            id=image_id,
            filename=filename,
            title=request.title,
            description=request.description,
            tags=request.tags,
            category=request.category,
            ai_tool=request.ai_tool,
            license=request.license,
            date=utc_now(),
            url=self.store.public_url(path=image_path),
        )

        try:
            self.store.write_file(
                path=metadata_path,
                content=json.dumps(record.to_document(), indent=2).encode("utf-8"),
                message=METADATA_COMMIT_MESSAGE.format(image_id=image_id),
            )
        except ContentStoreError as exc:
            logger.error(
                "Metadata commit failed; image binary is orphaned",
                extra={
                    "image_id": image_id,
                    "orphaned_image": image_path,
                    "metadata_path": metadata_path,
                    "error_code": exc.error_code,
                },
            )
            raise MetadataOperationFailedError(
                message="Unable to save image metadata",
                error_code=ERROR_CODE_METADATA_CREATE_FAILED,
                details={"image_id": image_id, "orphaned_image": image_path},
            ) from exc

        logger.info(
            "Image uploaded successfully",
            extra={"image_id": image_id, "image_filename": filename},
        )
        return record
