"""Custom exception classes for the image gallery service."""

from typing import Any

from core.utils.constants import (
    ERROR_CODE_FILE_SIZE_EXCEEDED,
    ERROR_CODE_INVALID_MULTIPART,
    ERROR_CODE_METADATA_FETCH_FAILED,
    ERROR_CODE_METADATA_OPERATION_FAILED,
    ERROR_CODE_RESOURCE_NOT_FOUND,
    ERROR_CODE_STORE,
    ERROR_CODE_STORE_CONFLICT,
    ERROR_CODE_UNSUPPORTED_MIME_TYPE,
    ERROR_CODE_VALIDATION_FAILED,
)


class ImageServiceError(Exception):
    """
    Base exception for all image service errors.

    All custom errors must inherit from this class.
    Callers must explicitly provide a message and error code.
    Optional contextual information can be supplied via `details`.
    """

    message: str
    error_code: str
    details: dict[str, Any]

    def __init__(
        self,
        *,
        message: str,
        error_code: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.error_code = error_code
        self.details = details or {}

        super().__init__(self.message)


class ValidationError(ImageServiceError):
    """Raised when request validation fails."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_VALIDATION_FAILED,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class MIMETypeError(ValidationError):
    """Raised when an unsupported MIME type is provided."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_UNSUPPORTED_MIME_TYPE,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class FileSizeError(ValidationError):
    """Raised when file size exceeds the allowed limit."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_FILE_SIZE_EXCEEDED,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class MultipartParseError(ValidationError):
    """Raised when a multipart/form-data body cannot be split into parts."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_INVALID_MULTIPART,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class NotFoundError(ImageServiceError):
    """Raised when a requested resource is not found."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_RESOURCE_NOT_FOUND,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class ContentStoreError(ImageServiceError):
    """Raised when the remote content store (or the network to it) fails."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_STORE,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class ContentConflictError(ContentStoreError):
    """Raised when the store rejects a write because the path changed underneath it."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_STORE_CONFLICT,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class MetadataOperationFailedError(ImageServiceError):
    """Raised when an image metadata operation fails."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_METADATA_OPERATION_FAILED,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class PartialFetchError(ImageServiceError):
    """Raised when a single metadata entry of the aggregate list cannot be loaded.

    Never surfaced to callers: the list service drops the entry and moves on.
    """

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_METADATA_FETCH_FAILED,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )
