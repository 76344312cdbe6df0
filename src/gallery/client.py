"""
HTTP client for the list, upload and download endpoints.
"""

from email.message import Message
from typing import Any

import requests
from aws_lambda_powertools import Logger
from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError
from requests_toolbelt import MultipartEncoder

from core.models.errors import FileSizeError, MIMETypeError, ValidationError
from core.models.image import ImageRecord
from core.utils.constants import (
    ALLOWED_MIME_TYPES,
    API_BASE_PATH,
    BINARY_FALLBACK_CONTENT_TYPE,
    DEFAULT_CLIENT_TIMEOUT,
    DEFAULT_DOWNLOAD_FILENAME,
    DEFAULT_LICENSE,
    DOWNLOAD_ENDPOINT,
    IMAGE_FORM_FIELD,
    LIST_ENDPOINT,
    MAX_FILE_SIZE,
    UPLOAD_ENDPOINT,
    get_max_file_size_mb,
)

logger = Logger(utc=True)


class GalleryClientError(Exception):
    """Raised when an endpoint call fails or answers with an error."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class DownloadedFile(BaseModel):
    """Binary returned by the download endpoint."""

    filename: str
    content_type: str
    content: bytes = Field(repr=False)


def filename_from_disposition(value: str | None) -> str | None:
    if not value:
        return None
    msg = Message()
    msg["content-disposition"] = value
    return msg.get_filename()


def check_upload(*, content: bytes, content_type: str | None, title: str) -> None:
    """Reject an upload locally before any network call.

    Raises:
        ValidationError: If the title is blank or the file is empty
        FileSizeError: If the file exceeds the maximum upload size
        MIMETypeError: If the file type is not an allowed image type
    """
    if not content:
        raise ValidationError(message="Please select an image")

    if len(content) > MAX_FILE_SIZE:
        raise FileSizeError(message=f"File is too large (max {get_max_file_size_mb()}MB)")

    if content_type not in ALLOWED_MIME_TYPES:
        raise MIMETypeError(message="Invalid file format. Use JPG, PNG, WebP, or GIF.")

    if not title.strip():
        raise ValidationError(message="Title is required")


class GalleryClient:
    """Thin requests wrapper around the three gallery endpoints."""

    def __init__(
        self,
        base_url: str = API_BASE_PATH,
        *,
        session: requests.Session | None = None,
        timeout: float = DEFAULT_CLIENT_TIMEOUT,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    def _url(self, endpoint: str) -> str:
        return f"{self.base_url}/{endpoint}"

    def _send(self, method: str, endpoint: str, **kwargs: Any) -> requests.Response:
        try:
            response = self.session.request(method, self._url(endpoint), timeout=self.timeout, **kwargs)
        except requests.RequestException as exc:
            logger.warning("Gallery request failed", extra={"endpoint": endpoint, "error": str(exc)})
            raise GalleryClientError(f"Request to {endpoint} failed") from exc

        if not response.ok:
            raise GalleryClientError(self._error_message(response), status_code=response.status_code)
        return response

    @staticmethod
    def _error_message(response: requests.Response) -> str:
        try:
            payload = response.json()
        except ValueError:
            return f"HTTP {response.status_code}"
        if isinstance(payload, dict):
            return str(payload.get("message") or payload.get("error") or f"HTTP {response.status_code}")
        return f"HTTP {response.status_code}"

    def list_images(self) -> list[ImageRecord]:
        """Fetch the aggregate image list.

        Entries that do not form a valid record are skipped.
        """
        response = self._send("GET", LIST_ENDPOINT)

        try:
            payload = response.json()
        except ValueError as exc:
            raise GalleryClientError("List response is not JSON", status_code=response.status_code) from exc

        if not isinstance(payload, dict):
            raise GalleryClientError("List response is not an object", status_code=response.status_code)

        entries = payload.get("images") or []
        if not isinstance(entries, list):
            raise GalleryClientError("List response has no image list", status_code=response.status_code)

        images: list[ImageRecord] = []
        for raw in entries:
            if not isinstance(raw, dict):
                logger.warning("Skipping non-object image entry", extra={"entry_type": type(raw).__name__})
                continue
            try:
                images.append(ImageRecord.model_validate(raw))
            except PydanticValidationError:
                logger.warning("Skipping malformed image entry", extra={"entry_id": raw.get("id")})
        return images

    def upload_image(
        self,
        *,
        content: bytes,
        filename: str,
        content_type: str,
        title: str,
        description: str = "",
        tags: str = "",
        category: str = "",
        ai_tool: str = "",
        license: str = DEFAULT_LICENSE,
    ) -> str:
        """Upload an image and return its new id."""
        check_upload(content=content, content_type=content_type, title=title)

        encoder = MultipartEncoder(
            fields={
                IMAGE_FORM_FIELD: (filename, content, content_type),
                "title": title,
                "description": description,
                "tags": tags,
                "category": category,
                "aiTool": ai_tool,
                "license": license,
            }
        )
        response = self._send(
            "POST",
            UPLOAD_ENDPOINT,
            data=encoder,
            headers={"Content-Type": encoder.content_type},
        )

        image_id = response.json().get("imageId")
        if not image_id:
            raise GalleryClientError("Upload response carried no imageId", status_code=response.status_code)

        logger.info("Image uploaded", extra={"image_id": image_id, "image_filename": filename})
        return image_id

    def download_image(self, image_id: str, *, fallback_filename: str | None = None) -> DownloadedFile:
        """Download the binary for ``image_id``.

        The filename comes from ``Content-Disposition``, then
        ``fallback_filename``, then a generic default.
        """
        response = self._send("POST", DOWNLOAD_ENDPOINT, json={"imageId": image_id})

        filename = (
            filename_from_disposition(response.headers.get("Content-Disposition"))
            or fallback_filename
            or DEFAULT_DOWNLOAD_FILENAME
        )
        return DownloadedFile(
            filename=filename,
            content_type=response.headers.get("Content-Type") or BINARY_FALLBACK_CONTENT_TYPE,
            content=response.content,
        )
