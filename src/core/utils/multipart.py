"""
Structured multipart/form-data parsing for upload requests.

The body is split into discrete parts by boundary and per-part headers
(``requests_toolbelt``'s decoder); fields are only ever read from a named
part, never searched for in the raw payload.
"""

from email.message import Message

from aws_lambda_powertools import Logger
from pydantic import BaseModel, Field
from requests_toolbelt.multipart.decoder import (
    BodyPart,
    ImproperBodyPartContentException,
    MultipartDecoder,
    NonMultipartContentTypeException,
)

from core.models.errors import MultipartParseError

logger = Logger(utc=True)


class UploadedFile(BaseModel):
    """A file part of a multipart form."""

    field_name: str
    filename: str | None = None
    content_type: str | None = None
    content: bytes = Field(repr=False)

    @property
    def size(self) -> int:
        return len(self.content)


class MultipartForm(BaseModel):
    """Named text fields and file parts of a multipart body."""

    fields: dict[str, str] = Field(default_factory=dict)
    files: list[UploadedFile] = Field(default_factory=list)

    def get_file(self, field_name: str) -> UploadedFile | None:
        return next((f for f in self.files if f.field_name == field_name), None)

    def count_files(self, field_name: str) -> int:
        return sum(1 for f in self.files if f.field_name == field_name)


def _header(part: BodyPart, name: bytes) -> str | None:
    value = part.headers.get(name)
    if value is None:
        return None
    return value.decode("utf-8", errors="replace")


def _disposition_params(value: str) -> tuple[str | None, str | None]:
    msg = Message()
    msg["content-disposition"] = value
    name = msg.get_param("name", header="content-disposition")
    filename = msg.get_filename()
    return (
        name if isinstance(name, str) else None,
        filename,
    )


def parse_multipart(body: bytes, content_type: str | None) -> MultipartForm:
    """Parse a multipart/form-data body into text fields and file parts.

    Raises:
        MultipartParseError: If the content type is not multipart, the
            boundary is missing, or a part is malformed.
    """
    if not content_type or "boundary=" not in content_type:
        raise MultipartParseError(
            message="Invalid content type: expected multipart/form-data with a boundary",
            details={"content_type": content_type},
        )

    try:
        decoder = MultipartDecoder(body, content_type)
    except (NonMultipartContentTypeException, ImproperBodyPartContentException) as exc:
        logger.warning("Multipart body rejected", extra={"error": str(exc)})
        raise MultipartParseError(
            message="Invalid multipart body",
            details={"content_type": content_type},
        ) from exc

    form = MultipartForm()

    for part in decoder.parts:
        disposition = _header(part, b"Content-Disposition")
        if not disposition:
            raise MultipartParseError(message="Invalid multipart body: part without Content-Disposition")

        name, filename = _disposition_params(disposition)
        if not name:
            raise MultipartParseError(message="Invalid multipart body: part without a field name")

        if filename is not None:
            form.files.append(
                UploadedFile(
                    field_name=name,
                    filename=filename,
                    content_type=_header(part, b"Content-Type"),
                    content=part.content,
                )
            )
            continue

        try:
            form.fields[name] = part.content.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise MultipartParseError(
                message=f"Invalid multipart body: field '{name}' is not valid UTF-8",
            ) from exc

    logger.debug(
        "Multipart body parsed",
        extra={"fields": sorted(form.fields), "files": len(form.files)},
    )
    return form
