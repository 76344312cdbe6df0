import json
import re

import pytest

from core.models.errors import (
    ContentStoreError,
    FileSizeError,
    MetadataOperationFailedError,
    MIMETypeError,
    ValidationError,
)
from core.utils.constants import MAX_FILE_SIZE
from core.utils.multipart import UploadedFile
from handlers.upload_image.models import ImageUploadRequest
from handlers.upload_image.service import UploadService


@pytest.fixture
def service(content_store, github_settings) -> UploadService:
    return UploadService(store=content_store, settings=github_settings)


@pytest.fixture
def png_part(sample_image_binary) -> UploadedFile:
    return UploadedFile(
        field_name="image",
        filename="sunset.png",
        content_type="image/png",
        content=sample_image_binary,
    )


@pytest.fixture
def request_model() -> ImageUploadRequest:
    return ImageUploadRequest.model_validate(
        {"title": "Sunset", "tags": "sky, sea", "category": "landscape", "aiTool": "SDXL"}
    )


class TestGenerateImageId:
    def test_format(self) -> None:
        assert re.fullmatch(r"\d{13}-[0-9a-f]{8}", UploadService.generate_image_id())

    def test_ids_do_not_collide_within_a_millisecond(self) -> None:
        ids = {UploadService.generate_image_id() for _ in range(200)}
        assert len(ids) == 200


class TestValidateImage:
    def test_declared_type_is_returned(self, png_part) -> None:
        assert UploadService.validate_image(png_part) == "image/png"

    def test_missing_image(self) -> None:
        with pytest.raises(ValidationError, match="No image provided"):
            UploadService.validate_image(None)

    def test_empty_image(self) -> None:
        with pytest.raises(ValidationError, match="empty"):
            UploadService.validate_image(UploadedFile(field_name="image", filename="a.png", content=b""))

    def test_oversized_image(self) -> None:
        part = UploadedFile(
            field_name="image",
            filename="big.png",
            content_type="image/png",
            content=b"\x89PNG\r\n\x1a\n" + b"x" * MAX_FILE_SIZE,
        )

        with pytest.raises(FileSizeError, match="max 50MB"):
            UploadService.validate_image(part)

    def test_disallowed_declared_type(self, sample_image_binary) -> None:
        part = UploadedFile(
            field_name="image",
            filename="a.svg",
            content_type="image/svg+xml",
            content=sample_image_binary,
        )

        with pytest.raises(MIMETypeError):
            UploadService.validate_image(part)

    def test_octet_stream_falls_back_to_signature(self, sample_jpeg_binary) -> None:
        part = UploadedFile(
            field_name="image",
            filename="blob",
            content_type="application/octet-stream",
            content=sample_jpeg_binary,
        )

        assert UploadService.validate_image(part) == "image/jpeg"

    def test_unrecognised_signature(self) -> None:
        part = UploadedFile(field_name="image", filename="a.bin", content=b"%PDF-1.7")

        with pytest.raises(MIMETypeError):
            UploadService.validate_image(part)


class TestBuildFilename:
    @pytest.mark.parametrize(
        "original, mime, expected",
        [
            ("sunset.PNG", "image/png", "id.png"),
            ("photo.jpeg", "image/jpeg", "id.jpeg"),
            ("no-extension", "image/jpeg", "id.jpg"),
            ("../../etc/passwd.sh", "image/gif", "id.gif"),
            (None, "image/webp", "id.webp"),
        ],
    )
    def test_build_filename(self, original, mime, expected) -> None:
        assert UploadService.build_filename("id", original, mime) == expected


class TestUploadImage:
    def test_binary_then_metadata(self, service, fake_github, png_part, request_model) -> None:
        record = service.upload_image(request=request_model, image=png_part)

        image_path = f"images/{record.filename}"
        metadata_path = f"metadata/{record.id}.json"

        assert fake_github.written_paths() == [image_path, metadata_path]
        assert fake_github.writes[0][1] == f"Add image: {record.filename}"
        assert fake_github.writes[1][1] == f"Add metadata: {record.id}"
        assert fake_github.files[image_path] == png_part.content

        document = json.loads(fake_github.files[metadata_path])
        assert document["id"] == record.id
        assert document["title"] == "Sunset"
        assert document["tags"] == ["sky", "sea"]
        assert document["category"] == "landscape"
        assert document["aiTool"] == "SDXL"
        assert document["license"] == "cc0"
        assert document["url"].endswith(f"/gallery-owner/gallery-repo/main/{image_path}")
        assert "downloads" not in document

    def test_invalid_image_writes_nothing(self, service, fake_github, request_model) -> None:
        with pytest.raises(ValidationError):
            service.upload_image(request=request_model, image=None)

        assert fake_github.writes == []

    def test_binary_failure_writes_no_metadata(
        self, service, fake_github, png_part, request_model, http_error_factory
    ) -> None:
        fake_github.write_failures["images/"] = http_error_factory(500)

        with pytest.raises(ContentStoreError):
            service.upload_image(request=request_model, image=png_part)

        assert fake_github.writes == []

    def test_metadata_failure_leaves_orphan(
        self, service, fake_github, png_part, request_model, http_error_factory
    ) -> None:
        fake_github.write_failures["metadata/"] = http_error_factory(500)

        with pytest.raises(MetadataOperationFailedError) as exc_info:
            service.upload_image(request=request_model, image=png_part)

        orphan = exc_info.value.details["orphaned_image"]
        assert fake_github.written_paths() == [orphan]
        assert exc_info.value.error_code == "METADATA_CREATE_FAILED"
