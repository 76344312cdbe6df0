import pytest
import requests

from core.models.errors import ContentStoreError, MetadataOperationFailedError, NotFoundError
from core.models.image import ImageRecord
from core.models.store import StoredFile
from handlers.download_image.service import DownloadService


@pytest.fixture
def service(content_store, github_settings) -> DownloadService:
    return DownloadService(store=content_store, settings=github_settings)


class TestDownloadService:
    def test_download(self, service, fake_github, make_record, sample_image_binary) -> None:
        fake_github.seed_record(make_record("img-1", title="Sunset"), sample_image_binary, "image/png")

        image = service.download_image("img-1")

        assert image.content == sample_image_binary
        assert image.content_type == "image/png"
        assert image.record.title == "Sunset"
        assert image.content_disposition == 'attachment; filename="img-1.png"'
        assert fake_github.reads == ["metadata/img-1.json", "images/img-1.png"]

    def test_unknown_id_never_reads_a_binary(self, service, fake_github) -> None:
        with pytest.raises(NotFoundError) as exc_info:
            service.download_image("missing")

        assert exc_info.value.message == "Image not found"
        assert exc_info.value.error_code == "IMAGE_NOT_FOUND"
        assert fake_github.reads == ["metadata/missing.json"]

    def test_missing_binary(self, service, fake_github, make_record) -> None:
        fake_github.seed_record(make_record("img-1"))

        with pytest.raises(ContentStoreError) as exc_info:
            service.download_image("img-1")

        assert exc_info.value.error_code == "IMAGE_DOWNLOAD_FAILED"

    def test_binary_timeout(self, service, fake_github, make_record, sample_image_binary) -> None:
        fake_github.seed_record(make_record("img-1"), sample_image_binary)
        fake_github.read_failures["images/img-1.png"] = requests.Timeout("slow")

        with pytest.raises(ContentStoreError):
            service.download_image("img-1")

    def test_corrupt_metadata(self, service, fake_github) -> None:
        fake_github.seed("metadata/img-1.json", b"{broken")

        with pytest.raises(MetadataOperationFailedError):
            service.download_image("img-1")


class TestResolveContentType:
    @pytest.fixture
    def record(self, make_record) -> ImageRecord:
        return ImageRecord.model_validate(make_record("img-1", filename="img-1.webp"))

    def test_served_image_type_wins(self, record) -> None:
        stored = StoredFile(path="p", content=b"anything", content_type="image/gif; charset=binary")

        assert DownloadService.resolve_content_type(stored, record) == "image/gif"

    def test_signature_when_served_type_is_generic(self, record, sample_jpeg_binary) -> None:
        stored = StoredFile(path="p", content=sample_jpeg_binary, content_type="application/octet-stream")

        assert DownloadService.resolve_content_type(stored, record) == "image/jpeg"

    def test_extension_when_signature_is_unknown(self, record) -> None:
        stored = StoredFile(path="p", content=b"????", content_type=None)

        assert DownloadService.resolve_content_type(stored, record) == "image/webp"

    def test_octet_stream_as_last_resort(self, make_record) -> None:
        record = ImageRecord.model_validate(make_record("img-1", filename="img-1"))
        stored = StoredFile(path="p", content=b"????")

        assert DownloadService.resolve_content_type(stored, record) == "application/octet-stream"
