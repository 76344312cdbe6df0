import pytest

from core.utils.mime import detect_mime_type, extension_for_mime_type, mime_type_for_filename


class TestDetectMimeType:
    def test_png(self, sample_image_binary) -> None:
        assert detect_mime_type(sample_image_binary) == "image/png"

    def test_jpeg(self, sample_jpeg_binary) -> None:
        assert detect_mime_type(sample_jpeg_binary) == "image/jpeg"

    @pytest.mark.parametrize("header", [b"GIF87a", b"GIF89a"])
    def test_gif(self, header) -> None:
        assert detect_mime_type(header + b"\x00" * 10) == "image/gif"

    def test_webp(self) -> None:
        assert detect_mime_type(b"RIFF\x24\x00\x00\x00WEBPVP8 ") == "image/webp"

    def test_riff_that_is_not_webp(self) -> None:
        with pytest.raises(ValueError):
            detect_mime_type(b"RIFF\x24\x00\x00\x00WAVEfmt ")

    def test_unknown_bytes(self) -> None:
        with pytest.raises(ValueError):
            detect_mime_type(b"%PDF-1.7")


class TestExtensions:
    def test_extension_for_known_type(self) -> None:
        assert extension_for_mime_type("image/png") == "png"
        assert extension_for_mime_type("image/jpeg") == "jpg"

    def test_extension_for_unknown_type(self) -> None:
        with pytest.raises(ValueError):
            extension_for_mime_type("application/pdf")

    @pytest.mark.parametrize(
        "filename, expected",
        [
            ("a.PNG", "image/png"),
            ("photo.jpeg", "image/jpeg"),
            ("anim.gif", "image/gif"),
            ("x.webp", "image/webp"),
            ("notes.txt", None),
            ("noext", None),
        ],
    )
    def test_mime_type_for_filename(self, filename, expected) -> None:
        assert mime_type_for_filename(filename) == expected
