from collections.abc import Mapping
from pathlib import PurePosixPath

from core.utils.constants import MIME_TYPE_EXTENSION_MAP

MAGIC_BYTES: Mapping[bytes, str] = {
    b"\xff\xd8\xff": "image/jpeg",
    b"\x89PNG\r\n\x1a\n": "image/png",
    b"GIF87a": "image/gif",
    b"GIF89a": "image/gif",
}


def detect_mime_type(file_data: bytes) -> str:
    for signature, mime in MAGIC_BYTES.items():
        if file_data.startswith(signature):
            return mime

    # RIFF is a container; only the WEBP form type is an image we accept
    if file_data[:4] == b"RIFF" and file_data[8:12] == b"WEBP":
        return "image/webp"

    raise ValueError("Unsupported or unknown file type")


def extension_for_mime_type(mime_type: str) -> str:
    extensions = MIME_TYPE_EXTENSION_MAP.get(mime_type)
    if not extensions:
        raise ValueError(f"No known extension for {mime_type}")
    return extensions[0]


def mime_type_for_filename(filename: str) -> str | None:
    suffix = PurePosixPath(filename).suffix.lower().lstrip(".")
    for mime, extensions in MIME_TYPE_EXTENSION_MAP.items():
        if suffix in extensions:
            return mime
    return None
