"""
Pytest configuration and fixtures for image gallery tests.
Provides environment setup, an in-memory GitHub adapter and event builders.
"""

import base64
import json
import threading
from collections.abc import Callable
from types import SimpleNamespace
from typing import Any

import pytest
import requests
from requests_toolbelt import MultipartEncoder

from core.infrastructure.github.github_content_store import GitHubContentStore
from core.utils.config import GitHubSettings

GITHUB_OWNER = "gallery-owner"
GITHUB_REPO = "gallery-repo"


@pytest.fixture(autouse=True)
def gallery_env(monkeypatch):
    """Process configuration every handler reads at construction time."""
    monkeypatch.setenv("GITHUB_OWNER", GITHUB_OWNER)
    monkeypatch.setenv("GITHUB_REPO", GITHUB_REPO)
    monkeypatch.setenv("GITHUB_BRANCH", "main")
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    monkeypatch.delenv("GITHUB_TOKEN_SECRET_NAME", raising=False)

    monkeypatch.setenv("POWERTOOLS_TRACE_DISABLED", "1")
    monkeypatch.setenv("POWERTOOLS_METRICS_NAMESPACE", "ImageGallery")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")
    monkeypatch.setenv("AWS_REGION", "us-east-1")
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")


def http_error(status: int) -> requests.HTTPError:
    response = requests.Response()
    response.status_code = status
    return requests.HTTPError(f"{status} error", response=response)


class FakeGitHubAdapter:
    """In-memory stand-in for the GitHub contents API.

    Writes go through the same base64 transport encoding the real adapter
    uses and every mutation is recorded, so tests can assert that nothing
    was written.
    """

    def __init__(self, settings: GitHubSettings) -> None:
        self.settings = settings
        self.files: dict[str, bytes] = {}
        self.content_types: dict[str, str] = {}
        self.writes: list[tuple[str, str]] = []
        self.reads: list[str] = []
        self.read_failures: dict[str, Exception] = {}
        self.write_failures: dict[str, Exception] = {}
        self.listing_failure: Exception | None = None
        self.read_gates: dict[str, threading.Event] = {}
        self._lock = threading.Lock()

    def seed(self, path: str, content: bytes, content_type: str | None = None) -> None:
        self.files[path] = content
        if content_type:
            self.content_types[path] = content_type

    def seed_record(
        self,
        doc: dict[str, Any],
        image: bytes | None = None,
        content_type: str | None = None,
    ) -> None:
        """Store a metadata document and, optionally, its binary."""
        self.seed(f"metadata/{doc['id']}.json", json.dumps(doc).encode("utf-8"))
        if image is not None:
            self.seed(f"images/{doc['filename']}", image, content_type)

    def list_directory(self, *, path: str) -> list[dict[str, Any]]:
        if self.listing_failure is not None:
            raise self.listing_failure

        prefix = path.rstrip("/") + "/"
        names = sorted({p[len(prefix):] for p in self.files if p.startswith(prefix)})
        if not names:
            raise http_error(404)

        return [
            {
                "name": name,
                "path": f"{prefix}{name}",
                "type": "file",
                "download_url": self.settings.raw_file_url(f"{prefix}{name}"),
            }
            for name in names
        ]

    def get_raw(self, *, path: str, timeout: float | None = None) -> tuple[bytes, str | None]:
        with self._lock:
            self.reads.append(path)

        gate = self.read_gates.get(path)
        if gate is not None:
            gate.wait(timeout=10)

        if path in self.read_failures:
            raise self.read_failures[path]
        if path not in self.files:
            raise http_error(404)
        return self.files[path], self.content_types.get(path)

    def put_file(self, *, path: str, content: bytes, message: str) -> dict[str, Any]:
        for prefix, exc in self.write_failures.items():
            if path.startswith(prefix):
                raise exc
        if path in self.files:
            raise http_error(422)

        encoded = base64.b64encode(content).decode("ascii")
        self.files[path] = base64.b64decode(encoded)
        self.writes.append((path, message))
        return {"content": {"path": path}}

    def written_paths(self) -> list[str]:
        return [path for path, _ in self.writes]


@pytest.fixture
def github_settings() -> GitHubSettings:
    return GitHubSettings(owner=GITHUB_OWNER, repo=GITHUB_REPO, branch="main")


@pytest.fixture
def fake_github(monkeypatch, github_settings) -> FakeGitHubAdapter:
    """Fake adapter wired in wherever the production store is built."""
    adapter = FakeGitHubAdapter(github_settings)
    monkeypatch.setattr(
        "core.infrastructure.github.github_content_store.GitHubAdapter",
        lambda settings=None: adapter,
    )
    return adapter


@pytest.fixture
def content_store(fake_github) -> GitHubContentStore:
    return GitHubContentStore(fake_github)


@pytest.fixture
def http_error_factory() -> Callable[[int], requests.HTTPError]:
    return http_error


@pytest.fixture
def lambda_context() -> SimpleNamespace:
    return SimpleNamespace(
        aws_request_id="test-request-id",
        function_name="test-function",
        memory_limit_in_mb=256,
        invoked_function_arn="arn:aws:lambda:us-east-1:000000000000:function:test",
        log_group_name="/aws/lambda/test-function",
        log_stream_name="2024/01/01/[$LATEST]test",
    )


@pytest.fixture
def sample_image_binary() -> bytes:
    """Sample binary image data (1x1 PNG)."""
    png_base64 = "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNk+M9QDwADhgGAWjR9awAAAABJRU5ErkJggg=="
    return base64.b64decode(png_base64)


@pytest.fixture
def sample_jpeg_binary() -> bytes:
    """Sample binary JPEG data (minimal valid JPEG)."""
    return (
        b"\xff\xd8\xff\xe0\x00\x10JFIF\x00\x01\x01\x00\x00\x01\x00\x01\x00\x00"
        b"\xff\xdb\x00C\x00\x08\x06\x06\x07\x06\x05\x08\x07\x07\x07\t\t\x08\n\x0c"
        b"\x14\r\x0c\x0b\x0b\x0c\x19\x12\x13\x0f\x14\x1d\x1a\x1f\x1e\x1d\x1a\x1c"
        b"\x1c $.' \",#\x1c\x1c(7),01444\x1f'9=82<.342\xff\xc0\x00\x0b\x08"
        b"\x00\x01\x00\x01\x01\x01\x11\x00\xff\xc4\x00\x14\x00\x01\x00\x00\x00"
        b"\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\t\xff\xc4\x00\x14\x10"
        b"\x01\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00"
        b"\xff\xda\x00\x08\x01\x01\x00\x00?\x00\x7f\x00\xff\xd9"
    )


@pytest.fixture
def make_record() -> Callable[..., dict[str, Any]]:
    """
    Build a metadata document as stored under ``metadata/<id>.json``.

    Usage:
        doc = make_record("img-1", title="Sunset", downloads=3)
    """

    def _make(image_id: str = "img-1", **overrides: Any) -> dict[str, Any]:
        doc: dict[str, Any] = {
            "id": image_id,
            "filename": f"{image_id}.png",
            "title": f"Image {image_id}",
            "description": "",
            "tags": [],
            "category": "landscape",
            "aiTool": "",
            "license": "cc0",
            "date": "2024-01-01T10:00:00Z",
            "url": f"https://raw.githubusercontent.com/{GITHUB_OWNER}/{GITHUB_REPO}/main/images/{image_id}.png",
        }
        doc.update(overrides)
        return doc

    return _make


@pytest.fixture
def multipart_event() -> Callable[..., dict[str, Any]]:
    """
    Build an API Gateway upload event with a real multipart body.

    Usage:
        event = multipart_event({"title": "Sunset"}, image=("a.png", data, "image/png"))
    """

    def _build(
        fields: dict[str, str] | None = None,
        *,
        image: tuple[str, bytes, str] | None = None,
        parts: list[tuple[str, Any]] | None = None,
        method: str = "POST",
    ) -> dict[str, Any]:
        encoder_fields: list[tuple[str, Any]] = list((fields or {}).items())
        if image is not None:
            encoder_fields.append(("image", image))
        encoder_fields.extend(parts or [])

        encoder = MultipartEncoder(fields=encoder_fields)
        return {
            "httpMethod": method,
            "path": "/upload",
            "headers": {"Content-Type": encoder.content_type},
            "body": base64.b64encode(encoder.to_string()).decode("ascii"),
            "isBase64Encoded": True,
        }

    return _build
