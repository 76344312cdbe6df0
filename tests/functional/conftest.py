import base64
from typing import Any
from urllib.parse import urlparse

import pytest
import requests
from requests.adapters import BaseAdapter
from requests.structures import CaseInsensitiveDict

from core.utils.constants import DOWNLOAD_ENDPOINT, LIST_ENDPOINT, UPLOAD_ENDPOINT
from gallery.client import GalleryClient
from handlers.download_image.handler import handler as download_handler
from handlers.list_images.handler import handler as list_handler
from handlers.upload_image.handler import handler as upload_handler

BASE_URL = "https://gallery.test/.netlify/functions"


class LambdaTransport(BaseAdapter):
    """requests transport that turns each request into an API Gateway proxy event."""

    def __init__(self, routes: dict[str, Any], context: Any) -> None:
        super().__init__()
        self.routes = routes
        self.context = context

    def send(self, request, stream=False, timeout=None, verify=True, cert=None, proxies=None):
        path = urlparse(request.url).path
        lambda_handler = self.routes[path.rsplit("/", 1)[-1]]

        raw = request.body
        if hasattr(raw, "read"):
            raw = raw.read()
        if isinstance(raw, str):
            raw = raw.encode("utf-8")

        event = {
            "httpMethod": request.method,
            "path": path,
            "headers": dict(request.headers),
            "body": base64.b64encode(raw or b"").decode("ascii"),
            "isBase64Encoded": True,
        }
        result = lambda_handler(event, self.context)

        response = requests.Response()
        response.status_code = result["statusCode"]
        response.headers = CaseInsensitiveDict(result["headers"])
        body = result.get("body") or ""
        response._content = base64.b64decode(body) if result.get("isBase64Encoded") else body.encode("utf-8")
        response.url = request.url
        response.request = request
        return response

    def close(self) -> None:
        pass


@pytest.fixture
def gallery_client(fake_github, lambda_context) -> GalleryClient:
    """Gallery client whose requests are served by the handlers over the fake store."""
    session = requests.Session()
    session.mount(
        BASE_URL,
        LambdaTransport(
            {
                LIST_ENDPOINT: list_handler,
                UPLOAD_ENDPOINT: upload_handler,
                DOWNLOAD_ENDPOINT: download_handler,
            },
            lambda_context,
        ),
    )
    return GalleryClient(BASE_URL, session=session)
