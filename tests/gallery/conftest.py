import json
from collections.abc import Callable
from typing import Any

import pytest
import requests
from requests.structures import CaseInsensitiveDict

from core.models.image import ImageRecord


@pytest.fixture
def make_response() -> Callable[..., requests.Response]:
    """
    Build a real requests.Response without a network round trip.

    Usage:
        response = make_response(200, json_body={"images": []})
    """

    def _make(
        status: int = 200,
        *,
        json_body: Any = None,
        content: bytes | None = None,
        headers: dict[str, str] | None = None,
    ) -> requests.Response:
        response = requests.Response()
        response.status_code = status
        response.headers = CaseInsensitiveDict(headers or {})
        if json_body is not None:
            response._content = json.dumps(json_body).encode("utf-8")
            response.headers.setdefault("Content-Type", "application/json")
        else:
            response._content = content or b""
        return response

    return _make


@pytest.fixture
def gallery_records(make_record) -> list[ImageRecord]:
    """Thirty records spread over three categories and three dates."""
    categories = ["landscape", "fantasy", "anime"]
    records = []
    for i in range(30):
        records.append(
            ImageRecord.model_validate(
                make_record(
                    f"img-{i:02d}",
                    title=f"{'Sunset' if i % 2 else 'Forest'} {i}",
                    description="misty morning" if i % 5 == 0 else "",
                    tags=["golden"] if i % 4 == 0 else [],
                    category=categories[i % 3],
                    date=f"2024-02-{(i % 28) + 1:02d}T12:00:00Z",
                    downloads=i if i % 2 == 0 else None,
                )
            )
        )
    return records
