"""Thin adapter for the GitHub repository contents API."""

import base64
from typing import Any, Protocol

import requests

from core.utils.config import GitHubSettings
from core.utils.constants import (
    DEFAULT_WRITE_TIMEOUT,
    GITHUB_JSON_ACCEPT,
    GITHUB_RAW_ACCEPT,
)


class GitHubAdapterProtocol(Protocol):
    """Minimal GitHub contents adapter protocol (store-facing)."""

    settings: GitHubSettings

    def list_directory(self, *, path: str) -> list[dict[str, Any]]: ...

    def get_raw(self, *, path: str, timeout: float | None = None) -> tuple[bytes, str | None]: ...

    def put_file(self, *, path: str, content: bytes, message: str) -> dict[str, Any]: ...


class GitHubAdapter:
    """Low-level GitHub contents operations (mechanical, no error handling).

    This adapter:
    - Wraps a requests session authenticated with the configured token
    - Does NOT handle errors (``requests`` exceptions bubble up)
    - Domain implementations catch and translate errors
    """

    def __init__(
        self,
        settings: GitHubSettings | None = None,
        session: requests.Session | None = None,
    ) -> None:
        """Create the session from settings (environment by default)."""
        self.settings = settings or GitHubSettings.from_env()
        self._session = session or requests.Session()

        if self.settings.token is not None:
            self._session.headers["Authorization"] = (
                f"token {self.settings.token.get_secret_value()}"
            )

    def _contents_url(self, path: str) -> str:
        s = self.settings
        return f"{s.api_url}/repos/{s.owner}/{s.repo}/contents/{path}"

    def list_directory(self, *, path: str) -> list[dict[str, Any]]:
        """List a directory at the configured branch.

        Raises requests exceptions - caught by domain implementation.
        """
        response = self._session.get(
            self._contents_url(path),
            params={"ref": self.settings.branch},
            headers={"Accept": GITHUB_JSON_ACCEPT},
            timeout=self.settings.metadata_fetch_timeout,
        )
        response.raise_for_status()

        payload = response.json()
        if not isinstance(payload, list):
            raise ValueError(f"Expected a directory listing at '{path}'")
        return payload

    def get_raw(self, *, path: str, timeout: float | None = None) -> tuple[bytes, str | None]:
        """Fetch raw file bytes and the served content type.

        Raises requests exceptions - caught by domain implementation.
        """
        response = self._session.get(
            self._contents_url(path),
            params={"ref": self.settings.branch},
            headers={"Accept": GITHUB_RAW_ACCEPT},
            timeout=timeout,
        )
        response.raise_for_status()
        return response.content, response.headers.get("Content-Type")

    def put_file(self, *, path: str, content: bytes, message: str) -> dict[str, Any]:
        """Create a file as a single commit; content travels base64-encoded.

        Raises requests exceptions - caught by domain implementation.
        """
        response = self._session.put(
            self._contents_url(path),
            json={
                "message": message,
                "content": base64.b64encode(content).decode("ascii"),
                "branch": self.settings.branch,
            },
            headers={"Accept": GITHUB_JSON_ACCEPT},
            timeout=DEFAULT_WRITE_TIMEOUT,
        )
        response.raise_for_status()
        result: dict[str, Any] = response.json()
        return result
