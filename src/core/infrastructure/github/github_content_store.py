"""GitHub-backed implementation of ContentStoreRepository."""

from http import HTTPStatus

import requests
from aws_lambda_powertools import Logger

from core.infrastructure.adapters.github_adapter import GitHubAdapter, GitHubAdapterProtocol
from core.models.errors import (
    ContentConflictError,
    ContentStoreError,
    NotFoundError,
)
from core.models.store import StoreEntry, StoredFile
from core.repositories.content_repository import ContentStoreRepository
from core.utils.config import GitHubSettings
from core.utils.constants import (
    ERROR_CODE_IMAGE_DOWNLOAD_FAILED,
    ERROR_CODE_IMAGE_UPLOAD_FAILED,
    ERROR_CODE_METADATA_LIST_FAILED,
    ERROR_CODE_STORE_TIMEOUT,
)

logger = Logger(utc=True)

# GitHub answers 409 on branch races and 422 when the path already has a file
_CONFLICT_STATUSES = frozenset({HTTPStatus.CONFLICT, HTTPStatus.UNPROCESSABLE_ENTITY})


def _status_of(exc: requests.HTTPError) -> int | None:
    return exc.response.status_code if exc.response is not None else None


class GitHubContentStore(ContentStoreRepository):
    """Content store backed by a GitHub repository.

    All requests errors are caught and translated into
    domain-specific errors with stable semantics.
    """

    def __init__(self, adapter: GitHubAdapterProtocol | None = None) -> None:
        """Create the store using the provided GitHub adapter."""
        self._github: GitHubAdapterProtocol = adapter or GitHubAdapter()

    def list_directory(self, *, path: str) -> list[StoreEntry]:
        logger.debug("Listing store directory", extra={"path": path})

        try:
            raw_entries = self._github.list_directory(path=path)

        except requests.HTTPError as exc:
            status = _status_of(exc)
            if status == HTTPStatus.NOT_FOUND:
                raise NotFoundError(
                    message="Directory not found",
                    details={"path": path},
                ) from exc

            logger.error("GitHub directory listing failed", extra={"path": path, "status": status})
            raise ContentStoreError(
                message=f"GitHub API error: {status}",
                error_code=ERROR_CODE_METADATA_LIST_FAILED,
                details={"path": path, "status": status},
            ) from exc

        except (requests.RequestException, ValueError) as exc:
            logger.exception("Unexpected error listing store directory")
            raise ContentStoreError(
                message="Unable to list stored images",
                error_code=ERROR_CODE_METADATA_LIST_FAILED,
                details={"path": path},
            ) from exc

        entries: list[StoreEntry] = []
        for raw in raw_entries:
            name = raw.get("name")
            if not isinstance(name, str):
                logger.warning("Skipping listing entry without a name", extra={"path": path})
                continue
            entries.append(
                StoreEntry(
                    name=name,
                    path=raw.get("path") or f"{path}/{name}",
                    entry_type=raw.get("type") or "file",
                    download_url=raw.get("download_url"),
                )
            )

        logger.info("Store directory listed", extra={"path": path, "count": len(entries)})
        return entries

    def read_file(self, *, path: str, timeout: float | None = None) -> StoredFile:
        logger.debug("Reading store file", extra={"path": path, "timeout": timeout})

        try:
            content, content_type = self._github.get_raw(path=path, timeout=timeout)

        except requests.HTTPError as exc:
            status = _status_of(exc)
            if status == HTTPStatus.NOT_FOUND:
                raise NotFoundError(
                    message="File not found",
                    details={"path": path},
                ) from exc

            logger.error("GitHub file read failed", extra={"path": path, "status": status})
            raise ContentStoreError(
                message="Unable to read file from the store",
                error_code=ERROR_CODE_IMAGE_DOWNLOAD_FAILED,
                details={"path": path, "status": status},
            ) from exc

        except requests.Timeout as exc:
            logger.warning("GitHub file read timed out", extra={"path": path, "timeout": timeout})
            raise ContentStoreError(
                message="Timed out reading file from the store",
                error_code=ERROR_CODE_STORE_TIMEOUT,
                details={"path": path},
            ) from exc

        except requests.RequestException as exc:
            logger.exception("Unexpected error reading store file")
            raise ContentStoreError(
                message="Unable to read file from the store",
                error_code=ERROR_CODE_IMAGE_DOWNLOAD_FAILED,
                details={"path": path},
            ) from exc

        return StoredFile(path=path, content=content, content_type=content_type)

    def write_file(self, *, path: str, content: bytes, message: str) -> None:
        logger.debug("Writing store file", extra={"path": path, "size": len(content)})

        try:
            self._github.put_file(path=path, content=content, message=message)
            logger.info("Store file committed", extra={"path": path, "commit_message": message})

        except requests.HTTPError as exc:
            status = _status_of(exc)
            logger.error("GitHub commit failed", extra={"path": path, "status": status})

            if status in _CONFLICT_STATUSES:
                raise ContentConflictError(
                    message="The store rejected the write as conflicting",
                    details={"path": path, "status": status},
                ) from exc

            raise ContentStoreError(
                message="GitHub upload failed",
                error_code=ERROR_CODE_IMAGE_UPLOAD_FAILED,
                details={"path": path, "status": status},
            ) from exc

        except requests.RequestException as exc:
            logger.exception("Unexpected error writing store file")
            raise ContentStoreError(
                message="GitHub upload failed",
                error_code=ERROR_CODE_IMAGE_UPLOAD_FAILED,
                details={"path": path},
            ) from exc

    def public_url(self, *, path: str) -> str:
        return self._github.settings.raw_file_url(path)


def build_content_store(settings: GitHubSettings | None = None) -> GitHubContentStore:
    """Create the production store for the configured repository."""
    return GitHubContentStore(GitHubAdapter(settings))
