"""
Business logic for building the aggregate image list.
"""

import json
from concurrent.futures import ThreadPoolExecutor, wait

from aws_lambda_powertools import Logger
from pydantic import ValidationError as PydanticValidationError

from core.infrastructure.github.github_content_store import build_content_store
from core.models.errors import ImageServiceError, NotFoundError, PartialFetchError
from core.models.image import ImageRecord
from core.models.store import StoreEntry
from core.repositories.content_repository import ContentStoreRepository
from core.utils.config import GitHubSettings
from core.utils.constants import METADATA_DIR, METADATA_EXTENSION

from .models import ListResult

logger = Logger(utc=True)


class ListService:
    """Application service responsible for the aggregate image list.

    This service coordinates:
    - Listing the metadata directory (fatal when it fails)
    - Fetching every metadata entry concurrently
    - Dropping entries that fail to fetch, parse or validate
    """

    def __init__(
        self,
        store: ContentStoreRepository | None = None,
        settings: GitHubSettings | None = None,
    ) -> None:
        """Initialize list service with required dependencies."""
        self.settings = settings or GitHubSettings.from_env()
        self.store = store or build_content_store(self.settings)

    @staticmethod
    def is_metadata_entry(entry: StoreEntry) -> bool:
        return entry.entry_type == "file" and entry.name.endswith(METADATA_EXTENSION)

    def list_images(self) -> ListResult:
        """Resolve every metadata entry into an ImageRecord.

        Raises:
            ContentStoreError: If the metadata directory cannot be listed
        """
        try:
            entries = self.store.list_directory(path=METADATA_DIR)
        except NotFoundError:
            logger.info("Metadata directory does not exist yet", extra={"path": METADATA_DIR})
            return ListResult()

        candidates = [entry for entry in entries if self.is_metadata_entry(entry)]
        if not candidates:
            return ListResult()

        # Merged in path order so the surviving duplicate is the same every time
        candidates.sort(key=lambda entry: entry.path)
        workers = min(self.settings.metadata_fetch_workers, len(candidates))
        deadline = self.settings.metadata_fetch_deadline

        pool = ThreadPoolExecutor(max_workers=workers)
        try:
            futures = [(entry, pool.submit(self._load_entry, entry)) for entry in candidates]
            _, pending = wait([future for _, future in futures], timeout=deadline)
        finally:
            # Stragglers keep their thread but are not waited for
            pool.shutdown(wait=False, cancel_futures=True)

        if pending:
            logger.warning(
                "Metadata fetch deadline exceeded",
                extra={"deadline": deadline, "unfinished": len(pending)},
            )

        resolved: dict[str, ImageRecord] = {}
        dropped = 0

        for entry, future in futures:
            if future in pending:
                dropped += 1
                logger.warning("Dropping unfinished metadata entry", extra={"path": entry.path})
                continue

            try:
                record = future.result()
            except PartialFetchError as exc:
                dropped += 1
                logger.warning(
                    "Dropping metadata entry",
                    extra={"path": entry.path, "reason": exc.message, **exc.details},
                )
                continue

            if record.id in resolved:
                logger.warning(
                    "Duplicate image id in metadata",
                    extra={"image_id": record.id, "path": entry.path},
                )
                continue
            resolved[record.id] = record

        logger.info(
            "Images listed successfully",
            extra={"count": len(resolved), "dropped": dropped, "entries": len(candidates)},
        )
        return ListResult(images=list(resolved.values()), dropped=dropped)

    def _load_entry(self, entry: StoreEntry) -> ImageRecord:
        """Fetch and validate one metadata entry.

        Raises:
            PartialFetchError: For any fetch, decode or validation failure
        """
        try:
            stored = self.store.read_file(
                path=entry.path,
                timeout=self.settings.metadata_fetch_timeout,
            )
            return ImageRecord.model_validate(json.loads(stored.content))

        except ImageServiceError as exc:
            raise PartialFetchError(
                message=exc.message,
                details={"error_code": exc.error_code},
            ) from exc

        except PydanticValidationError as exc:
            raise PartialFetchError(
                message="Metadata entry failed validation",
                details={"errors": exc.error_count()},
            ) from exc

        except ValueError as exc:
            # json.JSONDecodeError and UnicodeDecodeError both land here
            raise PartialFetchError(message=f"Metadata entry is not valid JSON: {exc}") from exc
