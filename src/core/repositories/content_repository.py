"""Abstract contract for the remote content store."""

from abc import ABC, abstractmethod

from core.models.store import StoreEntry, StoredFile


class ContentStoreRepository(ABC):
    """Contract for a version-controlled path -> content store.

    Every write is a single commit. Implementations could be GitHub,
    GitLab, a local git checkout, etc. Services depend on this
    interface, not the implementation.
    """

    @abstractmethod
    def list_directory(self, *, path: str) -> list[StoreEntry]:
        """List the entries directly under ``path``.

        Raises:
            NotFoundError: If the directory does not exist
            ContentStoreError: If the listing fails
        """

    @abstractmethod
    def read_file(self, *, path: str, timeout: float | None = None) -> StoredFile:
        """Read the file at ``path`` on the configured branch.

        Args:
            path: Store-relative file path
            timeout: Optional per-request timeout in seconds

        Raises:
            NotFoundError: If no file exists at ``path``
            ContentStoreError: If the read fails or times out
        """

    @abstractmethod
    def write_file(self, *, path: str, content: bytes, message: str) -> None:
        """Create the file at ``path`` as one commit.

        Raises:
            ContentConflictError: If the store rejects the write as conflicting
            ContentStoreError: If the write fails for other reasons
        """

    @abstractmethod
    def public_url(self, *, path: str) -> str:
        """Return the public retrieval URL for ``path`` (not verified)."""
