"""Free-text filtering for images."""

from collections.abc import Sequence

from core.models.image import ImageRecord


class TextSearchFilter:
    """Filter images by a case-insensitive substring search.

    A record matches when the search term appears in its title, its
    description, or any one of its tags.
    """

    @staticmethod
    def matches(record: ImageRecord, search_lower: str) -> bool:
        return (
            search_lower in record.title.lower()
            or search_lower in record.description.lower()
            or any(search_lower in tag.lower() for tag in record.tags)
        )

    @staticmethod
    def apply(items: Sequence[ImageRecord], search_term: str | None) -> list[ImageRecord]:
        """Apply the search filter; a blank term keeps every item."""
        if not search_term or not search_term.strip():
            return list(items)

        search_lower = search_term.strip().lower()
        return [item for item in items if TextSearchFilter.matches(item, search_lower)]
