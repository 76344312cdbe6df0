"""Category filtering for images."""

from collections.abc import Sequence

from core.models.image import ImageRecord


class CategoryFilter:
    """Keep only images whose category equals the selected one exactly."""

    @staticmethod
    def apply(items: Sequence[ImageRecord], category: str | None) -> list[ImageRecord]:
        if not category:
            return list(items)
        return [item for item in items if item.category == category]
