"""
Image filtering service for the gallery.

Provides a coordination layer that applies search, category, sort and
pagination strategies to an in-memory snapshot of image records. This
service does not perform data access and never mutates the records.
"""

import random
from collections.abc import Sequence

from aws_lambda_powertools import Logger

from core.filters.category_filter import CategoryFilter
from core.filters.cumulative_pagination import CumulativePagination
from core.filters.image_sorter import ImageSorter
from core.filters.text_search_filter import TextSearchFilter
from core.models.image import ImageRecord
from core.models.pagination import PageWindow

logger = Logger(utc=True)


class InMemoryImageFilter:
    """
    Service responsible for refining and paginating image records.

    The pipeline order is fixed: search, category, sort, truncate.
    """

    def __init__(self) -> None:
        """Initialize filter components used for orchestration."""
        self._search = TextSearchFilter()
        self._category = CategoryFilter()
        self._sorter = ImageSorter()
        self._pagination = CumulativePagination()

    def refine(
        self,
        items: Sequence[ImageRecord],
        *,
        search: str | None,
        category: str | None,
        sort: str,
        rng: random.Random | None = None,
    ) -> list[ImageRecord]:
        """Filter and sort without truncating."""
        result = self._search.apply(items, search)
        result = self._category.apply(result, category)
        return self._sorter.apply(result, sort, rng=rng)

    def paginate(
        self,
        items: Sequence[ImageRecord],
        *,
        page: int,
        page_size: int,
    ) -> tuple[list[ImageRecord], PageWindow]:
        """
        Apply cumulative pagination to refined records.

        Raises:
            ValueError: If pagination parameters are invalid
        """
        is_valid, error_message = self._pagination.validate(page, page_size)
        if not is_valid:
            logger.error(
                "Invalid pagination parameters",
                extra={"page": page, "page_size": page_size, "error": error_message},
            )
            raise ValueError(error_message)

        visible, total_count, _ = self._pagination.paginate(items, page, page_size)
        return visible, self._pagination.get_page_info(page, page_size, total_count)
