"""
Cumulative ("load more") pagination utilities.
"""

from collections.abc import Sequence
from typing import TypeVar

from core.models.pagination import PageWindow
from core.utils.constants import IMAGES_PER_PAGE

ItemT = TypeVar("ItemT")


class CumulativePagination:
    """
    Cumulative pagination helper.

    Page N exposes the first ``N * page_size`` items. Loading another page
    only appends items; earlier pages never drop out of the window.

    Typical usage:
    1. Validate page and page size
    2. Apply pagination to a list of items
    3. Return visible items along with a PageWindow
    """

    @staticmethod
    def paginate(
        items: Sequence[ItemT],
        page: int = 1,
        page_size: int = IMAGES_PER_PAGE,
    ) -> tuple[list[ItemT], int, bool]:
        """
        Truncate items to the cumulative window for ``page``.

        Returns:
            A tuple containing:
            - visible_items: The first ``page * page_size`` items
            - total_count: Total number of items before truncation
            - has_more: True if items remain beyond the window

        Example:
            items = [1, 2, 3, 4, 5]
            page = 2
            page_size = 2

            → ([1, 2, 3, 4], 5, True)
        """
        total_count = len(items)
        limit = page * page_size
        visible_items = list(items[:limit])
        has_more = limit < total_count

        return visible_items, total_count, has_more

    @staticmethod
    def validate(page: int, page_size: int) -> tuple[bool, str]:
        """
        Validate pagination parameters.

        Returns:
            A tuple of:
            - is_valid: Whether parameters are valid
            - error_message: Human-readable error message if invalid
        """
        if page < 1:
            return False, "Page must be at least 1"

        if page_size < 1:
            return False, "Page size must be at least 1"

        return True, ""

    @staticmethod
    def get_page_info(page: int, page_size: int, total_count: int) -> PageWindow:
        """Build the PageWindow describing the current truncation."""
        limit = page * page_size
        return PageWindow(
            page=page,
            page_size=page_size,
            visible_count=min(limit, total_count),
            total_count=total_count,
            has_more=limit < total_count,
        )
