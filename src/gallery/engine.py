"""
Gallery state transitions.

Every function takes a ``GalleryState`` and returns a new one (or a value
derived from it); nothing here mutates its input or touches rendering.
Only ``load`` performs I/O.
"""

import random
from typing import Protocol

from aws_lambda_powertools import Logger

from core.filters.in_memory_image_filter import InMemoryImageFilter
from core.models.image import ImageRecord
from core.models.pagination import PageWindow
from core.utils.constants import ALLOWED_SORTS, DEFAULT_SORT, IMAGES_PER_PAGE

from .client import GalleryClientError
from .models import GalleryCard, GalleryState, GalleryView

logger = Logger(utc=True)

_filter = InMemoryImageFilter()


class ImageSource(Protocol):
    """Anything able to return the aggregate image list."""

    def list_images(self) -> list[ImageRecord]: ...


def initial_state() -> GalleryState:
    return GalleryState()


def load(state: GalleryState, source: ImageSource) -> GalleryState:
    """Fetch the aggregate list once and populate ``images``.

    A failed fetch moves the gallery into the error state for this page
    load; filters and selection are left untouched.
    """
    try:
        images = source.list_images()
    except GalleryClientError as exc:
        logger.error("Failed to load images", extra={"error": exc.message, "status": exc.status_code})
        return state.model_copy(
            update={"status": "error", "error_message": "Failed to load images. Please refresh."}
        )

    logger.info("Gallery loaded", extra={"count": len(images)})
    return state.model_copy(
        update={
            "images": tuple(images),
            "current_page": 1,
            "status": "ready",
            "error_message": None,
        }
    )


def set_search(state: GalleryState, query: str) -> GalleryState:
    return state.model_copy(update={"current_search": query.strip(), "current_page": 1})


def set_category(state: GalleryState, category: str) -> GalleryState:
    return state.model_copy(update={"current_category": category.strip(), "current_page": 1})


def set_sort(state: GalleryState, mode: str) -> GalleryState:
    """Change the sort mode.

    Raises:
        ValueError: If ``mode`` is not a known sort mode
    """
    if mode not in ALLOWED_SORTS:
        raise ValueError(f"Invalid sort mode '{mode}'")
    return state.model_copy(update={"current_sort": mode, "current_page": 1})


def reset_filters(state: GalleryState) -> GalleryState:
    return state.model_copy(
        update={
            "current_search": "",
            "current_category": "",
            "current_sort": DEFAULT_SORT,
            "current_page": 1,
        }
    )


def search_tag(state: GalleryState, tag: str) -> GalleryState:
    """Search by a tag clicked in the detail view."""
    return set_search(state, tag)


def load_more(state: GalleryState) -> GalleryState:
    return state.model_copy(update={"current_page": state.current_page + 1})


def view(state: GalleryState, image_id: str) -> GalleryState:
    """Open the detail view for ``image_id``.

    The lookup runs over the unfiltered snapshot; an unknown id leaves the
    state unchanged.
    """
    record = next((image for image in state.images if image.id == image_id), None)
    if record is None:
        logger.debug("View requested for unknown image", extra={"image_id": image_id})
        return state
    return state.model_copy(update={"selected_image": record})


def close_view(state: GalleryState) -> GalleryState:
    return state.model_copy(update={"selected_image": None})


def share_url(state: GalleryState) -> str | None:
    """Public URL of the open image, for copy-to-clipboard."""
    return state.selected_image.url if state.selected_image else None


def compute_visible(
    state: GalleryState,
    *,
    rng: random.Random | None = None,
    page_size: int = IMAGES_PER_PAGE,
) -> list[ImageRecord]:
    """Filtered, sorted and truncated records for the current state.

    With the ``random`` sort every call reshuffles.
    """
    visible, _ = _refine_and_paginate(state, rng=rng, page_size=page_size)
    return visible


def build_view(
    state: GalleryState,
    *,
    rng: random.Random | None = None,
    page_size: int = IMAGES_PER_PAGE,
) -> GalleryView:
    """Render-ready view of ``state``."""
    if state.status == "loading":
        return GalleryView(status="loading")

    if state.status == "error":
        return GalleryView(
            status="error",
            error_message=state.error_message,
            selected=state.selected_image,
        )

    visible, window = _refine_and_paginate(state, rng=rng, page_size=page_size)
    return GalleryView(
        status="ready" if window.total_count else "empty",
        cards=tuple(GalleryCard.from_record(record) for record in visible),
        window=window,
        selected=state.selected_image,
    )


def _refine_and_paginate(
    state: GalleryState, *, rng: random.Random | None, page_size: int
) -> tuple[list[ImageRecord], PageWindow]:
    refined = _filter.refine(
        state.images,
        search=state.current_search,
        category=state.current_category,
        sort=state.current_sort,
        rng=rng,
    )
    return _filter.paginate(refined, page=state.current_page, page_size=page_size)
