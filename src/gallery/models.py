"""
State and view models for the gallery.

``GalleryState`` is immutable: every user action produces a new state
through the functions in ``gallery.engine``. ``GalleryView`` is the
render-ready structure a presentation layer consumes.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr

from core.models.image import ImageRecord
from core.models.pagination import PageWindow
from core.utils.constants import CATEGORY_LABELS, DEFAULT_SORT

LoadStatus = Literal["loading", "ready", "error"]
ViewStatus = Literal["loading", "ready", "empty", "error"]


def category_label(category: str) -> str:
    """Display label for ``category``; unknown values render as-is."""
    return CATEGORY_LABELS.get(category, category)


class GalleryState(BaseModel):
    """Snapshot of the gallery for one page load."""

    model_config = ConfigDict(frozen=True)

    images: tuple[ImageRecord, ...] = Field(default_factory=tuple)
    current_page: StrictInt = Field(1, ge=1)
    current_search: StrictStr = ""
    current_category: StrictStr = ""
    current_sort: StrictStr = DEFAULT_SORT
    selected_image: ImageRecord | None = None

    status: LoadStatus = "loading"
    error_message: StrictStr | None = None


class GalleryCard(BaseModel):
    """One tile of the gallery grid."""

    model_config = ConfigDict(frozen=True)

    id: StrictStr
    title: StrictStr
    url: StrictStr
    category: StrictStr
    category_label: StrictStr
    tags: tuple[StrictStr, ...] = ()
    date: datetime
    downloads: StrictInt = 0

    @classmethod
    def from_record(cls, record: ImageRecord) -> "GalleryCard":
        return cls(
            id=record.id,
            title=record.title,
            url=record.url,
            category=record.category,
            category_label=category_label(record.category),
            tags=tuple(record.tags),
            date=record.date,
            downloads=record.downloads or 0,
        )


class GalleryView(BaseModel):
    """Everything needed to draw the gallery once.

    ``empty`` is the "no results" state: the load succeeded but nothing
    matches the active filters. It is distinct from ``loading`` and ``error``.
    """

    model_config = ConfigDict(frozen=True)

    status: ViewStatus
    cards: tuple[GalleryCard, ...] = ()
    window: PageWindow | None = None
    selected: ImageRecord | None = None
    error_message: StrictStr | None = None

    @property
    def total_count(self) -> int:
        return self.window.total_count if self.window else 0

    @property
    def has_more(self) -> bool:
        return self.window.has_more if self.window else False
