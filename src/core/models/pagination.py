"""Pagination model."""

from pydantic import BaseModel, Field, StrictBool, StrictInt


class PageWindow(BaseModel):
    """Cumulative pagination metadata for the gallery view.

    The window always starts at the first item: page N shows the first
    ``N * page_size`` items rather than a slice of its own.
    """

    page: StrictInt = Field(..., ge=1, description="1-based page counter")
    page_size: StrictInt = Field(..., ge=1, description="Items added per page")
    visible_count: StrictInt = Field(..., ge=0, description="Items inside the window")
    total_count: StrictInt = Field(..., ge=0, description="Items matching the active filters")
    has_more: StrictBool = Field(..., description="Whether items remain beyond the window")
