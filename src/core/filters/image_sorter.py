"""Sort strategies for the gallery."""

import random
from collections.abc import Sequence

from core.models.image import ImageRecord
from core.utils.constants import SORT_NEWEST, SORT_POPULAR, SORT_RANDOM


class ImageSorter:
    """Order images by one of the gallery sort modes.

    - ``newest``: descending by creation date
    - ``popular``: descending by download count, missing counts as 0
    - ``random``: a fresh shuffle on every call
    """

    SORT_MODES = (SORT_NEWEST, SORT_POPULAR, SORT_RANDOM)

    @staticmethod
    def apply(
        items: Sequence[ImageRecord],
        mode: str,
        *,
        rng: random.Random | None = None,
    ) -> list[ImageRecord]:
        if mode == SORT_NEWEST:
            return sorted(items, key=lambda item: item.date, reverse=True)

        if mode == SORT_POPULAR:
            return sorted(items, key=lambda item: item.downloads or 0, reverse=True)

        if mode == SORT_RANDOM:
            shuffled = list(items)
            (rng or random).shuffle(shuffled)
            return shuffled

        raise ValueError(f"Invalid sort mode '{mode}'. Allowed: {', '.join(ImageSorter.SORT_MODES)}")
