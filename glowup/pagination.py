"""Slice a tall rasterized report into fixed-size pages.

The whole image is scaled to the page width and drawn once per page,
shifted up by one page height each time, so every page clips a different
vertical band of the same image.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, List

_EPSILON = 1e-6


@dataclass(frozen=True)
class PageSlice:
    """Placement of the scaled source image on one page."""

    source_image: Any
    source_y_offset: float
    dest_page_index: int
    width: float
    height: float


def scale_factor(source_width: float, page_width: float) -> float:
    """Uniform factor that makes the source fill the page width."""

    if source_width <= 0 or page_width <= 0:
        raise ValueError("widths must be positive")
    return page_width / source_width


def paginate(
    source_height: float,
    source_width: float,
    page_width: float,
    page_height: float,
    *,
    image: Any = None,
    keep_trailing_blank_page: bool = False,
) -> List[PageSlice]:
    """Return one :class:`PageSlice` per page, in page order.

    With ``keep_trailing_blank_page`` a scaled height that is an exact
    multiple of ``page_height`` yields one more, empty, page; by default that
    page is dropped.
    """

    if source_height <= 0 or page_height <= 0:
        raise ValueError("heights must be positive")
    scaled_height = source_height * scale_factor(source_width, page_width)

    slices = [PageSlice(image, 0.0, 0, page_width, scaled_height)]
    height_left = scaled_height - page_height
    page_index = 1
    while _has_more(height_left, keep_trailing_blank_page):
        slices.append(PageSlice(image, -(page_index * page_height), page_index, page_width, scaled_height))
        height_left -= page_height
        page_index += 1
    return slices


def _has_more(height_left: float, keep_trailing_blank_page: bool) -> bool:
    if keep_trailing_blank_page:
        return height_left >= 0 or math.isclose(height_left, 0.0, abs_tol=_EPSILON)
    return height_left > _EPSILON
