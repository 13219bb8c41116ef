"""Vertical write position and page-break management for one render."""
from __future__ import annotations

import logging
from typing import Callable, Optional

from fabdocs.utils.errors import LayoutError
from .geometry import PageGeometry

LOGGER = logging.getLogger(__name__)


class PageCursor:
    """Tracks ``y`` (mm from page top) and the 1-based page number.

    ``on_new_page`` is called with the new page number right after a break so the
    caller can repaint the page chrome before any content lands on the page.
    """

    def __init__(self, canvas, geometry: PageGeometry, on_new_page: Optional[Callable[[int], None]] = None):
        self.canvas = canvas
        self.geometry = geometry
        self.on_new_page = on_new_page
        self.page = 1
        self.y = geometry.content_top

    @property
    def limit(self) -> float:
        return self.geometry.content_bottom

    @property
    def remaining(self) -> float:
        return self.limit - self.y

    def ensure_space(self, needed_height: float) -> bool:
        """Break to a new page unless ``needed_height`` fits below ``y``.

        Returns True when a break happened. A block that cannot fit even on an
        empty page raises :class:`LayoutError`.
        """
        if needed_height > self.limit - self.geometry.content_top:
            raise LayoutError(
                f"Block of {needed_height:.1f}mm exceeds the printable height of "
                f"{self.limit - self.geometry.content_top:.1f}mm")
        if self.y + needed_height > self.limit:
            self.new_page()
            return True
        return False

    def new_page(self) -> None:
        self.canvas.showPage()
        self.page += 1
        self.y = self.geometry.content_top
        LOGGER.debug("Page break -> page %d", self.page)
        if self.on_new_page is not None:
            self.on_new_page(self.page)

    def advance(self, height: float) -> None:
        self.y += height


__all__ = ["PageCursor"]
