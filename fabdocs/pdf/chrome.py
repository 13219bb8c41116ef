"""Per-page chrome: branding header/footer/stamp images and the page caption."""
from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Optional

from reportlab.lib.utils import ImageReader

from fabdocs.config.observability import record_asset_failure
from .geometry import CAPTION_COLOR, CAPTION_FONT_SIZE, FONT_REGULAR, PageGeometry

LOGGER = logging.getLogger(__name__)


@dataclass
class BrandingImages:
    """Decoded branding images; any slot may be absent."""

    header: Optional[ImageReader] = None
    footer: Optional[ImageReader] = None
    stamp: Optional[ImageReader] = None

    def present(self) -> list[str]:
        return [slot for slot in ("header", "footer", "stamp") if getattr(self, slot) is not None]


class ChromeRenderer:
    """Draws the chrome identically on every page.

    An image that fails to draw is dropped for the rest of the render so each
    page keeps the same chrome.
    """

    def __init__(self, canvas, geometry: PageGeometry, images: Optional[BrandingImages] = None):
        self.canvas = canvas
        self.geometry = geometry
        self.images = images or BrandingImages()

    def render(self, page_number: int) -> None:
        g = self.geometry
        self._draw_image("header", 0, 0, g.width, g.header_height)
        self._draw_image("footer", 0, g.height - g.footer_height, g.width, g.footer_height)
        self._draw_image(
            "stamp",
            g.width - g.stamp_right - g.stamp_size,
            g.height - g.stamp_bottom - g.stamp_size,
            g.stamp_size,
            g.stamp_size,
        )
        self.canvas.setFont(FONT_REGULAR, CAPTION_FONT_SIZE)
        self.canvas.setFillColor(CAPTION_COLOR)
        self.canvas.drawCentredString(g.x_pt(g.width / 2), g.y_pt(g.height - 8), f"Page {page_number}")

    def _draw_image(self, slot: str, x: float, top: float, width: float, height: float) -> None:
        image = getattr(self.images, slot)
        if image is None:
            return
        g = self.geometry
        try:
            self.canvas.drawImage(image, g.x_pt(x), g.y_pt(top + height), g.x_pt(width), g.x_pt(height), mask="auto")
        except Exception as exc:  # noqa: BLE001 - chrome degrades, never aborts the render
            LOGGER.warning("Dropping %s image after draw failure: %s", slot, exc)
            record_asset_failure(slot)
            setattr(self.images, slot, None)


__all__ = ["BrandingImages", "ChromeRenderer"]
