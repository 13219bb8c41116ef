"""Branding image fetch-and-decode.

Images are loaded sequentially and fully decoded before layout starts, since
every page's chrome draws from already-decoded data. Any failure (network,
HTTP status, undecodable bytes) drops that one image and is logged; it never
fails the render.
"""
from __future__ import annotations

import base64
import binascii
from io import BytesIO
import logging
from typing import Dict, Optional
from urllib.parse import unquote_to_bytes

import httpx
from reportlab.lib.utils import ImageReader

from fabdocs.config.observability import record_asset_failure
from fabdocs.config.settings import get_settings
from fabdocs.models.documents import Branding
from fabdocs.pdf.chrome import BrandingImages

LOGGER = logging.getLogger(__name__)


class AssetLoadError(Exception):
    """Raised internally when one image cannot be fetched or decoded."""


def decode_data_uri(uri: str) -> bytes:
    """Return the payload of a ``data:`` URI (base64 or percent-encoded)."""
    header, sep, payload = uri.partition(",")
    if not sep:
        raise AssetLoadError("Malformed data URI")
    if header.endswith(";base64"):
        try:
            return base64.b64decode(payload, validate=False)
        except (binascii.Error, ValueError) as exc:
            raise AssetLoadError(f"Invalid base64 payload: {exc}") from exc
    return unquote_to_bytes(payload)


def decode_image(data: bytes) -> ImageReader:
    if not data:
        raise AssetLoadError("Empty image payload")
    try:
        reader = ImageReader(BytesIO(data))
        reader.getSize()
    except Exception as exc:  # noqa: BLE001 - reportlab/PIL raise a wide range of decode errors
        raise AssetLoadError(f"Undecodable image: {exc}") from exc
    return reader


async def fetch_image_bytes(url: str, client: httpx.AsyncClient) -> bytes:
    if url.startswith("data:"):
        return decode_data_uri(url)
    try:
        response = await client.get(url)
        response.raise_for_status()
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        raise AssetLoadError(f"Fetch failed for {url}: {exc}") from exc
    return response.content


async def load_image(url: Optional[str], client: httpx.AsyncClient, slot: str = "image") -> Optional[ImageReader]:
    if not url:
        return None
    try:
        return decode_image(await fetch_image_bytes(url, client))
    except AssetLoadError as exc:
        LOGGER.warning("Failed to load %s image: %s", slot, exc)
        record_asset_failure(slot)
        return None


async def load_images(urls: Dict[str, Optional[str]], client: Optional[httpx.AsyncClient] = None
                      ) -> Dict[str, Optional[ImageReader]]:
    """Fetch every named image in order; failed or absent slots map to None."""
    loaded: Dict[str, Optional[ImageReader]] = {slot: None for slot in urls}
    if not any(urls.values()):
        return loaded

    owns_client = client is None
    if owns_client:
        client = httpx.AsyncClient(timeout=get_settings().ASSET_FETCH_TIMEOUT_S, follow_redirects=True)
    try:
        for slot, url in urls.items():
            loaded[slot] = await load_image(url, client, slot)
    finally:
        if owns_client:
            await client.aclose()
    return loaded


async def load_branding_images(branding: Optional[Branding], client: Optional[httpx.AsyncClient] = None
                               ) -> BrandingImages:
    """Fetch header, footer and stamp images, omitting any that fail."""
    if branding is None:
        return BrandingImages()
    images = BrandingImages(**await load_images(branding.image_urls(), client))
    LOGGER.info("Branding images loaded: %s", ", ".join(images.present()) or "none")
    return images


__all__ = [
    "AssetLoadError",
    "decode_data_uri",
    "decode_image",
    "fetch_image_bytes",
    "load_image",
    "load_images",
    "load_branding_images",
]
