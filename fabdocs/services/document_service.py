"""Document render entry point.

``render_document`` is the only public seam of the render pipeline: it awaits
image loading, runs the synchronous composer, and converts every failure into
:class:`DocumentRenderFailed` after logging the real cause.
"""
from __future__ import annotations

from datetime import date
from typing import Optional

import httpx
import structlog

from fabdocs.config.observability import track_render
from fabdocs.config.settings import get_settings
from fabdocs.models.documents import Branding, GatePassDocument, RenderedDocument, RenderOptions
from fabdocs.services.asset_loader import load_branding_images, load_images
from fabdocs.services.pdf_service import Document, composer_for
from fabdocs.utils.errors import DocumentRenderFailed

logger = structlog.get_logger(__name__)


async def _render(document: Document, branding: Optional[Branding], options: RenderOptions,
                  client: httpx.AsyncClient, generated_on: Optional[date]) -> RenderedDocument:
    document_type = document.document_type
    try:
        images = await load_branding_images(branding, client)
        extra = {}
        if isinstance(document, GatePassDocument):
            extra["signature_images"] = await load_images(document.signatures.model_dump(), client)
        composer = composer_for(document)(document, branding, images, generated_on=generated_on, **extra)
        with track_render(document_type):
            rendered = composer.compose()
    except Exception as exc:  # noqa: BLE001 - callers only ever see the generic export error
        logger.exception("document_render_failed", document_type=document_type, error=str(exc))
        raise DocumentRenderFailed(document_type) from exc

    logger.info(
        "document_rendered",
        document_type=document_type,
        file_name=rendered.file_name,
        page_count=rendered.page_count,
        size_bytes=len(rendered.file_bytes),
        delivery=options.delivery,
    )
    return rendered


async def render_document(
    document: Document,
    branding: Optional[Branding] = None,
    options: Optional[RenderOptions] = None,
    *,
    client: Optional[httpx.AsyncClient] = None,
    generated_on: Optional[date] = None,
) -> RenderedDocument:
    """Render ``document`` to PDF bytes.

    Branding images are fetched sequentially before layout begins; an image
    that cannot be loaded is omitted. Pass ``client`` to reuse (or mock) the
    HTTP transport.
    """
    options = options or RenderOptions()
    if client is not None:
        return await _render(document, branding, options, client, generated_on)
    async with httpx.AsyncClient(timeout=get_settings().ASSET_FETCH_TIMEOUT_S, follow_redirects=True) as owned:
        return await _render(document, branding, options, owned, generated_on)


__all__ = ["render_document"]
