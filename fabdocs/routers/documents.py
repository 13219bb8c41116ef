"""Document export router.

Each endpoint renders one document type (invoice, gate pass, client ledger, quotation). ``delivery=download`` streams the PDF
itself; ``attachment`` and ``both`` return the bytes as a data URI inside the
success envelope so the caller can attach them to an outbound message.
"""
from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Request, Response, status
from pydantic import BaseModel, ConfigDict, Field

from ..config.logging import bind_context
from ..models.documents import (
    Branding,
    GatePassDocument,
    InvoiceDocument,
    LedgerStatement,
    QuotationDocument,
    RenderedDocument,
    RenderOptions,
)
from ..services.document_service import render_document
from ..services.pdf_service import Document
from ..utils.api_shapes import success
from ..utils.errors import DocumentRenderFailed, raise_http_error

logger = logging.getLogger(__name__)

router = APIRouter()


class _RenderRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    branding: Optional[Branding] = None
    options: RenderOptions = Field(default_factory=RenderOptions)


class InvoiceRenderRequest(_RenderRequest):
    document: InvoiceDocument


class GatePassRenderRequest(_RenderRequest):
    document: GatePassDocument


class LedgerRenderRequest(_RenderRequest):
    document: LedgerStatement


class QuotationRenderRequest(_RenderRequest):
    document: QuotationDocument


def _deliver(rendered: RenderedDocument, options: RenderOptions):
    if options.delivery == "download":
        return Response(
            content=rendered.file_bytes,
            media_type=rendered.media_type,
            headers={"Content-Disposition": f'attachment; filename="{rendered.file_name}"'},
        )
    return success({
        "file_name": rendered.file_name,
        "page_count": rendered.page_count,
        "data_uri": rendered.data_uri(),
        "offer_download": options.offer_download,
    }, delivery=options.delivery)


async def _export(request: Request, document: Document, branding: Optional[Branding], options: RenderOptions):
    log = bind_context(logger, request_id=getattr(request.state, "request_id", None),
                       document_type=document.document_type)
    try:
        rendered = await render_document(document, branding, options)
    except DocumentRenderFailed as exc:
        log.warning("Export failed")
        raise_http_error(status.HTTP_500_INTERNAL_SERVER_ERROR, exc.code, exc.message)
    log.info("Exported %s (%d page(s), delivery=%s)", rendered.file_name, rendered.page_count, options.delivery)
    return _deliver(rendered, options)


@router.post("/invoice")
async def export_invoice(payload: InvoiceRenderRequest, request: Request):
    return await _export(request, payload.document, payload.branding, payload.options)


@router.post("/gate-pass")
async def export_gate_pass(payload: GatePassRenderRequest, request: Request):
    return await _export(request, payload.document, payload.branding, payload.options)


@router.post("/client-ledger")
async def export_client_ledger(payload: LedgerRenderRequest, request: Request):
    return await _export(request, payload.document, payload.branding, payload.options)


@router.post("/quotation")
async def export_quotation(payload: QuotationRenderRequest, request: Request):
    return await _export(request, payload.document, payload.branding, payload.options)


__all__ = ["router", "InvoiceRenderRequest", "GatePassRenderRequest", "LedgerRenderRequest",
           "QuotationRenderRequest"]
