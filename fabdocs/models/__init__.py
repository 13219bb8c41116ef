"""Models package marker.

Exposes the document records for simplified imports.
"""
from .documents import (  # noqa: F401
    Branding,
    GatePassDocument,
    InvoiceDocument,
    LedgerStatement,
    QuotationDocument,
    RenderOptions,
    RenderedDocument,
)
