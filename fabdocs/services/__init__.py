"""Service layer package."""

__all__ = [
    "asset_loader",
    "document_service",
    "pdf_service",
]
