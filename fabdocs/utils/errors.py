"""Centralized error codes, response helpers and domain exceptions.

Render failures of any kind surface to callers as a single generic
``EXPORT_FAILED`` error; the underlying cause is only logged.
"""
from __future__ import annotations
from fastapi import HTTPException
from typing import Any, Dict
import time

ERROR_CODES = {
    "validation": "VALIDATION_ERROR",
    "not_found": "NOT_FOUND",
    "layout_config": "LAYOUT_CONFIG_ERROR",
    "layout": "LAYOUT_ERROR",
    "export_failed": "EXPORT_FAILED",
    "internal": "INTERNAL_SERVER_ERROR",
}

EXPORT_FAILED_MESSAGE = "Failed to export document PDF. Please try again."


def error_payload(code: str, message: str, details: Any | None = None, path: str | None = None) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "status": "error",
        "error": {
            "code": code,
            "message": message,
        },
        "timestamp": time.time(),
    }
    if details is not None:
        payload["error"]["details"] = details
    if path:
        payload["path"] = path
    return payload


def raise_http_error(status_code: int, code: str, message: str, details: Any | None = None) -> None:
    """Raise an HTTPException carrying a standardized code (global handlers keep the shape)."""
    exc = HTTPException(status_code=status_code, detail=message)
    setattr(exc, "code", code)
    setattr(exc, "details", details)
    raise exc


class DomainError(Exception):
    """Base domain error storing standardized fields."""

    def __init__(self, code: str, message: str, details: Any | None = None):  # noqa: D401
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details


class LayoutConfigError(DomainError):
    """A static table configuration cannot hold wrapped text."""

    def __init__(self, message: str):
        super().__init__(ERROR_CODES["layout_config"], message)


class LayoutError(DomainError):
    """A block cannot be placed inside the printable area of a page."""

    def __init__(self, message: str):
        super().__init__(ERROR_CODES["layout"], message)


class DocumentRenderFailed(DomainError):
    def __init__(self, document_type: str):
        super().__init__(ERROR_CODES["export_failed"], EXPORT_FAILED_MESSAGE,
                         details={"document_type": document_type})
        self.document_type = document_type


__all__ = [
    "ERROR_CODES",
    "EXPORT_FAILED_MESSAGE",
    "error_payload",
    "raise_http_error",
    "DomainError",
    "LayoutConfigError",
    "LayoutError",
    "DocumentRenderFailed",
]
