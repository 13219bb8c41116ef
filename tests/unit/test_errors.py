import pytest  # noqa: F401
from fabdocs.utils.errors import (
    ERROR_CODES,
    EXPORT_FAILED_MESSAGE,
    DocumentRenderFailed,
    LayoutError,
    error_payload,
)


def test_error_payload_basic():
    p = error_payload(ERROR_CODES["validation"], "Invalid data", details={
                      "field": "x"}, path="/api/v1/documents/invoice")
    assert p["status"] == "error"
    assert p["error"]["code"] == ERROR_CODES["validation"]
    assert p["error"]["details"] == {"field": "x"}
    assert p["path"] == "/api/v1/documents/invoice"


def test_render_failure_carries_generic_message_only():
    exc = DocumentRenderFailed("invoice")
    assert exc.code == ERROR_CODES["export_failed"] == "EXPORT_FAILED"
    assert exc.message == EXPORT_FAILED_MESSAGE
    assert exc.details == {"document_type": "invoice"}


def test_layout_error_code():
    assert LayoutError("too tall").code == ERROR_CODES["layout"]
