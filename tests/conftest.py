"""Test configuration and fixtures.

Provides an in-process ASGI client for contract tests, a MagicMock canvas for
layout unit tests, and small Pillow-generated images for branding tests.
"""
import base64
from io import BytesIO
from typing import AsyncGenerator
from unittest.mock import MagicMock

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from PIL import Image

from fabdocs.main import app


@pytest_asyncio.fixture
async def async_client() -> AsyncGenerator[AsyncClient, None]:  # noqa: D401
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def canvas() -> MagicMock:
    """Stand-in for a reportlab canvas; records every draw call."""
    return MagicMock(name="canvas")


def make_png(width: int = 40, height: int = 20, color=(218, 32, 50)) -> bytes:
    buf = BytesIO()
    Image.new("RGB", (width, height), color).save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def png_bytes() -> bytes:
    return make_png()


@pytest.fixture
def png_data_uri(png_bytes: bytes) -> str:
    return "data:image/png;base64," + base64.b64encode(png_bytes).decode("ascii")


@pytest.fixture
def invoice_payload():
    """camelCase invoice document as the frontend sends it."""
    return {
        "invoiceType": "TAX INVOICE",
        "sequence": 7,
        "documentDate": "2026-10-19",
        "organisationName": "Shree Ganesh Steel Fabricators",
        "registeredAddress": "Plot 14, Industrial Area Phase II, Okhla, New Delhi - 110020",
        "consigneeAddress": "Site Office, Sector 62, Noida",
        "clientGstin": "09ABCDE1234F1Z5",
        "orderReferenceType": "po",
        "purchaseOrderNo": "PO/884",
        "vehicleNo": "DL1LX4432",
        "dispatchLrNo": "LR-77",
        "appliedTaxType": "cgst_sgst",
        "lineItems": [
            {"serialNo": 1, "description": "Pre-engineered building structure", "quantity": "2",
             "unit": "MT", "ratePerUnit": "1,25,000", "percentage": "100"},
            {"serialNo": 2, "description": "Roof sheeting", "quantity": 150, "unit": "SQM",
             "ratePerUnit": 420.5, "percentage": 100},
        ],
    }


@pytest.fixture
def gate_pass_payload():
    return {
        "gatePassNumber": "GP-0042",
        "issueDate": "2026-10-19",
        "consigneeName": "Metro Infra Projects",
        "consigneeAddress": "Warehouse 3, Kundli, Sonipat",
        "vehicleNumber": "HR55AB1234",
        "contactNo": "9812345678",
        "contactPerson": "R. Sharma",
        "lineItems": [
            {"serialNo": 1, "partMark": "C1", "materialDescription": "Column", "materialSize": "ISMB 300",
             "quantity": 4, "asslyPartSl": "A-1", "approxValue": "12,000"},
            {"serialNo": 2, "partMark": "R1", "materialDescription": "Rafter", "materialSize": "ISMB 250",
             "quantity": "6", "asslyPartSl": "A-2", "approxValue": "-"},
        ],
        "remarkText": "Material dispatched for erection at site.",
    }


@pytest.fixture
def ledger_payload():
    return {
        "clientName": "Metro Infra Projects",
        "statementDate": "2026-10-19",
        "entries": [
            {"entryDate": "2026-05-02", "particulars": "Payment received", "vchType": "Receipt",
             "vchNo": "RC-11", "credit": "50000"},
            {"entryDate": "2026-04-10", "particulars": "Tax invoice TI-001", "vchType": "Sales",
             "vchNo": "TI-001", "debit": "1,18,000"},
        ],
    }


@pytest.fixture
def quotation_payload():
    return {
        "quotationNumber": "RNS/Q/2026-27/015",
        "enquiryNumber": "ENQ-204",
        "quotationDate": "2026-10-19",
        "projectId": 15,
        "projectLocation": "Sector 8, IMT Manesar",
        "quotationType": "Supply and Fabrication",
        "clientName": "Metro Infra Projects",
        "clientLocation": "Gurugram, Haryana",
        "subject": "Offer for PEB warehouse 40m x 60m",
        "introParagraphs": ["With reference to your enquiry, we are pleased to submit our offer."],
        "contactName": "A. Verma",
        "contactMobile": "9876500000",
        "contactEmail": "sales@example.com",
        "blocks": [
            {"type": "scopeBrief", "rows": [
                {"slNo": 1, "description": "Building width", "details": "40 m"},
                {"slNo": 2, "description": "Building length", "details": "60 m"},
            ]},
            {"type": "applicableCodes", "items": ["IS 800:2007", "IS 875 (Part 3)"]},
            {"type": "commercialPrice"},
            {"type": "paymentTerms"},
            {"type": "scopeBrief", "rows": [{"slNo": 1, "description": "Eave height", "details": "9 m"}]},
        ],
        "lineItems": [
            {"serialNo": 1, "description": "PEB structure supply", "unit": "MT", "quantity": "42",
             "rate": "92,500"},
            {"serialNo": 2, "description": "Roof sheeting", "unit": "SQM", "quantity": 2400, "rate": 450},
        ],
        "paymentTermSections": [
            {"heading": "peb - supply and erection", "terms": ["30% advance with PO", "Balance before dispatch"]},
            {"heading": "", "terms": ["Erection billed monthly"]},
        ],
        "bankDetails": [{"particular": "IFSC", "value": "HDFC0000123"}],
        "notes": ["Prices are valid for 15 days."],
    }
