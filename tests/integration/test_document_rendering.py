"""End-to-end renders through ``render_document`` with real reportlab output."""
import re
from datetime import date
from decimal import Decimal
from unittest.mock import patch

import httpx
import pytest

from fabdocs.models.documents import (
    Branding,
    GatePassDocument,
    GatePassLineItem,
    InvoiceDocument,
    InvoiceLineItem,
    LedgerStatement,
    QuotationDocument,
    RenderOptions,
)
from fabdocs.pdf.cursor import PageCursor
from fabdocs.pdf.geometry import A4
from fabdocs.services import pdf_service
from fabdocs.services.document_service import render_document
from fabdocs.services.pdf_service import entity_initials, financial_year
from fabdocs.utils.errors import DocumentRenderFailed, EXPORT_FAILED_MESSAGE

FILE_NAME = re.compile(r"^[A-Z_]+_\d{8}_[A-Za-z]+_[^.]+\.pdf$")
TODAY = date(2026, 10, 19)


def _invoice(count: int, **overrides) -> InvoiceDocument:
    items = [
        InvoiceLineItem(serial_no=i, description=f"Fabricated member {i}", quantity=Decimal("1"),
                        rate_per_unit=Decimal("1000"))
        for i in range(1, count + 1)
    ]
    return InvoiceDocument(line_items=items, **overrides)


def _offline_client() -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(lambda request: httpx.Response(404)))


def test_entity_initials_and_financial_year():
    assert entity_initials("Revira NexGen Structures") == "RNS"
    assert entity_initials(None) == "RNS"
    assert entity_initials("Acme Steel Works") == "ASW"
    assert financial_year(date(2026, 10, 19)) == "2026-27"
    assert financial_year(date(2027, 3, 31)) == "2026-27"


@pytest.mark.asyncio
async def test_forty_items_span_more_than_one_page():
    rendered = await render_document(_invoice(40), generated_on=TODAY)
    assert rendered.page_count > 1
    assert rendered.file_bytes.startswith(b"%PDF")


@pytest.mark.asyncio
async def test_short_invoice_fits_one_page():
    rendered = await render_document(_invoice(3), generated_on=TODAY)
    assert rendered.page_count == 1


@pytest.mark.asyncio
async def test_invoice_without_branding_uses_default_initials():
    rendered = await render_document(_invoice(2, invoice_type="TAX INVOICE"), generated_on=TODAY)
    assert rendered.file_name == "TAX_INVOICE_19102026_RNS_R0.pdf"
    assert FILE_NAME.match(rendered.file_name)


@pytest.mark.asyncio
async def test_proforma_file_name_uses_entity_and_revision():
    branding = Branding(entity_name="Acme Steel Works")
    doc = _invoice(1, revision="R2", document_date=date(2026, 4, 1))
    rendered = await render_document(doc, branding, generated_on=TODAY)
    assert rendered.file_name == "PROFORMA_INVOICE_01042026_ASW_R2.pdf"


@pytest.mark.asyncio
async def test_unreachable_branding_images_still_render(png_data_uri):
    branding = Branding(entity_name="Acme Steel Works", header_url="http://assets.test/header.png",
                        footer_url="not a url at all", stamp_url=png_data_uri)
    async with _offline_client() as client:
        rendered = await render_document(_invoice(5), branding, client=client, generated_on=TODAY)
    assert rendered.page_count == 1
    assert rendered.file_bytes.startswith(b"%PDF")


@pytest.mark.asyncio
async def test_long_descriptions_repeat_across_pages(png_data_uri):
    long_text = "Heavy built-up section with stiffeners, cleats and base plates " * 6
    items = [InvoiceLineItem(serial_no=i, description=long_text, rate_per_unit=Decimal("10"))
             for i in range(1, 16)]
    branding = Branding(header_url=png_data_uri, footer_url=png_data_uri)
    rendered = await render_document(InvoiceDocument(line_items=items), branding, generated_on=TODAY)
    assert rendered.page_count >= 2


@pytest.mark.asyncio
async def test_gate_pass_render(gate_pass_payload, png_data_uri):
    gate_pass_payload["signatures"] = {"storeKeeper": png_data_uri, "plantHead": "http://assets.test/sig.png"}
    doc = GatePassDocument.model_validate(gate_pass_payload)
    async with _offline_client() as client:
        rendered = await render_document(doc, client=client, generated_on=TODAY)
    assert rendered.file_name == "GATE_PASS_19102026_RNS_R0.pdf"
    assert rendered.page_count == 1


@pytest.mark.asyncio
async def test_client_ledger_render(ledger_payload):
    doc = LedgerStatement.model_validate(ledger_payload)
    rendered = await render_document(doc, Branding(entity_name="Revira NexGen Structures"),
                                     RenderOptions(delivery="attachment"), generated_on=TODAY)
    assert rendered.file_name == "CLIENT_LEDGER_19102026_RNS_R0.pdf"
    assert rendered.data_uri().startswith("data:application/pdf;filename=CLIENT_LEDGER_19102026_RNS_R0.pdf;base64,")


def test_ledger_closing_balance_sides(ledger_payload):
    doc = LedgerStatement.model_validate(ledger_payload)
    assert pdf_service.LedgerComposer(doc).closing_lines()[-1] == "Closing Balance (Dr): 68,000.00"
    ledger_payload["entries"][0]["credit"] = "2,00,000"
    doc = LedgerStatement.model_validate(ledger_payload)
    assert pdf_service.LedgerComposer(doc).closing_lines()[-1] == "Closing Balance (Cr): 82,000.00"


def test_invoice_summary_rows_follow_regime(invoice_payload):
    doc = InvoiceDocument.model_validate(invoice_payload)
    rows = {r.detail: r.value for r in pdf_service.InvoiceComposer(doc).summary_rows()}
    assert rows["Total Amount before Tax"] == "3,13,075.00"
    assert rows["(1) Add: CGST"] == rows["(2) Add: SGST"] == "28,176.75"
    assert rows["(3) Add: IGST"] == "0.00"
    assert rows["Grand Total"] == "3,69,428.50"


def test_invoice_number_uses_financial_year(invoice_payload):
    doc = InvoiceDocument.model_validate(invoice_payload)
    composer = pdf_service.InvoiceComposer(doc, Branding(entity_name="Revira NexGen Structures"))
    assert composer.document_number() == "RNS/2026-27/RNS-TI-007"


def test_gate_pass_total_row(gate_pass_payload):
    doc = GatePassDocument.model_validate(gate_pass_payload)
    total = pdf_service.GatePassComposer(doc).item_rows()[-1]
    assert total.cells[2] == "TOTAL"
    assert total.cells[4] == "10"
    assert total.cells[6] == "12,000.00"
    assert total.shaded is True


@pytest.mark.asyncio
async def test_layout_failure_becomes_generic_export_error():
    with patch.object(pdf_service.InvoiceComposer, "draw", side_effect=RuntimeError("boom")):
        with pytest.raises(DocumentRenderFailed) as info:
            await render_document(_invoice(1), generated_on=TODAY)
    assert info.value.message == EXPORT_FAILED_MESSAGE
    assert "boom" not in info.value.message
    assert isinstance(info.value.__cause__, RuntimeError)


@pytest.mark.parametrize("raw", ["Infinity", "-Infinity", "NaN", "sNaN", "-", ""])
def test_non_numeric_approx_value_counts_as_zero(raw):
    assert GatePassLineItem(approx_value=raw).approx_amount == 0


def test_gate_pass_total_ignores_infinite_values(gate_pass_payload):
    gate_pass_payload["lineItems"][1]["approxValue"] = "Infinity"
    doc = GatePassDocument.model_validate(gate_pass_payload)
    total = pdf_service.GatePassComposer(doc).item_rows()[-1]
    assert total.cells[6] == "12,000.00"


def test_long_remark_box_grows_to_fit_every_word(canvas):
    remark = " ".join(f"Bundle {i} of cleats and purlins loaded on trailer bay {i}." for i in range(1, 40))
    composer = pdf_service.GatePassComposer(GatePassDocument(remark_text=remark))
    composer.canvas = canvas
    composer.cursor = PageCursor(canvas, A4)
    height = composer.text_box(remark, 18)
    drawn = " ".join(call.args[2] for call in canvas.drawString.call_args_list)
    assert drawn.split() == remark.split()
    assert height > 18
    assert composer.cursor.y == pytest.approx(A4.content_top + height)


@pytest.mark.asyncio
async def test_gate_pass_with_long_remark_renders(gate_pass_payload):
    gate_pass_payload["remarkText"] = "Handle with care and keep the stacks covered. " * 40
    doc = GatePassDocument.model_validate(gate_pass_payload)
    rendered = await render_document(doc, generated_on=TODAY)
    assert rendered.file_bytes.startswith(b"%PDF")


def test_quotation_titles_and_sections(quotation_payload):
    doc = QuotationDocument.model_validate(quotation_payload)
    assert doc.index_titles() == [
        "SCOPE OF SUPPLY - BRIEF DETAILS",
        "APPLICABLE CODES for Design",
        "COMMERCIAL PRICE & PAYMENT",
        "PAYMENT TERMS",
        "SCOPE OF SUPPLY - BRIEF DETAILS (2)",
    ]
    assert [s.heading for s in doc.payment_sections()] == ["Supply and Erection", "Heading 2"]
    assert doc.blocks[0].rows[0].sl_no == "1"


def test_quotation_price_rows_and_total(quotation_payload):
    doc = QuotationDocument.model_validate(quotation_payload)
    rows = pdf_service.QuotationComposer(doc).price_rows()
    assert rows[0].cells[3:6] == ("42", "Rs.92,500.00", "Rs.38,85,000.00")
    assert rows[1].cells[5] == "Rs.10,80,000.00"
    assert pdf_service.rupees(doc.total_amount) == "Rs.49,65,000.00"


@pytest.mark.parametrize("quotation_type,prefix", [
    ("Supply and Fabrication", "Peb"),
    ("Structural Fabrication", "SF"),
    ("Job Work", "JW"),
])
def test_quotation_file_name_prefix(quotation_type, prefix):
    doc = QuotationDocument(quotation_type=quotation_type, project_id=7, quotation_date=TODAY)
    assert pdf_service.QuotationComposer(doc).file_name() == f"RNS_19102026_COMPANY_{prefix}-007_R-001.pdf"


@pytest.mark.asyncio
async def test_quotation_render_fills_index_pages(quotation_payload):
    doc = QuotationDocument.model_validate(quotation_payload)
    composer = pdf_service.QuotationComposer(doc, generated_on=TODAY)
    rendered = composer.compose()
    assert rendered.file_name == "RNS_19102026_MIP_Peb-015_R-001.pdf"
    assert rendered.page_count >= 3
    assert len(composer.index_pages) == len(doc.blocks)
    assert composer.index_pages[0] == 3
    assert composer.index_pages == sorted(composer.index_pages)
    assert [row.cells[2] for row in composer.index_rows()] == [str(p) for p in composer.index_pages]


@pytest.mark.asyncio
async def test_quotation_index_tracks_blocks_on_later_pages(quotation_payload):
    rows = [{"slNo": i, "description": f"Member group {i}", "details": "Built-up section " * 6} for i in range(60)]
    quotation_payload["blocks"].insert(1, {"type": "materialSpecs", "rows": rows})
    doc = QuotationDocument.model_validate(quotation_payload)
    composer = pdf_service.QuotationComposer(doc, generated_on=TODAY)
    rendered = composer.compose()
    assert composer.index_pages[-1] > 3
    assert rendered.page_count >= composer.index_pages[-1]
