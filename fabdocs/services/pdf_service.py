"""PDF composers, one per document type.

A composer owns a single render: it creates the canvas, the page cursor and the
chrome renderer, lays out its sections top to bottom through the table engine
and serializes the canvas to bytes. Composers never fetch anything; branding and
signature images arrive already decoded.
"""
from __future__ import annotations

from datetime import date
from decimal import Decimal
from io import BytesIO
import logging
from typing import ClassVar, Dict, List, Optional, Sequence, Tuple, Type, Union

from reportlab.lib import colors
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen.canvas import Canvas

from fabdocs.config.settings import Settings, get_settings
from fabdocs.models.documents import (
    Branding,
    DocumentType,
    GatePassDocument,
    InvoiceDocument,
    LedgerStatement,
    QuotationBlock,
    QuotationBlockType,
    QuotationDocument,
    RenderedDocument,
)
from fabdocs.pdf.chrome import BrandingImages, ChromeRenderer
from fabdocs.pdf.cursor import PageCursor
from fabdocs.pdf.geometry import (
    A4,
    BANK_DETAILS_TABLE,
    BLOCK_GAP,
    BORDER_COLOR,
    BORDER_WIDTH,
    CELL_PAD,
    CELL_TOP_PAD,
    CLIENT_DETAILS_TABLE,
    FONT_BOLD,
    FONT_REGULAR,
    GATE_PASS_DETAILS_TABLE,
    GATE_PASS_ITEMS_TABLE,
    HEADER_BG,
    INVOICE_ITEMS_TABLE,
    LEDGER_TABLE,
    LINE_HEIGHT,
    META_FONT_SIZE,
    QUOTATION_ADDITIONS_TABLE,
    QUOTATION_INDEX_TABLE,
    QUOTATION_MATERIAL_TABLE,
    QUOTATION_PRICE_TABLE,
    QUOTATION_SCOPE_TABLE,
    QUOTATION_STEEL_WORK_TABLE,
    QUOTATION_TERMS_TABLE,
    ROW_VERTICAL_PAD,
    SECTION_ACCENT,
    SECTION_TEXT,
    SUMMARY_TABLE,
    TEXT_ASCENT,
    TITLE_COLOR,
    TITLE_FONT_SIZE,
    PageGeometry,
    TableSpec,
)
from fabdocs.pdf.tables import ItemRow, MergedRow, PairedRow, SummaryRow, Table, wrap_text
from fabdocs.utils.indian_format import format_amount, to_indian_words

LOGGER = logging.getLogger(__name__)

DEFAULT_INITIALS = "RNS"

Document = Union[InvoiceDocument, GatePassDocument, LedgerStatement, QuotationDocument]


def entity_initials(name: Optional[str]) -> str:
    """First letter of each word of the entity name (``RNS`` when unnamed)."""
    words = (name or "").split()
    return "".join(word[0] for word in words) if words else DEFAULT_INITIALS


def financial_year(on: date) -> str:
    """April-based Indian financial year, e.g. ``2025-26``."""
    start = on.year if on.month >= 4 else on.year - 1
    return f"{start}-{str(start + 1)[-2:]}"


def format_quantity(value: Decimal) -> str:
    return format(value.normalize(), "f")


def format_date(value: date) -> str:
    return value.strftime("%d/%m/%Y")


class DocumentComposer:
    """Base composer: canvas lifecycle, chrome wiring and shared blocks."""

    document_type: ClassVar[DocumentType]
    file_prefix: ClassVar[str] = "DOCUMENT"

    def __init__(
        self,
        document: Document,
        branding: Optional[Branding] = None,
        images: Optional[BrandingImages] = None,
        *,
        geometry: PageGeometry = A4,
        generated_on: Optional[date] = None,
        settings: Optional[Settings] = None,
    ):
        self.document = document
        self.branding = branding or Branding()
        self.images = images or BrandingImages()
        self.geometry = geometry
        self.generated_on = generated_on or date.today()
        self.settings = settings or get_settings()
        self.canvas: Optional[Canvas] = None
        self.cursor: Optional[PageCursor] = None

    # ---- identity ----
    @property
    def title(self) -> str:
        raise NotImplementedError

    @property
    def entity_name(self) -> str:
        return self.branding.entity_name or self.settings.DEFAULT_ENTITY_NAME

    @property
    def revision(self) -> str:
        return getattr(self.document, "revision", None) or "R0"

    def document_date(self) -> date:
        return self.generated_on

    def file_name(self) -> str:
        stamp = self.document_date().strftime("%d%m%Y")
        return f"{self.file_prefix}_{stamp}_{entity_initials(self.branding.entity_name)}_{self.revision}.pdf"

    # ---- lifecycle ----
    def compose(self) -> RenderedDocument:
        buffer = BytesIO()
        canvas = Canvas(buffer, pagesize=self.geometry.pagesize)
        canvas.setTitle(self.title)
        canvas.setAuthor(self.entity_name)
        chrome = ChromeRenderer(canvas, self.geometry, self.images)
        self.canvas = canvas
        self.cursor = PageCursor(canvas, self.geometry, on_new_page=chrome.render)

        chrome.render(self.cursor.page)
        self.draw()
        canvas.save()
        LOGGER.debug("Composed %s over %d page(s)", self.file_name(), self.cursor.page)
        return RenderedDocument(file_bytes=buffer.getvalue(), file_name=self.file_name(),
                                page_count=self.cursor.page)

    def draw(self) -> None:
        raise NotImplementedError

    # ---- shared blocks ----
    def table(self, spec: TableSpec) -> Table:
        return Table(self.canvas, self.cursor, spec)

    def gap(self, height: float = BLOCK_GAP) -> None:
        self.cursor.advance(height)

    def draw_title(self, text: str, size: float = TITLE_FONT_SIZE, centered: bool = True, after: float = 10,
                   color=None) -> None:
        c, g = self.canvas, self.geometry
        self.cursor.ensure_space(after)
        c.setFont(FONT_BOLD, size)
        if color is None:
            color = TITLE_COLOR if centered else colors.black
        c.setFillColor(color)
        baseline = g.y_pt(self.cursor.y + size * 0.25)
        if centered:
            c.drawCentredString(g.x_pt(g.width / 2), baseline, text)
        else:
            c.drawString(g.x_pt(g.margin), baseline, text)
        self.cursor.advance(after)

    def meta_line(self, cells: Sequence[Tuple[float, str]], size: float = META_FONT_SIZE, after: float = 5) -> None:
        """One line of free-positioned metadata; ``cells`` are (x mm, text)."""
        c, g = self.canvas, self.geometry
        self.cursor.ensure_space(after)
        c.setFont(FONT_REGULAR, size)
        c.setFillColor(colors.black)
        for x, text in cells:
            c.drawString(g.x_pt(x), g.y_pt(self.cursor.y + 3), text)
        self.cursor.advance(after)

    def section_title(self, text: str, size: float = 11) -> None:
        c, g = self.canvas, self.geometry
        self.cursor.advance(4)
        self.cursor.ensure_space(12)
        top = self.cursor.y
        c.setFillColor(SECTION_ACCENT)
        c.rect(g.x_pt(g.margin), g.y_pt(top + 5), g.x_pt(4), g.x_pt(5), stroke=0, fill=1)
        c.setFont(FONT_BOLD, size)
        c.setFillColor(SECTION_TEXT)
        c.drawString(g.x_pt(g.margin + 7), g.y_pt(top + 4), text)
        self.cursor.advance(7)

    def text_box(self, text: str, height: float, size: float = META_FONT_SIZE) -> float:
        """Bordered box with wrapped text; ``height`` is a minimum, long text grows the box.

        Returns the height actually drawn.
        """
        c, g = self.canvas, self.geometry
        width = g.content_width
        lines = wrap_text(text, width - CELL_PAD * 2, FONT_REGULAR, size)
        height = max(height, len(lines) * LINE_HEIGHT + ROW_VERTICAL_PAD + CELL_TOP_PAD)
        self.cursor.ensure_space(height)
        top = self.cursor.y
        c.setStrokeColor(BORDER_COLOR)
        c.setLineWidth(BORDER_WIDTH)
        c.rect(g.x_pt(g.margin), g.y_pt(top + height), g.x_pt(width), g.x_pt(height), stroke=1, fill=0)
        c.setFont(FONT_REGULAR, size)
        c.setFillColor(colors.black)
        for idx, line in enumerate(lines):
            baseline = top + CELL_TOP_PAD + TEXT_ASCENT + idx * LINE_HEIGHT
            c.drawString(g.x_pt(g.margin + CELL_PAD), g.y_pt(baseline), line)
        self.cursor.advance(height)
        return height

    def paragraph(self, text: str, size: float = 10, indent: float = 0, leading: float = 5,
                  bold: bool = False, color=colors.black) -> None:
        """Free-flowing wrapped text, one space check per line."""
        c, g = self.canvas, self.geometry
        font = FONT_BOLD if bold else FONT_REGULAR
        for line in wrap_text(text, g.content_width - indent, font, size):
            self.cursor.ensure_space(leading)
            c.setFont(font, size)
            c.setFillColor(color)
            c.drawString(g.x_pt(g.margin + indent), g.y_pt(self.cursor.y + size * 0.3), line)
            self.cursor.advance(leading)

    def signatory(self) -> None:
        c, g = self.canvas, self.geometry
        self.cursor.ensure_space(24)
        c.setFont(FONT_REGULAR, META_FONT_SIZE)
        c.setFillColor(colors.black)
        c.drawString(g.x_pt(g.width - g.margin - 60), g.y_pt(self.cursor.y + 3), f"For, {self.entity_name}")
        self.cursor.advance(18)
        c.drawString(g.x_pt(g.width - g.margin - 50), g.y_pt(self.cursor.y + 3), "Authorised Signatory")
        self.cursor.advance(6)


class InvoiceComposer(DocumentComposer):
    document_type = DocumentType.INVOICE
    document: InvoiceDocument

    @property
    def title(self) -> str:
        return self.document.invoice_type

    @property
    def file_prefix(self) -> str:  # type: ignore[override]
        return "TAX_INVOICE" if self.document.is_tax_invoice else "PROFORMA_INVOICE"

    @property
    def number_label(self) -> str:
        return "T.I. No" if self.document.is_tax_invoice else "P.I No"

    @property
    def type_code(self) -> str:
        return "TI" if self.document.is_tax_invoice else "PI"

    def document_date(self) -> date:
        return self.document.document_date or self.generated_on

    def document_number(self) -> str:
        initials = entity_initials(self.branding.entity_name)
        fy = financial_year(self.document_date())
        return f"{initials}/{fy}/{initials}-{self.type_code}-{self.document.sequence:03d}"

    def summary_rows(self) -> List[SummaryRow]:
        totals = self.document.totals()
        return [
            SummaryRow("Total Amount (INR)", format_amount(totals.subtotal)),
            SummaryRow("Total Amount before Tax", format_amount(totals.subtotal)),
            SummaryRow("(1) Add: CGST", format_amount(totals.cgst_amount)),
            SummaryRow("(2) Add: SGST", format_amount(totals.sgst_amount)),
            SummaryRow("(3) Add: IGST", format_amount(totals.igst_amount)),
            SummaryRow("Total GST", format_amount(totals.total_tax)),
            SummaryRow("Grand Total", format_amount(totals.grand_total)),
        ]

    def item_rows(self) -> List[ItemRow]:
        return [
            ItemRow((
                str(item.serial_no),
                item.description,
                item.hsn_code,
                format_quantity(item.quantity),
                item.unit or "LS",
                format_amount(item.rate_per_unit),
                f"{format_quantity(item.percentage)}%",
                format_amount(item.amount),
            ))
            for item in self.document.printable_items()
        ]

    def draw(self) -> None:
        doc, b, s, g = self.document, self.branding, self.settings, self.geometry
        mid_x = g.width / 2 - 20
        right_x = g.width - g.margin - 50

        self.draw_title(self.title)
        self.meta_line([
            (g.margin, f"CIN: {b.cin or '-'}"),
            (mid_x, f"Company GSTIN: {b.company_gstin or s.DEFAULT_COMPANY_GSTIN}"),
            (right_x, f"{self.number_label}: {self.document_number()}"),
        ])
        self.meta_line([
            (mid_x, f"Email: {b.email or s.DEFAULT_EMAIL}"),
            (right_x, f"Date: {self.document_date().strftime('%d %b %Y')}"),
        ], after=8)

        self.section_title("Client Details")
        if doc.order_reference_type == "po":
            reference = ("P.O. No.", doc.purchase_order_no or "-")
        else:
            reference = ("W.O. No.", doc.work_order_no or "-")
        client = self.table(CLIENT_DETAILS_TABLE)
        client.add_all([
            MergedRow("Organisation Name", doc.organisation_name),
            MergedRow("Registered Address", doc.registered_address),
            MergedRow("Consignee Address", doc.consignee_address),
            PairedRow(("GSTIN", doc.client_gstin or ""), reference),
            MergedRow("Dispatch Details", doc.dispatch_details(), fragmented=True),
        ])
        self.gap()

        items = self.table(INVOICE_ITEMS_TABLE)
        items.draw_header()
        items.add_all(self.item_rows())
        self.gap()

        totals = doc.totals()
        self.table(SUMMARY_TABLE).add_summary(to_indian_words(totals.grand_total), self.summary_rows())
        self.gap()

        self.section_title("Bank Details")
        self.table(BANK_DETAILS_TABLE).add_all([
            PairedRow(("Account Name", self.entity_name),
                      ("Account Number", b.bank_account_number or s.BANK_ACCOUNT_NUMBER)),
            PairedRow(("Address", b.head_office_address or s.DEFAULT_HEAD_OFFICE_ADDRESS),
                      ("IFSC Code", b.bank_ifsc or s.BANK_IFSC)),
        ])
        self.gap()
        self.signatory()


SIGNATURE_SLOTS = (
    ("store_keeper", "Store Keeper"),
    ("qc_engg", "Qc Engg."),
    ("store_incharge", "Store Incharge"),
    ("plant_head", "Plant Head"),
)


class GatePassComposer(DocumentComposer):
    document_type = DocumentType.GATE_PASS
    file_prefix = "GATE_PASS"
    document: GatePassDocument

    def __init__(self, *args, signature_images: Optional[Dict[str, Optional[ImageReader]]] = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.signature_images = signature_images or {}

    @property
    def title(self) -> str:
        return "NON-RETURNABLE GATE PASS"

    def document_date(self) -> date:
        return self.document.issue_date or self.generated_on

    def item_rows(self) -> List[ItemRow]:
        rows = [
            ItemRow((
                str(item.serial_no) if item.serial_no else "",
                item.part_mark,
                item.material_description,
                item.material_size,
                format_quantity(item.quantity),
                item.assly_part_sl,
                item.approx_value,
            ))
            for item in self.document.printable_items()
        ]
        items = self.document.printable_items()
        total_qty = sum((item.quantity for item in items), Decimal("0"))
        total_value = sum((item.approx_amount for item in items), Decimal("0"))
        rows.append(ItemRow(
            ("", "", "TOTAL", "", format_quantity(total_qty), "", format_amount(total_value)),
            bold_columns=frozenset({2, 4, 5, 6}),
            shaded=True,
        ))
        return rows

    def draw(self) -> None:
        doc = self.document
        self.draw_title(self.title, after=8)

        self.section_title("Gate Pass Details")
        self.table(GATE_PASS_DETAILS_TABLE).add_all([
            MergedRow("Doc. No", doc.gate_pass_number),
            MergedRow("Date", format_date(self.document_date())),
            MergedRow("CONSIGNEE NAME", doc.consignee_name),
            MergedRow("CONSIGNEE ADDRESS", doc.consignee_address),
            MergedRow("Mode of transport", doc.mode_of_transport),
            MergedRow("Vehicle No.", doc.vehicle_number),
            MergedRow("Contact No.", doc.contact_no),
            MergedRow("Contact person", doc.contact_person),
        ])
        self.gap()

        items = self.table(GATE_PASS_ITEMS_TABLE)
        items.draw_header()
        items.add_all(self.item_rows())
        self.gap()

        self.section_title("Remark")
        self.text_box(doc.remark_text or "-", 18)
        self.gap()

        self.section_title("Signature")
        self.signature_boxes()

    def signature_boxes(self, box_height: float = 22, spacing: float = 3) -> None:
        c, g = self.canvas, self.geometry
        box_width = (g.content_width - spacing * 3) / 4
        self.cursor.ensure_space(box_height + 12)
        top = self.cursor.y
        c.setStrokeColor(BORDER_COLOR)
        c.setLineWidth(BORDER_WIDTH)
        for idx, (slot, label) in enumerate(SIGNATURE_SLOTS):
            x = g.margin + idx * (box_width + spacing)
            c.rect(g.x_pt(x), g.y_pt(top + box_height), g.x_pt(box_width), g.x_pt(box_height), stroke=1, fill=0)
            image = self.signature_images.get(slot)
            if image is not None:
                self._draw_fitted(image, x + 1, top + 0.8, box_width - 2, box_height - 7, slot)
            c.setFont(FONT_BOLD, 8)
            c.setFillColor(colors.black)
            c.drawCentredString(g.x_pt(x + box_width / 2), g.y_pt(top + box_height - 1.2), label)
        self.cursor.advance(box_height)

    def _draw_fitted(self, image: ImageReader, x: float, top: float, width: float, height: float, slot: str) -> None:
        """Scale ``image`` into the box keeping its aspect ratio, centred."""
        g = self.geometry
        try:
            natural_w, natural_h = image.getSize()
            ratio = (natural_w or 1) / (natural_h or 1)
            draw_w, draw_h = width, height
            if ratio > width / height:
                draw_h = width / ratio
            else:
                draw_w = height * ratio
            left = x + (width - draw_w) / 2
            bottom = top + (height - draw_h) / 2 + draw_h
            self.canvas.drawImage(image, g.x_pt(left), g.y_pt(bottom), g.x_pt(draw_w), g.x_pt(draw_h), mask="auto")
        except Exception as exc:  # noqa: BLE001 - a bad signature image leaves the box empty
            LOGGER.warning("Skipping %s signature image: %s", slot, exc)


class LedgerComposer(DocumentComposer):
    document_type = DocumentType.CLIENT_LEDGER
    file_prefix = "CLIENT_LEDGER"
    document: LedgerStatement

    @property
    def title(self) -> str:
        return f"Client Ledger - {self.document.client_name or 'Client'}"

    def document_date(self) -> date:
        return self.document.statement_date or self.generated_on

    def entry_rows(self) -> List[ItemRow]:
        return [
            ItemRow((
                format_date(entry.entry_date),
                entry.particulars,
                entry.vch_type,
                entry.vch_no,
                format_amount(entry.debit) if entry.debit > 0 else "",
                format_amount(entry.credit) if entry.credit > 0 else "",
            ))
            for entry in self.document.sorted_entries()
        ]

    def closing_lines(self) -> List[str]:
        doc = self.document
        label = "Closing Balance (Dr)" if doc.balance >= 0 else "Closing Balance (Cr)"
        return [
            f"Total Debit: {format_amount(doc.total_debit)}",
            f"Total Credit: {format_amount(doc.total_credit)}",
            f"{label}: {format_amount(abs(doc.balance))}",
        ]

    def draw(self) -> None:
        c, g = self.canvas, self.geometry
        self.draw_title(self.title, size=14, centered=False, after=7)
        self.meta_line([(g.margin, f"Date: {format_date(self.document_date())}")], size=10, after=7)

        ledger = self.table(LEDGER_TABLE)
        ledger.draw_header()
        ledger.add_all(self.entry_rows())

        lines = self.closing_lines()
        self.cursor.ensure_space(2 + 5 * len(lines) + 2)
        right = g.margin + g.content_width
        self.cursor.advance(2)
        c.setStrokeColor(colors.black)
        c.setLineWidth(BORDER_WIDTH)
        c.line(g.x_pt(right - 48), g.y_pt(self.cursor.y), g.x_pt(right), g.y_pt(self.cursor.y))
        c.setFont(FONT_BOLD, META_FONT_SIZE)
        c.setFillColor(colors.black)
        for line in lines:
            self.cursor.advance(5)
            c.drawRightString(g.x_pt(right - 2), g.y_pt(self.cursor.y), line)
        self.cursor.advance(2)


QUOTATION_DETAIL_TABLES: Dict[QuotationBlockType, TableSpec] = {
    QuotationBlockType.SCOPE_BRIEF: QUOTATION_SCOPE_TABLE,
    QuotationBlockType.SCOPE_BASIC: QUOTATION_SCOPE_TABLE,
    QuotationBlockType.SCOPE_ADDITIONS: QUOTATION_ADDITIONS_TABLE,
    QuotationBlockType.DESIGN_LOADS: QUOTATION_ADDITIONS_TABLE,
    QuotationBlockType.STEEL_WORK: QUOTATION_STEEL_WORK_TABLE,
    QuotationBlockType.MATERIAL_SPECS: QUOTATION_MATERIAL_TABLE,
}

QUOTATION_BULLET_BLOCKS = frozenset({
    QuotationBlockType.APPLICABLE_CODES,
    QuotationBlockType.DRAWINGS_DELIVERY,
    QuotationBlockType.ERECTION_SCOPE_CLIENT,
    QuotationBlockType.ERECTION_SCOPE_COMPANY,
})


def rupees(value: Decimal) -> str:
    return f"Rs.{format_amount(value)}"


class QuotationComposer(DocumentComposer):
    """Techno-commercial offer: cover page, index page, content blocks and closing.

    The index lists the page each block starts on, which is only known after the
    blocks are laid out. The document is therefore composed twice: the first pass
    prints placeholder page numbers and records where each block lands, the second
    prints the recorded numbers. Both passes draw the same rows, so pagination is
    identical.
    """

    document_type = DocumentType.QUOTATION
    document: QuotationDocument

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.index_pages: Optional[List[int]] = None
        self.block_pages: List[int] = []

    @property
    def title(self) -> str:
        return self.document.proposal_title or "Techno-Commercial Offer"

    @property
    def revision(self) -> str:
        return self.document.revision or "R-001"

    def document_date(self) -> date:
        return self.document.quotation_date or self.generated_on

    def file_name(self) -> str:
        doc = self.document
        stamp = self.document_date().strftime("%d%m%Y")
        return (f"{DEFAULT_INITIALS}_{stamp}_{doc.client_initials}_"
                f"{doc.template_prefix}-{doc.project_id:03d}_{self.revision}.pdf")

    def compose(self) -> RenderedDocument:
        self.index_pages = None
        super().compose()
        self.index_pages = list(self.block_pages)
        return super().compose()

    def draw(self) -> None:
        self.cover_page()
        self.cursor.new_page()
        self.index_page()
        self.cursor.new_page()
        self.block_pages = []
        for block, title in zip(self.document.blocks, self.document.index_titles()):
            self.cursor.ensure_space(50)
            self.block_pages.append(self.cursor.page)
            self.draw_block(block, title)
        self.closing()

    # ---- cover ----
    def cover_page(self) -> None:
        doc, c, g = self.document, self.canvas, self.geometry
        self.cursor.ensure_space(8)
        c.setFont(FONT_REGULAR, 10)
        c.setFillColor(colors.black)
        baseline = g.y_pt(self.cursor.y + 3)
        c.drawString(g.x_pt(g.margin), baseline, f"Ref.: {doc.quotation_number or '-'}")
        c.drawRightString(g.x_pt(g.width - g.margin), baseline,
                          f"Date: {format_date(self.document_date())}, Revision: {self.revision}")
        self.cursor.advance(8)
        self.meta_line([(g.margin, f"Enquiry no.: {doc.enquiry_number or '-'}")], size=10, after=8)
        self.meta_line([(g.margin, f"Project Location: {doc.project_location or '-'}")], size=10, after=15)

        self.draw_title(self.title, size=18, after=15)

        self.paragraph(doc.to_label or "To", size=12, bold=True, leading=6)
        self.paragraph(f"{doc.ms_label or 'M/s'} {doc.client_name or '-'}", size=12, leading=6)
        if doc.client_location:
            self.paragraph(doc.client_location, size=10)
        self.gap(7)
        self.paragraph(f"Subject: {doc.subject or '-'}", size=10, bold=True)
        self.gap(7)
        for text in doc.intro_paragraphs:
            self.paragraph(text)
        self.gap(7)

        self.paragraph("Regards,", leading=6)
        self.paragraph(doc.contact_name or self.entity_name, bold=True)
        if doc.contact_mobile:
            self.paragraph(f"Mo: {doc.contact_mobile}")
        if doc.contact_email:
            self.paragraph(f"Email: {doc.contact_email}")

    # ---- index ----
    def index_rows(self) -> List[ItemRow]:
        pages = self.index_pages
        return [
            ItemRow((str(idx + 1), title, str(pages[idx]) if pages else "-"))
            for idx, title in enumerate(self.document.index_titles())
        ]

    def index_page(self) -> None:
        self.draw_title("INDEX", size=16, after=10, color=SECTION_TEXT)
        index = self.table(QUOTATION_INDEX_TABLE)
        index.draw_header()
        index.add_all(self.index_rows())

    # ---- content blocks ----
    def draw_block(self, block: QuotationBlock, title: str) -> None:
        self.section_title(title, size=12)
        kind = block.block_type
        if kind in QUOTATION_DETAIL_TABLES:
            table = self.table(QUOTATION_DETAIL_TABLES[kind])
            table.draw_header()
            table.add_all([ItemRow((row.sl_no, row.description, row.details)) for row in block.rows])
        elif kind in QUOTATION_BULLET_BLOCKS:
            for item in block.items:
                self.paragraph(f"• {item}", size=9, indent=5)
        elif kind is QuotationBlockType.COMMERCIAL_PRICE:
            self.price_table()
        elif kind is QuotationBlockType.PAYMENT_TERMS:
            self.payment_terms()
        elif kind is QuotationBlockType.COMMERCIAL_TERMS:
            terms = self.table(QUOTATION_TERMS_TABLE)
            terms.draw_header()
            terms.add_all([
                ItemRow((term.sl_no, term.description, term.conditions))
                for term in self.document.commercial_terms
            ])
        self.gap()

    def price_rows(self) -> List[ItemRow]:
        return [
            ItemRow((
                str(item.serial_no),
                item.description,
                item.unit,
                format_quantity(item.quantity),
                rupees(item.rate),
                rupees(item.amount),
                item.remarks,
            ))
            for item in self.document.printable_items()
        ]

    def price_table(self) -> None:
        prices = self.table(QUOTATION_PRICE_TABLE)
        prices.draw_header()
        prices.add_all(self.price_rows())
        self.total_box(f"Total Amount: {rupees(self.document.total_amount)}")

    def total_box(self, text: str, width: float = 75, height: float = 9) -> None:
        c, g = self.canvas, self.geometry
        self.cursor.advance(2)
        self.cursor.ensure_space(height)
        left = g.margin + g.content_width - width
        top = self.cursor.y
        c.setFillColor(HEADER_BG)
        c.setStrokeColor(BORDER_COLOR)
        c.setLineWidth(BORDER_WIDTH)
        c.rect(g.x_pt(left), g.y_pt(top + height), g.x_pt(width), g.x_pt(height), stroke=1, fill=1)
        c.setFont(FONT_BOLD, 10)
        c.setFillColor(colors.black)
        c.drawString(g.x_pt(left + 3), g.y_pt(top + 6), text)
        self.cursor.advance(height)

    def payment_terms(self) -> None:
        doc = self.document
        for section in doc.payment_sections():
            self.paragraph(section.heading, size=10, bold=True, leading=6)
            for idx, term in enumerate(section.terms, start=1):
                self.paragraph(f"{idx}. {term}", size=9, indent=5)
            self.gap(2)
        if doc.bank_details:
            self.section_title("BANK DETAILS", size=11)
            for detail in doc.bank_details:
                self.paragraph(f"{detail.particular}: {detail.value}", size=9, indent=5)

    # ---- closing ----
    def closing(self) -> None:
        doc = self.document
        if doc.notes:
            self.section_title("Notes:", size=11)
            for idx, note in enumerate(doc.notes, start=1):
                self.paragraph(f"{idx}. {note}", size=9, indent=5)
            self.gap(7)
        for text in doc.closing_paragraphs:
            self.paragraph(text)
        self.gap(10)
        self.paragraph(doc.closing_thanks or "Thanking you", size=11, bold=True, leading=6)
        self.paragraph(doc.closing_company_name or self.entity_name, size=11, bold=True, color=TITLE_COLOR)


COMPOSERS: Dict[DocumentType, Type[DocumentComposer]] = {
    DocumentType.INVOICE: InvoiceComposer,
    DocumentType.GATE_PASS: GatePassComposer,
    DocumentType.CLIENT_LEDGER: LedgerComposer,
    DocumentType.QUOTATION: QuotationComposer,
}


def composer_for(document: Document) -> Type[DocumentComposer]:
    return COMPOSERS[DocumentType(document.document_type)]


__all__ = [
    "DocumentComposer",
    "InvoiceComposer",
    "GatePassComposer",
    "LedgerComposer",
    "QuotationComposer",
    "COMPOSERS",
    "composer_for",
    "entity_initials",
    "financial_year",
]
