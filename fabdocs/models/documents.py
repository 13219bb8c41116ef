"""Request-level document records consumed by the composers.

These arrive already validated/persisted upstream; the models only coerce
shapes (camelCase aliases, numeric strings, blank strings) and derive amounts.
"""
from __future__ import annotations

import base64
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from fabdocs.utils.indian_format import CENT, to_decimal


class _Record(BaseModel):
    # Frontend sends camelCase; unknown keys are ignored
    model_config = ConfigDict(extra="ignore", alias_generator=to_camel, populate_by_name=True)


def _money(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def _blank_number(value):
    if isinstance(value, str):
        value = value.replace(",", "").strip()
        return value or "0"
    return value


class DocumentType(str, Enum):
    INVOICE = "invoice"
    GATE_PASS = "gate_pass"
    CLIENT_LEDGER = "client_ledger"
    QUOTATION = "quotation"


class TaxRegime(str, Enum):
    CGST_SGST = "cgst_sgst"
    IGST = "igst"


class Branding(_Record):
    entity_name: Optional[str] = None
    cin: Optional[str] = None
    company_gstin: Optional[str] = None
    email: Optional[str] = None
    head_office_address: Optional[str] = None
    bank_account_number: Optional[str] = None
    bank_ifsc: Optional[str] = None
    header_url: Optional[str] = None
    footer_url: Optional[str] = None
    stamp_url: Optional[str] = None

    def image_urls(self) -> Dict[str, Optional[str]]:
        return {"header": self.header_url, "footer": self.footer_url, "stamp": self.stamp_url}


# ----------------------------- Invoice ----------------------------- #


class InvoiceLineItem(_Record):
    serial_no: int = Field(gt=0)
    description: str
    hsn_code: str = "940610"
    quantity: Decimal = Field(default=Decimal("1"), ge=0)
    unit: str = "LS"
    rate_per_unit: Decimal = Field(default=Decimal("0"), ge=0)
    percentage: Decimal = Decimal("0")

    @field_validator("quantity", "rate_per_unit", "percentage", mode="before")
    @classmethod
    def coerce_numbers(cls, value):
        return _blank_number(value)

    @property
    def amount(self) -> Decimal:
        """Always derived; never read from input."""
        return _money(self.quantity * self.rate_per_unit)


class InvoiceTotals(BaseModel):
    subtotal: Decimal
    cgst_amount: Decimal
    sgst_amount: Decimal
    igst_amount: Decimal
    total_tax: Decimal
    grand_total: Decimal


def compute_totals(items: List[InvoiceLineItem], regime: TaxRegime, cgst_rate: Decimal = Decimal("9"),
                   sgst_rate: Decimal = Decimal("9"), igst_rate: Decimal = Decimal("18")) -> InvoiceTotals:
    """Tax components of the inactive regime are exactly zero; all values are cent-rounded."""
    subtotal = _money(sum((item.amount for item in items), Decimal("0")))
    zero = Decimal("0.00")
    cgst = sgst = igst = zero
    if regime is TaxRegime.CGST_SGST:
        cgst = _money(subtotal * to_decimal(cgst_rate) / 100)
        sgst = _money(subtotal * to_decimal(sgst_rate) / 100)
    else:
        igst = _money(subtotal * to_decimal(igst_rate) / 100)
    total_tax = cgst + sgst + igst
    return InvoiceTotals(
        subtotal=subtotal,
        cgst_amount=cgst,
        sgst_amount=sgst,
        igst_amount=igst,
        total_tax=total_tax,
        grand_total=subtotal + total_tax,
    )


class InvoiceDocument(_Record):
    document_type: Literal["invoice"] = "invoice"
    invoice_type: Literal["PROFORMA INVOICE", "TAX INVOICE"] = "PROFORMA INVOICE"
    sequence: int = Field(default=0, ge=0)
    revision: str = "R0"
    document_date: Optional[date] = None
    organisation_name: Optional[str] = None
    registered_address: Optional[str] = None
    consignee_address: Optional[str] = None
    client_gstin: Optional[str] = None
    order_reference_type: Literal["po", "wo"] = "po"
    purchase_order_no: Optional[str] = None
    work_order_no: Optional[str] = None
    vehicle_no: Optional[str] = None
    dispatch_lr_no: Optional[str] = None
    dispatch_dc_no: Optional[str] = None
    dispatch_gate_pass: Optional[str] = None
    applied_tax_type: TaxRegime = TaxRegime.IGST
    cgst_rate: Decimal = Field(default=Decimal("9"), ge=0)
    sgst_rate: Decimal = Field(default=Decimal("9"), ge=0)
    igst_rate: Decimal = Field(default=Decimal("18"), ge=0)
    line_items: List[InvoiceLineItem] = Field(default_factory=list)

    @property
    def is_tax_invoice(self) -> bool:
        return self.invoice_type == "TAX INVOICE"

    def printable_items(self) -> List[InvoiceLineItem]:
        return [item for item in self.line_items if item.description.strip()]

    def totals(self) -> InvoiceTotals:
        return compute_totals(self.printable_items(), self.applied_tax_type,
                              self.cgst_rate, self.sgst_rate, self.igst_rate)

    def dispatch_details(self) -> str:
        entries = [
            ("Vehicle No.", self.vehicle_no),
            ("L.R. No.", self.dispatch_lr_no),
            ("D.C No.", self.dispatch_dc_no),
            ("Gate Pass", self.dispatch_gate_pass),
        ]
        parts = [f"{key} - {value.strip()}" for key, value in entries if value and value.strip()]
        return ", ".join(parts) if parts else "-"


# ----------------------------- Gate pass ----------------------------- #


class GatePassLineItem(_Record):
    serial_no: Optional[int] = None
    part_mark: str = ""
    material_description: str = ""
    material_size: str = "-"
    quantity: Decimal = Field(default=Decimal("0"), ge=0)
    assly_part_sl: str = ""
    approx_value: str = "-"

    @field_validator("quantity", mode="before")
    @classmethod
    def coerce_numbers(cls, value):
        return _blank_number(value)

    @property
    def approx_amount(self) -> Decimal:
        """Numeric approx value; free-text values such as ``-`` (or NaN/Infinity) count as zero."""
        try:
            value = to_decimal(self.approx_value.replace(",", "").strip())
        except ArithmeticError:
            return Decimal("0")
        return value if value.is_finite() else Decimal("0")


class GatePassSignatures(_Record):
    store_keeper: Optional[str] = None
    qc_engg: Optional[str] = None
    store_incharge: Optional[str] = None
    plant_head: Optional[str] = None


class GatePassDocument(_Record):
    document_type: Literal["gate_pass"] = "gate_pass"
    gate_pass_number: Optional[str] = None
    issue_date: Optional[date] = None
    consignee_name: Optional[str] = None
    consignee_address: Optional[str] = None
    mode_of_transport: str = "By Road"
    vehicle_number: Optional[str] = None
    contact_no: Optional[str] = None
    contact_person: Optional[str] = None
    line_items: List[GatePassLineItem] = Field(default_factory=list)
    remark_text: Optional[str] = None
    signatures: GatePassSignatures = Field(default_factory=GatePassSignatures)
    revision: str = "R0"

    def printable_items(self) -> List[GatePassLineItem]:
        return [item for item in self.line_items if item.part_mark.strip() or item.material_description.strip()]


# ----------------------------- Client ledger ----------------------------- #


class LedgerEntry(_Record):
    entry_date: date
    particulars: str
    vch_type: str
    vch_no: str = ""
    debit: Decimal = Field(default=Decimal("0"), ge=0)
    credit: Decimal = Field(default=Decimal("0"), ge=0)

    @field_validator("debit", "credit", mode="before")
    @classmethod
    def coerce_numbers(cls, value):
        return _blank_number(value)


class LedgerStatement(_Record):
    document_type: Literal["client_ledger"] = "client_ledger"
    client_name: str = "Client"
    statement_date: Optional[date] = None
    revision: str = "R0"
    entries: List[LedgerEntry] = Field(default_factory=list)

    def sorted_entries(self) -> List[LedgerEntry]:
        return sorted(self.entries, key=lambda e: e.entry_date)

    @property
    def total_debit(self) -> Decimal:
        return _money(sum((e.debit for e in self.entries), Decimal("0")))

    @property
    def total_credit(self) -> Decimal:
        return _money(sum((e.credit for e in self.entries), Decimal("0")))

    @property
    def balance(self) -> Decimal:
        return self.total_debit - self.total_credit


# ----------------------------- Quotation ----------------------------- #


class QuotationBlockType(str, Enum):
    SCOPE_BRIEF = "scopeBrief"
    SCOPE_BASIC = "scopeBasic"
    SCOPE_ADDITIONS = "scopeAdditions"
    STEEL_WORK = "steelWork"
    DESIGN_LOADS = "designLoads"
    APPLICABLE_CODES = "applicableCodes"
    MATERIAL_SPECS = "materialSpecs"
    DRAWINGS_DELIVERY = "drawingsDelivery"
    ERECTION_SCOPE_CLIENT = "erectionScopeClient"
    ERECTION_SCOPE_COMPANY = "erectionScopeCompany"
    COMMERCIAL_PRICE = "commercialPrice"
    PAYMENT_TERMS = "paymentTerms"
    COMMERCIAL_TERMS = "commercialTerms"


BLOCK_LABELS: Dict[QuotationBlockType, str] = {
    QuotationBlockType.SCOPE_BRIEF: "SCOPE OF SUPPLY - BRIEF DETAILS",
    QuotationBlockType.SCOPE_BASIC: "SCOPE OF SUPPLY - BASIC BUILDING DESCRIPTION",
    QuotationBlockType.SCOPE_ADDITIONS: "STANDARD BUILDING ADDITIONS (CANOPY / FASCIA / LINER / PARTITIONS)",
    QuotationBlockType.STEEL_WORK: "STEEL WORK FINISH",
    QuotationBlockType.DESIGN_LOADS: "DESIGN LOADS",
    QuotationBlockType.APPLICABLE_CODES: "APPLICABLE CODES for Design",
    QuotationBlockType.MATERIAL_SPECS: "MATERIAL SPECIFICATIONS",
    QuotationBlockType.DRAWINGS_DELIVERY: "DRAWINGS & DELIVERY",
    QuotationBlockType.ERECTION_SCOPE_CLIENT: "ERECTION SCOPES - SCOPE OF CLIENT",
    QuotationBlockType.ERECTION_SCOPE_COMPANY: "ERECTION SCOPES - SCOPE OF COMPANY",
    QuotationBlockType.COMMERCIAL_PRICE: "COMMERCIAL PRICE & PAYMENT",
    QuotationBlockType.PAYMENT_TERMS: "PAYMENT TERMS",
    QuotationBlockType.COMMERCIAL_TERMS: "COMMERCIAL TERMS & CONDITIONS",
}


def _serial_text(value):
    return "" if value is None else str(value)


class QuotationDetailRow(_Record):
    sl_no: str = ""
    description: str = ""
    details: str = ""

    @field_validator("sl_no", mode="before")
    @classmethod
    def coerce_serial(cls, value):
        return _serial_text(value)


class QuotationBlock(_Record):
    """One titled section of the offer; table blocks use ``rows``, list blocks use ``items``."""

    block_type: QuotationBlockType = Field(alias="type")
    heading: Optional[str] = None
    rows: List[QuotationDetailRow] = Field(default_factory=list)
    items: List[str] = Field(default_factory=list)

    @property
    def title(self) -> str:
        if self.heading and self.heading.strip():
            return self.heading
        return BLOCK_LABELS[self.block_type]


class QuotationLineItem(_Record):
    serial_no: int = Field(gt=0)
    description: str
    unit: str = "MT"
    quantity: Decimal = Field(default=Decimal("1"), ge=0)
    rate: Decimal = Field(default=Decimal("0"), ge=0)
    remarks: str = ""

    @field_validator("quantity", "rate", mode="before")
    @classmethod
    def coerce_numbers(cls, value):
        return _blank_number(value)

    @property
    def amount(self) -> Decimal:
        return _money(self.quantity * self.rate)


class PaymentTermSection(_Record):
    heading: str = ""
    terms: List[str] = Field(default_factory=list)


class BankDetail(_Record):
    particular: str
    value: str = ""


class CommercialTerm(_Record):
    sl_no: str = ""
    description: str = ""
    conditions: str = ""

    @field_validator("sl_no", mode="before")
    @classmethod
    def coerce_serial(cls, value):
        return _serial_text(value)


class QuotationDocument(_Record):
    document_type: Literal["quotation"] = "quotation"
    quotation_number: str = ""
    enquiry_number: str = ""
    revision: str = "R-001"
    quotation_date: Optional[date] = None
    project_id: int = Field(default=1, ge=0)
    project_location: Optional[str] = None
    quotation_type: str = "Supply and Fabrication"
    proposal_title: str = "Techno-Commercial Offer"
    to_label: str = "To"
    ms_label: str = "M/s"
    client_name: Optional[str] = None
    client_location: Optional[str] = None
    subject: str = ""
    intro_paragraphs: List[str] = Field(default_factory=list)
    contact_name: str = ""
    contact_mobile: str = ""
    contact_email: str = ""
    blocks: List[QuotationBlock] = Field(default_factory=list)
    line_items: List[QuotationLineItem] = Field(default_factory=list)
    payment_term_sections: List[PaymentTermSection] = Field(default_factory=list)
    bank_details: List[BankDetail] = Field(default_factory=list)
    commercial_terms: List[CommercialTerm] = Field(default_factory=list)
    notes: List[str] = Field(default_factory=list)
    closing_paragraphs: List[str] = Field(default_factory=list)
    closing_thanks: str = "Thanking you"
    closing_company_name: Optional[str] = None

    @property
    def template_prefix(self) -> str:
        if self.quotation_type == "Supply and Fabrication":
            return "Peb"
        if self.quotation_type == "Structural Fabrication":
            return "SF"
        return "JW"

    @property
    def client_initials(self) -> str:
        words = (self.client_name or "").split()
        return "".join(word[0].upper() for word in words) if words else "COMPANY"

    def printable_items(self) -> List[QuotationLineItem]:
        return [item for item in self.line_items if item.description.strip()]

    @property
    def total_amount(self) -> Decimal:
        return _money(sum((item.amount for item in self.printable_items()), Decimal("0")))

    def payment_sections(self) -> List[PaymentTermSection]:
        """Blank headings become ``Heading n``; sections with neither heading nor terms are dropped."""
        sections = []
        for idx, section in enumerate(self.payment_term_sections):
            heading = section.heading.strip()
            if heading.lower() == "peb - supply and erection":
                heading = "Supply and Erection"
            if not heading and not section.terms:
                continue
            sections.append(PaymentTermSection(heading=heading or f"Heading {idx + 1}", terms=section.terms))
        return sections

    def index_titles(self) -> List[str]:
        """Block titles for the index page; repeated titles get a ``(n)`` suffix."""
        seen: Dict[str, int] = {}
        titles = []
        for block in self.blocks:
            count = seen.get(block.title, 0) + 1
            seen[block.title] = count
            titles.append(block.title if count == 1 else f"{block.title} ({count})")
        return titles


# ----------------------------- Render I/O ----------------------------- #


class RenderOptions(_Record):
    delivery: Literal["download", "attachment", "both"] = "download"

    @property
    def offer_download(self) -> bool:
        return self.delivery in ("download", "both")

    @property
    def attach(self) -> bool:
        return self.delivery in ("attachment", "both")


class RenderedDocument(BaseModel):
    file_bytes: bytes
    file_name: str
    page_count: int
    media_type: str = "application/pdf"

    def data_uri(self) -> str:
        encoded = base64.b64encode(self.file_bytes).decode("ascii")
        return f"data:{self.media_type};filename={self.file_name};base64,{encoded}"


__all__ = [
    "DocumentType",
    "TaxRegime",
    "Branding",
    "InvoiceLineItem",
    "InvoiceTotals",
    "compute_totals",
    "InvoiceDocument",
    "GatePassLineItem",
    "GatePassSignatures",
    "GatePassDocument",
    "LedgerEntry",
    "LedgerStatement",
    "QuotationBlockType",
    "QuotationBlock",
    "QuotationDetailRow",
    "QuotationLineItem",
    "PaymentTermSection",
    "BankDetail",
    "CommercialTerm",
    "QuotationDocument",
    "RenderOptions",
    "RenderedDocument",
]
