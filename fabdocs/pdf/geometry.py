"""Page geometry, layout constants and static table configurations.

All layout arithmetic is done in millimetres measured from the top-left corner
of the page; conversion to PDF points (bottom-left origin) happens only at draw
time through :meth:`PageGeometry.x_pt` and :meth:`PageGeometry.y_pt`.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, Optional, Sequence, Tuple

from reportlab.lib import colors
from reportlab.lib.units import mm
from reportlab.pdfbase import pdfmetrics

from fabdocs.utils.errors import LayoutConfigError


def px_to_mm(px: float) -> float:
    return px * 0.2646


# ===== Fonts =====
FONT_REGULAR = "Helvetica"
FONT_BOLD = "Helvetica-Bold"
TABLE_FONT_SIZE = 8.5
HEADER_FONT_SIZE = 8
TITLE_FONT_SIZE = 16
META_FONT_SIZE = 9
CAPTION_FONT_SIZE = 8

# ===== Row metrics (mm) =====
LINE_HEIGHT = 3.2
MIN_ROW_HEIGHT = 5.8
ROW_VERTICAL_PAD = 1.2
CELL_PAD = px_to_mm(3)
CELL_TOP_PAD = px_to_mm(3)
TEXT_ASCENT = 2.5
BLOCK_GAP = px_to_mm(10)

# ===== Colours =====
BORDER_COLOR = colors.HexColor("#eeb7b7")
HEADER_BG = colors.HexColor("#fff5f5")
ZEBRA_FILL = colors.Color(245 / 255, 245 / 255, 245 / 255)
TITLE_COLOR = colors.HexColor("#da2032")
SECTION_ACCENT = colors.HexColor("#d92134")
SECTION_TEXT = colors.HexColor("#1e3a5f")
CAPTION_COLOR = colors.Color(128 / 255, 128 / 255, 128 / 255)
BORDER_WIDTH = 0.2 * mm


def text_width(text: str, font: str, size: float) -> float:
    """Rendered width of ``text`` in millimetres."""
    return pdfmetrics.stringWidth(text, font, size) / mm


@dataclass(frozen=True)
class PageGeometry:
    """Fixed page frame: size, margins and chrome strips (mm)."""

    width: float = 210.0
    height: float = 297.0
    margin: float = 15.0
    header_height: float = 35.0
    footer_height: float = 30.0
    bottom_margin: float = 10.0
    top_gap: float = 10.0
    stamp_size: float = px_to_mm(80)
    stamp_right: float = px_to_mm(50)
    stamp_bottom: float = px_to_mm(80)

    @property
    def content_width(self) -> float:
        return self.width - self.margin * 2

    @property
    def content_top(self) -> float:
        return self.header_height + self.top_gap

    @property
    def content_bottom(self) -> float:
        return self.height - self.footer_height - self.bottom_margin

    @property
    def pagesize(self) -> Tuple[float, float]:
        return (self.width * mm, self.height * mm)

    def x_pt(self, x: float) -> float:
        return x * mm

    def y_pt(self, y: float) -> float:
        """Convert a distance from the page top (mm) to a PDF y coordinate (points)."""
        return (self.height - y) * mm


A4 = PageGeometry()


@dataclass(frozen=True)
class TableSpec:
    """Static column layout of one table type.

    ``right_aligned`` and ``bold_columns`` hold column indexes. Construction fails
    with :class:`LayoutConfigError` when a column interior cannot hold one glyph.
    """

    name: str
    widths: Tuple[float, ...]
    header: Optional[Tuple[str, ...]] = None
    right_aligned: FrozenSet[int] = field(default_factory=frozenset)
    bold_columns: FrozenSet[int] = field(default_factory=frozenset)
    font_size: float = TABLE_FONT_SIZE
    repeat_header: bool = True

    def __post_init__(self) -> None:
        if not self.widths:
            raise LayoutConfigError(f"Table '{self.name}' has no columns")
        if self.header is not None and len(self.header) != len(self.widths):
            raise LayoutConfigError(
                f"Table '{self.name}' has {len(self.header)} header cells for {len(self.widths)} columns")
        glyph = text_width("W", FONT_BOLD, self.font_size)
        for idx, width in enumerate(self.widths):
            if width - CELL_PAD * 2 < glyph:
                raise LayoutConfigError(
                    f"Column {idx} of table '{self.name}' is {width}mm wide; "
                    f"needs at least {glyph + CELL_PAD * 2:.2f}mm")
        for idx in set(self.right_aligned) | set(self.bold_columns):
            if not 0 <= idx < len(self.widths):
                raise LayoutConfigError(f"Column index {idx} out of range for table '{self.name}'")

    @property
    def total_width(self) -> float:
        return sum(self.widths)

    def offsets(self) -> Sequence[float]:
        """Left edge of every column relative to the table's left edge."""
        out, x = [], 0.0
        for width in self.widths:
            out.append(x)
            x += width
        return out


# ===== Static table configurations =====
CLIENT_DETAILS_TABLE = TableSpec(name="client_details", widths=(32, 63, 32, 63))
BANK_DETAILS_TABLE = TableSpec(name="bank_details", widths=(32, 75, 32, 51))
GATE_PASS_DETAILS_TABLE = TableSpec(name="gate_pass_details", widths=(32, 63, 32, 63))

INVOICE_ITEMS_TABLE = TableSpec(
    name="invoice_items",
    widths=(12, 55, 20, 13, 13, 20, 14, 43),
    header=("Sr.No.", "Description of Goods", "HSN Code", "Qty.", "Unit", "Rate", "%age", "Basic Amount (INR)"),
    right_aligned=frozenset({5, 7}),
    bold_columns=frozenset({0}),
)

GATE_PASS_ITEMS_TABLE = TableSpec(
    name="gate_pass_items",
    widths=(14, 25, 40, 29, 20, 24, 28),
    header=("SR. NO.", "PARTMARK", "MATERIAL DISCRIPTION", "MATERIAL SIZE", "QUANTITY", "ASSLY PART SL",
            "APPROX. VALUE"),
    bold_columns=frozenset({0}),
)

LEDGER_TABLE = TableSpec(
    name="client_ledger",
    widths=(24, 68, 24, 26, 24, 24),
    header=("Date", "Particulars", "Vch Type", "Vch No.", "Debit", "Credit"),
    right_aligned=frozenset({4, 5}),
    bold_columns=frozenset({0}),
)

SUMMARY_TABLE = TableSpec(
    name="summary",
    widths=(95, 55, 30),
    header=("Total Amount In Words", "Details", "Amount"),
    right_aligned=frozenset({2}),
)

QUOTATION_SCOPE_TABLE = TableSpec(
    name="quotation_scope",
    widths=(25, 90, 65),
    header=("Sl. No.", "Description", "Details"),
)

QUOTATION_ADDITIONS_TABLE = TableSpec(
    name="quotation_additions",
    widths=(25, 90, 65),
    header=("Sr. No.", "Description", "Details"),
)

QUOTATION_STEEL_WORK_TABLE = TableSpec(
    name="quotation_steel_work",
    widths=(20, 80, 80),
    header=("No.", "Description", "Details"),
)

QUOTATION_MATERIAL_TABLE = TableSpec(
    name="quotation_material",
    widths=(25, 90, 65),
    header=("SI. No.", "Structural Components", "Details"),
)

QUOTATION_PRICE_TABLE = TableSpec(
    name="quotation_price",
    widths=(15, 55, 20, 20, 25, 30, 15),
    header=("S.N.", "Description", "UOM", "QTY", "Rate", "Amount", "Remarks"),
    right_aligned=frozenset({4, 5}),
)

QUOTATION_TERMS_TABLE = TableSpec(
    name="quotation_terms",
    widths=(20, 45, 115),
    header=("SI. No.", "Description", "Conditions"),
)

QUOTATION_INDEX_TABLE = TableSpec(
    name="quotation_index",
    widths=(25, 120, 35),
    header=("Sl. No.", "Subject", "Page No."),
)


__all__ = [
    "px_to_mm",
    "text_width",
    "PageGeometry",
    "A4",
    "TableSpec",
    "CLIENT_DETAILS_TABLE",
    "BANK_DETAILS_TABLE",
    "GATE_PASS_DETAILS_TABLE",
    "INVOICE_ITEMS_TABLE",
    "GATE_PASS_ITEMS_TABLE",
    "LEDGER_TABLE",
    "SUMMARY_TABLE",
    "QUOTATION_SCOPE_TABLE",
    "QUOTATION_ADDITIONS_TABLE",
    "QUOTATION_STEEL_WORK_TABLE",
    "QUOTATION_MATERIAL_TABLE",
    "QUOTATION_PRICE_TABLE",
    "QUOTATION_TERMS_TABLE",
    "QUOTATION_INDEX_TABLE",
]
