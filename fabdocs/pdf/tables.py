"""Row-based table layout on a reportlab canvas.

Every row shape (merged label/value, paired label/value, item row, summary row)
is first *prepared* into positioned cells with wrapped text, then painted by one
shared routine:

1. wrap each cell against its interior width (column width minus padding),
2. row height = max(MIN_ROW_HEIGHT, lines * LINE_HEIGHT + ROW_VERTICAL_PAD),
3. ``cursor.ensure_space(row height)``,
4. zebra fill by row parity within the table instance,
5. row border and a separator at every cell boundary,
6. text, left-aligned unless the column is right-aligned.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, List, Optional, Sequence, Tuple, Union

from reportlab.lib import colors

from fabdocs.utils.errors import LayoutError
from .cursor import PageCursor
from .geometry import (
    BORDER_COLOR,
    BORDER_WIDTH,
    CELL_PAD,
    CELL_TOP_PAD,
    FONT_BOLD,
    FONT_REGULAR,
    HEADER_BG,
    HEADER_FONT_SIZE,
    LINE_HEIGHT,
    MIN_ROW_HEIGHT,
    ROW_VERTICAL_PAD,
    TEXT_ASCENT,
    ZEBRA_FILL,
    TableSpec,
    text_width,
)

# ----------------------------- Row shapes ----------------------------- #


@dataclass(frozen=True)
class MergedRow:
    """Label in the first column, value spanning the rest.

    ``fragmented`` values are comma-separated ``Key - Value`` fragments wrapped
    fragment by fragment with the key in bold.
    """
    label: str
    value: Optional[str] = None
    fragmented: bool = False


@dataclass(frozen=True)
class PairedRow:
    left: Tuple[str, Optional[str]]
    right: Optional[Tuple[str, Optional[str]]] = None


@dataclass(frozen=True)
class ItemRow:
    cells: Tuple[str, ...]
    bold_columns: Optional[FrozenSet[int]] = None
    shaded: Optional[bool] = None


@dataclass(frozen=True)
class SummaryRow:
    detail: str
    value: str

    @property
    def emphasized(self) -> bool:
        return self.detail.strip().lower() == "grand total"


Row = Union[MergedRow, PairedRow, ItemRow]

# (text, bold) pieces of one rendered line
Run = Tuple[str, bool]


@dataclass
class Cell:
    x: float
    width: float
    lines: List[str] = field(default_factory=list)
    bold: bool = False
    align: str = "left"
    size: float = 8.5
    runs: Optional[List[List[Run]]] = None

    @property
    def line_count(self) -> int:
        return max(1, len(self.runs) if self.runs is not None else len(self.lines))


@dataclass
class PreparedRow:
    cells: List[Cell]
    height: float


# ----------------------------- Text wrapping ----------------------------- #


def _fit_prefix(word: str, width: float, font: str, size: float) -> int:
    n = len(word)
    while n > 1 and text_width(word[:n], font, size) > width:
        n -= 1
    return n


def wrap_text(text: Optional[str], width: float, font: str = FONT_REGULAR, size: float = 8.5) -> List[str]:
    """Greedy word wrap against ``width`` mm; words wider than a line are hard-broken."""
    lines: List[str] = []
    for paragraph in (text or "").replace("\r", "").split("\n"):
        words = paragraph.split()
        if not words:
            lines.append("")
            continue
        current = ""
        for word in words:
            candidate = f"{current} {word}" if current else word
            if text_width(candidate, font, size) <= width:
                current = candidate
                continue
            if current:
                lines.append(current)
            while len(word) > 1 and text_width(word, font, size) > width:
                cut = _fit_prefix(word, width, font, size)
                lines.append(word[:cut])
                word = word[cut:]
            current = word
        lines.append(current)
    return lines or [""]


def _split_tail(tail: str, first_width: float, width: float, size: float) -> Tuple[str, List[str]]:
    """Fill what is left of the key's line with ``tail``; wrap the rest at full width."""
    words = tail.split()
    taken: List[str] = []
    while words and text_width(" " + " ".join(taken + words[:1]), FONT_REGULAR, size) <= first_width:
        taken.append(words.pop(0))
    head = " " + " ".join(taken) if taken else ""
    return head, wrap_text(" ".join(words), width, FONT_REGULAR, size) if words else []


def wrap_fragments(value: Optional[str], width: float, size: float = 8.5) -> List[List[Run]]:
    """Wrap ``Key - Value`` fragments so a key never leaves its value behind.

    A fragment wider than the whole cell starts a fresh line; its value is then
    hard-wrapped onto the following lines.
    """
    entries = [part.strip() for part in (value or "").split(",") if part.strip()]
    if not entries:
        return [[("-", False)]]
    lines: List[List[Run]] = [[]]
    used = 0.0
    for idx, entry in enumerate(entries):
        separator = ", " if idx < len(entries) - 1 else ""
        key, dash, rest = entry.partition(" - ")
        tail = dash + rest + separator
        key_w = text_width(key, FONT_BOLD, size)
        tail_w = text_width(tail, FONT_REGULAR, size)
        if lines[-1] and used + key_w + tail_w > width:
            lines.append([])
            used = 0.0
        if key_w + tail_w <= width:
            lines[-1].append((key, True))
            if tail:
                lines[-1].append((tail, False))
            used += key_w + tail_w
            continue

        key_lines = wrap_text(key, width, FONT_BOLD, size)
        for key_line in key_lines[:-1]:
            lines[-1].append((key_line, True))
            lines.append([])
        last_key = key_lines[-1]
        lines[-1].append((last_key, True))
        used = text_width(last_key, FONT_BOLD, size)
        head, overflow = _split_tail(tail, width - used, width, size)
        if head:
            lines[-1].append((head, False))
            used += text_width(head, FONT_REGULAR, size)
        for text in overflow:
            lines.append([(text, False)])
            used = text_width(text, FONT_REGULAR, size)
        if separator:
            text, bold = lines[-1][-1]
            lines[-1][-1] = (text + " ", bold)
            used += text_width(" ", FONT_REGULAR, size)
    return lines


def row_height(cells: Sequence[Cell]) -> float:
    lines = max(cell.line_count for cell in cells)
    return max(MIN_ROW_HEIGHT, lines * LINE_HEIGHT + ROW_VERTICAL_PAD)


# ----------------------------- Table ----------------------------- #


class Table:
    """One table instance drawn at the cursor.

    Zebra parity is counted per instance, so every table starts unshaded no
    matter what was drawn before it on the page.
    """

    def __init__(self, canvas, cursor: PageCursor, spec: TableSpec, left: Optional[float] = None):
        self.canvas = canvas
        self.cursor = cursor
        self.spec = spec
        self.left = cursor.geometry.margin if left is None else left
        self.rows_drawn = 0
        self._header_drawn = False

    # ---- preparation ----
    def _cell(self, x: float, width: float, text: Optional[str], bold: bool = False, align: str = "left",
              size: Optional[float] = None, pad_factor: float = 2) -> Cell:
        size = size or self.spec.font_size
        font = FONT_BOLD if bold else FONT_REGULAR
        lines = wrap_text(text, width - CELL_PAD * pad_factor, font, size)
        return Cell(x=x, width=width, lines=lines, bold=bold, align=align, size=size)

    def _prepared(self, cells: List[Cell]) -> PreparedRow:
        return PreparedRow(cells=cells, height=row_height(cells))

    def prepare_header(self) -> PreparedRow:
        if not self.spec.header:
            raise LayoutError(f"Table '{self.spec.name}' has no header")
        offsets = self.spec.offsets()
        return self._prepared([
            self._cell(offsets[i], w, title, bold=True, size=HEADER_FONT_SIZE)
            for i, (w, title) in enumerate(zip(self.spec.widths, self.spec.header))
        ])

    def prepare(self, row: Row) -> PreparedRow:
        widths = self.spec.widths
        offsets = self.spec.offsets()
        if isinstance(row, MergedRow):
            label = self._cell(0, widths[0], row.label, bold=True)
            span = self.spec.total_width - widths[0]
            if row.fragmented:
                value = Cell(x=widths[0], width=span, size=self.spec.font_size,
                             runs=wrap_fragments(row.value, span - CELL_PAD * 2, self.spec.font_size))
            else:
                value = self._cell(widths[0], span, row.value or "-")
            return self._prepared([label, value])
        if isinstance(row, PairedRow):
            if len(widths) != 4:
                raise LayoutError(f"Paired rows need 4 columns, table '{self.spec.name}' has {len(widths)}")
            right_label, right_value = row.right if row.right is not None else ("", "")
            return self._prepared([
                self._cell(offsets[0], widths[0], row.left[0], bold=True),
                self._cell(offsets[1], widths[1], row.left[1] or "-"),
                self._cell(offsets[2], widths[2], right_label, bold=True),
                self._cell(offsets[3], widths[3], right_value or ""),
            ])
        if isinstance(row, ItemRow):
            if len(row.cells) != len(widths):
                raise LayoutError(
                    f"Row has {len(row.cells)} cells, table '{self.spec.name}' has {len(widths)} columns")
            bold = self.spec.bold_columns if row.bold_columns is None else row.bold_columns
            return self._prepared([
                self._cell(offsets[i], widths[i], text, bold=i in bold,
                           align="right" if i in self.spec.right_aligned else "left")
                for i, text in enumerate(row.cells)
            ])
        raise TypeError(f"Unsupported row shape: {type(row).__name__}")

    def prepare_summary(self, row: SummaryRow) -> PreparedRow:
        w0, w1, w2 = self.spec.widths
        return self._prepared([
            self._cell(w0, w1, row.detail, bold=row.emphasized),
            self._cell(w0 + w1, w2, row.value, bold=row.emphasized,
                       align="right" if 2 in self.spec.right_aligned else "left"),
        ])

    # ---- drawing ----
    def draw_header(self) -> None:
        """Draw the column header; it is repeated after any later page break."""
        header = self.prepare_header()
        self.cursor.ensure_space(header.height + MIN_ROW_HEIGHT)
        self._paint(header, HEADER_BG)
        self._header_drawn = True

    def add(self, row: Row) -> PreparedRow:
        prepared = self.prepare(row)
        if self.cursor.ensure_space(prepared.height) and self._header_drawn and self.spec.repeat_header:
            self._paint(self.prepare_header(), HEADER_BG)
            self.cursor.ensure_space(prepared.height)
        shaded = self.rows_drawn % 2 == 1 if getattr(row, "shaded", None) is None else row.shaded
        self._paint(prepared, ZEBRA_FILL if shaded else None)
        self.rows_drawn += 1
        return prepared

    def add_all(self, rows: Sequence[Row]) -> None:
        for row in rows:
            self.add(row)

    def add_summary(self, amount_in_words: str, rows: Sequence[SummaryRow]) -> float:
        """Header, then a words cell spanning every summary row beside the detail grid.

        The whole block is kept on one page. Returns the block height.
        """
        w0 = self.spec.widths[0]
        header = self.prepare_header()
        prepared = [self.prepare_summary(r) for r in rows]
        words = self._cell(0, w0, amount_in_words, bold=True, pad_factor=3)
        body = sum(p.height for p in prepared)
        words_height = row_height([words])
        if prepared and words_height > body:
            prepared[-1].height += words_height - body
            body = words_height

        self.cursor.ensure_space(header.height + body)
        self._paint(header, HEADER_BG)
        top = self.cursor.y
        self._paint_at(PreparedRow(cells=[words], height=body), top, None)
        y = top
        for idx, row in enumerate(prepared):
            self._paint_at(row, y, ZEBRA_FILL if idx % 2 == 1 else None)
            y += row.height
        self.cursor.advance(body)
        return header.height + body

    def _paint(self, prepared: PreparedRow, fill) -> None:
        self._paint_at(prepared, self.cursor.y, fill)
        self.cursor.advance(prepared.height)

    def _paint_at(self, prepared: PreparedRow, top: float, fill) -> None:
        c = self.canvas
        g = self.cursor.geometry
        first, last = prepared.cells[0], prepared.cells[-1]
        x0 = self.left + first.x
        x1 = self.left + last.x + last.width
        bottom = top + prepared.height
        if fill is not None:
            c.setFillColor(fill)
            c.rect(g.x_pt(x0), g.y_pt(bottom), g.x_pt(x1 - x0), g.x_pt(prepared.height), stroke=0, fill=1)
        c.setStrokeColor(BORDER_COLOR)
        c.setLineWidth(BORDER_WIDTH)
        c.rect(g.x_pt(x0), g.y_pt(bottom), g.x_pt(x1 - x0), g.x_pt(prepared.height), stroke=1, fill=0)
        for cell in prepared.cells[1:]:
            x = self.left + cell.x
            c.line(g.x_pt(x), g.y_pt(top), g.x_pt(x), g.y_pt(bottom))
        c.setFillColor(colors.black)
        for cell in prepared.cells:
            self._draw_text(cell, top)

    def _draw_text(self, cell: Cell, top: float) -> None:
        c = self.canvas
        g = self.cursor.geometry
        if cell.runs is not None:
            for idx, runs in enumerate(cell.runs):
                baseline = top + CELL_TOP_PAD + TEXT_ASCENT + idx * LINE_HEIGHT
                x = self.left + cell.x + CELL_PAD
                for text, bold in runs:
                    font = FONT_BOLD if bold else FONT_REGULAR
                    c.setFont(font, cell.size)
                    c.drawString(g.x_pt(x), g.y_pt(baseline), text)
                    x += text_width(text, font, cell.size)
            return
        c.setFont(FONT_BOLD if cell.bold else FONT_REGULAR, cell.size)
        for idx, line in enumerate(cell.lines):
            baseline = top + CELL_TOP_PAD + TEXT_ASCENT + idx * LINE_HEIGHT
            if cell.align == "right":
                c.drawRightString(g.x_pt(self.left + cell.x + cell.width - CELL_PAD), g.y_pt(baseline), line)
            else:
                c.drawString(g.x_pt(self.left + cell.x + CELL_PAD), g.y_pt(baseline), line)


__all__ = [
    "MergedRow",
    "PairedRow",
    "ItemRow",
    "SummaryRow",
    "Row",
    "Cell",
    "PreparedRow",
    "Table",
    "wrap_text",
    "wrap_fragments",
    "row_height",
]
