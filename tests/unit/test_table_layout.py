from unittest.mock import MagicMock

import pytest

from fabdocs.pdf.cursor import PageCursor
from fabdocs.pdf.geometry import (
    A4,
    CELL_PAD,
    CLIENT_DETAILS_TABLE,
    FONT_BOLD,
    FONT_REGULAR,
    HEADER_BG,
    INVOICE_ITEMS_TABLE,
    LINE_HEIGHT,
    MIN_ROW_HEIGHT,
    ROW_VERTICAL_PAD,
    SUMMARY_TABLE,
    ZEBRA_FILL,
    TableSpec,
    text_width,
)
from fabdocs.pdf.tables import (
    ItemRow,
    MergedRow,
    PairedRow,
    SummaryRow,
    Table,
    wrap_fragments,
    wrap_text,
)
from fabdocs.utils.errors import LayoutConfigError, LayoutError

LONG_DESCRIPTION = (
    "Supply, fabrication and erection of pre-engineered steel building including primary frames, "
    "secondary members, roof and wall sheeting, flashing, gutters and anchor bolts as per approved drawings"
)


def _item(description="Column", rate="1,000.00"):
    return ItemRow(("1", description, "940610", "2", "MT", rate, "100%", "2,000.00"))


def _fills(canvas, color):
    return [c for c in canvas.setFillColor.call_args_list if c.args[0] is color]


@pytest.fixture
def cursor(canvas):
    return PageCursor(canvas, A4)


def test_wrap_respects_width():
    lines = wrap_text(LONG_DESCRIPTION, 50, FONT_REGULAR, 8.5)
    assert len(lines) > 3
    assert all(text_width(line, FONT_REGULAR, 8.5) <= 50 for line in lines)
    assert " ".join(lines) == LONG_DESCRIPTION


def test_wrap_hard_breaks_overlong_word():
    lines = wrap_text("X" * 80, 20, FONT_REGULAR, 8.5)
    assert len(lines) > 1
    assert "".join(lines) == "X" * 80


def test_wrap_empty_text_is_one_blank_line():
    assert wrap_text("", 20) == [""]
    assert wrap_text(None, 20) == [""]


def test_row_height_follows_wrapped_lines(canvas, cursor):
    cursor.ensure_space = MagicMock(wraps=cursor.ensure_space)
    table = Table(canvas, cursor, INVOICE_ITEMS_TABLE)
    prepared = table.add(_item(LONG_DESCRIPTION))

    lines = len(wrap_text(LONG_DESCRIPTION, 55 - CELL_PAD * 2, FONT_REGULAR, 8.5))
    assert lines > 1
    assert prepared.height == pytest.approx(lines * LINE_HEIGHT + ROW_VERTICAL_PAD)
    cursor.ensure_space.assert_called_once_with(prepared.height)


def test_short_rows_use_minimum_height(canvas, cursor):
    assert Table(canvas, cursor, INVOICE_ITEMS_TABLE).add(_item()).height == MIN_ROW_HEIGHT


def test_zebra_parity_within_table(canvas, cursor):
    table = Table(canvas, cursor, INVOICE_ITEMS_TABLE)
    table.add_all([_item(), _item(), _item(), _item()])
    assert len(_fills(canvas, ZEBRA_FILL)) == 2

    canvas.setFillColor.reset_mock()
    Table(canvas, cursor, INVOICE_ITEMS_TABLE).add(_item())
    assert _fills(canvas, ZEBRA_FILL) == []


def test_explicit_shading_overrides_parity(canvas, cursor):
    table = Table(canvas, cursor, INVOICE_ITEMS_TABLE)
    table.add(ItemRow(_item().cells, shaded=True))
    assert len(_fills(canvas, ZEBRA_FILL)) == 1


def test_header_repeats_after_page_break(canvas, cursor):
    table = Table(canvas, cursor, INVOICE_ITEMS_TABLE)
    table.draw_header()
    cursor.y = cursor.limit - 1
    table.add(_item())
    assert cursor.page == 2
    assert len(_fills(canvas, HEADER_BG)) == 2
    canvas.showPage.assert_called_once()


def test_right_aligned_columns_use_right_string(canvas, cursor):
    Table(canvas, cursor, INVOICE_ITEMS_TABLE).add(_item(rate="1,25,000.00"))
    right = [c.args[2] for c in canvas.drawRightString.call_args_list]
    assert right == ["1,25,000.00", "2,000.00"]


def test_item_row_must_match_column_count(canvas, cursor):
    with pytest.raises(LayoutError):
        Table(canvas, cursor, INVOICE_ITEMS_TABLE).add(ItemRow(("1", "only two")))


def test_paired_row_blank_values(canvas, cursor):
    prepared = Table(canvas, cursor, CLIENT_DETAILS_TABLE).prepare(PairedRow(("GSTIN", None)))
    assert [cell.lines for cell in prepared.cells] == [["GSTIN"], ["-"], [""], [""]]
    assert prepared.cells[0].bold and not prepared.cells[1].bold


def test_merged_row_spans_remaining_columns(canvas, cursor):
    prepared = Table(canvas, cursor, CLIENT_DETAILS_TABLE).prepare(MergedRow("Organisation Name", None))
    assert len(prepared.cells) == 2
    assert prepared.cells[1].x == 32
    assert prepared.cells[1].width == 63 + 32 + 63
    assert prepared.cells[1].lines == ["-"]


def test_dispatch_fragments_keep_key_bold():
    value = "Vehicle No. - DL1LX4432, L.R. No. - LR-77"
    assert wrap_fragments(value, 200) == [[
        ("Vehicle No.", True), (" - DL1LX4432, ", False), ("L.R. No.", True), (" - LR-77", False),
    ]]
    narrow = wrap_fragments(value, 40)
    assert len(narrow) == 2
    assert narrow[1][0] == ("L.R. No.", True)


def test_oversized_fragment_wraps_inside_cell():
    gate_pass = (
        "Gate Pass - RNS/PROJECT/2026-27/RNS-GT-0001 issued for dispatch of primary frames and secondary "
        "members to the Manesar warehouse site via the Nagpur bypass after quality clearance by the plant head"
    )
    value = f"Vehicle No. - DL1LX4432, {gate_pass}"
    width = 63 + 32 + 63 - CELL_PAD * 2
    lines = wrap_fragments(value, width)
    assert len(lines) > 2
    assert lines[1][0] == ("Gate Pass", True)
    for line in lines:
        runs = line[:-1] + [(line[-1][0].rstrip(), line[-1][1])]
        drawn = sum(text_width(text, FONT_BOLD if bold else FONT_REGULAR, 8.5) for text, bold in runs)
        assert drawn <= width
    rebuilt = " ".join("".join(text for text, _ in line) for line in lines)
    assert rebuilt.split() == value.split()


def test_empty_fragments_render_placeholder():
    assert wrap_fragments("", 100) == [[("-", False)]]


def test_grand_total_row_is_bold(canvas, cursor):
    table = Table(canvas, cursor, SUMMARY_TABLE)
    assert all(c.bold for c in table.prepare_summary(SummaryRow("Grand Total", "1.00")).cells)
    assert not any(c.bold for c in table.prepare_summary(SummaryRow("Total GST", "1.00")).cells)


def test_summary_block_moves_to_next_page_whole(canvas, cursor):
    cursor.y = cursor.limit - 20
    rows = [SummaryRow(f"Row {i}", "0.00") for i in range(7)]
    height = Table(canvas, cursor, SUMMARY_TABLE).add_summary("Zero Rupees Only", rows)
    assert cursor.page == 2
    assert cursor.y == pytest.approx(A4.content_top + height)


def test_narrow_column_is_rejected_at_construction():
    with pytest.raises(LayoutConfigError):
        TableSpec(name="bad", widths=(3, 50))


def test_header_must_match_columns():
    with pytest.raises(LayoutConfigError):
        TableSpec(name="bad", widths=(20, 20), header=("Only one",))
