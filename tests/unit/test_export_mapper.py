from __future__ import annotations

from cellmark.excel.constants import GREEN_ARGB, RED_ARGB
from cellmark.excel.export_mapper import encode, export_column_widths, red_extract_rows
from cellmark.models.config_models import SheetTitles
from cellmark.models.highlight import CellColor, CellCoord
from cellmark.services.section_index import SectionIndex

HEADERS = ["№", "Ревизионная группа", "Item"]
ROWS = [
    ["Ревизионная группа X", "A", "B"],
    [1, None, "r1"],
    [2, None, "r2"],
    [3, None, "r3"],
    [4, None, "r4"],
]
SECTIONS = SectionIndex((0,))


def test_export_column_widths():
    assert export_column_widths([40.0, 160.0, 40.0], 3) == [5.0, 20.0, 10.0]
    # missing widths fall back to 80 px
    assert export_column_widths([], 2) == [5.0, 10.0]


def test_red_extract_section_not_duplicated():
    highlights = {CellCoord(2, 2): CellColor.RED, CellCoord(4, 2): CellColor.RED}
    assert red_extract_rows(highlights, SECTIONS) == [0, 2, 4]


def test_red_extract_new_section_emitted_per_run():
    sections = SectionIndex((0, 3))
    highlights = {
        CellCoord(1, 2): CellColor.RED,
        CellCoord(2, 0): CellColor.RED,
        CellCoord(4, 1): CellColor.RED,
        CellCoord(2, 1): CellColor.GREEN,
    }
    assert red_extract_rows(highlights, sections) == [0, 1, 2, 3, 4]


def test_red_extract_rows_before_any_section():
    sections = SectionIndex((2,))
    highlights = {CellCoord(0, 1): CellColor.RED, CellCoord(3, 1): CellColor.RED}
    assert red_extract_rows(highlights, sections) == [0, 2, 3]


def test_red_section_row_not_emitted_twice():
    highlights = {CellCoord(0, 1): CellColor.RED, CellCoord(1, 1): CellColor.RED}
    assert red_extract_rows(highlights, SECTIONS) == [0, 1]


def test_green_only_has_no_extract():
    assert red_extract_rows({CellCoord(1, 1): CellColor.GREEN}, SECTIONS) == []


def test_encode_primary_sheet_fills_and_comments():
    highlights = {CellCoord(1, 2): CellColor.GREEN, CellCoord(2, 2): CellColor.RED}
    notes = {CellCoord(1, 0): "n1"}
    encoded = encode(HEADERS, ROWS, highlights, notes, [40.0, 200.0, 80.0], sections=SECTIONS)

    primary = encoded.primary
    assert primary.sheet_name == "Основной лист"
    assert primary.headers == HEADERS
    assert len(primary.rows) == len(ROWS) + 1
    assert primary.column_widths == [5.0, 25.0, 10.0]

    green = primary.rows[2][2]
    assert (green.fill_pattern, green.fg_color) == ("solid", GREEN_ARGB)
    red = primary.rows[3][2]
    assert (red.fill_pattern, red.fg_color) == ("solid", RED_ARGB)
    plain = primary.rows[4][2]
    assert plain.fill_pattern is None and plain.fg_color is None
    assert primary.rows[2][0].comment == "n1"
    assert primary.rows[2][0].value == 1


def test_encode_red_extract_values_only():
    highlights = {CellCoord(2, 2): CellColor.RED, CellCoord(4, 2): CellColor.RED}
    encoded = encode(HEADERS, ROWS, highlights, {CellCoord(2, 2): "n"}, [], sections=SECTIONS)

    extract = encoded.red_extract
    assert extract is not None
    assert extract.sheet_name == "Выделено красным"
    assert [r[0].value for r in extract.rows] == ["№", "Ревизионная группа X", 2, 4]
    assert all(c.fill_pattern is None and c.comment is None for row in extract.rows for c in row)
    assert [s.sheet_name for s in encoded.sheets] == ["Основной лист", "Выделено красным"]


def test_encode_without_red_has_single_sheet():
    encoded = encode(HEADERS, ROWS, {CellCoord(1, 1): CellColor.GREEN}, {}, [])
    assert encoded.red_extract is None
    assert len(encoded.sheets) == 1


def test_encode_custom_titles_and_short_rows():
    titles = SheetTitles(primary_title="Main", red_extract_title="Red")
    encoded = encode(["a", "b"], [[1]], {CellCoord(0, 0): CellColor.RED}, {}, [], titles=titles)
    assert encoded.primary.sheet_name == "Main"
    assert encoded.primary.rows[1][1].value is None
    assert encoded.red_extract.sheet_name == "Red"
    assert [c.value for c in encoded.red_extract.rows[1]] == [1, None]
