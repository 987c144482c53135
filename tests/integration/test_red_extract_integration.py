from __future__ import annotations

from pathlib import Path

from openpyxl import load_workbook

from cellmark.models.config_models import AppConfig
from cellmark.models.highlight import CellCoord
from cellmark.services.orchestrator import open_workbook, save_workbook
from cellmark.services.session import AnnotationSession

SECTION = "Ревизионная группа"


def _values(ws) -> list[list[object]]:
    return [[c.value for c in row] for row in ws.iter_rows()]


def test_extract_has_section_once_for_same_section(make_xlsx, temp_workdir: Path):
    src = make_xlsx(
        "audit.xlsx",
        [
            ["Пункт", SECTION, "Описание"],
            [f"{SECTION} X", "A", "B"],
            ["r1", None, "one"],
            ["r2", None, "two"],
            ["r3", None, "three"],
            ["r4", None, "four"],
        ],
    )
    session = AnnotationSession(AppConfig())
    open_workbook(src, session)
    for row in (2, 4):
        session.set_highlight(CellCoord(row, 2))
        session.set_highlight(CellCoord(row, 2))
    out = temp_workdir / "out.xlsx"
    save_workbook(session, out)
    session.close()

    wb = load_workbook(out)
    extract = wb["Выделено красным"]
    assert _values(extract) == [
        ["Пункт", SECTION, "Описание"],
        [f"{SECTION} X", "A", "B"],
        ["r2", None, "two"],
        ["r4", None, "four"],
    ]
    # values only
    for row in extract.iter_rows():
        for cell in row:
            assert cell.fill.fill_type is None
            assert cell.comment is None

    primary = wb["Основной лист"]
    assert primary.cell(row=4, column=2).fill.fgColor.rgb == "FFFF0000"
    assert primary.cell(row=6, column=2).fill.fgColor.rgb == "FFFF0000"
    assert primary.cell(row=3, column=2).fill.fill_type is None


def test_extract_across_sections(sample_xlsx: Path, temp_workdir: Path):
    session = AnnotationSession(AppConfig())
    open_workbook(sample_xlsx, session)
    for coord in (CellCoord(2, 3), CellCoord(4, 2), CellCoord(5, 2)):
        session.set_highlight(coord)
        session.set_highlight(coord)
    out = temp_workdir / "out.xlsx"
    save_workbook(session, out)
    session.close()

    extract = load_workbook(out)["Выделено красным"]
    first_column = [row[0] for row in _values(extract)]
    assert first_column == ["№", f"{SECTION} 1", 2, f"{SECTION} 2", 3, 4]


def test_clearing_last_red_removes_extract(sample_xlsx: Path, temp_workdir: Path):
    session = AnnotationSession(AppConfig())
    open_workbook(sample_xlsx, session)
    coord = CellCoord(2, 3)
    for _ in range(3):
        session.set_highlight(coord)
    out = temp_workdir / "out.xlsx"
    encoded = save_workbook(session, out)
    session.close()
    assert encoded.red_extract is None
    assert load_workbook(out).sheetnames == ["Основной лист"]
