from __future__ import annotations

import time
from pathlib import Path

import pytest
from openpyxl import load_workbook

from cellmark.excel.reader import WorkbookDecodeError, read_first_sheet
from cellmark.excel.writer import WorkbookEncodeError
from cellmark.logging.error_log import AnomalyLogBuffer
from cellmark.models.config_models import AppConfig
from cellmark.models.excel_file import SessionStatus
from cellmark.models.highlight import CellCoord
from cellmark.models.sheet_data import CellData
from cellmark.services.orchestrator import default_output_path, open_workbook, save_workbook, summarize
from cellmark.services.session import AnnotationSession


@pytest.fixture()
def session():
    s = AnnotationSession(AppConfig(search_debounce_ms=10_000))
    yield s
    s.close()


def test_default_output_path():
    assert default_output_path(Path("/data/book.xlsx")) == Path("/data/edited_book.xlsx")
    assert default_output_path(Path("book.xlsx"), "x_") == Path("x_book.xlsx")


def test_open_workbook_loads_session(sample_xlsx: Path, session: AnnotationSession):
    anomalies = AnomalyLogBuffer()
    count = open_workbook(sample_xlsx, session, anomalies)
    assert count == 0
    assert len(anomalies) == 0
    assert session.status is SessionStatus.READY
    assert session.state.file_name == "sample.xlsx"
    assert len(session.state.rows) == 6


def test_open_failure_keeps_previous_workbook(sample_xlsx: Path, session: AnnotationSession, temp_workdir: Path):
    open_workbook(sample_xlsx, session)
    before = session.state
    bad = temp_workdir / "bad.xlsx"
    bad.write_bytes(b"garbage")
    with pytest.raises(WorkbookDecodeError):
        open_workbook(bad, session)
    assert session.status is SessionStatus.FAILED
    assert session.error
    assert session.state is before


def test_anomalies_collected(make_xlsx, session: AnnotationSession, monkeypatch):
    path = make_xlsx("a.xlsx", [["a", "b"], [1, 2]])

    def with_bad_colour(p):
        sheet = read_first_sheet(p)
        sheet.rows[1][0] = CellData(1, "solid", "nonsense")
        return sheet

    monkeypatch.setattr("cellmark.services.orchestrator.read_first_sheet", with_bad_colour)
    buf = AnomalyLogBuffer()
    assert open_workbook(path, session, buf) == 1
    assert buf.records[0].anomaly_type == "MALFORMED_COLOR"
    assert buf.records[0].file == "a.xlsx"


def test_save_workbook_writes_output(sample_xlsx: Path, session: AnnotationSession, temp_workdir: Path):
    open_workbook(sample_xlsx, session)
    session.set_highlight(CellCoord(1, 2))
    session.set_highlight(CellCoord(1, 2))
    out = temp_workdir / "out.xlsx"
    encoded = save_workbook(session, out)
    assert session.status is SessionStatus.READY
    assert encoded.red_extract is not None
    wb = load_workbook(out)
    assert wb.sheetnames == ["Основной лист", "Выделено красным"]


def test_save_failure_marks_failed(sample_xlsx: Path, session: AnnotationSession, temp_workdir: Path, monkeypatch):
    open_workbook(sample_xlsx, session)

    def fail(*args, **kwargs):
        raise WorkbookEncodeError("disk full")

    monkeypatch.setattr("cellmark.services.orchestrator.write_sheets", fail)
    with pytest.raises(WorkbookEncodeError):
        save_workbook(session, temp_workdir / "out.xlsx")
    assert session.status is SessionStatus.FAILED
    assert not (temp_workdir / "out.xlsx").exists()
    # annotation state survives a failed save
    assert session.is_loaded


def test_summarize_counts(sample_xlsx: Path, session: AnnotationSession):
    started = time.perf_counter()
    open_workbook(sample_xlsx, session)
    session.set_highlight(CellCoord(1, 2))
    session.set_highlight(CellCoord(1, 2))
    session.set_highlight(CellCoord(4, 3))
    session.set_note(CellCoord(2, 2), "n")
    encoded = session.export()
    result = summarize(session, encoded=encoded, anomalies=3, started=started)
    assert result.file_name == "sample.xlsx"
    assert result.data_rows == 6
    assert result.red_cells == 2  # the toggled cell and its section cell
    assert result.green_cells == 1
    assert result.red_rows == 1
    assert result.notes == 1
    assert result.extract_rows == 2
    assert result.anomalies == 3
    assert result.elapsed_seconds >= 0


def test_summarize_without_export(sample_xlsx: Path, session: AnnotationSession):
    open_workbook(sample_xlsx, session)
    result = summarize(session)
    assert result.extract_rows == 0
    assert result.elapsed_seconds == 0.0
