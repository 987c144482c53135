from __future__ import annotations

import logging
import time
from pathlib import Path

from ..excel.export_mapper import EncodedWorkbook
from ..excel.reader import WorkbookDecodeError, read_first_sheet
from ..excel.writer import WorkbookEncodeError
from ..excel.writer import save_workbook as write_sheets
from ..logging.error_log import AnomalyLogBuffer
from ..models.highlight import CellColor
from ..models.processing_result import ProcessingResult
from .progress import BusyIndicator
from .session import AnnotationSession

"""Service orchestration: file -> session -> file.

open_workbook() reads the first sheet, decodes it and swaps it into the
session; save_workbook() encodes the session and writes the output file.
Both drive the session's busy state. The session is only replaced once a
decode fully succeeded, and the output file only appears once the encode
fully succeeded.
"""

__all__ = [
    "default_output_path",
    "open_workbook",
    "save_workbook",
    "summarize",
]

logger = logging.getLogger(__name__)


def default_output_path(source: Path, prefix: str = "edited_") -> Path:
    return source.with_name(f"{prefix}{source.name}")


def open_workbook(
    path: Path,
    session: AnnotationSession,
    anomalies: AnomalyLogBuffer | None = None,
) -> int:
    """Load path into session. Returns the number of recovered per-cell anomalies.

    Raises:
        WorkbookDecodeError: the file could not be decoded; the session keeps
            its previous workbook (status FAILED)
    """
    session.mark_busy()
    with BusyIndicator(2, description=f"Opening {path.name}") as busy:
        try:
            busy.start_stage("read")
            sheet = read_first_sheet(path)
            busy.set_postfix(rows=len(sheet.data_rows))
            busy.finish_stage()
            busy.start_stage("decode")
            decoded = session.load(sheet, file_name=path.name)
            busy.finish_stage()
        except WorkbookDecodeError as e:
            session.mark_failed(str(e))
            raise
        except (TypeError, ValueError, AttributeError) as e:
            session.mark_failed(str(e))
            raise WorkbookDecodeError(f"cannot decode {path.name}: {e}") from e
    if anomalies is not None:
        anomalies.extend(decoded.anomalies)
    return len(decoded.anomalies)


def save_workbook(session: AnnotationSession, out_path: Path) -> EncodedWorkbook:
    """Encode the session and write it to out_path.

    Raises:
        WorkbookEncodeError: encoding or writing failed; no file is left behind
    """
    session.mark_busy()
    with BusyIndicator(2, description=f"Saving {out_path.name}") as busy:
        try:
            busy.start_stage("encode")
            encoded = session.export()
            busy.finish_stage()
            busy.start_stage("write")
            write_sheets(encoded.sheets, out_path, session.config.comment_author)
            busy.finish_stage()
        except WorkbookEncodeError as e:
            session.mark_failed(str(e))
            raise
    session.mark_ready()
    logger.info("saved %s sheets=%d", out_path, len(encoded.sheets))
    return encoded


def summarize(
    session: AnnotationSession,
    *,
    encoded: EncodedWorkbook | None = None,
    anomalies: int = 0,
    started: float | None = None,
) -> ProcessingResult:
    state = session.state
    store = state.store
    extract_rows = 0
    if encoded is not None and encoded.red_extract is not None:
        extract_rows = len(encoded.red_extract.rows) - 1
    elapsed = time.perf_counter() - started if started is not None else 0.0
    return ProcessingResult(
        file_name=state.file_name,
        data_rows=len(state.rows),
        red_cells=store.count(CellColor.RED),
        green_cells=store.count(CellColor.GREEN),
        red_rows=len(store.red_rows()),
        notes=len(store.notes),
        extract_rows=extract_rows,
        anomalies=anomalies,
        elapsed_seconds=round(elapsed, 3),
    )
