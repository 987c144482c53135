from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from ..models.error_record import AnomalyRecord
from ..models.highlight import CellColor, CellCoord
from ..models.sheet_data import CellData, SheetData, display_text
from ..services.color_classifier import classify, parse_rgb
from .constants import (
    AUTO_MAX_WIDTH_PX,
    AUTO_MIN_WIDTH_PX,
    AUTO_PADDING_PX,
    PX_PER_WIDTH_UNIT,
    SOLID_PATTERN,
    UNDECLARED_WIDTH_PX,
)

"""Import mapper: decoded worksheet -> initial annotation state.

Convention: worksheet row 1 is the header row; worksheet row N (N >= 2) and
column M map to CellCoord(N - 2, M - 1). The same convention is used by the
export mapper so one import -> export -> import cycle is stable.

- Highlights: solid fills only, foreground colour classified red/green.
- Notes: comment text (text runs joined), trimmed; empty notes are dropped.
- Widths: declared widths x8 px; otherwise auto widths from content length.

A malformed colour or comment on one cell is recorded as an anomaly and
skipped; it never aborts the decode.
"""

__all__ = [
    "DecodedAnnotations",
    "auto_column_widths",
    "decode",
    "declared_column_widths",
]

logger = logging.getLogger(__name__)


@dataclass
class DecodedAnnotations:
    highlights: dict[CellCoord, CellColor] = field(default_factory=dict)
    notes: dict[CellCoord, str] = field(default_factory=dict)
    column_widths: list[float] = field(default_factory=list)
    anomalies: list[AnomalyRecord] = field(default_factory=list)


def auto_column_widths(headers: Sequence[Any], rows: Sequence[Sequence[Any]]) -> list[float]:
    """clamp(80, 350, 8 * longest text in the column + 20) per header column."""
    chars = [len(display_text(h)) for h in headers]
    for row in rows:
        for i, value in enumerate(row[: len(chars)]):
            chars[i] = max(chars[i], len(display_text(value)))
    return [
        float(max(AUTO_MIN_WIDTH_PX, min(AUTO_MAX_WIDTH_PX, n * PX_PER_WIDTH_UNIT + AUTO_PADDING_PX)))
        for n in chars
    ]


def declared_column_widths(sheet: SheetData) -> list[float]:
    column_count = len(sheet.headers)
    declared = list(sheet.column_widths[:column_count])
    declared.extend([None] * (column_count - len(declared)))
    return [
        float(w) * PX_PER_WIDTH_UNIT if w else float(UNDECLARED_WIDTH_PX)
        for w in declared
    ]


def _note_text(comment: Any) -> str | None:
    """Comment -> note text; raises TypeError for unsupported shapes."""
    if comment is None:
        return None
    if isinstance(comment, str):
        return comment.strip()
    if isinstance(comment, Sequence) and all(isinstance(run, str) for run in comment):
        return "".join(comment).strip()
    raise TypeError(f"unsupported comment type {type(comment).__name__}")


def decode(sheet: SheetData, *, file_name: str = "") -> DecodedAnnotations:
    """Decode highlights, notes and column widths from a worksheet.

    The result is built in full before anything is handed to the session, so
    an exception here leaves any existing annotation state untouched.
    """
    result = DecodedAnnotations()
    headers = sheet.headers
    column_count = len(headers)

    def anomaly(row: int, col: int, kind: str, message: str) -> None:
        # worksheet numbering: data row 0 is worksheet row 2
        record = AnomalyRecord.create(file_name, sheet.sheet_name, row + 2, col + 1, kind, message)
        result.anomalies.append(record)
        logger.warning("%s row=%d col=%d: %s", kind, record.row, record.column, message)

    for r, raw in enumerate(sheet.data_rows):
        for c, cell in enumerate(raw[:column_count]):
            if not isinstance(cell, CellData):
                anomaly(r, c, "MALFORMED_CELL", f"unexpected cell object {type(cell).__name__}")
                continue
            coord = CellCoord(r, c)

            if cell.fill_pattern == SOLID_PATTERN and cell.fg_color is not None:
                rgb = parse_rgb(cell.fg_color)
                if rgb is None:
                    anomaly(r, c, "MALFORMED_COLOR", f"unparseable fill colour {cell.fg_color!r}")
                else:
                    color = classify(*rgb)
                    if color is not CellColor.NONE:
                        result.highlights[coord] = color

            try:
                text = _note_text(cell.comment)
            except TypeError as e:
                anomaly(r, c, "MALFORMED_COMMENT", str(e))
                continue
            if text:
                result.notes[coord] = text

    if sheet.has_declared_widths:
        result.column_widths = declared_column_widths(sheet)
    else:
        result.column_widths = auto_column_widths(headers, sheet.values())

    logger.debug(
        "decoded sheet=%s highlights=%d notes=%d anomalies=%d",
        sheet.sheet_name,
        len(result.highlights),
        len(result.notes),
        len(result.anomalies),
    )
    return result
