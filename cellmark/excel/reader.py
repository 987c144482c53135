from __future__ import annotations

import logging
import zipfile
from datetime import date, datetime, time
from pathlib import Path
from typing import TYPE_CHECKING, Any

from openpyxl import load_workbook
from openpyxl.styles.colors import COLOR_INDEX
from openpyxl.utils import column_index_from_string, get_column_letter
from openpyxl.utils.exceptions import InvalidFileException

from ..models.sheet_data import CellData, SheetData

if TYPE_CHECKING:
    from openpyxl.cell.cell import Cell
    from openpyxl.worksheet.worksheet import Worksheet

"""Workbook reader: first worksheet of an .xlsx file -> SheetData.

Only the first sheet is modeled. Row 1 is the header row; header cells are
read up to the last non-empty one and every data row is padded or cut to the
header count. Formulas are read as their cached values.
"""

__all__ = [
    "WorkbookDecodeError",
    "read_first_sheet",
    "sheet_from_worksheet",
]

logger = logging.getLogger(__name__)


class WorkbookDecodeError(Exception):
    """Raised when a workbook cannot be decoded into a sheet."""


def _plain_value(value: Any) -> Any:
    if value is None or isinstance(value, (str, bool, int, float)):
        return value
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    return str(value)


def _fill_of(cell: Cell) -> tuple[str | None, str | None]:
    """(pattern type, foreground hex) of a cell; theme colours yield no hex."""
    fill = cell.fill
    pattern = getattr(fill, "fill_type", None)
    if pattern is None:
        return None, None
    color = fill.fgColor
    if color is None:
        return pattern, None
    if color.type == "rgb":
        return pattern, color.rgb if isinstance(color.rgb, str) else None
    if color.type == "indexed" and isinstance(color.indexed, int) and color.indexed < len(COLOR_INDEX):
        return pattern, COLOR_INDEX[color.indexed]
    return pattern, None


def _read_cell(cell: Cell, sheet_name: str) -> CellData:
    try:
        pattern, fg = _fill_of(cell)
    except (AttributeError, TypeError, ValueError) as e:
        logger.warning("sheet=%s cell=%s unreadable fill: %s", sheet_name, cell.coordinate, e)
        pattern, fg = None, None
    comment = cell.comment.text if cell.comment is not None else None
    return CellData(value=_plain_value(cell.value), fill_pattern=pattern, fg_color=fg, comment=comment)


def _declared_widths(ws: Worksheet, column_count: int) -> list[float | None]:
    widths: list[float | None] = [None] * column_count
    # column_dimensions entries may cover a min..max span of columns
    for dim in ws.column_dimensions.values():
        if not dim.width or not dim.customWidth:
            continue
        lo = dim.min or column_index_from_string(dim.index)
        hi = dim.max or lo
        for col in range(lo, min(hi, column_count) + 1):
            widths[col - 1] = float(dim.width)
    return widths


def sheet_from_worksheet(ws: Worksheet) -> SheetData:
    rows_iter = ws.iter_rows()
    header_cells = next(rows_iter, None)
    if header_cells is None:
        raise WorkbookDecodeError(f"sheet '{ws.title}' has no header row")
    last = max((i for i, c in enumerate(header_cells) if c.value not in (None, "")), default=-1)
    if last < 0:
        raise WorkbookDecodeError(f"sheet '{ws.title}' has an empty header row")
    column_count = last + 1

    grid: list[list[CellData]] = [[_read_cell(c, ws.title) for c in header_cells[:column_count]]]
    for raw in rows_iter:
        row = [_read_cell(c, ws.title) for c in raw[:column_count]]
        row.extend(CellData() for _ in range(column_count - len(row)))
        grid.append(row)

    widths = _declared_widths(ws, column_count)
    logger.debug(
        "read sheet=%s columns=%d rows=%d declared_widths=%s",
        ws.title,
        column_count,
        len(grid) - 1,
        [get_column_letter(i + 1) for i, w in enumerate(widths) if w is not None],
    )
    return SheetData(sheet_name=ws.title, rows=grid, column_widths=widths)


def read_first_sheet(path: Path) -> SheetData:
    """Read the first worksheet of an .xlsx workbook.

    Raises:
        WorkbookDecodeError: unreadable/corrupt file, no worksheet, no header row
    """
    if not path.exists():
        raise WorkbookDecodeError(f"file not found: {path}")
    try:
        wb = load_workbook(path, data_only=True)
    except (InvalidFileException, zipfile.BadZipFile, KeyError, OSError, ValueError) as e:
        raise WorkbookDecodeError(f"cannot read workbook {path.name}: {e}") from e
    try:
        if not wb.worksheets:
            raise WorkbookDecodeError(f"workbook {path.name} contains no worksheets")
        return sheet_from_worksheet(wb.worksheets[0])
    finally:
        wb.close()
