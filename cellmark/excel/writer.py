from __future__ import annotations

import logging
import os
import tempfile
from collections.abc import Sequence
from io import BytesIO
from pathlib import Path

from openpyxl import Workbook
from openpyxl.comments import Comment
from openpyxl.styles import PatternFill
from openpyxl.utils import get_column_letter
from openpyxl.utils.exceptions import IllegalCharacterError

from ..models.sheet_data import SheetData

"""Workbook writer: SheetData list -> .xlsx.

save_workbook() renders into a temporary file next to the destination and
moves it into place only after the save succeeded, so a failed encode never
leaves a partial file behind.
"""

__all__ = [
    "WorkbookEncodeError",
    "build_workbook",
    "save_workbook",
    "workbook_bytes",
]

logger = logging.getLogger(__name__)


class WorkbookEncodeError(Exception):
    """Raised when the output workbook cannot be produced."""


def build_workbook(sheets: Sequence[SheetData], comment_author: str = "cellmark") -> Workbook:
    if not sheets:
        raise WorkbookEncodeError("nothing to write: no sheets")
    wb = Workbook()
    wb.remove(wb.active)
    for sheet in sheets:
        ws = wb.create_sheet(title=sheet.sheet_name[:31])
        for r, row in enumerate(sheet.rows, start=1):
            ws.append([c.value for c in row])
            for c, data in enumerate(row, start=1):
                if isinstance(data.value, str) and data.value.startswith("="):
                    # text, not a formula
                    ws.cell(row=r, column=c).data_type = "s"
                if data.fill_pattern is None and data.comment is None:
                    continue
                cell = ws.cell(row=r, column=c)
                if data.fill_pattern is not None and data.fg_color:
                    cell.fill = PatternFill(
                        fill_type=data.fill_pattern, start_color=data.fg_color, end_color=data.fg_color
                    )
                if data.comment:
                    text = data.comment if isinstance(data.comment, str) else "".join(data.comment)
                    cell.comment = Comment(text, comment_author)
        for i, width in enumerate(sheet.column_widths, start=1):
            if width is not None:
                ws.column_dimensions[get_column_letter(i)].width = width
    return wb


def workbook_bytes(sheets: Sequence[SheetData], comment_author: str = "cellmark") -> bytes:
    try:
        wb = build_workbook(sheets, comment_author)
        buf = BytesIO()
        wb.save(buf)
    except WorkbookEncodeError:
        raise
    except (IllegalCharacterError, ValueError, TypeError, OSError) as e:
        raise WorkbookEncodeError(f"failed to encode workbook: {e}") from e
    return buf.getvalue()


def save_workbook(sheets: Sequence[SheetData], path: Path, comment_author: str = "cellmark") -> Path:
    """Encode and atomically write the workbook to path."""
    payload = workbook_bytes(sheets, comment_author)
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.stem}-", suffix=".xlsx.tmp", dir=path.parent)
    tmp = Path(tmp_name)
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(payload)
        os.replace(tmp, path)
    except OSError as e:
        tmp.unlink(missing_ok=True)
        raise WorkbookEncodeError(f"cannot write {path}: {e}") from e
    logger.debug("wrote %s sheets=%d bytes=%d", path, len(sheets), len(payload))
    return path
