from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from ..models.config_models import SheetTitles
from ..models.highlight import CellColor, CellCoord
from ..models.sheet_data import CellData, SheetData
from ..services.section_index import SectionIndex
from .constants import (
    FALLBACK_EXPORT_PX,
    GREEN_ARGB,
    INDEX_COLUMN_WIDTH,
    MIN_EXPORT_WIDTH,
    PX_PER_WIDTH_UNIT,
    RED_ARGB,
    SOLID_PATTERN,
)

"""Export mapper: annotation state -> primary worksheet + red extract.

The primary sheet is the header row followed by every data row, with solid
fills from the highlight map and comments from the note map. The red extract
exists only when at least one red cell does: the header row, then for each
red row in ascending order its owning section header row (not repeated for
consecutive red rows of the same section) followed by the red row itself.
"""

__all__ = [
    "EncodedWorkbook",
    "encode",
    "export_column_widths",
    "red_extract_rows",
]

logger = logging.getLogger(__name__)

_FILL_ARGB = {
    CellColor.GREEN: GREEN_ARGB,
    CellColor.RED: RED_ARGB,
}


@dataclass(frozen=True)
class EncodedWorkbook:
    primary: SheetData
    red_extract: SheetData | None = None

    @property
    def sheets(self) -> list[SheetData]:
        return [s for s in (self.primary, self.red_extract) if s is not None]


def export_column_widths(column_widths: Sequence[float | None], column_count: int) -> list[float]:
    """Pixels -> worksheet units; column 1 fixed narrow, others floored."""
    widths: list[float] = []
    for i in range(column_count):
        if i == 0:
            widths.append(float(INDEX_COLUMN_WIDTH))
            continue
        px = column_widths[i] if i < len(column_widths) else None
        widths.append(max(float(MIN_EXPORT_WIDTH), (px or FALLBACK_EXPORT_PX) / PX_PER_WIDTH_UNIT))
    return widths


def red_extract_rows(highlights: Mapping[CellCoord, CellColor], sections: SectionIndex) -> list[int]:
    """Row indices of the red extract body, section headers interleaved."""
    red_rows = sorted({c.row for c, color in highlights.items() if color is CellColor.RED})
    out: list[int] = []
    last_section: int | None = None
    for row in red_rows:
        section = sections.nearest_section_header(row)
        if section is not None and section != last_section:
            out.append(section)
            last_section = section
        if row != section:
            out.append(row)
    return out


def _value_row(values: Sequence[Any], width: int) -> list[CellData]:
    row = [CellData(value=v) for v in values[:width]]
    row.extend(CellData() for _ in range(width - len(row)))
    return row


def encode(
    headers: Sequence[str],
    rows: Sequence[Sequence[Any]],
    highlights: Mapping[CellCoord, CellColor],
    notes: Mapping[CellCoord, str],
    column_widths: Sequence[float | None],
    *,
    sections: SectionIndex | None = None,
    titles: SheetTitles | None = None,
) -> EncodedWorkbook:
    titles = titles or SheetTitles()
    width = len(headers)
    header_row = [CellData(value=h if h is not None else "") for h in headers]
    sheet_widths = export_column_widths(column_widths, width)

    grid: list[list[CellData]] = [header_row]
    for r, values in enumerate(rows):
        out_row: list[CellData] = []
        for c in range(width):
            coord = CellCoord(r, c)
            argb = _FILL_ARGB.get(highlights.get(coord, CellColor.NONE))
            out_row.append(
                CellData(
                    value=values[c] if c < len(values) else None,
                    fill_pattern=SOLID_PATTERN if argb else None,
                    fg_color=argb,
                    comment=notes.get(coord),
                )
            )
        grid.append(out_row)
    primary = SheetData(sheet_name=titles.primary_title, rows=grid, column_widths=list(sheet_widths))

    extract_body = red_extract_rows(highlights, sections or SectionIndex())
    red_extract = None
    if extract_body:
        extract_grid = [list(header_row)]
        extract_grid.extend(_value_row(rows[i], width) for i in extract_body)
        red_extract = SheetData(
            sheet_name=titles.red_extract_title, rows=extract_grid, column_widths=list(sheet_widths)
        )

    logger.debug("encoded rows=%d extract_rows=%d", len(rows), len(extract_body))
    return EncodedWorkbook(primary=primary, red_extract=red_extract)
