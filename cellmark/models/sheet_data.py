from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

"""Decoded worksheet shape exchanged with the workbook codec.

The reader turns the first worksheet of a file into a SheetData; the export
mapper produces SheetData objects that the writer renders back. Row 0 is
always the header row.
"""

__all__ = [
    "CellData",
    "SheetData",
    "display_text",
]


@dataclass(frozen=True)
class CellData:
    """Value and annotation-relevant styling of a single worksheet cell."""
    value: Any = None  # str | int | float | bool | None
    fill_pattern: str | None = None  # "solid", "gray125", ... (None = no fill)
    fg_color: str | None = None  # hex RGB/ARGB as stored in the workbook
    comment: str | Sequence[str] | None = None  # note text, or its text runs


@dataclass
class SheetData:
    sheet_name: str
    rows: list[list[CellData]]
    # Declared width per header column in worksheet units, None when undeclared
    column_widths: list[float | None] = field(default_factory=list)

    @property
    def headers(self) -> list[str]:
        if not self.rows:
            return []
        return ["" if c.value is None else str(c.value) for c in self.rows[0]]

    @property
    def data_rows(self) -> list[list[CellData]]:
        return self.rows[1:]

    def values(self) -> list[list[Any]]:
        """Data-row values padded with None up to the header count."""
        width = len(self.headers)
        out: list[list[Any]] = []
        for raw in self.data_rows:
            row = [c.value for c in raw[:width]]
            row.extend([None] * (width - len(row)))
            out.append(row)
        return out

    @property
    def has_declared_widths(self) -> bool:
        return any(w is not None for w in self.column_widths)

    @staticmethod
    def from_values(sheet_name: str, headers: Sequence[Any], rows: Sequence[Sequence[Any]]) -> SheetData:
        """Build an unstyled sheet from plain values (header row first)."""
        grid = [[CellData(value=v) for v in headers]]
        grid.extend([CellData(value=v) for v in row] for row in rows)
        return SheetData(sheet_name=sheet_name, rows=grid, column_widths=[None] * len(headers))


def display_text(value: Any) -> str:
    """String form of a cell value as shown in the table (None -> "")."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
