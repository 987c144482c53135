from __future__ import annotations

from bisect import bisect_right
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

"""Section index: locate section header rows and the section column.

A section header row is a data row whose first cell, trimmed, starts with the
configured section prefix. The section column is the first header whose name,
trimmed, starts with the same prefix (-1 when there is none, which disables
red propagation).

The index is derived once per dataset load and never updated incrementally.
"""

__all__ = [
    "SectionIndex",
    "find_section_column",
    "is_section_row",
]


def _starts_with(value: Any, prefix: str) -> bool:
    if value is None or not prefix:
        return False
    return str(value).strip().startswith(prefix)


def is_section_row(row: Sequence[Any], prefix: str) -> bool:
    return bool(row) and _starts_with(row[0], prefix)


def find_section_column(headers: Sequence[Any], prefix: str) -> int:
    for i, header in enumerate(headers):
        if _starts_with(header, prefix):
            return i
    return -1


@dataclass(frozen=True)
class SectionIndex:
    """Sorted row indices of section header rows."""
    header_rows: tuple[int, ...] = ()
    _members: frozenset[int] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_members", frozenset(self.header_rows))

    @staticmethod
    def build(rows: Sequence[Sequence[Any]], prefix: str) -> SectionIndex:
        return SectionIndex(tuple(i for i, row in enumerate(rows) if is_section_row(row, prefix)))

    def __contains__(self, row_index: object) -> bool:
        return row_index in self._members

    def __len__(self) -> int:
        return len(self.header_rows)

    def nearest_section_header(self, row_index: int) -> int | None:
        """Greatest section header index <= row_index, or None."""
        pos = bisect_right(self.header_rows, row_index)
        if pos == 0:
            return None
        return self.header_rows[pos - 1]
