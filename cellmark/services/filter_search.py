from __future__ import annotations

from collections.abc import Collection, Iterable, Mapping, Sequence
from typing import Any

from ..models.highlight import CellColor, CellCoord, FilterMode
from ..models.row_data import ViewRow
from ..models.sheet_data import display_text

"""Filter/search index over the annotation model.

apply_filter() yields the visible subset of rows for a FilterMode, in the
original order. search() scans the already filtered view for a
case-insensitive substring. MatchCursor walks the resulting match list.

Section header rows (passed as section_rows) stay in the ALL view but are not
screened as data: they never match a colour filter or a search.
"""

__all__ = [
    "MatchCursor",
    "apply_filter",
    "row_colors",
    "search",
]


def row_colors(
    row_index: int, column_count: int, highlights: Mapping[CellCoord, CellColor]
) -> tuple[bool, bool]:
    """Return (has_green, has_red) for one row."""
    has_green = has_red = False
    for col in range(column_count):
        color = highlights.get(CellCoord(row_index, col))
        if color is CellColor.GREEN:
            has_green = True
        elif color is CellColor.RED:
            has_red = True
    return has_green, has_red


def apply_filter(
    rows: Sequence[Sequence[Any]],
    highlights: Mapping[CellCoord, CellColor],
    mode: FilterMode,
    section_rows: Collection[int] = (),
) -> list[ViewRow]:
    view: list[ViewRow] = []
    for index, row in enumerate(rows):
        if mode is FilterMode.ALL:
            view.append(ViewRow(index, tuple(row)))
            continue
        if index in section_rows:
            continue
        has_green, has_red = row_colors(index, len(row), highlights)
        if mode is FilterMode.GREEN:
            keep = has_green
        elif mode is FilterMode.RED:
            keep = has_red
        else:
            keep = not (has_green or has_red)
        if keep:
            view.append(ViewRow(index, tuple(row)))
    return view


def search(view: Iterable[ViewRow], query: str | None, section_rows: Collection[int] = ()) -> list[int]:
    """Original indices of view rows with a cell containing query (case-insensitive).

    An empty or whitespace-only query means "search inactive" and matches nothing.
    """
    needle = (query or "").strip().lower()
    if not needle:
        return []
    matches: list[int] = []
    for view_row in view:
        if view_row.original_index in section_rows:
            continue
        if any(needle in display_text(v).lower() for v in view_row.values):
            matches.append(view_row.original_index)
    return matches


class MatchCursor:
    """Clamped cursor over a match list; moving past either end is a no-op."""

    def __init__(self, matches: Sequence[int] = ()) -> None:
        self._matches: tuple[int, ...] = tuple(matches)
        self._position = 0

    @property
    def matches(self) -> tuple[int, ...]:
        return self._matches

    @property
    def position(self) -> int:
        return self._position

    def __len__(self) -> int:
        return len(self._matches)

    @property
    def current(self) -> int | None:
        if not self._matches:
            return None
        return self._matches[self._position]

    def next(self) -> int | None:
        if self._position + 1 < len(self._matches):
            self._position += 1
        return self.current

    def prev(self) -> int | None:
        if self._position > 0:
            self._position -= 1
        return self.current
