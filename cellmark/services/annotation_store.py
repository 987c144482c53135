from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Mapping
from types import MappingProxyType
from typing import Any

from ..excel.constants import MIN_RESIZE_WIDTH_PX
from ..models.highlight import CellColor, CellCoord, next_color
from .propagation import HighlightChange, HighlightPropagationRule
from .section_index import SectionIndex

"""Annotation store: highlights, notes, column widths and header marks.

The store is the only owner of the four annotation structures. Every mutation
goes through one of the public operations, each of which keeps the
invariants:

- the highlight map holds only GREEN/RED entries (no explicit NONE)
- the note map holds only non-empty, trimmed text
- interactive column widths are >= 40 px
- header marks exist only for the section column

Requests that address something that does not exist (coordinates outside the
sheet, unknown columns, header marks on ordinary columns) are no-ops.
"""

__all__ = [
    "AnnotationStore",
]

logger = logging.getLogger(__name__)


class AnnotationStore:
    """Mutable annotation state for one loaded dataset."""

    def __init__(
        self,
        row_count: int,
        column_count: int,
        *,
        highlights: Mapping[CellCoord, CellColor] | None = None,
        notes: Mapping[CellCoord, str] | None = None,
        column_widths: Iterable[float] | None = None,
        rule: HighlightPropagationRule | None = None,
        sections: SectionIndex | None = None,
    ) -> None:
        self.row_count = row_count
        self.column_count = column_count
        self.rule = rule or HighlightPropagationRule(-1, column_count)
        self.sections = sections or SectionIndex()
        self._highlights: dict[CellCoord, CellColor] = {}
        self._notes: dict[CellCoord, str] = {}
        self._header_highlights: set[int] = set()

        for coord, color in (highlights or {}).items():
            if color in (CellColor.GREEN, CellColor.RED) and self.in_bounds(coord):
                self._highlights[coord] = color
        for coord, text in (notes or {}).items():
            cleaned = text.strip() if isinstance(text, str) else ""
            if cleaned and self.in_bounds(coord):
                self._notes[coord] = cleaned
        widths = list(column_widths or [])
        widths.extend([float(MIN_RESIZE_WIDTH_PX)] * (column_count - len(widths)))
        self._column_widths: list[float] = widths[:column_count]

    # ------------------------------------------------------------------ views
    @property
    def highlights(self) -> Mapping[CellCoord, CellColor]:
        return MappingProxyType(self._highlights)

    @property
    def notes(self) -> Mapping[CellCoord, str]:
        return MappingProxyType(self._notes)

    @property
    def column_widths(self) -> tuple[float, ...]:
        return tuple(self._column_widths)

    @property
    def header_highlights(self) -> frozenset[int]:
        return frozenset(self._header_highlights)

    @property
    def section_column(self) -> int:
        return self.rule.section_column if self.rule.enabled else -1

    def in_bounds(self, coord: CellCoord) -> bool:
        return 0 <= coord.row < self.row_count and 0 <= coord.col < self.column_count

    def color_at(self, coord: CellCoord) -> CellColor:
        return self._highlights.get(coord, CellColor.NONE)

    def note_at(self, coord: CellCoord) -> str | None:
        return self._notes.get(coord)

    def red_rows(self) -> list[int]:
        """Sorted row indices holding at least one red cell."""
        return sorted({c.row for c, color in self._highlights.items() if color is CellColor.RED})

    def count(self, color: CellColor) -> int:
        return sum(1 for c in self._highlights.values() if c is color)

    # ------------------------------------------------------------- operations
    def set_highlight(self, coord: CellCoord) -> HighlightChange | None:
        """Cycle the cell none -> green -> red -> none and apply red propagation.

        Section header rows render as separators and are not toggled.
        Returns None for ignored requests.
        """
        if not self.in_bounds(coord) or coord.row in self.sections:
            logger.debug("highlight toggle ignored at %s", coord.key)
            return None
        previous = self.color_at(coord)
        current = next_color(previous)
        if current is CellColor.NONE:
            self._highlights.pop(coord, None)
        else:
            self._highlights[coord] = current
        change = self.rule.apply(self._highlights, HighlightChange(coord, previous, current))
        if change.section_changed:
            logger.debug(
                "section cell %s %s -> %s",
                change.section_cell.key if change.section_cell else "?",
                change.section_previous.value,
                change.section_current.value,
            )
        return change

    def clear_all_highlights(self) -> int:
        cleared = len(self._highlights)
        self._highlights.clear()
        return cleared

    def set_note(self, coord: CellCoord, text: str | None) -> str | None:
        """Store trimmed note text; empty text deletes the note. Returns the stored text."""
        if not self.in_bounds(coord):
            return None
        cleaned = (text or "").strip()
        if cleaned:
            self._notes[coord] = cleaned
            return cleaned
        self._notes.pop(coord, None)
        return None

    def resize_column(self, index: int, width_px: float) -> float | None:
        if not 0 <= index < self.column_count:
            return None
        width = max(float(MIN_RESIZE_WIDTH_PX), float(width_px))
        self._column_widths[index] = width
        return width

    def toggle_header_highlight(self, col: int) -> bool:
        """Toggle the manual mark on the section column header. Returns the new mark state."""
        if col < 0 or col != self.section_column:
            return col in self._header_highlights
        if col in self._header_highlights:
            self._header_highlights.remove(col)
            return False
        self._header_highlights.add(col)
        return True

    # --------------------------------------------------------------- snapshot
    def snapshot(self) -> dict[str, Any]:
        """JSON-ready copy of the annotation state keyed by "{row}-{col}"."""
        return {
            "highlights": {c.key: color.value for c, color in sorted(self._highlights.items())},
            "notes": {c.key: text for c, text in sorted(self._notes.items())},
            "column_widths": list(self._column_widths),
            "header_highlights": sorted(self._header_highlights),
        }

    @classmethod
    def from_snapshot(
        cls,
        data: Mapping[str, Any],
        row_count: int,
        column_count: int,
        *,
        rule: HighlightPropagationRule | None = None,
        sections: SectionIndex | None = None,
    ) -> AnnotationStore:
        """Restore a snapshot; malformed keys and unknown colours are dropped."""
        highlights: dict[CellCoord, CellColor] = {}
        for key, value in (data.get("highlights") or {}).items():
            try:
                highlights[CellCoord.from_key(key)] = CellColor(value)
            except ValueError:
                logger.warning("snapshot: dropping highlight %r=%r", key, value)
        notes: dict[CellCoord, str] = {}
        for key, value in (data.get("notes") or {}).items():
            try:
                notes[CellCoord.from_key(key)] = str(value)
            except ValueError:
                logger.warning("snapshot: dropping note %r", key)
        widths: list[float] = []
        for value in data.get("column_widths") or []:
            if isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value):
                widths.append(max(float(MIN_RESIZE_WIDTH_PX), float(value)))
            else:
                logger.warning("snapshot: replacing column width %r", value)
                widths.append(float(MIN_RESIZE_WIDTH_PX))
        store = cls(
            row_count,
            column_count,
            highlights=highlights,
            notes=notes,
            column_widths=widths,
            rule=rule,
            sections=sections,
        )
        for col in data.get("header_highlights") or []:
            if isinstance(col, int) and col == store.section_column:
                store._header_highlights.add(col)
        return store
