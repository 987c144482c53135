from __future__ import annotations

from collections.abc import MutableMapping
from dataclasses import dataclass, replace

from ..models.highlight import CellColor, CellCoord
from .section_index import SectionIndex

"""Highlight propagation rule: keep a row's section cell in sync with its red cells.

Triggered by every highlight toggle on a data cell:

1. The section column is the header starting with the section prefix
   (-1 disables propagation entirely).
2. New colour RED: the row's section-column cell is forced to RED.
3. RED -> NONE: if no column of the row still holds RED, the section-column
   cell is cleared; otherwise it stays RED.
4. Transitions into or through GREEN never touch the section cell.

Rows above the first section header row belong to no section and are exempt.
The rule only adds red when a red cell appears and only removes it when the
last red cell of the row is cleared, so it is idempotent.

Manual header marking (AnnotationStore.toggle_header_highlight) is a separate
affordance and is not handled here.
"""

__all__ = [
    "HighlightChange",
    "HighlightPropagationRule",
]


@dataclass(frozen=True)
class HighlightChange:
    """Outcome of one highlight toggle, including any propagated section change."""
    coord: CellCoord
    previous: CellColor
    current: CellColor
    section_cell: CellCoord | None = None
    section_previous: CellColor = CellColor.NONE
    section_current: CellColor = CellColor.NONE

    @property
    def section_changed(self) -> bool:
        return self.section_cell is not None and self.section_previous is not self.section_current


class HighlightPropagationRule:
    """Red propagation policy bound to one dataset load."""

    def __init__(self, section_column: int, column_count: int, sections: SectionIndex | None = None) -> None:
        self.section_column = section_column
        self.column_count = column_count
        self.sections = sections

    @property
    def enabled(self) -> bool:
        return 0 <= self.section_column < self.column_count

    def section_cell_for(self, coord: CellCoord) -> CellCoord | None:
        """Section-column cell of coord's row, or None when propagation does not apply."""
        if not self.enabled:
            return None
        if self.sections is not None and self.sections.nearest_section_header(coord.row) is None:
            return None
        return CellCoord(coord.row, self.section_column)

    def row_has_red(self, highlights: MutableMapping[CellCoord, CellColor], row: int) -> bool:
        return any(
            highlights.get(CellCoord(row, col)) is CellColor.RED for col in range(self.column_count)
        )

    def apply(self, highlights: MutableMapping[CellCoord, CellColor], change: HighlightChange) -> HighlightChange:
        """Update highlights in place for an already applied cell change.

        The caller owns the mapping and has already written change.current for
        change.coord. Returns the change annotated with the section outcome.
        """
        target = self.section_cell_for(change.coord)
        if target is None:
            return change
        before = highlights.get(target, CellColor.NONE)

        if change.current is CellColor.RED:
            highlights[target] = CellColor.RED
        elif change.previous is CellColor.RED and change.current is CellColor.NONE:
            if not self.row_has_red(highlights, change.coord.row):
                highlights.pop(target, None)

        after = highlights.get(target, CellColor.NONE)
        return replace(change, section_cell=target, section_previous=before, section_current=after)
