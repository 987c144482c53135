from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any

from ..excel.export_mapper import EncodedWorkbook, encode
from ..excel.import_mapper import DecodedAnnotations, decode
from ..models.config_models import AppConfig
from ..models.excel_file import SessionStatus
from ..models.highlight import CellCoord, FilterMode
from ..models.row_data import ViewRow
from ..models.sheet_data import SheetData
from .annotation_store import AnnotationStore
from .debounce import SearchDebouncer
from .filter_search import MatchCursor, apply_filter, search
from .propagation import HighlightChange, HighlightPropagationRule
from .section_index import SectionIndex, find_section_column

"""Annotation session: the single owned "current workbook" aggregate.

WorkbookState bundles headers, rows, the annotation store and the section
index. load() decodes a sheet completely and only then swaps the aggregate in
one assignment, so a failed decode leaves the previous state intact.

All mutations are serialized through one lock; the debounced search
evaluation runs on a timer thread and takes the same lock.
"""

__all__ = [
    "AnnotationSession",
    "SessionError",
    "WorkbookState",
    "build_state",
]

logger = logging.getLogger(__name__)


class SessionError(Exception):
    """Raised for operations that need a loaded workbook when none is loaded."""


@dataclass(frozen=True)
class WorkbookState:
    file_name: str
    headers: list[str]
    rows: list[list[Any]]
    store: AnnotationStore
    sections: SectionIndex
    section_column: int


def build_state(sheet: SheetData, *, file_name: str = "", section_prefix: str) -> tuple[WorkbookState, DecodedAnnotations]:
    headers = sheet.headers
    rows = sheet.values()
    decoded = decode(sheet, file_name=file_name)
    sections = SectionIndex.build(rows, section_prefix)
    section_column = find_section_column(headers, section_prefix)
    store = AnnotationStore(
        len(rows),
        len(headers),
        highlights=decoded.highlights,
        notes=decoded.notes,
        column_widths=decoded.column_widths,
        rule=HighlightPropagationRule(section_column, len(headers), sections),
        sections=sections,
    )
    state = WorkbookState(
        file_name=file_name,
        headers=headers,
        rows=rows,
        store=store,
        sections=sections,
        section_column=section_column,
    )
    return state, decoded


class AnnotationSession:
    def __init__(self, config: AppConfig | None = None) -> None:
        self.config = config or AppConfig()
        self._lock = threading.RLock()
        self._state: WorkbookState | None = None
        self.status = SessionStatus.IDLE
        self.error: str | None = None
        self._filter = FilterMode.ALL
        self._selected: CellCoord | None = None
        self._query = ""
        self._active_query = ""
        self._cursor = MatchCursor()
        self._debouncer: SearchDebouncer[str] = SearchDebouncer(
            self.config.search_debounce_seconds, self._apply_query
        )

    # ------------------------------------------------------------- lifecycle
    @property
    def is_loaded(self) -> bool:
        return self._state is not None

    @property
    def state(self) -> WorkbookState:
        if self._state is None:
            raise SessionError("no workbook loaded")
        return self._state

    @property
    def store(self) -> AnnotationStore:
        return self.state.store

    def mark_busy(self) -> None:
        with self._lock:
            self.status = SessionStatus.BUSY
            self.error = None

    def mark_failed(self, message: str) -> None:
        with self._lock:
            self.status = SessionStatus.FAILED
            self.error = message

    def mark_ready(self) -> None:
        with self._lock:
            self.status = SessionStatus.READY if self._state is not None else SessionStatus.IDLE

    def load(self, sheet: SheetData, file_name: str = "") -> DecodedAnnotations:
        """Replace the whole aggregate with a freshly decoded sheet."""
        state, decoded = build_state(sheet, file_name=file_name, section_prefix=self.config.section_prefix)
        self._debouncer.cancel()
        with self._lock:
            self._state = state
            self._filter = FilterMode.ALL
            self._selected = None
            self._query = ""
            self._active_query = ""
            self._cursor = MatchCursor()
            self.status = SessionStatus.READY
            self.error = None
        logger.info(
            "loaded %s rows=%d columns=%d sections=%d",
            file_name or sheet.sheet_name,
            len(state.rows),
            len(state.headers),
            len(state.sections),
        )
        return decoded

    def reset(self) -> None:
        self._debouncer.cancel()
        with self._lock:
            self._state = None
            self._filter = FilterMode.ALL
            self._selected = None
            self._query = ""
            self._active_query = ""
            self._cursor = MatchCursor()
            self.status = SessionStatus.IDLE
            self.error = None

    def close(self) -> None:
        self._debouncer.cancel()

    # ------------------------------------------------------------ annotation
    def set_highlight(self, coord: CellCoord) -> HighlightChange | None:
        with self._lock:
            change = self.store.set_highlight(coord)
            if change is not None and self._filter is not FilterMode.ALL:
                self._refresh_matches()
            return change

    def clear_all_highlights(self) -> int:
        with self._lock:
            cleared = self.store.clear_all_highlights()
            if self._filter is not FilterMode.ALL:
                self._refresh_matches()
            return cleared

    def set_note(self, coord: CellCoord, text: str | None) -> str | None:
        with self._lock:
            return self.store.set_note(coord, text)

    def resize_column(self, index: int, width_px: float) -> float | None:
        with self._lock:
            return self.store.resize_column(index, width_px)

    def toggle_header_highlight(self, col: int) -> bool:
        with self._lock:
            return self.store.toggle_header_highlight(col)

    @property
    def selected_cell(self) -> CellCoord | None:
        return self._selected

    def select_cell(self, coord: CellCoord) -> CellCoord | None:
        """Select a cell for note editing; selecting it again deselects it."""
        with self._lock:
            if not self.store.in_bounds(coord):
                return self._selected
            self._selected = None if self._selected == coord else coord
            return self._selected

    # ---------------------------------------------------------- filter/search
    @property
    def filter(self) -> FilterMode:
        return self._filter

    def set_filter(self, mode: FilterMode) -> list[ViewRow]:
        with self._lock:
            self._filter = mode
            self._selected = None
            self._refresh_matches()
            return self.view()

    def view(self) -> list[ViewRow]:
        with self._lock:
            state = self.state
            return apply_filter(state.rows, state.store.highlights, self._filter, state.sections)

    @property
    def query(self) -> str:
        return self._query

    @property
    def active_query(self) -> str:
        return self._active_query

    def set_query(self, text: str) -> None:
        """Record typed query text; evaluation is debounced."""
        with self._lock:
            self._query = text
        self._debouncer.submit(text)

    def flush_search(self) -> bool:
        return self._debouncer.flush()

    def _apply_query(self, text: str) -> None:
        with self._lock:
            if text != self._query:
                # superseded by a load/reset or newer text while the timer waited
                logger.debug("search %r dropped: stale", text)
                return
            self._active_query = text
            if self._state is not None:
                self._refresh_matches()

    def _refresh_matches(self) -> None:
        matches = search(self.view(), self._active_query, self.state.sections)
        if tuple(matches) != self._cursor.matches:
            self._cursor = MatchCursor(matches)
            logger.debug("search %r -> %d matches", self._active_query, len(matches))

    @property
    def matches(self) -> tuple[int, ...]:
        return self._cursor.matches

    @property
    def match_position(self) -> int:
        return self._cursor.position

    def current_match(self) -> int | None:
        return self._cursor.current

    def next_match(self) -> int | None:
        with self._lock:
            return self._cursor.next()

    def prev_match(self) -> int | None:
        with self._lock:
            return self._cursor.prev()

    # ---------------------------------------------------------------- export
    def export(self) -> EncodedWorkbook:
        with self._lock:
            state = self.state
            store = state.store
            return encode(
                state.headers,
                state.rows,
                store.highlights,
                store.notes,
                store.column_widths,
                sections=state.sections,
                titles=self.config.sheets,
            )
