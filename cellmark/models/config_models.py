from __future__ import annotations

from dataclasses import dataclass, field

"""Config dataclasses for cellmark.

Populated by cellmark.config.loader from config/cellmark.yml; every field has
a default so an absent file still yields a usable configuration.
"""

DEFAULT_SECTION_PREFIX = "Ревизионная группа"
DEFAULT_SEARCH_DEBOUNCE_MS = 300


@dataclass(frozen=True)
class SheetTitles:
    """Worksheet titles used on export."""
    primary_title: str = "Основной лист"
    red_extract_title: str = "Выделено красным"


@dataclass(frozen=True)
class AppConfig:
    """Root configuration object."""
    section_prefix: str = DEFAULT_SECTION_PREFIX  # first-cell / header prefix marking sections
    search_debounce_ms: int = DEFAULT_SEARCH_DEBOUNCE_MS
    output_prefix: str = "edited_"  # prepended to the input file name on save
    sheets: SheetTitles = field(default_factory=SheetTitles)
    comment_author: str = "cellmark"

    @property
    def search_debounce_seconds(self) -> float:
        return self.search_debounce_ms / 1000.0
