from __future__ import annotations

from dataclasses import dataclass
from typing import Any

"""ViewRow model: one row of the displayed (filtered) view.

original_index always refers to the row position in the full dataset, so
highlights and notes stay addressable regardless of the active filter.
"""

__all__ = [
    "ViewRow",
]


@dataclass(frozen=True)
class ViewRow:
    original_index: int  # position in the unfiltered data rows (0 = first row after header)
    values: tuple[Any, ...]
