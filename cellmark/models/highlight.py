from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

"""Cell coordinate, colour state machine and filter mode.

CellCoord is the identity of a cell inside the full, unfiltered dataset
(zero-based, header row excluded). The string key format "{row}-{col}" is
kept for snapshots and log messages.
"""

__all__ = [
    "CellColor",
    "CellCoord",
    "FilterMode",
    "next_color",
]


class CellColor(Enum):
    """Highlight state of a single cell.

    Only GREEN and RED are ever stored in a highlight map; NONE means
    "no entry".
    """
    NONE = "none"
    GREEN = "green"
    RED = "red"

    @property
    def is_highlight(self) -> bool:
        return self is not CellColor.NONE


_CYCLE = {
    CellColor.NONE: CellColor.GREEN,
    CellColor.GREEN: CellColor.RED,
    CellColor.RED: CellColor.NONE,
}


def next_color(color: CellColor) -> CellColor:
    """Three-state toggle: none -> green -> red -> none."""
    return _CYCLE[color]


class FilterMode(Enum):
    ALL = "all"
    GREEN = "green"
    RED = "red"
    NONE = "none"


@dataclass(frozen=True, order=True)
class CellCoord:
    row: int
    col: int

    @property
    def key(self) -> str:
        return f"{self.row}-{self.col}"

    @staticmethod
    def from_key(key: str) -> CellCoord:
        """Parse a "{row}-{col}" key.

        Raises:
            ValueError: if the key is not two non-negative integers joined by "-"
        """
        parts = key.strip().split("-")
        if len(parts) != 2 or not all(p.isdigit() for p in parts):
            raise ValueError(f"malformed cell key: {key!r}")
        return CellCoord(int(parts[0]), int(parts[1]))

    def __str__(self) -> str:  # pragma: no cover (trivial)
        return self.key
