from __future__ import annotations

import re

from ..models.highlight import CellColor

"""Colour classifier: map an RGB fill to {red, green, none}.

Workbook authors use many shades of red and green; the engine only knows the
two semantic highlights, so a dominance heuristic decides:

    red   = r > 100 and r > 1.5*g and r > 1.5*b
    green = g > 100 and g > 1.5*r and g > 1.5*b

Red is checked first. Malformed input never raises; it classifies as NONE.
"""

__all__ = [
    "classify",
    "classify_hex",
    "parse_rgb",
]

_HEX6 = re.compile(r"[0-9A-Fa-f]{6}")

DOMINANCE = 1.5
MIN_CHANNEL = 100


def classify(r: int, g: int, b: int) -> CellColor:
    try:
        r, g, b = int(r), int(g), int(b)
    except (TypeError, ValueError):
        return CellColor.NONE
    if r > MIN_CHANNEL and r > g * DOMINANCE and r > b * DOMINANCE:
        return CellColor.RED
    if g > MIN_CHANNEL and g > r * DOMINANCE and g > b * DOMINANCE:
        return CellColor.GREEN
    return CellColor.NONE


def parse_rgb(hex_color: object) -> tuple[int, int, int] | None:
    """Parse "RRGGBB" or "AARRGGBB" (optionally '#'-prefixed) into an RGB triple.

    An 8-digit value carries a leading alpha byte which is dropped. Anything
    that does not yield six hex digits returns None.
    """
    if not isinstance(hex_color, str):
        return None
    text = hex_color.strip().lstrip("#")
    rgb = text[2:] if len(text) > 6 else text
    if len(rgb) < 6 or not _HEX6.fullmatch(rgb[:6]):
        return None
    return int(rgb[0:2], 16), int(rgb[2:4], 16), int(rgb[4:6], 16)


def classify_hex(hex_color: object) -> CellColor:
    rgb = parse_rgb(hex_color)
    if rgb is None:
        return CellColor.NONE
    return classify(*rgb)
