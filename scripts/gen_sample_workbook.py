#!/usr/bin/env python3
"""Sample workbook generator for manual and performance testing.

Generates an .xlsx file in the layout cellmark expects:
- Row 1: header row; the second header starts with the section prefix
- Row 2+: data rows, with a section header row every --section-every rows

A share of data cells gets a solid fill in a random shade of red or green
(not the exact export colours, to exercise the colour classifier) and a
smaller share gets a comment.
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

import numpy as np

from cellmark.models.config_models import DEFAULT_SECTION_PREFIX
from cellmark.models.sheet_data import CellData, SheetData
from cellmark.excel.writer import WorkbookEncodeError, save_workbook


def _shade(rng: np.random.Generator, red: bool) -> str:
    strong = int(rng.integers(170, 256))
    weak = int(rng.integers(0, 90))
    other = int(rng.integers(0, 90))
    r, g, b = (strong, weak, other) if red else (weak, strong, other)
    return f"FF{r:02X}{g:02X}{b:02X}"


def generate_sheet(
    rows: int,
    cols: int,
    *,
    section_every: int = 25,
    highlight_ratio: float = 0.05,
    note_ratio: float = 0.01,
    seed: int = 42,
    prefix: str = DEFAULT_SECTION_PREFIX,
) -> SheetData:
    rng = np.random.default_rng(seed)
    headers = ["#", f"{prefix} / статус"] + [f"col_{i}" for i in range(2, cols)]
    grid: list[list[CellData]] = [[CellData(value=h) for h in headers]]

    section_no = 0
    for r in range(rows):
        if section_every > 0 and r % section_every == 0:
            section_no += 1
            grid.append([CellData(value=f"{prefix} {section_no}")] + [CellData() for _ in headers[1:]])
            continue
        row: list[CellData] = [CellData(value=r + 1), CellData(value=None)]
        for _ in range(2, cols):
            value = int(rng.integers(0, 100_000)) if rng.random() < 0.5 else f"Item_{int(rng.integers(1000, 9999))}"
            fill = fg = comment = None
            if rng.random() < highlight_ratio:
                fill, fg = "solid", _shade(rng, red=bool(rng.random() < 0.4))
            if rng.random() < note_ratio:
                comment = f"check {value}"
            row.append(CellData(value=value, fill_pattern=fill, fg_color=fg, comment=comment))
        grid.append(row)

    widths: list[float | None] = [5.0, 30.0] + [None] * (cols - 2)
    return SheetData(sheet_name="Sheet1", rows=grid, column_widths=widths)


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Generate a sample annotated workbook",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # 1000 rows, 8 columns
  %(prog)s sample.xlsx --rows 1000 --cols 8

  # large dataset for timing filter/search
  %(prog)s large.xlsx --rows 50000 --cols 12 --section-every 100
        """,
    )
    parser.add_argument("output", type=Path, help="Output Excel file path")
    parser.add_argument("--rows", type=int, default=1000, help="Number of body rows (default: 1000)")
    parser.add_argument("--cols", type=int, default=8, help="Number of columns, at least 3 (default: 8)")
    parser.add_argument("--section-every", type=int, default=25, help="Section header row interval (0 = none)")
    parser.add_argument("--highlight-ratio", type=float, default=0.05)
    parser.add_argument("--note-ratio", type=float, default=0.01)
    parser.add_argument("--seed", type=int, default=42, help="Random seed (default: 42)")
    args = parser.parse_args()

    if args.rows <= 0:
        print("Error: --rows must be positive", file=sys.stderr)
        return 1
    if args.cols < 3:
        print("Error: --cols must be at least 3", file=sys.stderr)
        return 1

    sheet = generate_sheet(
        args.rows,
        args.cols,
        section_every=args.section_every,
        highlight_ratio=args.highlight_ratio,
        note_ratio=args.note_ratio,
        seed=args.seed,
    )
    try:
        save_workbook([sheet], args.output)
    except WorkbookEncodeError as e:
        print(f"Error generating workbook: {e}", file=sys.stderr)
        return 1
    print(f"Created {args.output}: {args.rows:,} rows x {args.cols} columns")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
