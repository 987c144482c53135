# Shared pytest fixtures
from __future__ import annotations

import tempfile
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Any

import pytest
from openpyxl import Workbook
from openpyxl.comments import Comment
from openpyxl.styles import PatternFill

from cellmark.models.sheet_data import SheetData

SECTION = "Ревизионная группа"

# Sample sheet: two sections, two items each.
# Data rows 0 and 3 are section header rows; column 1 is the section column.
SAMPLE_HEADERS = ["№", f"{SECTION} / статус", "Наименование", "Сумма"]
SAMPLE_ROWS: list[list[Any]] = [
    [f"{SECTION} 1", None, None, None],
    [1, None, "Widget A", 100],
    [2, None, "Widget B", 200],
    [f"{SECTION} 2", None, None, None],
    [3, None, "Gadget C", 300],
    [4, None, "widget d", 400],
]


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        # keep the developer's environment out of config resolution
        monkeypatch.delenv("CELLMARK_SECTION_PREFIX", raising=False)
        monkeypatch.delenv("CELLMARK_SEARCH_DEBOUNCE_MS", raising=False)
        yield p


@pytest.fixture()
def sample_config_yaml() -> str:
    return f"""section_prefix: "{SECTION}"
search_debounce_ms: 0
output_prefix: "edited_"
sheets:
  primary_title: "Основной лист"
  red_extract_title: "Выделено красным"
comment_author: "tester"
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "cellmark.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


def build_xlsx(
    path: Path,
    rows: Sequence[Sequence[Any]],
    *,
    fills: dict[tuple[int, int], str] | None = None,
    comments: dict[tuple[int, int], str] | None = None,
    widths: dict[str, float] | None = None,
    title: str = "Sheet1",
) -> Path:
    """Write a one-sheet workbook. fills/comments are keyed by worksheet (row, col), 1-based."""
    wb = Workbook()
    ws = wb.active
    ws.title = title
    for row in rows:
        ws.append(list(row))
    for (r, c), argb in (fills or {}).items():
        ws.cell(row=r, column=c).fill = PatternFill(fill_type="solid", start_color=argb, end_color=argb)
    for (r, c), text in (comments or {}).items():
        ws.cell(row=r, column=c).comment = Comment(text, "author")
    for letter, width in (widths or {}).items():
        ws.column_dimensions[letter].width = width
    wb.save(path)
    return path


@pytest.fixture()
def make_xlsx(temp_workdir: Path) -> Callable[..., Path]:
    def _make(name: str, rows: Sequence[Sequence[Any]], **kwargs: Any) -> Path:
        return build_xlsx(temp_workdir / "data" / name, rows, **kwargs)
    return _make


@pytest.fixture()
def sample_xlsx(make_xlsx) -> Path:
    return make_xlsx("sample.xlsx", [SAMPLE_HEADERS, *SAMPLE_ROWS])


@pytest.fixture()
def sample_sheet() -> SheetData:
    return SheetData.from_values("Sheet1", SAMPLE_HEADERS, SAMPLE_ROWS)
