from __future__ import annotations

from dataclasses import dataclass

"""Processing result model for the SUMMARY line."""


@dataclass(frozen=True)
class ProcessingResult:
    """Counts gathered after an open (and optional save) of one workbook."""
    file_name: str
    data_rows: int
    red_cells: int
    green_cells: int
    red_rows: int  # rows holding at least one red cell
    notes: int
    extract_rows: int  # rows written to the red extract (0 when not written)
    anomalies: int  # recovered per-cell decode anomalies
    elapsed_seconds: float
