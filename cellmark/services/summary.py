from __future__ import annotations

from ..models.processing_result import ProcessingResult

"""Summary line rendering.

Format:
SUMMARY file={name} rows={rows} red_cells={n} green_cells={n} red_rows={n}
notes={n} extract_rows={n} anomalies={n} elapsed_sec={elapsed}
"""


def _format_seconds(value: float) -> str:
    if value == 0:
        return "0"
    if value == int(value):
        return str(int(value))
    if value < 0.01:
        # avoid scientific notation for very small numbers
        return f"{value:.6f}".rstrip("0").rstrip(".")
    return f"{value:.3f}".rstrip("0").rstrip(".")


def render_summary_line(result: ProcessingResult) -> str:
    """Render the SUMMARY line for one processed workbook.

    Examples:
        >>> r = ProcessingResult("a.xlsx", 3, 1, 2, 1, 0, 2, 0, 0.5)
        >>> render_summary_line(r)
        'SUMMARY file=a.xlsx rows=3 red_cells=1 green_cells=2 red_rows=1 notes=0 extract_rows=2 anomalies=0 elapsed_sec=0.5'
    """
    return (
        f"SUMMARY file={result.file_name} "
        f"rows={result.data_rows} "
        f"red_cells={result.red_cells} "
        f"green_cells={result.green_cells} "
        f"red_rows={result.red_rows} "
        f"notes={result.notes} "
        f"extract_rows={result.extract_rows} "
        f"anomalies={result.anomalies} "
        f"elapsed_sec={_format_seconds(result.elapsed_seconds)}"
    )
