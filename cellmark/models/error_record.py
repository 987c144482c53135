from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

"""AnomalyRecord model for per-cell decode anomalies.

A malformed fill colour or comment on one cell must not abort an import; the
cell annotation is skipped and an AnomalyRecord is buffered for the anomaly
log. row/column use worksheet numbering (1-based, row 1 = header) and -1 when
unknown.

The record adheres to cellmark/logging/anomaly_log_schema.json.
"""

__all__ = [
    "AnomalyRecord",
]


@dataclass(frozen=True)
class AnomalyRecord:
    """Structured anomaly record for JSON Lines logging.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        file: workbook file name
        sheet: worksheet title
        row: worksheet row number (1-based), -1 when unknown
        column: worksheet column number (1-based), -1 when unknown
        anomaly_type: classification in UPPER_SNAKE_CASE (e.g. MALFORMED_COLOR)
        message: human readable description
    """
    timestamp: str
    file: str
    sheet: str
    row: int
    column: int
    anomaly_type: str
    message: str

    @staticmethod
    def create(file: str, sheet: str, row: int, column: int, anomaly_type: str, message: str) -> AnomalyRecord:
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return AnomalyRecord(
            timestamp=ts,
            file=file,
            sheet=sheet,
            row=row,
            column=column,
            anomaly_type=anomaly_type,
            message=message,
        )

    def to_json_line(self) -> str:
        return json.dumps(asdict(self), ensure_ascii=False)
