from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path

from ..models.error_record import AnomalyRecord

"""Anomaly log buffering.

Per-cell decode anomalies are buffered in memory and flushed as JSON Lines
(fixed schema, no extra keys) to logs/anomalies-YYYYMMDD-HHMMSS.log (UTC).
The file is only created when there is something to write.
"""

__all__ = [
    "AnomalyRecord",
    "AnomalyLogBuffer",
]

LOGS_DIR = Path("./logs")
TIMESTAMP_FMT = "%Y%m%d-%H%M%S"


class AnomalyLogBuffer:
    """In-memory buffer of anomaly records; flush() appends them as JSON Lines."""

    def __init__(self, logs_dir: Path | None = None) -> None:
        self._records: list[AnomalyRecord] = []
        self._logs_dir = logs_dir or LOGS_DIR
        self._file_path: Path | None = None

    @property
    def file_path(self) -> Path:
        if self._file_path is None:
            stamp = datetime.now(UTC).strftime(TIMESTAMP_FMT)
            self._file_path = self._logs_dir / f"anomalies-{stamp}.log"
        return self._file_path

    @property
    def records(self) -> tuple[AnomalyRecord, ...]:
        return tuple(self._records)

    def append(self, record: AnomalyRecord) -> None:
        self._records.append(record)

    def extend(self, records: list[AnomalyRecord]) -> None:
        self._records.extend(records)

    def __len__(self) -> int:  # pragma: no cover (trivial)
        return len(self._records)

    def flush(self) -> Path | None:
        """Append buffered records to the log file. Returns None when empty."""
        if not self._records:
            return None
        fp = self.file_path
        fp.parent.mkdir(parents=True, exist_ok=True)
        with fp.open("a", encoding="utf-8") as f:
            for r in self._records:
                f.write(r.to_json_line() + "\n")
        self._records.clear()
        return fp
