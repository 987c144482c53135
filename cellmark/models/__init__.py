"""Domain models for cellmark.

Plain dataclasses and enums shared by the engine services, the workbook
codec adapters and the CLI.
"""

from .config_models import AppConfig, SheetTitles
from .error_record import AnomalyRecord
from .excel_file import SessionStatus
from .highlight import CellColor, CellCoord, FilterMode, next_color
from .processing_result import ProcessingResult
from .row_data import ViewRow
from .sheet_data import CellData, SheetData

__all__ = [
    # Configuration models
    "AppConfig",
    "SheetTitles",
    # Annotation models
    "CellColor",
    "CellCoord",
    "FilterMode",
    "next_color",
    # Sheet / view models
    "CellData",
    "SheetData",
    "ViewRow",
    # Processing models
    "AnomalyRecord",
    "ProcessingResult",
    "SessionStatus",
]
