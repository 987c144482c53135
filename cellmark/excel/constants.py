"""Workbook format constants shared by the import and export mappers."""

GREEN_ARGB = "FF00B050"
RED_ARGB = "FFFF0000"

SOLID_PATTERN = "solid"

# Column width conversion: one worksheet width unit ~ 8 pixels
PX_PER_WIDTH_UNIT = 8

MIN_RESIZE_WIDTH_PX = 40
AUTO_MIN_WIDTH_PX = 80
AUTO_MAX_WIDTH_PX = 350
AUTO_PADDING_PX = 20
# Pixel width for a column without a declared width when other columns declare one
UNDECLARED_WIDTH_PX = 100

# Export: column 1 is the narrow index/marker column
INDEX_COLUMN_WIDTH = 5
MIN_EXPORT_WIDTH = 10
FALLBACK_EXPORT_PX = 80
