"""cellmark - annotate spreadsheet cells with red/green highlights and notes.

The engine keeps highlights, notes and column widths for the first sheet of a
workbook, propagates red highlights to the owning section column, filters and
searches rows, and re-exports an annotated workbook with a red-only extract.
"""

__version__ = "0.3.0"
