"""
Workbook model module.

This module provides the format-agnostic in-memory model of tabular documents
and its pandas interop helpers.
"""

from sheetcast.spreadsheet.model import (
    ColumnKey,
    Row,
    Workbook,
    Worksheet,
)
from sheetcast.spreadsheet.frames import (
    from_dataframe,
    to_dataframe,
    workbook_from_dataframes,
    workbook_to_dataframes,
)

__all__ = [
    "ColumnKey",
    "Row",
    "Workbook",
    "Worksheet",
    "from_dataframe",
    "to_dataframe",
    "workbook_from_dataframes",
    "workbook_to_dataframes",
]
