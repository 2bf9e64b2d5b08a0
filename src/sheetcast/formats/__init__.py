"""
Format handlers module.

This module provides the FormatHandler protocol, the bundled csv, json and xlsx
handlers, and the FormatRegistry that resolves a filename or format identifier
to a handler.
"""

from sheetcast.formats.base import BaseFormatHandler, FormatHandler
from sheetcast.formats.csv_handler import CsvHandler
from sheetcast.formats.json_handler import JsonHandler
from sheetcast.formats.registry import FormatRegistry
from sheetcast.formats.xlsx_handler import XlsxHandler

__all__ = [
    "BaseFormatHandler",
    "CsvHandler",
    "FormatHandler",
    "FormatRegistry",
    "JsonHandler",
    "XlsxHandler",
]
