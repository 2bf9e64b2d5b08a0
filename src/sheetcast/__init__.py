"""
sheetcast - A format-agnostic workbook model with bidirectional value casting.

This package provides an in-memory model of tabular documents (workbooks made
of named worksheets) and a caster that converts between the raw strings and
numbers stored by document formats and rich Python values (bool, int, float,
UTC datetime, list, dict, None).

Usage:
    >>> from sheetcast import Caster, Dumper, FormatRegistry, Loader
    >>> registry = FormatRegistry.with_default_handlers()
    >>> caster = Caster()
    >>> workbook = Loader(registry, caster).load_from_file("report.csv")
    >>> workbook.get_active_sheet().get_cell(1, 0)
    >>> Dumper(registry, caster).dump_to_file(workbook, "report.xlsx")

Key components:
- Workbook / Worksheet: the document model
- Caster: cell value casting after load and before dump
- FormatRegistry: csv, json and xlsx handlers keyed by extension
- Loader / Dumper: handler plus caster, end to end
"""

import logging

from .spreadsheet import Workbook, Worksheet
from .casting import Caster
from .config import Settings, get_settings
from .formats import FormatHandler, FormatRegistry
from .loader import Loader
from .dumper import Dumper
from .exceptions import *

# Version
__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    'Workbook',
    'Worksheet',
    'Caster',
    'Settings',
    'get_settings',
    'FormatHandler',
    'FormatRegistry',
    'Loader',
    'Dumper',
    'SheetcastError',
    'DocumentNotFoundError',
    'UnsupportedFormatError',
    'LoadError',
    'DumpError',
    'SheetNotFoundError',
    'NoActiveSheetError',
    'UnsupportedOperationError',
]
