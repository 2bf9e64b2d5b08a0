"""
XLSX format handler backed by openpyxl.

Every worksheet of the file becomes an indexed sheet, in file order, and the
file's active worksheet becomes the active sheet. Cells keep the types openpyxl
reads them with (str, int, float, bool, datetime, None); cached formula results
are read instead of formulas. Excel stores no time zone, so date cells are
read as UTC datetimes, matching what the caster produces for date strings.

Strings starting with "=" are written as text, never as formulas.
"""

import io
import logging
import zipfile
from datetime import datetime
from typing import Any, List, Optional

import openpyxl
from openpyxl.utils.exceptions import IllegalCharacterError, InvalidFileException

from sheetcast.casting.rules import to_utc
from sheetcast.exceptions import DumpError, LoadError, UnsupportedOperationError
from sheetcast.formats.base import BaseFormatHandler
from sheetcast.spreadsheet.model import Workbook

logger = logging.getLogger(__name__)


def _keep_text(ws, row_index: int, row: List[Any]) -> None:
    """Store strings starting with "=" as text; openpyxl would write formulas."""
    for col_index, value in enumerate(row, start=1):
        if isinstance(value, str) and value.startswith("="):
            ws.cell(row=row_index, column=col_index).data_type = "s"


def _cell_value(value: Any) -> Any:
    if isinstance(value, datetime):
        return to_utc(value)
    return value


class XlsxHandler(BaseFormatHandler):
    """Reads and writes Office Open XML workbooks."""

    extension = "xlsx"
    mime_type = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

    def load_from_bytes(self, data: bytes, sheet_name: Optional[str] = None) -> Workbook:
        """Read an xlsx file from memory.

        ``sheet_name`` is unused: xlsx worksheets always carry their own names.

        Raises:
            LoadError: If the data is not a readable xlsx file
        """
        try:
            book = openpyxl.load_workbook(io.BytesIO(data), data_only=True)
        except (InvalidFileException, zipfile.BadZipFile, KeyError, ValueError, OSError) as e:
            raise LoadError(f"Error reading xlsx data: {e}") from e

        workbook = Workbook()
        for ws in book.worksheets:
            rows = [[_cell_value(v) for v in row] for row in ws.iter_rows(values_only=True)]
            workbook.create_sheet(ws.title, rows)
            logger.debug("Read worksheet %r (%d rows)", ws.title, len(rows))

        if book.worksheets:
            workbook.set_active_sheet(book.active.title)
        book.close()
        return workbook

    def dump_to_bytes(self, workbook: Workbook) -> bytes:
        """Write every sheet, in order, to an xlsx file in memory.

        Associative sheets are written with their column names as the first
        row. The active sheet is kept as the active worksheet.

        Raises:
            DumpError: If a sheet name or a value is rejected by openpyxl
        """
        book = openpyxl.Workbook()
        book.remove(book.active)

        try:
            for sheet in workbook:
                ws = book.create_sheet(title=sheet.name)
                for row_index, row in enumerate(sheet.to_grid(), start=1):
                    ws.append(row)
                    _keep_text(ws, row_index, row)
            if not book.worksheets:
                book.create_sheet(title=self.sheet_name)
            elif workbook.active_sheet_name is not None:
                book.active = workbook.sheet_names.index(workbook.active_sheet_name)

            buffer = io.BytesIO()
            book.save(buffer)
        except (IllegalCharacterError, ValueError, TypeError) as e:
            raise DumpError(f"Error creating xlsx data: {e}") from e
        return buffer.getvalue()

    def load_from_string(self, data: str, sheet_name: Optional[str] = None) -> Workbook:
        raise UnsupportedOperationError("xlsx is a binary format; use load_from_bytes()")

    def dump_to_string(self, workbook: Workbook) -> str:
        raise UnsupportedOperationError("xlsx is a binary format; use dump_to_bytes()")
