"""
CSV format handler.

CSV holds a single sheet, so a loaded workbook always has exactly one sheet
(named after the file, or the default sheet name) and only the first sheet of a
workbook is dumped. Every loaded value is a string; casting happens later.
"""

import csv
import io
import logging
from typing import Optional

from sheetcast.exceptions import DumpError, LoadError
from sheetcast.formats.base import BaseFormatHandler
from sheetcast.spreadsheet.model import Workbook

logger = logging.getLogger(__name__)


class CsvHandler(BaseFormatHandler):
    """Reads and writes delimited text with the standard library csv module.

    Attributes:
        delimiter: Field delimiter
        quotechar: Quote character
    """

    extension = "csv"
    mime_type = "text/csv"

    def __init__(
        self,
        delimiter: str = ",",
        quotechar: str = '"',
        sheet_name: str = "Sheet",
        encoding: str = "utf-8",
    ) -> None:
        super().__init__(sheet_name=sheet_name, encoding=encoding)
        self.delimiter = delimiter
        self.quotechar = quotechar

    def load_from_string(self, data: str, sheet_name: Optional[str] = None) -> Workbook:
        """Parse CSV text into a one-sheet, indexed workbook.

        Empty input yields a sheet with a single empty cell.

        Raises:
            LoadError: If the text is not valid CSV
        """
        data = data.lstrip("\ufeff")
        reader = csv.reader(
            io.StringIO(data, newline=""),
            delimiter=self.delimiter,
            quotechar=self.quotechar,
        )
        try:
            rows = [list(record) for record in reader]
        except csv.Error as e:
            raise LoadError(f"Error processing CSV data: {e}") from e

        if not rows:
            rows = [[None]]

        workbook = Workbook()
        workbook.create_sheet(sheet_name or self.sheet_name, rows)
        logger.debug("Parsed %d CSV rows", len(rows))
        return workbook

    def dump_to_string(self, workbook: Workbook) -> str:
        """Write the first sheet as CSV text.

        Associative sheets are written with their column names as the first
        row. An empty workbook produces an empty string.

        Raises:
            DumpError: If a row cannot be written
        """
        if not len(workbook):
            return ""

        sheet = workbook.get_sheet(workbook.sheet_names[0])
        if len(workbook) > 1:
            logger.debug("CSV holds one sheet; writing %r only", sheet.name)

        buffer = io.StringIO()
        writer = csv.writer(
            buffer,
            delimiter=self.delimiter,
            quotechar=self.quotechar,
            lineterminator="\n",
        )
        try:
            writer.writerows(sheet.to_grid())
        except csv.Error as e:
            raise DumpError(f"Error creating CSV data: {e}") from e
        return buffer.getvalue()
