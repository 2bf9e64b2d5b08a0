"""
JSON format handler.

Recognized document shapes, in order:

- A list of objects: one associative sheet, ``[{"a": 1}, {"a": 2}]``
- A list of lists: one indexed sheet, ``[["a"], [1], [2]]``
- An object keyed by sheet name: ``{"People": [...], "Totals": [...]}``
- Any other scalar: one sheet holding a single cell

A workbook whose only sheet is associative is dumped as a list of objects;
anything else is dumped as an object keyed by sheet name.
"""

import json
import logging
from typing import Any, List, Optional

from sheetcast.exceptions import DumpError, LoadError
from sheetcast.formats.base import BaseFormatHandler
from sheetcast.spreadsheet.model import Workbook

logger = logging.getLogger(__name__)


def _as_rows(items: List[Any]) -> List[Any]:
    """Rows from a decoded list; a list of scalars is a single row."""
    if items and not isinstance(items[0], (list, dict)):
        return [items]
    return [item if isinstance(item, (list, dict)) else [item] for item in items]


class JsonHandler(BaseFormatHandler):
    """Reads and writes workbooks as JSON documents.

    Attributes:
        indent: Indentation of dumped documents; 0 or None writes compact JSON
    """

    extension = "json"
    mime_type = "application/json"

    def __init__(
        self,
        indent: Optional[int] = 4,
        sheet_name: str = "Sheet",
        encoding: str = "utf-8",
    ) -> None:
        super().__init__(sheet_name=sheet_name, encoding=encoding)
        self.indent = indent

    def load_from_string(self, data: str, sheet_name: Optional[str] = None) -> Workbook:
        """Decode a JSON document into a workbook.

        Raises:
            LoadError: If the text is not valid JSON
        """
        sheet_name = sheet_name or self.sheet_name
        try:
            decoded = json.loads(data)
        except (ValueError, RecursionError) as e:
            raise LoadError(f"Invalid JSON data: {e}") from e

        workbook = Workbook()

        if isinstance(decoded, list):
            rows = _as_rows(decoded)
            associative = bool(rows) and isinstance(rows[0], dict)
            workbook.create_sheet(sheet_name, rows, is_associative=associative)
            return workbook

        if not isinstance(decoded, dict):
            workbook.create_sheet(sheet_name, [[decoded]])
            return workbook

        for name, rows in decoded.items():
            if isinstance(rows, dict):
                rows = [rows]
            if not isinstance(rows, list) or not rows:
                logger.debug("Skipping JSON member %r: not a non-empty list of rows", name)
                continue
            rows = _as_rows(rows)
            workbook.create_sheet(str(name), rows, is_associative=isinstance(rows[0], dict))

        if not len(workbook):
            # A lone object with no sheet-like members is a single record.
            workbook.create_sheet(sheet_name, [decoded], is_associative=True)

        return workbook

    def dump_to_string(self, workbook: Workbook) -> str:
        """Encode a workbook as a JSON document.

        Raises:
            DumpError: If a value cannot be encoded
        """
        sheets = list(workbook)
        if len(sheets) == 1 and sheets[0].is_associative:
            data: Any = sheets[0].rows
        else:
            data = {
                sheet.name: sheet.rows if sheet.is_associative else sheet.to_grid()
                for sheet in sheets
            }

        try:
            return json.dumps(data, indent=self.indent or None, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            raise DumpError(f"Failed to encode data as JSON: {e}") from e
