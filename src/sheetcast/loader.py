"""
Document loading.

A Loader resolves the format handler for a document, lets it parse the data into
a raw workbook and casts every cell to its rich type:

    bytes -> handler -> raw Workbook -> Caster.cast_after_load -> typed Workbook

The registry and the caster are always supplied by the caller.
"""

import logging
from pathlib import Path
from typing import Optional

from sheetcast.casting.caster import Caster
from sheetcast.config import get_settings
from sheetcast.exceptions import DocumentNotFoundError
from sheetcast.formats.base import PathLike
from sheetcast.formats.registry import FormatRegistry
from sheetcast.spreadsheet.model import Workbook

logger = logging.getLogger(__name__)


class Loader:
    """Loads documents into typed workbooks.

    Usage::

        loader = Loader(FormatRegistry.with_default_handlers(), Caster())
        workbook = loader.load_from_file("report.xlsx")

    Attributes:
        registry: Resolves formats to handlers
        caster: Casts raw cell values after loading
        default_format: Format used by the string and bytes loaders when no
                        format is given (Settings.default_format when omitted)
    """

    def __init__(self, registry: FormatRegistry, caster: Caster, default_format: Optional[str] = None) -> None:
        self.registry = registry
        self.caster = caster
        self.default_format = default_format or get_settings().default_format

    def load_from_file(self, path: PathLike, format: Optional[str] = None) -> Workbook:
        """Load and cast a document file.

        Args:
            path: Path of the document
            format: Explicit format; detected from the extension when omitted

        Raises:
            DocumentNotFoundError: If the file does not exist
            UnsupportedFormatError: If no handler matches the format
            LoadError: If the handler cannot parse the file
        """
        path = Path(path)
        if not path.is_file():
            raise DocumentNotFoundError(f'File not found: "{path}".', path=str(path))

        handler = self.registry.resolve(str(path), format)
        logger.info("Loading %s as %s", path, handler.extension)
        return self.caster.cast_after_load(handler.load_from_file(path))

    def load_from_string(
        self,
        data: str,
        format: Optional[str] = None,
        sheet_name: Optional[str] = None,
    ) -> Workbook:
        """Load and cast a document held in a string (text formats only)."""
        handler = self.registry.resolve(format or self.default_format)
        logger.info("Loading %d characters as %s", len(data), handler.extension)
        return self.caster.cast_after_load(handler.load_from_string(data, sheet_name))

    def load_from_bytes(
        self,
        data: bytes,
        format: Optional[str] = None,
        sheet_name: Optional[str] = None,
    ) -> Workbook:
        """Load and cast a document held in memory."""
        handler = self.registry.resolve(format or self.default_format)
        logger.info("Loading %d bytes as %s", len(data), handler.extension)
        return self.caster.cast_after_load(handler.load_from_bytes(data, sheet_name))
