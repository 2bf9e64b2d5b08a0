"""
Format registry.

Maps format identifiers (lower-case file extensions such as ``csv``) to handler
factories and resolves a filename or identifier to a fresh handler instance.
"""

import logging
from pathlib import PurePath
from typing import Callable, Dict, List, Optional

from sheetcast.config import Settings, get_settings
from sheetcast.exceptions import UnsupportedFormatError
from sheetcast.formats.base import FormatHandler
from sheetcast.formats.csv_handler import CsvHandler
from sheetcast.formats.json_handler import JsonHandler
from sheetcast.formats.xlsx_handler import XlsxHandler

logger = logging.getLogger(__name__)

HandlerFactory = Callable[[], FormatHandler]


def _normalize(format_id: str) -> str:
    return format_id.strip().lstrip(".").lower()


class FormatRegistry:
    """Registry of format handler factories keyed by format identifier.

    Usage::

        registry = FormatRegistry.with_default_handlers(get_settings())
        handler = registry.resolve("report.xlsx")
        registry.register("tsv", lambda: CsvHandler(delimiter="\\t"))
    """

    def __init__(self, factories: Optional[Dict[str, HandlerFactory]] = None) -> None:
        self._factories: Dict[str, HandlerFactory] = {}
        for format_id, factory in (factories or {}).items():
            self.register(format_id, factory)

    @classmethod
    def with_default_handlers(cls, settings: Optional[Settings] = None) -> "FormatRegistry":
        """Build a registry with the csv, json and xlsx handlers.

        Args:
            settings: Source of handler defaults; get_settings() when omitted
        """
        settings = settings or get_settings()
        return cls({
            "csv": lambda: CsvHandler(
                delimiter=settings.csv_delimiter,
                quotechar=settings.csv_quotechar,
                sheet_name=settings.default_sheet_name,
                encoding=settings.encoding,
            ),
            "json": lambda: JsonHandler(
                indent=settings.json_indent,
                sheet_name=settings.default_sheet_name,
                encoding=settings.encoding,
            ),
            "xlsx": lambda: XlsxHandler(sheet_name=settings.default_sheet_name),
        })

    def register(self, format_id: str, factory: HandlerFactory) -> "FormatRegistry":
        """Register (or replace) the handler factory for a format.

        Args:
            format_id: File extension, with or without a leading dot
            factory: Zero-argument callable returning a handler; a handler
                     class works as well
        """
        format_id = _normalize(format_id)
        if not format_id:
            raise ValueError("Format identifier must be a non-empty string")
        self._factories[format_id] = factory
        logger.debug("Registered format handler for %r", format_id)
        return self

    def detect_format(self, filename: str) -> str:
        """Return the registered format of ``filename``, from its extension.

        Raises:
            UnsupportedFormatError: If there is no extension or it is not registered
        """
        extension = _normalize(PurePath(filename).suffix)
        if not extension:
            raise UnsupportedFormatError(f'Could not detect extension for file "{filename}".')
        if extension not in self._factories:
            raise UnsupportedFormatError(f'Extension "{extension}" is not supported.')
        return extension

    def resolve(self, filename_or_format: str, format_override: Optional[str] = None) -> FormatHandler:
        """Create the handler for a filename or a bare format identifier.

        Args:
            filename_or_format: ``"data/report.xlsx"`` or ``"xlsx"``
            format_override: Explicit format, taking precedence over detection

        Raises:
            UnsupportedFormatError: If no handler is registered for the format
        """
        if format_override:
            format_id = _normalize(format_override)
        elif _normalize(filename_or_format) in self._factories:
            format_id = _normalize(filename_or_format)
        else:
            format_id = self.detect_format(filename_or_format)

        if format_id not in self._factories:
            raise UnsupportedFormatError(f'Format "{format_id}" is not supported.')
        return self._factories[format_id]()

    def supported_formats(self) -> List[str]:
        return list(self._factories)

    def __contains__(self, format_id: object) -> bool:
        return isinstance(format_id, str) and _normalize(format_id) in self._factories

    def __repr__(self) -> str:
        return f"FormatRegistry(formats={self.supported_formats()!r})"
