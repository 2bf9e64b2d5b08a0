"""
Document dumping.

A Dumper casts every cell of a workbook to its canonical form and lets the
format handler serialize the result:

    typed Workbook -> Caster.cast_before_dump -> canonical Workbook -> handler -> bytes

The workbook passed in is never modified. The registry and the caster are
always supplied by the caller.
"""

import logging
from typing import Optional

from sheetcast.casting.caster import Caster
from sheetcast.config import get_settings
from sheetcast.formats.base import PathLike
from sheetcast.formats.registry import FormatRegistry
from sheetcast.spreadsheet.model import Workbook

logger = logging.getLogger(__name__)


class Dumper:
    """Dumps typed workbooks to documents.

    Usage::

        dumper = Dumper(FormatRegistry.with_default_handlers(), Caster())
        dumper.dump_to_file(workbook, "out/report.csv")

    Attributes:
        registry: Resolves formats to handlers
        caster: Casts rich cell values before dumping
        default_format: Format used when none is given and none can be detected
                        (Settings.default_format when omitted)
    """

    def __init__(self, registry: FormatRegistry, caster: Caster, default_format: Optional[str] = None) -> None:
        self.registry = registry
        self.caster = caster
        self.default_format = default_format or get_settings().default_format

    def dump_to_file(
        self,
        workbook: Workbook,
        path: Optional[PathLike] = None,
        format: Optional[str] = None,
    ) -> str:
        """Cast and write a workbook to a file.

        Args:
            workbook: The workbook to write
            path: Destination; a temporary file when omitted
            format: Explicit format; detected from ``path`` when omitted, and
                    ``default_format`` when there is no path

        Returns:
            The path that was written

        Raises:
            UnsupportedFormatError: If no handler matches the format
            DumpError: If the handler cannot write the file
        """
        if path is None:
            handler = self.registry.resolve(format or self.default_format)
        else:
            handler = self.registry.resolve(str(path), format)

        written = handler.dump_to_file(self.caster.cast_before_dump(workbook), path)
        logger.info("Dumped workbook (%d sheets) to %s", len(workbook), written)
        return written

    def dump_to_string(self, workbook: Workbook, format: Optional[str] = None) -> str:
        """Cast and serialize a workbook to text (text formats only)."""
        handler = self.registry.resolve(format or self.default_format)
        logger.info("Dumping workbook (%d sheets) as %s", len(workbook), handler.extension)
        return handler.dump_to_string(self.caster.cast_before_dump(workbook))

    def dump_to_bytes(self, workbook: Workbook, format: Optional[str] = None) -> bytes:
        """Cast and serialize a workbook to bytes."""
        handler = self.registry.resolve(format or self.default_format)
        logger.info("Dumping workbook (%d sheets) as %s", len(workbook), handler.extension)
        return handler.dump_to_bytes(self.caster.cast_before_dump(workbook))
