"""
Exception classes for sheetcast.

These exceptions are used throughout the sheetcast package to signal error conditions
in the workbook model, the format registry and the format handlers. The value caster
never raises: ambiguous or malformed cell values are left unchanged instead.
"""

from typing import Optional


class SheetcastError(Exception):
    """Base class for all sheetcast errors."""
    pass


class DocumentNotFoundError(SheetcastError, FileNotFoundError):
    """Raised when a document to be loaded does not exist or cannot be read.

    Attributes:
        path: The path that was requested
    """

    def __init__(self, message: str, path: Optional[str] = None) -> None:
        super().__init__(message)
        self.path = path


class UnsupportedFormatError(SheetcastError):
    """Raised when no format handler is registered for a requested format.

    Common causes include:
        - A filename without an extension and no explicit format
        - An extension that was never registered (e.g. ``.ods``)
        - A typo in an explicit format identifier
    """
    pass


class LoadError(SheetcastError):
    """Raised when a format handler cannot parse input into a workbook.

    The original exception (csv.Error, json.JSONDecodeError, openpyxl errors, ...)
    is preserved as ``__cause__``.
    """
    pass


class DumpError(SheetcastError):
    """Raised when a format handler cannot serialize a workbook.

    Examples:
        - A sheet name rejected by the target format (xlsx titles are limited to
          31 characters and may not contain ``[]:*?/\\``)
        - The target directory cannot be created
        - The destination file cannot be written
    """
    pass


class SheetNotFoundError(SheetcastError, ValueError):
    """Raised when a workbook operation names a sheet that does not exist.

    Attributes:
        name: The sheet name that was requested
    """

    def __init__(self, name: str) -> None:
        super().__init__(f'Sheet "{name}" does not exist.')
        self.name = name


class NoActiveSheetError(SheetcastError, RuntimeError):
    """Raised when the active sheet of an empty workbook is requested.

    Adding a sheet always activates it when nothing is active, so this only
    happens for a workbook that has no sheets at all.
    """
    pass


class UnsupportedOperationError(SheetcastError):
    """Raised when a format handler does not offer an operation.

    Binary formats such as xlsx have no text representation, so their
    ``load_from_string`` and ``dump_to_string`` raise this error.
    """
    pass
