"""
Format handler interface.

The FormatHandler protocol defines the contract every document format must
satisfy: turn bytes, text or a file into a raw Workbook and back. Handlers deal
in raw values only; casting between stored and rich values is done by the
Loader and Dumper around them.

Concrete implementations include CsvHandler, JsonHandler and XlsxHandler.
"""

import logging
import os
import tempfile
from pathlib import Path
from typing import Optional, Protocol, Union

from sheetcast.exceptions import (
    DocumentNotFoundError,
    DumpError,
    LoadError,
)
from sheetcast.spreadsheet.model import Workbook

logger = logging.getLogger(__name__)

PathLike = Union[str, "os.PathLike[str]"]


class FormatHandler(Protocol):
    """Protocol for document format handlers.

    ``sheet_name`` is the name given to sheets when the data does not carry
    one; loading from a file uses the file name without its extension.
    """

    extension: str
    mime_type: str

    def load_from_bytes(self, data: bytes, sheet_name: Optional[str] = None) -> Workbook:
        ...

    def load_from_string(self, data: str, sheet_name: Optional[str] = None) -> Workbook:
        ...

    def load_from_file(self, path: PathLike) -> Workbook:
        ...

    def dump_to_bytes(self, workbook: Workbook) -> bytes:
        ...

    def dump_to_string(self, workbook: Workbook) -> str:
        ...

    def dump_to_file(self, workbook: Workbook, path: Optional[PathLike] = None) -> str:
        ...


class BaseFormatHandler:
    """Shared file handling for format handlers.

    Text formats implement ``load_from_string`` and ``dump_to_string``; the
    bytes variants encode and decode with ``encoding``. Binary formats override
    the bytes variants instead.
    """

    extension = ""
    mime_type = "application/octet-stream"

    def __init__(self, sheet_name: str = "Sheet", encoding: str = "utf-8") -> None:
        self.sheet_name = sheet_name
        self.encoding = encoding

    def load_from_string(self, data: str, sheet_name: Optional[str] = None) -> Workbook:
        raise NotImplementedError

    def dump_to_string(self, workbook: Workbook) -> str:
        raise NotImplementedError

    def load_from_bytes(self, data: bytes, sheet_name: Optional[str] = None) -> Workbook:
        try:
            text = data.decode(self.encoding)
        except UnicodeDecodeError as e:
            raise LoadError(f"Could not decode {self.extension} data as {self.encoding}: {e}") from e
        return self.load_from_string(text, sheet_name)

    def dump_to_bytes(self, workbook: Workbook) -> bytes:
        text = self.dump_to_string(workbook)
        try:
            return text.encode(self.encoding)
        except UnicodeEncodeError as e:
            raise DumpError(f"Could not encode {self.extension} data as {self.encoding}: {e}") from e

    def load_from_file(self, path: PathLike) -> Workbook:
        """Load a workbook from a file, naming default sheets after the file.

        Raises:
            DocumentNotFoundError: If the file does not exist or is not a file
            LoadError: If the file cannot be read or parsed
        """
        path = Path(path)
        if not path.is_file():
            raise DocumentNotFoundError(f'File "{path}" not found.', path=str(path))

        try:
            data = path.read_bytes()
        except OSError as e:
            raise LoadError(f'Could not read file "{path}": {e}') from e

        logger.debug("Read %d bytes from %s", len(data), path)
        return self.load_from_bytes(data, path.stem)

    def dump_to_file(self, workbook: Workbook, path: Optional[PathLike] = None) -> str:
        """Write a workbook to ``path``, or to a new temporary file.

        Missing parent directories are created.

        Returns:
            The path that was written

        Raises:
            DumpError: If the directory or the file cannot be written
        """
        if path is None:
            fd, temp_path = tempfile.mkstemp(suffix=f".{self.extension}")
            os.close(fd)
            path = temp_path
        path = Path(path)

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise DumpError(f'Directory "{path.parent}" could not be created.') from e

        data = self.dump_to_bytes(workbook)
        try:
            path.write_bytes(data)
        except OSError as e:
            raise DumpError(f'Could not write to file "{path}": {e}') from e

        logger.debug("Wrote %d bytes to %s", len(data), path)
        return str(path)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(sheet_name={self.sheet_name!r})"
