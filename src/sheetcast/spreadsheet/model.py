"""
Workbook model classes.

This module provides the format-agnostic in-memory model of a tabular document:
- Worksheet: An ordered grid of rows, either indexed or associative
- Workbook: An ordered, name-keyed collection of worksheets with one active sheet

Rows are stored as dicts mapping a column key to a cell value. In an indexed
worksheet the keys are contiguous integers starting at 0 and row 0 holds the
header labels by convention. In an associative worksheet the keys are strings,
every row is a record and the header is derived from the keys themselves.
"""

import copy
from typing import (
    Any,
    Callable,
    Dict,
    Iterable,
    Iterator,
    List,
    Mapping,
    Optional,
    Sequence,
    Union,
)

from sheetcast.exceptions import NoActiveSheetError, SheetNotFoundError

ColumnKey = Union[int, str]
Row = Dict[ColumnKey, Any]
RowLike = Union[Mapping[ColumnKey, Any], Sequence[Any]]


def _normalize_row(row: RowLike) -> Row:
    """Return a fresh dict for a mapping or positional sequence."""
    if isinstance(row, Mapping):
        return dict(row)
    return dict(enumerate(row))


def _union_of_keys(rows: Iterable[Row]) -> List[ColumnKey]:
    """Ordered union of row keys, in order of first appearance."""
    seen: Dict[ColumnKey, None] = {}
    for row in rows:
        for key in row:
            seen.setdefault(key, None)
    return list(seen)


def _header_label(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return str(value)


class Worksheet:
    """Represents a single sheet of a workbook.

    Attributes:
        name: The sheet name (non-empty, unique within its workbook)
        is_associative: Whether rows are keyed by column name instead of position
    """

    def __init__(
        self,
        name: str,
        rows: Optional[Iterable[RowLike]] = None,
        is_associative: bool = False,
    ) -> None:
        """Initialize a Worksheet.

        Args:
            name: Sheet name (non-empty string)
            rows: Initial rows, as mappings or positional sequences
            is_associative: True when rows are records keyed by column name

        Raises:
            ValueError: If name is empty or not a string
        """
        if not name or not isinstance(name, str):
            raise ValueError("Sheet name must be a non-empty string")

        self.name = name
        self.is_associative = is_associative
        self._rows: List[Row] = [_normalize_row(row) for row in rows or []]

    # Row access

    @property
    def rows(self) -> List[Row]:
        """Copies of all rows, in order."""
        return [dict(row) for row in self._rows]

    def set_rows(self, rows: Iterable[RowLike]) -> "Worksheet":
        self._rows = [_normalize_row(row) for row in rows]
        return self

    def get_row(self, index: int) -> Optional[Row]:
        """Return a copy of the row at ``index``, or None if there is none."""
        if index < 0 or index >= len(self._rows):
            return None
        return dict(self._rows[index])

    def set_row(self, index: int, row: RowLike) -> "Worksheet":
        """Replace the row at ``index``, appending empty rows to reach it.

        Negative indexes are ignored.
        """
        if index < 0:
            return self
        self._extend_to(index)
        self._rows[index] = _normalize_row(row)
        return self

    def add_row(self, row: RowLike) -> "Worksheet":
        """Append a row at the next integer index."""
        self._rows.append(_normalize_row(row))
        return self

    def get_cell(self, row: int, col: ColumnKey) -> Any:
        """Return the value at (row, col), or None when either is absent."""
        if row < 0 or row >= len(self._rows):
            return None
        return self._rows[row].get(col)

    def set_cell(self, row: int, col: ColumnKey, value: Any) -> "Worksheet":
        """Set the value at (row, col), creating empty rows for index gaps.

        Negative row indexes are ignored.
        """
        if row < 0:
            return self
        self._extend_to(row)
        self._rows[row][col] = value
        return self

    def _extend_to(self, index: int) -> None:
        while len(self._rows) <= index:
            self._rows.append({})

    # Header and data

    def get_header_row(self) -> List[Any]:
        """Return the header.

        For indexed sheets this is row 0 (its values, in key order). For
        associative sheets it is the ordered union of keys across all rows.
        """
        if not self._rows:
            return []
        if not self.is_associative:
            return list(self._rows[0].values())
        return _union_of_keys(self._rows)

    def get_column_names(self) -> List[ColumnKey]:
        if not self.is_associative:
            return []
        return _union_of_keys(self._rows)

    def get_data_rows(self) -> List[Row]:
        """Return the rows without the header row (copies).

        Associative sheets store no header row, so every row is a data row.
        """
        if not self.is_associative:
            return self.rows[1:]
        return self.rows

    def count_data(self) -> int:
        return len(self.get_data_rows())

    # Conversions

    def to_associative(self) -> "Worksheet":
        """Convert to an associative sheet using row 0 as the header.

        Values are matched to header labels by position. Rows shorter than the
        header are padded with None; values beyond the header are dropped.

        Returns:
            self if already associative, otherwise a new Worksheet
        """
        if self.is_associative:
            return self

        result = Worksheet(self.name, is_associative=True)
        if not self._rows:
            return result

        headers = [(index, _header_label(label)) for index, label in self._rows[0].items()]
        for row in self._rows[1:]:
            result.add_row({label: row.get(index) for index, label in headers})
        return result

    def to_indexed(self) -> "Worksheet":
        """Convert to an indexed sheet with a synthetic header row.

        The header is the union of keys across all rows, in order of first
        appearance. The column order therefore depends on which row introduces
        a key first when rows have different key sets.

        Returns:
            self if already indexed, otherwise a new Worksheet
        """
        if not self.is_associative:
            return self

        result = Worksheet(self.name)
        if not self._rows:
            return result

        keys = _union_of_keys(self._rows)
        result.add_row(keys)
        for row in self._rows:
            result.add_row([row.get(key) for key in keys])
        return result

    def to_grid(self) -> List[List[Any]]:
        """Render the sheet as a list of positional rows.

        Indexed rows are padded with None up to their highest key. Associative
        sheets are rendered through ``to_indexed()`` so the first row holds the
        column names.
        """
        if self.is_associative:
            return self.to_indexed().to_grid()

        grid = []
        for row in self._rows:
            width = max((key for key in row if isinstance(key, int)), default=-1) + 1
            grid.append([row.get(index) for index in range(width)])
        return grid

    # Derived sheets

    def filter(self, predicate: Callable[[Row], Any]) -> "Worksheet":
        """Return a new sheet with the rows for which ``predicate`` is truthy.

        Surviving rows are re-indexed from 0; their keys are unchanged.
        """
        kept = [dict(row) for row in self._rows if predicate(dict(row))]
        return Worksheet(self.name, kept, self.is_associative)

    def select_columns(self, columns: Iterable[ColumnKey]) -> "Worksheet":
        """Return a new sheet keeping only ``columns``, in the requested order.

        Columns missing from a row are skipped for that row.
        """
        columns = list(columns)
        selected = [
            {key: row[key] for key in columns if key in row}
            for row in self._rows
        ]
        return Worksheet(self.name, selected, self.is_associative)

    def copy(self) -> "Worksheet":
        """Deep copy of the sheet, including nested cell values."""
        return Worksheet(self.name, copy.deepcopy(self._rows), self.is_associative)

    # In-place transforms

    def map(self, fn: Callable[[Any, int, ColumnKey], Any]) -> "Worksheet":
        """Replace every cell with ``fn(value, row_index, col_key)``, in place."""
        for row_index, row in enumerate(self._rows):
            for key, value in row.items():
                row[key] = fn(value, row_index, key)
        return self

    def sort(self, key: Callable[[Row], Any], reverse: bool = False) -> "Worksheet":
        """Sort rows in place (stable).

        A two-argument comparator can be used through ``functools.cmp_to_key``.
        """
        self._rows.sort(key=key, reverse=reverse)
        return self

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "rows": self.rows,
            "is_associative": self.is_associative,
        }

    def __len__(self) -> int:
        return len(self._rows)

    def __iter__(self) -> Iterator[Row]:
        return iter(self.rows)

    def __repr__(self) -> str:
        return (
            f"Worksheet(name={self.name!r}, rows={len(self._rows)}, "
            f"is_associative={self.is_associative})"
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Worksheet):
            return NotImplemented
        return (
            self.name == other.name
            and self.is_associative == other.is_associative
            and self._rows == other._rows
        )


def _row_for_export(row: Row) -> Union[List[Any], Row]:
    if list(row) == list(range(len(row))):
        return list(row.values())
    return dict(row)


class Workbook:
    """Represents a complete document: ordered, named worksheets plus an active one.

    Sheets are kept in insertion order, which determines output order for
    formats that serialize several sheets.

    Attributes:
        active_sheet_name: Name of the active sheet, None only when empty
    """

    def __init__(self, sheets: Optional[Iterable[Worksheet]] = None) -> None:
        self._sheets: Dict[str, Worksheet] = {}
        self.active_sheet_name: Optional[str] = None
        for sheet in sheets or []:
            self.add_sheet(sheet)

    @property
    def sheets(self) -> Dict[str, Worksheet]:
        """Name-keyed view of the sheets (a new dict; sheets are shared)."""
        return dict(self._sheets)

    @property
    def sheet_names(self) -> List[str]:
        return list(self._sheets)

    def get_sheet(self, name: str) -> Optional[Worksheet]:
        return self._sheets.get(name)

    def has_sheet(self, name: str) -> bool:
        return name in self._sheets

    def add_sheet(self, sheet: Worksheet) -> "Workbook":
        """Add a sheet, replacing any sheet with the same name in place.

        The first sheet added to a workbook becomes the active sheet.
        """
        self._sheets[sheet.name] = sheet
        if self.active_sheet_name is None:
            self.active_sheet_name = sheet.name
        return self

    def remove_sheet(self, name: str) -> "Workbook":
        """Remove a sheet by name; unknown names are ignored.

        Removing the active sheet activates the first remaining sheet, or
        clears the activation when no sheets remain.
        """
        if name not in self._sheets:
            return self

        del self._sheets[name]
        if self.active_sheet_name == name:
            self.active_sheet_name = next(iter(self._sheets), None)
        return self

    def rename_sheet(self, old_name: str, new_name: str) -> "Workbook":
        """Rename a sheet, keeping its position and activation.

        Raises:
            SheetNotFoundError: If ``old_name`` does not exist
            ValueError: If ``new_name`` is empty or already used by another sheet
        """
        if old_name not in self._sheets:
            raise SheetNotFoundError(old_name)
        if not new_name or not isinstance(new_name, str):
            raise ValueError("Sheet name must be a non-empty string")
        if new_name != old_name and new_name in self._sheets:
            raise ValueError(f'Sheet "{new_name}" already exists.')

        renamed: Dict[str, Worksheet] = {}
        for name, sheet in self._sheets.items():
            if name == old_name:
                sheet.name = new_name
                name = new_name
            renamed[name] = sheet
        self._sheets = renamed

        if self.active_sheet_name == old_name:
            self.active_sheet_name = new_name
        return self

    def set_active_sheet(self, name: str) -> "Workbook":
        """Activate a sheet by name.

        Raises:
            SheetNotFoundError: If no sheet has that name
        """
        if name not in self._sheets:
            raise SheetNotFoundError(name)
        self.active_sheet_name = name
        return self

    def get_active_sheet(self) -> Worksheet:
        """Return the active sheet.

        Raises:
            NoActiveSheetError: If the workbook has no sheets
        """
        if self.active_sheet_name is None:
            raise NoActiveSheetError("No active sheet has been set.")
        return self._sheets[self.active_sheet_name]

    def create_sheet(
        self,
        name: str,
        rows: Optional[Iterable[RowLike]] = None,
        is_associative: bool = False,
    ) -> Worksheet:
        """Create a sheet, add it to the workbook and return it."""
        sheet = Worksheet(name, rows, is_associative)
        self.add_sheet(sheet)
        return sheet

    def copy(self) -> "Workbook":
        """Deep copy: every sheet is copied, activation is preserved."""
        result = Workbook(sheet.copy() for sheet in self._sheets.values())
        result.active_sheet_name = self.active_sheet_name
        return result

    @classmethod
    def from_dict(cls, data: Mapping[str, Iterable[RowLike]]) -> "Workbook":
        """Build a workbook of indexed sheets from ``{name: rows}``.

        Whether a sheet was associative cannot be recovered from bare rows, so
        every sheet is created indexed.
        """
        workbook = cls()
        for name, rows in data.items():
            workbook.create_sheet(name, rows)
        return workbook

    def to_dict(self) -> Dict[str, List[Union[List[Any], Row]]]:
        """Return ``{name: rows}``.

        Rows with contiguous integer keys are rendered as lists, other rows as
        dicts.
        """
        return {
            name: [_row_for_export(row) for row in sheet._rows]
            for name, sheet in self._sheets.items()
        }

    def __len__(self) -> int:
        return len(self._sheets)

    def __iter__(self) -> Iterator[Worksheet]:
        return iter(list(self._sheets.values()))

    def __contains__(self, name: object) -> bool:
        return name in self._sheets

    def __repr__(self) -> str:
        return f"Workbook(sheets={self.sheet_names!r}, active={self.active_sheet_name!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Workbook):
            return NotImplemented
        return (
            self.sheet_names == other.sheet_names
            and self.active_sheet_name == other.active_sheet_name
            and all(self._sheets[n] == other._sheets[n] for n in self._sheets)
        )
