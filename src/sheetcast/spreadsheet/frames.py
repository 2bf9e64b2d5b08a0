"""
pandas interop for worksheets.

Converts between Worksheet/Workbook objects and pandas DataFrames. Missing
values (NaN, NaT, pd.NA) become None and numpy scalars become plain Python
scalars, so frames can be fed straight into the caster and the format handlers.
"""

from typing import Any, Dict, List, Mapping

import pandas as pd

from sheetcast.spreadsheet.model import Workbook, Worksheet


def _python_rows(frame: pd.DataFrame) -> List[List[Any]]:
    values = frame.astype(object).where(pd.notna(frame), None)
    return values.values.tolist()


def to_dataframe(sheet: Worksheet) -> pd.DataFrame:
    """Convert a worksheet to a DataFrame.

    For indexed sheets row 0 supplies the column labels; for associative sheets
    the columns are the union of keys across rows. Missing cells become None.

    Args:
        sheet: The worksheet to convert

    Returns:
        DataFrame with one row per data row
    """
    if sheet.is_associative:
        columns = sheet.get_header_row()
        records = [[row.get(col) for col in columns] for row in sheet.get_data_rows()]
        return pd.DataFrame(records, columns=columns)

    grid = sheet.to_grid()
    if not grid:
        return pd.DataFrame()

    header = grid[0]
    width = max(len(row) for row in grid)
    columns = [
        header[i] if i < len(header) and header[i] is not None else i
        for i in range(width)
    ]
    data = [row + [None] * (width - len(row)) for row in grid[1:]]
    return pd.DataFrame(data, columns=columns)


def from_dataframe(frame: pd.DataFrame, name: str, associative: bool = False) -> Worksheet:
    """Build a worksheet from a DataFrame.

    Args:
        frame: Source frame; its index is not exported
        name: Name of the new sheet
        associative: Build an associative sheet (records keyed by column label)
                     instead of an indexed one with a header row

    Returns:
        New Worksheet
    """
    columns = [str(col) for col in frame.columns]
    rows = _python_rows(frame)

    if associative:
        return Worksheet(name, [dict(zip(columns, row)) for row in rows], is_associative=True)
    return Worksheet(name, [columns] + rows)


def workbook_to_dataframes(workbook: Workbook) -> Dict[str, pd.DataFrame]:
    """Convert every sheet of a workbook, keyed by sheet name."""
    return {sheet.name: to_dataframe(sheet) for sheet in workbook}


def workbook_from_dataframes(
    frames: Mapping[str, pd.DataFrame], associative: bool = False
) -> Workbook:
    """Build a workbook with one sheet per frame, in mapping order."""
    return Workbook(
        from_dataframe(frame, name, associative=associative)
        for name, frame in frames.items()
    )
