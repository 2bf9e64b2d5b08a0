"""
Workbook visualization utilities.

Provides text renderings for quick inspection: a tree of the sheets in a
workbook and a fixed-width table preview of a single sheet.
"""

from typing import Any, List

from ..spreadsheet.model import Workbook, Worksheet

_MAX_CELL_WIDTH = 24


def visualize(workbook: Workbook) -> str:
    """Generate a text tree of the sheets in a workbook.

    Args:
        workbook: The workbook to visualize

    Returns:
        A string with one line for the workbook and one per sheet

    Example:
        >>> wb = Workbook.from_dict({"People": [["name"], ["Ada"]], "Empty": []})
        >>> print(visualize(wb))
        Workbook(sheets=2)
        ├── People [indexed, 2 rows] *
        └── Empty [indexed, 0 rows]
    """
    if not isinstance(workbook, Workbook):
        raise TypeError(f"Expected Workbook, got {type(workbook)}")

    lines = [f"Workbook(sheets={len(workbook)})"]
    sheets = list(workbook)
    for index, sheet in enumerate(sheets):
        connector = "└── " if index == len(sheets) - 1 else "├── "
        lines.append(connector + _format_sheet(sheet, sheet.name == workbook.active_sheet_name))
    return "\n".join(lines)


def _format_sheet(sheet: Worksheet, active: bool) -> str:
    kind = "associative" if sheet.is_associative else "indexed"
    noun = "row" if len(sheet) == 1 else "rows"
    desc = f"{sheet.name} [{kind}, {len(sheet)} {noun}]"
    return desc + " *" if active else desc


def _format_cell(value: Any) -> str:
    text = "" if value is None else str(value)
    text = text.replace("\n", " ")
    if len(text) > _MAX_CELL_WIDTH:
        return text[:_MAX_CELL_WIDTH - 1] + "…"
    return text


def preview(sheet: Worksheet, max_rows: int = 10) -> str:
    """Render the first rows of a sheet as a fixed-width table.

    The header (row 0 of an indexed sheet, the column names of an associative
    sheet) is separated from the data by a rule. Long values are truncated.

    Args:
        sheet: The sheet to render
        max_rows: Maximum number of data rows shown

    Returns:
        The table as a string; a trailing line counts omitted rows
    """
    grid = sheet.to_grid()
    if not grid:
        return f"{sheet.name}: (empty)"

    header, data = grid[0], grid[1:]
    shown = data[:max_rows]
    width = max(len(row) for row in [header] + shown)

    table: List[List[str]] = [
        [_format_cell(row[i]) if i < len(row) else "" for i in range(width)]
        for row in [header] + shown
    ]
    widths = [max(len(row[i]) for row in table) for i in range(width)]

    def line(cells: List[str]) -> str:
        return " | ".join(cell.ljust(w) for cell, w in zip(cells, widths)).rstrip()

    lines = [line(table[0]), "-+-".join("-" * w for w in widths)]
    lines.extend(line(row) for row in table[1:])
    if len(data) > len(shown):
        lines.append(f"... {len(data) - len(shown)} more rows")
    return "\n".join(lines)
