"""
Workbook value caster.

The Caster converts every cell of a workbook in one direction:

- ``cast_after_load``: raw strings and numbers read by a format handler become
  rich values (None, bool, int, float, UTC datetime, list, dict)
- ``cast_before_dump``: rich values become the canonical strings and numbers a
  format handler writes

Both directions work on a deep copy, so the workbook passed in is never
modified, and neither direction raises: a value no rule recognizes is kept as
it is.
"""

import logging
from functools import partial
from typing import Any, Callable, List, Optional, Sequence

import numpy as np

from sheetcast.casting.rules import (
    DEFAULT_DATE_FORMATS,
    NO_MATCH,
    Rule,
    first_match,
    read_boolean,
    read_datetime,
    read_empty,
    read_json,
    read_non_string,
    read_number,
    write_boolean,
    write_container,
    write_datetime,
    write_null,
    write_number,
    write_stringable,
)
from sheetcast.spreadsheet.model import Workbook

logger = logging.getLogger(__name__)


class Caster:
    """Casts cell values between their stored and their rich representation.

    Usage::

        caster = Caster()
        typed = caster.cast_after_load(raw_workbook)
        raw = caster.cast_before_dump(typed)

    Attributes:
        date_formats: strptime formats tried, in order, before the permissive
                      date parser
    """

    def __init__(self, date_formats: Optional[Sequence[str]] = None) -> None:
        self.date_formats = tuple(date_formats) if date_formats is not None else DEFAULT_DATE_FORMATS

        self._read_rules: List[Rule] = [
            read_empty,
            read_non_string,
            read_number,
            read_boolean,
            partial(read_datetime, formats=self.date_formats),
            read_json,
        ]
        self._write_rules: List[Rule] = [
            write_null,
            write_boolean,
            write_datetime,
            write_stringable,
            partial(write_container, default=self._json_default),
            write_number,
        ]

    def cast_after_load(self, workbook: Workbook) -> Workbook:
        """Return a copy of ``workbook`` with every cell cast to its rich type."""
        return self._cast_workbook(workbook, self.cast_value_for_reading, "load")

    def cast_before_dump(self, workbook: Workbook) -> Workbook:
        """Return a copy of ``workbook`` with every cell in canonical form."""
        return self._cast_workbook(workbook, self.cast_value_for_writing, "dump")

    def cast_value_for_reading(self, value: Any) -> Any:
        """Infer the rich value of a single raw cell value.

        Args:
            value: A value as produced by a format handler

        Returns:
            None, bool, int, float, UTC datetime, list or dict when one of the
            rules recognizes the value, otherwise the value unchanged
        """
        return first_match(self._read_rules, value, value)

    def cast_value_for_writing(self, value: Any) -> Any:
        """Canonicalize a single rich cell value.

        Args:
            value: Any cell value

        Returns:
            A string, or the number itself for numeric values
        """
        result = first_match(self._write_rules, value, NO_MATCH)
        if result is NO_MATCH:
            return str(value)
        return result

    def _json_default(self, value: Any) -> Any:
        if isinstance(value, np.generic):
            return value.item()
        result = self.cast_value_for_writing(value)
        if result is value:
            return str(value)
        return result

    def _cast_workbook(
        self,
        workbook: Workbook,
        cast: Callable[[Any], Any],
        direction: str,
    ) -> Workbook:
        result = workbook.copy()
        for sheet in result:
            logger.debug("Casting sheet %r for %s (%d rows)", sheet.name, direction, len(sheet))
            sheet.map(lambda value, _row, _col: cast(value))
        return result
