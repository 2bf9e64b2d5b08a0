"""
Cell value coercion rules.

Each rule inspects a single cell value and returns either a converted value or
the ``NO_MATCH`` sentinel. ``None`` is a legitimate result (an empty cell), so
rules cannot use it to signal "not applicable". Rules are chained with
``first_match``; the order of a chain matters because the checks overlap (a
numeric string would also parse as a date with the permissive parser).

Reading rules turn raw strings into rich values; writing rules turn rich values
into the strings and numbers that format handlers store. No rule raises.
"""

import json
import numbers
import re
from datetime import date, datetime, time, timezone
from typing import Any, Callable, Iterable, Sequence

import numpy as np
from dateutil import parser as date_parser


class _NoMatch:
    """Sentinel type returned by a rule that does not apply."""

    _instance = None

    def __new__(cls) -> "_NoMatch":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "NO_MATCH"

    def __bool__(self) -> bool:
        return False


NO_MATCH = _NoMatch()

Rule = Callable[[Any], Any]

# Most common formats first.
DEFAULT_DATE_FORMATS = (
    "%Y-%m-%d",              # 2024-12-31
    "%d/%m/%Y",              # 31/12/2024
    "%Y-%m-%d %H:%M:%S",     # 2024-12-31 23:59:59
    "%d/%m/%Y %H:%M:%S",     # 31/12/2024 23:59:59
    "%Y-%m-%dT%H:%M:%S",     # 2024-12-31T23:59:59
    "%Y-%m-%dT%H:%M:%S%z",   # 2024-12-31T23:59:59+00:00
)

DATE_FORMAT = "%Y-%m-%d"
DATETIME_FORMAT = "%Y-%m-%dT%H:%M:%S"

# Locale-independent: ASCII digits only, no thousands separators, no inf/nan,
# no underscores.
_NUMERIC_RE = re.compile(r"^\s*[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?\s*$", re.ASCII)

_MIN_DATE_LENGTH = 6


def first_match(rules: Iterable[Rule], value: Any, default: Any) -> Any:
    """Return the result of the first rule that matches ``value``, else ``default``."""
    for rule in rules:
        result = rule(value)
        if result is not NO_MATCH:
            return result
    return default


def is_numeric_string(value: str) -> bool:
    return bool(_NUMERIC_RE.match(value))


def to_utc(value: datetime) -> datetime:
    """Normalize to an aware UTC datetime; naive values are taken as UTC."""
    if value.tzinfo is None or value.tzinfo.utcoffset(value) is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


# Reading rules

def read_empty(value: Any) -> Any:
    if value is None or (isinstance(value, str) and value == ""):
        return None
    return NO_MATCH


def read_non_string(value: Any) -> Any:
    """Pass through everything that is not a string.

    This covers scalars a handler already typed (bool, int, float, datetime from
    xlsx), decoded containers (list, dict) and opaque objects alike.
    """
    if not isinstance(value, str):
        return value
    return NO_MATCH


def read_number(value: str) -> Any:
    if not is_numeric_string(value):
        return NO_MATCH
    try:
        as_int = int(value)
    except ValueError:
        return float(value)
    if str(as_int) == value:
        return as_int
    return float(value)


def read_boolean(value: str) -> Any:
    lowered = value.lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    return NO_MATCH


def read_datetime(value: str, formats: Sequence[str] = DEFAULT_DATE_FORMATS) -> Any:
    """Parse a date/time string into an aware UTC datetime.

    The explicit ``formats`` are tried first with strict ``strptime`` (the whole
    string must match and every field must be in range). When none of them
    matches, dateutil's permissive parser gets a chance.
    """
    if len(value) < _MIN_DATE_LENGTH or is_numeric_string(value):
        return NO_MATCH

    parsed = None
    for fmt in formats:
        try:
            parsed = datetime.strptime(value, fmt)
        except ValueError:
            continue
        break

    if parsed is None:
        try:
            parsed = date_parser.parse(value)
        except (ValueError, OverflowError, TypeError):
            return NO_MATCH

    try:
        return to_utc(parsed)
    except OverflowError:
        # Offsets can push instants near datetime.min/max out of range.
        return NO_MATCH


def read_json(value: str) -> Any:
    if not value or value[0] not in "{[":
        return NO_MATCH
    try:
        decoded = json.loads(value)
    except (ValueError, RecursionError):
        return NO_MATCH
    if isinstance(decoded, (list, dict)):
        return decoded
    return NO_MATCH


# Writing rules

def write_null(value: Any) -> Any:
    if value is None:
        return ""
    return NO_MATCH


def write_boolean(value: Any) -> Any:
    if isinstance(value, (bool, np.bool_)):
        return "true" if value else "false"
    return NO_MATCH


def write_datetime(value: Any) -> Any:
    """Format dates as ``YYYY-MM-DD`` and other instants as ``YYYY-MM-DDTHH:MM:SS``.

    Aware datetimes are converted to UTC first. Fractional seconds are dropped
    from the output but still count when deciding whether the time is midnight.
    """
    if isinstance(value, datetime):
        try:
            if value.tzinfo is not None and value.tzinfo.utcoffset(value) is not None:
                value = value.astimezone(timezone.utc)
            if value.time() == time(0, 0):
                return value.strftime(DATE_FORMAT)
            return value.strftime(DATETIME_FORMAT)
        except (ValueError, OverflowError):
            # NaT and friends
            return NO_MATCH
    if isinstance(value, date):
        return value.strftime(DATE_FORMAT)
    return NO_MATCH


def _has_own_str(value: Any) -> bool:
    return type(value).__str__ is not object.__str__


def write_stringable(value: Any) -> Any:
    if isinstance(value, (str, bytes, numbers.Number, list, tuple, dict, np.generic)):
        return NO_MATCH
    if _has_own_str(value):
        return str(value)
    return NO_MATCH


def write_container(value: Any, default: Callable[[Any], Any]) -> Any:
    """JSON-encode lists, tuples and dicts.

    ``default`` canonicalizes nested values json cannot encode by itself.
    Values that still cannot be encoded (circular structures, non-string keys
    json rejects) fall back to ``str()``.
    """
    if not isinstance(value, (list, tuple, dict)):
        return NO_MATCH
    try:
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False, default=default)
    except (TypeError, ValueError, RecursionError):
        return str(value)


def write_number(value: Any) -> Any:
    if isinstance(value, numbers.Number):
        return value
    return NO_MATCH
