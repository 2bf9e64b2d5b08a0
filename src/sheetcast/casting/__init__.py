"""
Value casting module.

This module converts cell values between the raw strings/numbers stored by
document formats and the rich Python values applications work with.
"""

from sheetcast.casting.caster import Caster
from sheetcast.casting.rules import (
    DEFAULT_DATE_FORMATS,
    NO_MATCH,
    first_match,
)

__all__ = [
    "Caster",
    "DEFAULT_DATE_FORMATS",
    "NO_MATCH",
    "first_match",
]
