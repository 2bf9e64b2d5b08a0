"""
Utility functions for sheetcast.

This module provides utilities for working with workbooks:
- visualization: Text rendering of workbooks and sheet previews
- serialization: Versioned JSON snapshots of workbooks
"""

from .visualization import visualize, preview
from .serialization import (
    serialize,
    deserialize,
    to_json,
    from_json,
    SERIALIZATION_VERSION
)

__all__ = [
    'visualize',
    'preview',
    'serialize',
    'deserialize',
    'to_json',
    'from_json',
    'SERIALIZATION_VERSION'
]
