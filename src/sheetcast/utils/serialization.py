"""
Workbook snapshot utilities.

Provides JSON serialization and deserialization of whole workbooks. Unlike the
JSON format handler, a snapshot keeps everything the model knows: sheet order,
the active sheet and whether each sheet is associative. The serialized format
includes versioning for forward compatibility.
"""

import json
from typing import Any, Dict, Optional

from ..casting.caster import Caster
from ..spreadsheet.model import Workbook, Worksheet


# Current serialization format version
SERIALIZATION_VERSION = "1.0"


def serialize(workbook: Workbook, caster: Optional[Caster] = None) -> Dict[str, Any]:
    """Serialize a workbook to a JSON-serializable dictionary.

    The serialized format includes:
    - version: Format version string for forward compatibility
    - active_sheet: Name of the active sheet (or None)
    - sheets: List of {name, is_associative, rows} in workbook order

    Indexed rows are stored as lists, so gaps in their keys come back as None.

    Args:
        workbook: The workbook to serialize
        caster: When given, cell values are canonicalized first so that
                datetimes and other rich values survive ``json.dumps``

    Returns:
        Dictionary that can be serialized to JSON

    Raises:
        TypeError: If workbook is not a Workbook instance
    """
    if not isinstance(workbook, Workbook):
        raise TypeError(f"Expected Workbook, got {type(workbook)}")

    if caster is not None:
        workbook = caster.cast_before_dump(workbook)

    return {
        "version": SERIALIZATION_VERSION,
        "active_sheet": workbook.active_sheet_name,
        "sheets": [
            {
                "name": sheet.name,
                "is_associative": sheet.is_associative,
                "rows": sheet.rows if sheet.is_associative else sheet.to_grid(),
            }
            for sheet in workbook
        ],
    }


def deserialize(data: Dict[str, Any], caster: Optional[Caster] = None) -> Workbook:
    """Deserialize a workbook from a dictionary.

    Args:
        data: Dictionary containing serialized workbook data
        caster: When given, cell values are cast to their rich types

    Returns:
        Reconstructed Workbook instance

    Raises:
        ValueError: If data is missing required fields or has invalid structure
        TypeError: If data is not a dictionary
    """
    if not isinstance(data, dict):
        raise TypeError(f"Expected dict, got {type(data)}")

    if "version" not in data:
        raise ValueError("Serialized workbook must have 'version' field")
    if "sheets" not in data:
        raise ValueError("Serialized workbook must have 'sheets' field")

    version = data["version"]
    if version != SERIALIZATION_VERSION:
        raise ValueError(
            f"Unsupported serialization version: {version}. "
            f"Expected {SERIALIZATION_VERSION}"
        )

    workbook = Workbook()
    try:
        for entry in data["sheets"]:
            workbook.add_sheet(Worksheet(
                entry["name"],
                entry.get("rows", []),
                bool(entry.get("is_associative", False)),
            ))
    except KeyError as e:
        raise ValueError(f"Missing required field in sheet: {e}") from e
    except TypeError as e:
        raise ValueError(f"Invalid sheet entry: {e}") from e

    active = data.get("active_sheet")
    if active is not None:
        if not workbook.has_sheet(active):
            raise ValueError(f"Active sheet {active!r} is not among the serialized sheets")
        workbook.set_active_sheet(active)

    if caster is not None:
        workbook = caster.cast_after_load(workbook)
    return workbook


def to_json(workbook: Workbook, caster: Optional[Caster] = None, **kwargs) -> str:
    """Serialize a workbook to a JSON string.

    Args:
        workbook: The workbook to serialize
        caster: Optional caster, see ``serialize``
        **kwargs: Additional arguments to pass to json.dumps (e.g., indent=2)

    Returns:
        JSON string representation of the workbook
    """
    data = serialize(workbook, caster)
    return json.dumps(data, **kwargs)


def from_json(json_str: str, caster: Optional[Caster] = None) -> Workbook:
    """Deserialize a workbook from a JSON string.

    Args:
        json_str: JSON string containing a serialized workbook
        caster: Optional caster, see ``deserialize``

    Returns:
        Reconstructed Workbook instance

    Raises:
        ValueError: If JSON is invalid or the workbook structure is invalid
    """
    if not isinstance(json_str, str):
        raise TypeError(f"Expected str, got {type(json_str)}")

    try:
        data = json.loads(json_str)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON: {e}") from e

    return deserialize(data, caster)
