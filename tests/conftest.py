"""Shared pytest configuration and fixtures for sheetcast tests."""

import pandas as pd
import pytest

from sheetcast.casting import Caster
from sheetcast.config import Settings
from sheetcast.formats import FormatRegistry
from sheetcast.spreadsheet import Workbook, Worksheet


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None)


@pytest.fixture
def caster() -> Caster:
    return Caster()


@pytest.fixture
def registry(settings: Settings) -> FormatRegistry:
    return FormatRegistry.with_default_handlers(settings)


@pytest.fixture
def employees() -> pd.DataFrame:
    return pd.DataFrame({
        "name": ["Alice", "Bob", "Charlie", "Diana"],
        "age": [30, 45, 28, 35],
        "dept": ["eng", "eng", "sales", "hr"],
        "salary": [90000.5, 120000.0, 65000.25, 95000.0],
    })


@pytest.fixture
def people_sheet() -> Worksheet:
    """Indexed sheet with a header row and three data rows."""
    return Worksheet("People", [
        ["name", "age", "city"],
        ["Alice", 30, "Paris"],
        ["Bob", 25, "Lima"],
        ["Carol", 41, "Oslo"],
    ])


@pytest.fixture
def records_sheet() -> Worksheet:
    """Associative sheet whose rows do not share the same keys."""
    return Worksheet("Records", [
        {"id": 1, "name": "Alice"},
        {"id": 2, "email": "bob@example.com"},
        {"name": "Carol", "id": 3},
    ], is_associative=True)


@pytest.fixture
def workbook(people_sheet: Worksheet, records_sheet: Worksheet) -> Workbook:
    return Workbook([people_sheet, records_sheet])
