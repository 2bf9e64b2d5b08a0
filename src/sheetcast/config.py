"""Configuration for sheetcast.

Settings are read from environment variables with the SHEETCAST_ prefix, or
from a .env file in the working directory.

Environment Variables:
    SHEETCAST_DEFAULT_FORMAT: Format used when none can be detected (default: xlsx)
    SHEETCAST_DEFAULT_SHEET_NAME: Sheet name for single-sheet formats (default: Sheet)
    SHEETCAST_CSV_DELIMITER: CSV field delimiter (default: ,)
    SHEETCAST_CSV_QUOTECHAR: CSV quote character (default: ")
    SHEETCAST_JSON_INDENT: Indentation of dumped JSON, 0 for compact (default: 4)
    SHEETCAST_ENCODING: Text encoding for text formats (default: utf-8)
"""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Library settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="SHEETCAST_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    default_format: str = "xlsx"
    """Format identifier used when a loader or dumper gets no explicit format."""

    default_sheet_name: str = "Sheet"
    """Sheet name for formats that cannot store one (CSV, bare JSON lists)."""

    csv_delimiter: str = ","
    csv_quotechar: str = '"'

    json_indent: int = 4
    """Indentation for dumped JSON. 0 writes compact output."""

    encoding: str = "utf-8"

    @field_validator("default_format")
    @classmethod
    def normalize_format(cls, v: str) -> str:
        return v.strip().lstrip(".").lower()

    @field_validator("csv_delimiter", "csv_quotechar")
    @classmethod
    def single_character(cls, v: str) -> str:
        if len(v) != 1:
            raise ValueError("must be a single character")
        return v

    @field_validator("default_sheet_name")
    @classmethod
    def non_empty(cls, v: str) -> str:
        if not v:
            raise ValueError("must not be empty")
        return v


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings, loaded once."""
    return Settings()
