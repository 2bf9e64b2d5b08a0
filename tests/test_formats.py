"""
Unit tests for the format handlers and the format registry.

These tests verify:
1. CsvHandler parses and writes a single indexed sheet
2. JsonHandler recognizes record lists, grids and sheet-keyed objects
3. XlsxHandler keeps sheet order, names and the active sheet
4. File helpers name sheets after files and create missing directories
5. FormatRegistry detects formats from extensions and builds fresh handlers
"""

import io
import json
import os
from datetime import datetime, timezone

import openpyxl
import pytest

from sheetcast.config import Settings
from sheetcast.exceptions import (
    DocumentNotFoundError,
    DumpError,
    LoadError,
    UnsupportedFormatError,
    UnsupportedOperationError,
)
from sheetcast.formats import CsvHandler, FormatRegistry, JsonHandler, XlsxHandler
from sheetcast.spreadsheet import Workbook, Worksheet


class TestCsvHandler:
    """Tests for CsvHandler."""

    def test_load_from_string(self):
        workbook = CsvHandler().load_from_string("name,age\nAlice,30\n")
        sheet = workbook.get_active_sheet()

        assert workbook.sheet_names == ["Sheet"]
        assert sheet.to_grid() == [["name", "age"], ["Alice", "30"]]
        assert not sheet.is_associative

    def test_values_stay_strings(self):
        sheet = CsvHandler().load_from_string("1,true,\n").get_active_sheet()

        assert sheet.to_grid() == [["1", "true", ""]]

    def test_quoted_fields(self):
        data = 'a,b\n"x, y","line1\nline2"\n'
        sheet = CsvHandler().load_from_string(data).get_active_sheet()

        assert sheet.get_row(1) == {0: "x, y", 1: "line1\nline2"}

    def test_bom_is_stripped(self):
        sheet = CsvHandler().load_from_bytes("\ufeffid\n1\n".encode("utf-8")).get_active_sheet()

        assert sheet.get_cell(0, 0) == "id"

    def test_empty_input_is_single_empty_cell(self):
        sheet = CsvHandler().load_from_string("").get_active_sheet()

        assert sheet.to_grid() == [[None]]

    def test_custom_sheet_name_and_delimiter(self):
        handler = CsvHandler(delimiter=";", sheet_name="Data")
        workbook = handler.load_from_string("a;b\n1;2\n")

        assert workbook.sheet_names == ["Data"]
        assert workbook.get_sheet("Data").get_row(1) == {0: "1", 1: "2"}
        assert handler.load_from_string("a", sheet_name="Other").sheet_names == ["Other"]

    def test_dump_to_string(self):
        workbook = Workbook([Worksheet("S", [["a", "b"], ["1", None]])])

        assert CsvHandler().dump_to_string(workbook) == "a,b\n1,\n"

    def test_dump_quotes_when_needed(self):
        workbook = Workbook([Worksheet("S", [["x, y", 'say "hi"']])])

        assert CsvHandler().dump_to_string(workbook) == '"x, y","say ""hi"""\n'

    def test_dump_associative_writes_header(self, records_sheet):
        text = CsvHandler().dump_to_string(Workbook([records_sheet]))

        assert text.splitlines()[0] == "id,name,email"
        assert text.splitlines()[2] == "2,,bob@example.com"

    def test_dump_writes_first_sheet_only(self, workbook):
        text = CsvHandler().dump_to_string(workbook)

        assert text.startswith("name,age,city\n")
        assert "Alice" in text
        assert "bob@example.com" not in text

    def test_dump_empty_workbook(self):
        assert CsvHandler().dump_to_string(Workbook()) == ""

    def test_invalid_encoding_raises_load_error(self):
        with pytest.raises(LoadError):
            CsvHandler().load_from_bytes(b"\xff\xfe\xfa")

    def test_unencodable_text_raises_dump_error(self):
        workbook = Workbook([Worksheet("S", [["ñ"]])])

        with pytest.raises(DumpError):
            CsvHandler(encoding="ascii").dump_to_bytes(workbook)


class TestJsonHandler:
    """Tests for JsonHandler."""

    def test_list_of_objects_is_associative(self):
        workbook = JsonHandler().load_from_string('[{"a": 1}, {"a": 2, "b": "x"}]')
        sheet = workbook.get_active_sheet()

        assert sheet.is_associative
        assert sheet.name == "Sheet"
        assert sheet.get_header_row() == ["a", "b"]

    def test_list_of_lists_is_indexed(self):
        sheet = JsonHandler().load_from_string('[["a", "b"], [1, 2]]').get_active_sheet()

        assert not sheet.is_associative
        assert sheet.to_grid() == [["a", "b"], [1, 2]]

    def test_list_of_scalars_is_one_row(self):
        sheet = JsonHandler().load_from_string("[1, 2, 3]").get_active_sheet()

        assert sheet.to_grid() == [[1, 2, 3]]

    def test_object_keyed_by_sheet_name(self):
        data = {"People": [{"name": "Alice"}], "Grid": [["x"], [1]], "Skipped": 5}
        workbook = JsonHandler().load_from_string(json.dumps(data))

        assert workbook.sheet_names == ["People", "Grid"]
        assert workbook.get_sheet("People").is_associative
        assert not workbook.get_sheet("Grid").is_associative
        assert workbook.active_sheet_name == "People"

    def test_object_member_holding_one_record(self):
        workbook = JsonHandler().load_from_string('{"Config": {"debug": true}}')

        assert workbook.get_sheet("Config").rows == [{"debug": True}]

    def test_lone_object_is_one_record(self):
        workbook = JsonHandler().load_from_string('{"name": "Alice", "age": 30}')
        sheet = workbook.get_active_sheet()

        assert sheet.is_associative
        assert sheet.rows == [{"name": "Alice", "age": 30}]

    def test_scalar_is_one_cell(self):
        sheet = JsonHandler().load_from_string('"hello"').get_active_sheet()

        assert sheet.to_grid() == [["hello"]]

    def test_empty_list_is_empty_sheet(self):
        workbook = JsonHandler().load_from_string("[]")

        assert len(workbook.get_sheet("Sheet")) == 0

    def test_invalid_json_raises_load_error(self):
        with pytest.raises(LoadError, match="Invalid JSON"):
            JsonHandler().load_from_string("{not json")

    def test_single_associative_sheet_dumps_as_records(self, records_sheet):
        text = JsonHandler(indent=0).dump_to_string(Workbook([records_sheet]))

        assert json.loads(text) == records_sheet.rows
        assert "\n" not in text

    def test_multiple_sheets_dump_as_object(self, workbook):
        decoded = json.loads(JsonHandler().dump_to_string(workbook))

        assert list(decoded) == ["People", "Records"]
        assert decoded["People"][0] == ["name", "age", "city"]
        assert decoded["Records"][1] == {"id": 2, "email": "bob@example.com"}

    def test_dump_keeps_non_ascii(self):
        text = JsonHandler().dump_to_string(Workbook([Worksheet("S", [["año"]])]))

        assert "año" in text

    def test_dump_unencodable_value_raises(self):
        with pytest.raises(DumpError):
            JsonHandler().dump_to_string(Workbook([Worksheet("S", [[object()]])]))


class TestXlsxHandler:
    """Tests for XlsxHandler."""

    def test_round_trip_keeps_sheets_and_values(self):
        workbook = Workbook([
            Worksheet("People", [["name", "age"], ["Alice", 30], ["Bob", 2.5]]),
            Worksheet("Flags", [["on"], [True]]),
        ])
        handler = XlsxHandler()

        result = handler.load_from_bytes(handler.dump_to_bytes(workbook))

        assert result.sheet_names == ["People", "Flags"]
        assert result.get_sheet("People").to_grid() == [["name", "age"], ["Alice", 30], ["Bob", 2.5]]
        assert result.get_sheet("Flags").get_cell(1, 0) is True

    def test_active_sheet_is_kept(self, workbook):
        workbook.set_active_sheet("Records")
        handler = XlsxHandler()

        result = handler.load_from_bytes(handler.dump_to_bytes(workbook))

        assert result.active_sheet_name == "Records"

    def test_associative_sheet_written_with_header(self, records_sheet):
        handler = XlsxHandler()

        result = handler.load_from_bytes(handler.dump_to_bytes(Workbook([records_sheet])))

        assert result.get_sheet("Records").get_header_row() == ["id", "name", "email"]

    def test_empty_workbook_still_writes_a_sheet(self):
        handler = XlsxHandler(sheet_name="Blank")

        result = handler.load_from_bytes(handler.dump_to_bytes(Workbook()))

        assert result.sheet_names == ["Blank"]

    def test_strings_starting_with_equals_stay_text(self):
        workbook = Workbook([Worksheet("S", [["h"], ["=SUM(1,2)"], ["="]])])
        handler = XlsxHandler()

        result = handler.load_from_bytes(handler.dump_to_bytes(workbook))

        assert result.get_sheet("S").to_grid() == [["h"], ["=SUM(1,2)"], ["="]]

    def test_date_cells_are_read_as_utc(self):
        book = openpyxl.Workbook()
        book.active.title = "Log"
        book.active.append(["when"])
        book.active.append([datetime(2024, 1, 15, 10, 30)])
        buffer = io.BytesIO()
        book.save(buffer)

        result = XlsxHandler().load_from_bytes(buffer.getvalue())

        assert result.get_sheet("Log").get_cell(1, 0) == datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)

    def test_invalid_data_raises_load_error(self):
        with pytest.raises(LoadError):
            XlsxHandler().load_from_bytes(b"this is not a zip archive")

    def test_invalid_sheet_title_raises_dump_error(self):
        with pytest.raises(DumpError):
            XlsxHandler().dump_to_bytes(Workbook([Worksheet("a/b", [["x"]])]))

    def test_string_operations_are_unsupported(self):
        handler = XlsxHandler()

        with pytest.raises(UnsupportedOperationError):
            handler.load_from_string("data")
        with pytest.raises(UnsupportedOperationError):
            handler.dump_to_string(Workbook())


class TestFileOperations:
    """Tests for the file helpers shared by all handlers."""

    def test_load_from_file_names_sheet_after_file(self, tmp_path):
        path = tmp_path / "inventory.csv"
        path.write_text("sku,qty\nA1,4\n", encoding="utf-8")

        workbook = CsvHandler().load_from_file(path)

        assert workbook.sheet_names == ["inventory"]

    def test_load_missing_file_raises(self, tmp_path):
        missing = tmp_path / "missing.csv"

        with pytest.raises(DocumentNotFoundError) as exc_info:
            CsvHandler().load_from_file(missing)

        assert exc_info.value.path == str(missing)
        assert isinstance(exc_info.value, FileNotFoundError)

    def test_load_directory_raises(self, tmp_path):
        with pytest.raises(DocumentNotFoundError):
            JsonHandler().load_from_file(tmp_path)

    def test_dump_to_file_creates_directories(self, tmp_path, workbook):
        target = tmp_path / "nested" / "dir" / "out.json"

        written = JsonHandler().dump_to_file(workbook, target)

        assert written == str(target)
        assert json.loads(target.read_text(encoding="utf-8"))["People"][1][0] == "Alice"

    def test_dump_to_temporary_file(self, workbook):
        written = XlsxHandler().dump_to_file(workbook)

        try:
            assert written.endswith(".xlsx")
            assert os.path.getsize(written) > 0
        finally:
            os.remove(written)


class TestFormatRegistry:
    """Tests for FormatRegistry."""

    def test_default_formats(self, registry):
        assert registry.supported_formats() == ["csv", "json", "xlsx"]
        assert repr(registry) == "FormatRegistry(formats=['csv', 'json', 'xlsx'])"

    @pytest.mark.parametrize("filename,expected", [
        ("report.xlsx", "xlsx"),
        ("data/REPORT.CSV", "csv"),
        ("archive.tar.json", "json"),
    ])
    def test_detect_format(self, registry, filename, expected):
        assert registry.detect_format(filename) == expected

    def test_detect_without_extension_raises(self, registry):
        with pytest.raises(UnsupportedFormatError, match="Could not detect extension"):
            registry.detect_format("README")

    def test_detect_unknown_extension_raises(self, registry):
        with pytest.raises(UnsupportedFormatError, match='"ods" is not supported'):
            registry.detect_format("sheet.ods")

    @pytest.mark.parametrize("target,handler_type", [
        ("csv", CsvHandler),
        (".JSON", JsonHandler),
        ("book.xlsx", XlsxHandler),
    ])
    def test_resolve(self, registry, target, handler_type):
        assert isinstance(registry.resolve(target), handler_type)

    def test_override_wins_over_extension(self, registry):
        assert isinstance(registry.resolve("export.txt", "csv"), CsvHandler)
        assert isinstance(registry.resolve("export.csv", "json"), JsonHandler)

    def test_unknown_override_raises(self, registry):
        with pytest.raises(UnsupportedFormatError):
            registry.resolve("export.csv", "ods")

    def test_resolve_returns_fresh_handlers(self, registry):
        assert registry.resolve("csv") is not registry.resolve("csv")

    def test_register_custom_format(self, registry):
        registry.register(".TSV", lambda: CsvHandler(delimiter="\t"))

        handler = registry.resolve("table.tsv")

        assert handler.delimiter == "\t"
        assert "tsv" in registry

    def test_register_empty_identifier_raises(self, registry):
        with pytest.raises(ValueError):
            registry.register(" . ", CsvHandler)

    def test_contains(self, registry):
        assert "CSV" in registry
        assert "ods" not in registry
        assert 3 not in registry

    def test_handlers_follow_settings(self):
        settings = Settings(_env_file=None, csv_delimiter=";", default_sheet_name="Data", json_indent=0)
        registry = FormatRegistry.with_default_handlers(settings)

        csv_handler = registry.resolve("csv")

        assert csv_handler.delimiter == ";"
        assert csv_handler.sheet_name == "Data"
        assert registry.resolve("json").indent == 0
