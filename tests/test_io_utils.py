"""
Tests for data_cleaner/utils/io_utils.py
"""
import io
import json

import openpyxl
import pytest

from data_cleaner.exceptions import LoadError
from data_cleaner.utils.io_utils import (
    read_table, to_csv_text, to_excel_bytes, to_json_bytes,
)
from data_cleaner.utils.table_utils import make_table, table_to_records


class TestReadTable:
    def test_csv(self):
        table, headers = read_table(b"name,age\nAnn,30\nBob,\n", "people.csv")
        assert headers == ["name", "age"]
        assert table_to_records(table, headers) == [
            {"name": "Ann", "age": 30},
            {"name": "Bob", "age": None},
        ]

    def test_na_text_is_kept(self):
        table, headers = read_table(b"a\nNA\nnull\n", "x.csv")
        assert table["a"].tolist() == ["NA", "null"]

    def test_na_text_is_kept_in_workbooks(self):
        workbook = openpyxl.Workbook()
        sheet = workbook.active
        for value in ("a", "NA", "null", "N/A"):
            sheet.append([value])
        buf = io.BytesIO()
        workbook.save(buf)

        table, headers = read_table(buf.getvalue(), "x.xlsx")
        assert headers == ["a"]
        assert table["a"].tolist() == ["NA", "null", "N/A"]

    def test_latin1_fallback(self):
        data = "name\nJosé\n".encode("latin-1")
        table, _ = read_table(data, "x.csv")
        assert table["name"].tolist() == ["José"]

    def test_empty_file(self):
        with pytest.raises(LoadError):
            read_table(b"", "x.csv")

    def test_header_only(self):
        with pytest.raises(LoadError, match="no data rows"):
            read_table(b"a,b\n", "x.csv")

    def test_unsupported_extension(self):
        with pytest.raises(LoadError, match="Unsupported"):
            read_table(b"whatever", "x.pdf")

    def test_broken_workbook(self):
        with pytest.raises(LoadError):
            read_table(b"not a zip file", "x.xlsx")


class TestCsvExport:
    def test_every_field_quoted(self):
        table = make_table([{"name": 'Say "hi"', "note": None}], ["name", "note"])
        assert to_csv_text(table, ["name", "note"]) == '"name","note"\n"Say ""hi""",""'

    def test_cell_rendering(self):
        table = make_table([{"a": 0, "b": False, "c": 2.5}], ["a", "b", "c"])
        assert to_csv_text(table, ["a", "b", "c"]).split("\n")[1] == '"0","false","2.5"'

    def test_header_order(self):
        table = make_table([{"a": 1, "b": 2}], ["a", "b"])
        assert to_csv_text(table, ["b", "a"]).split("\n")[0] == '"b","a"'


class TestJsonExport:
    def test_records(self):
        table = make_table([{"a": 1, "b": "x"}, {"a": None}], ["a", "b"])
        payload = to_json_bytes(table, ["a", "b"])
        assert json.loads(payload) == [{"a": 1, "b": "x"}, {"a": None, "b": None}]
        assert b'\n  {' in payload


class TestExcelExport:
    def test_sheet_name_and_values(self):
        table = make_table([{"name": "Ann", "age": 31}, {"name": "Bob", "age": None}], ["name", "age"])
        payload = to_excel_bytes(table, ["name", "age"])

        workbook = openpyxl.load_workbook(io.BytesIO(payload))
        assert workbook.sheetnames == ["Cleaned Data"]

        loaded, headers = read_table(payload, "out.xlsx")
        assert headers == ["name", "age"]
        assert table_to_records(loaded, headers) == [
            {"name": "Ann", "age": 31},
            {"name": "Bob", "age": None},
        ]
