"""
tests/test_delimited_source.py

Row streaming for CSV/TSV feeds: header normalization, structural drops,
laziness, and access failures.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from feed_import.errors import FileAccessError
from feed_import.sources import CSVRowSource, TSVRowSource, normalize_headers


def _write(tmp_path: Path, content: str, name: str = "feed.csv", encoding: str = "utf-8") -> Path:
    path = tmp_path / name
    path.write_text(content, encoding=encoding)
    return path


class TestNormalizeHeaders:
    def test_strips_bom_whitespace_and_case(self) -> None:
        assert normalize_headers(["\ufeff GTIN ", " Title", "PRICE "]) == ["gtin", "title", "price"]

    def test_bom_only_removed_from_first_header(self) -> None:
        assert normalize_headers(["a", "\ufeffb"]) == ["a", "\ufeffb"]

    def test_empty_header_list(self) -> None:
        assert normalize_headers([]) == []


class TestCSVRowSource:
    def test_format_identifier(self) -> None:
        assert CSVRowSource().format == "csv"

    def test_yields_rows_keyed_by_normalized_header(self, tmp_path: Path) -> None:
        path = _write(tmp_path, "GTIN, Title ,Price\n123,Pen,1.50\n456,Ink,2.00\n")

        rows = list(CSVRowSource().read(path))

        assert rows == [
            {"gtin": "123", "title": "Pen", "price": "1.50"},
            {"gtin": "456", "title": "Ink", "price": "2.00"},
        ]
        assert list(rows[0].keys()) == ["gtin", "title", "price"]

    def test_byte_order_mark_is_stripped(self, tmp_path: Path) -> None:
        path = _write(tmp_path, "gtin,title\n1,A\n", encoding="utf-8-sig")

        rows = list(CSVRowSource().read(path))

        assert list(rows[0].keys()) == ["gtin", "title"]

    def test_quoted_fields_with_delimiters_quotes_and_newlines(self, tmp_path: Path) -> None:
        path = _write(
            tmp_path,
            'gtin,title,description\n1,"Pen, blue","He said ""hi""\nover two lines"\n',
        )

        rows = list(CSVRowSource().read(path))

        assert rows == [
            {"gtin": "1", "title": "Pen, blue", "description": 'He said "hi"\nover two lines'},
        ]

    def test_rows_with_wrong_field_count_are_dropped(self, tmp_path: Path) -> None:
        path = _write(tmp_path, "a,b\n1,2\n1,2,3\n4\n5,6\n")

        rows = list(CSVRowSource().read(path))

        assert rows == [{"a": "1", "b": "2"}, {"a": "5", "b": "6"}]

    def test_blank_lines_are_dropped(self, tmp_path: Path) -> None:
        path = _write(tmp_path, "a,b\n\n1,2\n   \n3,4\n")

        rows = list(CSVRowSource().read(path))

        assert rows == [{"a": "1", "b": "2"}, {"a": "3", "b": "4"}]

    def test_delimiter_only_line_is_yielded_with_empty_values(self, tmp_path: Path) -> None:
        path = _write(tmp_path, "a,b\n1,2\n,\n3,4\n")

        rows = list(CSVRowSource().read(path))

        assert rows == [{"a": "1", "b": "2"}, {"a": "", "b": ""}, {"a": "3", "b": "4"}]

    def test_header_only_file_yields_nothing(self, tmp_path: Path) -> None:
        path = _write(tmp_path, "gtin,title,price\n")

        assert list(CSVRowSource().read(path)) == []

    def test_empty_file_yields_nothing(self, tmp_path: Path) -> None:
        path = _write(tmp_path, "")

        assert list(CSVRowSource().read(path)) == []

    def test_missing_file_fails_when_read_is_called(self, tmp_path: Path) -> None:
        with pytest.raises(FileAccessError):
            CSVRowSource().read(tmp_path / "missing.csv")

    def test_directory_path_fails_when_read_is_called(self, tmp_path: Path) -> None:
        with pytest.raises(FileAccessError):
            CSVRowSource().read(tmp_path)

    def test_rows_are_produced_lazily(self, tmp_path: Path) -> None:
        path = _write(tmp_path, "a\n1\n2\n3\n")

        rows = CSVRowSource().read(path)
        first = next(rows)

        assert first == {"a": "1"}
        assert next(rows) == {"a": "2"}
        rows.close()

    def test_rows_are_read_only(self, tmp_path: Path) -> None:
        path = _write(tmp_path, "a\n1\n")

        row = next(CSVRowSource().read(path))

        with pytest.raises(TypeError):
            row["a"] = "2"  # type: ignore[index]

    def test_invalid_utf8_raises_file_access_error(self, tmp_path: Path) -> None:
        path = tmp_path / "latin1.csv"
        path.write_bytes("a,b\ncafé,1\n".encode("latin-1"))

        with pytest.raises(FileAccessError):
            list(CSVRowSource().read(path))


class TestTSVRowSource:
    def test_reads_tab_separated_rows(self, tmp_path: Path) -> None:
        path = _write(tmp_path, "gtin\ttitle\n1\tPen, blue\n", name="feed.tsv")

        source = TSVRowSource()

        assert source.format == "tsv"
        assert list(source.read(path)) == [{"gtin": "1", "title": "Pen, blue"}]
