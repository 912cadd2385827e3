"""Tests for db2file/exporter.py - writing documents to files."""

import json

import pytest

from db2file.errors import RenderError
from db2file.exporter import export_data, render_document, resolve_codec, rows_to_dataframe
from tests.conftest import PRODUCTS


class TestRowsToDataframe:
    """Tests for rows_to_dataframe()."""

    def test_keeps_column_order(self):
        df = rows_to_dataframe([{"b": 1, "a": 2}])

        assert list(df.columns) == ["b", "a"]
        assert df.iloc[0].tolist() == [1, 2]

    def test_empty(self):
        assert rows_to_dataframe([]).empty


class TestRenderDocument:
    """Tests for render_document()."""

    def test_csv(self):
        document = render_document([{"id": 1, "name": "Pen"}, {"id": 2, "name": "Cup"}], "csv")

        assert document.splitlines() == ["id,name", "1,Pen", "2,Cup"]

    def test_xml_options_are_forwarded(self):
        document = render_document([{"id": 1}], "xml", table_element="items")

        assert "<items>" in document

    def test_unknown_format(self):
        with pytest.raises(ValueError, match="yaml"):
            render_document([], "yaml")


class TestExportData:
    """Tests for export_data()."""

    def test_format_inferred_from_suffix(self, tmp_path):
        path = export_data(tmp_path / "out" / "products.json", PRODUCTS)

        assert json.loads(path.read_text(encoding="utf-8")) == PRODUCTS

    def test_xml_file_written_with_charset(self, tmp_path):
        rows = [{"name": "Café & Co"}]

        path = export_data(tmp_path / "products.xml", rows, charset="latin1")

        content = path.read_bytes().decode("latin1")
        assert content.startswith('<?xml version="1.0" encoding="latin1"?>')
        assert "<name>Café &amp; Co</name>" in content

    def test_explicit_format_wins(self, tmp_path):
        path = export_data(tmp_path / "products.txt", PRODUCTS, "csv")

        assert path.read_text(encoding="utf-8").splitlines()[0] == "id,name,price,note"

    def test_unknown_suffix(self, tmp_path):
        with pytest.raises(ValueError):
            export_data(tmp_path / "products.parquet", PRODUCTS)

    def test_unencodable_value_leaves_no_file(self, tmp_path):
        target = tmp_path / "prices.xml"

        with pytest.raises(RenderError, match="iso8859-1"):
            export_data(target, [{"name": "5 €"}], charset="latin1")

        assert not target.exists()

    def test_database_only_charset_written_as_utf8(self, tmp_path):
        path = export_data(tmp_path / "prices.xml", [{"name": "5 €"}], charset="utf8mb4")

        content = path.read_bytes().decode("utf-8")
        assert content.startswith('<?xml version="1.0" encoding="utf8mb4"?>')
        assert "<name>5 €</name>" in content


class TestResolveCodec:
    """Tests for resolve_codec()."""

    @pytest.mark.parametrize(
        "charset, codec",
        [
            ("utf8", "utf-8"),
            ("UTF8MB4", "utf-8"),
            ("utf8mb3", "utf-8"),
            ("latin1", "iso8859-1"),
            ("no-such-charset", "utf-8"),
        ],
    )
    def test_maps_to_python_codec(self, charset, codec):
        assert resolve_codec(charset) == codec
