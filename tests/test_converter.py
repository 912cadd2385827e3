"""Tests for db2file/converter.py - table/query to document conversion."""

import io
import json
import xml.etree.ElementTree as ET

import pytest

from db2file.converter import Converter
from db2file.database import DatabaseKind
from db2file.errors import QueryError
from tests.conftest import PRODUCTS


class TestJson:
    """Tests for the JSON conversions."""

    def test_json_from_table(self, converter):
        assert json.loads(converter.get_json_from_table("products")) == PRODUCTS

    def test_json_from_table_with_slice(self, converter):
        assert json.loads(converter.get_json_from_table("products", 2, 1)) == PRODUCTS[1:]

    def test_json_from_query(self, converter):
        document = converter.get_json_from_query("SELECT id FROM products WHERE id > 5")

        assert document == "[]"

    def test_query_error_propagates(self, converter):
        with pytest.raises(QueryError):
            converter.get_json_from_query("SELECT * FROM nowhere")


class TestXml:
    """Tests for the XML conversions."""

    def test_xml_from_table_structure(self, converter):
        root = ET.fromstring(converter.get_xml_from_table("products"))

        assert root.tag == "dataset"
        assert len(root) == 3
        assert [column.tag for column in root[0]] == ["id", "name", "price", "note"]
        assert root[0][3].text is None
        assert root[1][1].text == "Salt & Pepper"

    def test_xml_from_table_escapes_ampersands(self, converter):
        document = converter.get_xml_from_table("products", count=1, offset=2)

        assert "<note>A &amp; B &amp; C</note>" in document
        assert document.count("<datarow>") == 1

    def test_custom_element_names(self, converter):
        document = converter.get_xml_from_query(
            "SELECT name FROM products WHERE id = 1",
            table_element="products",
            row_element="product",
        )

        root = ET.fromstring(document)
        assert root.tag == "products"
        assert [row.tag for row in root] == ["product"]

    def test_declaration_uses_connection_charset(self, sqlite_path):
        with Converter(DatabaseKind.SQLITE, str(sqlite_path), charset="latin1") as conv:
            document = conv.get_xml_from_query("SELECT 1 AS one")

        assert document.startswith('<?xml version="1.0" encoding="latin1"?>')

    def test_strict_escaping_option(self, sqlite_path):
        query = "SELECT '<i>x</i>' AS markup"
        with Converter(DatabaseKind.SQLITE, str(sqlite_path), strict_escaping=True) as conv:
            document = conv.get_xml_from_query(query)

        assert "<markup>&lt;i&gt;x&lt;/i&gt;</markup>" in document

    def test_legacy_escaping_by_default(self, converter):
        document = converter.get_xml_from_query("SELECT '<i>x</i>' AS markup")

        assert "<markup><i>x</i></markup>" in document


class TestPrint:
    """Tests for the print_* methods."""

    def test_print_json_from_table(self, converter):
        stream = io.StringIO()

        converter.print_json_from_table("products", 1, stream=stream)

        assert json.loads(stream.getvalue()) == PRODUCTS[:1]

    def test_print_json_from_query_defaults_to_stdout(self, converter, capsys):
        converter.print_json_from_query("SELECT 1 AS one")

        assert capsys.readouterr().out == '[{"one":1}]'

    def test_print_xml_from_table(self, converter):
        stream = io.StringIO()

        converter.print_xml_from_table("empty_table", stream=stream)

        assert stream.getvalue().endswith("<dataset></dataset>\n")

    def test_print_xml_from_query(self, converter):
        stream = io.StringIO()

        converter.print_xml_from_query("SELECT 2 AS two", "r", "c", stream=stream)

        assert "<r>\n <c>\n  <two>2</two>\n </c>\n</r>\n" in stream.getvalue()
