"""
Document generation: turns fetched rows into JSON or XML text.
"""

import json
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any, Optional
from xml.sax.saxutils import escape

from db2file.errors import RenderError
from db2file.types import RowSet

CONTENT_TYPES: dict[str, str] = {
    "json": "application/json",
    "xml": "text/xml",
    "csv": "text/csv",
}

DEFAULT_TABLE_ELEMENT: str = "dataset"
DEFAULT_ROW_ELEMENT: str = "datarow"
DEFAULT_GENERATOR_NAME: str = "DB2XML"


def _json_default(value: Any) -> Any:
    # Exact digits, as drivers returning numeric strings would give them
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value).decode("utf-8", errors="replace")
    return str(value)


def generate_json(rows: RowSet) -> str:
    """
    Generates a JSON array with one object per row.

    Args:
        rows: Result of a table or query fetch.

    Returns:
        The JSON document.

    Raises:
        RenderError: If a value cannot be represented in JSON (NaN, infinity).
    """
    try:
        return json.dumps(
            rows, default=_json_default, separators=(",", ":"), allow_nan=False
        )
    except (TypeError, ValueError) as e:
        raise RenderError(f"Could not generate JSON: {e}") from e


def legacy_escape(text: str) -> str:
    # Only ampersands are replaced; < and > pass through as raw markup
    return text.replace("&", "&amp;")


def _to_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value).decode("utf-8", errors="replace")
    return str(value)


class XMLWriter:
    """
    Minimal in-memory XML writer producing indented output.

    Elements are opened and closed explicitly. An element that only receives
    text is written on a single line; one holding child elements puts each
    child on its own line, one indent deeper than itself.
    """

    def __init__(self: "XMLWriter", indent: str = " "):
        self.indent = indent
        self._parts: list[str] = []
        self._stack: list[str] = []
        # Whether the innermost open element already holds child elements
        self._has_children: list[bool] = []

    def _newline(self: "XMLWriter", depth: int):
        if self._parts:
            self._parts.append("\n")
        self._parts.append(self.indent * depth)

    def start_document(self: "XMLWriter", version: str = "1.0", encoding: Optional[str] = None):
        declaration = f'<?xml version="{version}"'
        if encoding:
            declaration += f' encoding="{encoding}"'
        self._parts.append(declaration + "?>")

    def write_comment(self: "XMLWriter", comment: str):
        self._newline(len(self._stack))
        self._parts.append(f"<!--{comment}-->")

    def start_element(self: "XMLWriter", name: str):
        if self._has_children:
            self._has_children[-1] = True
        self._newline(len(self._stack))
        self._parts.append(f"<{name}>")
        self._stack.append(name)
        self._has_children.append(False)

    def write_raw(self: "XMLWriter", text: str):
        """Writes text into the current element without any escaping."""
        self._parts.append(text)

    def end_element(self: "XMLWriter"):
        name = self._stack.pop()
        if self._has_children.pop():
            self._newline(len(self._stack))
        self._parts.append(f"</{name}>")

    def flush(self: "XMLWriter") -> str:
        if self._stack:
            raise RenderError(f"Unclosed elements: {', '.join(self._stack)}")
        document = "".join(self._parts) + "\n"
        self._parts.clear()
        return document


def generate_xml(
    rows: RowSet,
    charset: str = "utf8",
    table_element: str = DEFAULT_TABLE_ELEMENT,
    row_element: str = DEFAULT_ROW_ELEMENT,
    strict_escaping: bool = False,
    indent: str = " ",
    generator_name: str = DEFAULT_GENERATOR_NAME,
    generated_on: Optional[date] = None,
) -> str:
    """
    Generates an XML document with one element per row and one child
    element per column, named after the column.

    Column names are used as tag names as they are. By default only `&` is
    escaped in values, so values holding `<` or `>` produce raw markup;
    `strict_escaping` escapes all three.

    Args:
        rows: Result of a table or query fetch.
        charset: Encoding declared in the XML declaration.
        table_element: Root element name.
        row_element: Element name wrapping each row.
        strict_escaping: Escape `<` and `>` as well as `&`.
        indent: Indentation added per nesting level.
        generator_name: Tool name written in the header comment.
        generated_on: Date written in the header comment. Defaults to today.

    Returns:
        The XML document.
    """
    escape_text = escape if strict_escaping else legacy_escape
    generated_on = generated_on or date.today()
    comment = f"File generated by {generator_name}, {generated_on.strftime('%b %d %Y')}"

    try:
        xml = XMLWriter(indent)
        xml.start_document("1.0", charset)
        xml.write_comment(comment)
        xml.start_element(table_element)
        for row in rows:
            xml.start_element(row_element)
            for column, value in row.items():
                xml.start_element(str(column))
                xml.write_raw(escape_text(_to_text(value)))
                xml.end_element()
            xml.end_element()
        xml.end_element()
    except (TypeError, ValueError, AttributeError) as e:
        raise RenderError(f"Could not generate XML: {e}") from e

    return xml.flush()
