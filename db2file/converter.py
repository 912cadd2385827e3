import sys
from typing import Optional, TextIO

from db2file.database.fetcher import ALL_ROWS, RowFetcher
from db2file.generator import (
    DEFAULT_ROW_ELEMENT,
    DEFAULT_TABLE_ELEMENT,
    generate_json,
    generate_xml,
)


class Converter(RowFetcher):
    """
    Retrieves data from a database and generates JSON or XML documents.

    Example:
        >>> with Converter(DatabaseKind.SQLITE, "shop.db") as converter:
        ...     converter.get_json_from_table("products", count=10)
        '[{"id":1,"name":"Pen"}, ...]'
    """

    strict_escaping: bool

    def __init__(self: "Converter", *args, strict_escaping: bool = False, **kwargs):
        """
        Initializes a new Converter object.

        Args:
            *args: Connection arguments, see DBConnectionManager.
            strict_escaping: Escape `<` and `>` in XML values, not only `&`.
            **kwargs: Connection keyword arguments, see DBConnectionManager.
        """
        super().__init__(*args, **kwargs)
        self.strict_escaping = strict_escaping

    def get_json_from_table(
        self: "Converter", table_name: str, count: int = ALL_ROWS, offset: int = 0
    ) -> str:
        """
        Returns a JSON document with the rows of a table.

        Args:
            table_name: The table name.
            count: Number of rows to get. -1 gets every row.
            offset: Offset to start counting from.
        """
        return generate_json(self.fetch_table(table_name, count, offset))

    def get_json_from_query(self: "Converter", query: str) -> str:
        return generate_json(self.fetch_query(query))

    def get_xml_from_table(
        self: "Converter",
        table_name: str,
        count: int = ALL_ROWS,
        offset: int = 0,
        table_element: str = DEFAULT_TABLE_ELEMENT,
        row_element: str = DEFAULT_ROW_ELEMENT,
    ) -> str:
        """
        Returns an XML document with the rows of a table, declared with the
        connection charset.

        Args:
            table_name: The table name.
            count: Number of rows to get. -1 gets every row.
            offset: Offset to start counting from.
            table_element: Element representing the entire data set.
            row_element: Element representing each row.
        """
        rows = self.fetch_table(table_name, count, offset)
        return self._generate_xml(rows, table_element, row_element)

    def get_xml_from_query(
        self: "Converter",
        query: str,
        table_element: str = DEFAULT_TABLE_ELEMENT,
        row_element: str = DEFAULT_ROW_ELEMENT,
    ) -> str:
        rows = self.fetch_query(query)
        return self._generate_xml(rows, table_element, row_element)

    def _generate_xml(self: "Converter", rows, table_element: str, row_element: str) -> str:
        return generate_xml(
            rows,
            charset=self.charset,
            table_element=table_element,
            row_element=row_element,
            strict_escaping=self.strict_escaping,
        )

    def print_json_from_table(
        self: "Converter",
        table_name: str,
        count: int = ALL_ROWS,
        offset: int = 0,
        stream: Optional[TextIO] = None,
    ):
        """
        Writes a JSON document with table rows to `stream` (stdout by default).
        """
        self._print(self.get_json_from_table(table_name, count, offset), stream)

    def print_json_from_query(self: "Converter", query: str, stream: Optional[TextIO] = None):
        self._print(self.get_json_from_query(query), stream)

    def print_xml_from_table(
        self: "Converter",
        table_name: str,
        count: int = ALL_ROWS,
        offset: int = 0,
        table_element: str = DEFAULT_TABLE_ELEMENT,
        row_element: str = DEFAULT_ROW_ELEMENT,
        stream: Optional[TextIO] = None,
    ):
        """
        Writes an XML document with table rows to `stream` (stdout by default).
        """
        document = self.get_xml_from_table(
            table_name, count, offset, table_element, row_element
        )
        self._print(document, stream)

    def print_xml_from_query(
        self: "Converter",
        query: str,
        table_element: str = DEFAULT_TABLE_ELEMENT,
        row_element: str = DEFAULT_ROW_ELEMENT,
        stream: Optional[TextIO] = None,
    ):
        self._print(self.get_xml_from_query(query, table_element, row_element), stream)

    @staticmethod
    def _print(document: str, stream: Optional[TextIO]):
        (stream or sys.stdout).write(document)
