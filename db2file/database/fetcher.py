from sqlalchemy.exc import DBAPIError, SQLAlchemyError

from db2file.database.manager import DBConnectionManager
from db2file.errors import ConnectionError, QueryError
from db2file.types import RowSet

ALL_ROWS: int = -1


class RowFetcher(DBConnectionManager):
    """
    Fetches rows from the managed connection.

    Every row is returned as a dict keeping the column order of the result.
    """

    def fetch_table(
        self: "RowFetcher", table_name: str, count: int = ALL_ROWS, offset: int = 0
    ) -> RowSet:
        """
        Fetches the rows of a table, optionally slicing the result.

        The whole table is read first; the slice is taken afterwards and is
        truncated when it runs past the available rows.

        Args:
            table_name: The table name, interpolated verbatim.
            count: Number of rows to return. -1 returns every row.
            offset: Index of the first row to return.

        Returns:
            The fetched rows.

        Raises:
            ValueError: If offset is negative, or count is negative and not -1.
            QueryError: If the scan fails.
        """
        if offset < 0:
            raise ValueError(f"offset must not be negative, got {offset}!")
        if count < 0 and count != ALL_ROWS:
            raise ValueError(f"count must be -1 or positive, got {count}!")

        rows = self.fetch_query(f"SELECT * FROM {table_name}")

        if count != ALL_ROWS:
            rows = rows[offset : offset + count]

        return rows

    def fetch_query(self: "RowFetcher", query: str) -> RowSet:
        """
        Executes a query and returns every resulting row.

        The query reaches the driver untouched. Statements without a result
        set return an empty list. Nothing is committed.

        Args:
            query: A SQL query.

        Returns:
            The resulting rows.

        Raises:
            QueryError: If the driver rejects or fails the query.
        """
        if self.connection is None:
            raise ConnectionError("Connection is closed!")

        self.logger.info(f"--> Running query on {self.kind.name}")
        try:
            result = self.connection.exec_driver_sql(
                query, execution_options={"no_parameters": True}
            )
            if result.returns_rows:
                # Duplicate column names keep the last value
                columns = list(result.keys())
                rows = [dict(zip(columns, row)) for row in result]
            else:
                rows = []
        except DBAPIError as e:
            detail = str(e.orig) if e.orig is not None else str(e)
            raise QueryError(detail, query) from e
        except SQLAlchemyError as e:
            raise QueryError(str(e), query) from e
        finally:
            self.connection.rollback()

        self.logger.info(f"<-- Fetched {len(rows)} rows")
        return rows
