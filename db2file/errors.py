import builtins
from typing import Optional


class DB2FileError(Exception):
    """
    Base class for every error raised by db2file.
    """


class ConfigurationError(DB2FileError):
    """
    Unsupported database kind, missing driver or invalid configuration.
    """


class ConnectionError(DB2FileError, builtins.ConnectionError):
    """
    The database connection could not be established.
    """


class QueryError(DB2FileError):
    """
    A table scan or query failed on the database side.

    Attributes:
        query: The SQL text that was sent to the driver.
        detail: The driver's own error message.
    """

    def __init__(self: "QueryError", detail: str, query: Optional[str] = None):
        super().__init__(detail)
        self.detail = detail
        self.query = query


class RenderError(DB2FileError):
    """
    A row set could not be turned into a document.
    """
