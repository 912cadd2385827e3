"""
DB2File - Fetch database rows and generate JSON or XML documents.
"""

from db2file.converter import Converter
from db2file.database import DatabaseKind, DBConnectionManager, RowFetcher
from db2file.errors import (
    ConfigurationError,
    ConnectionError,
    DB2FileError,
    QueryError,
    RenderError,
)
from db2file.generator import CONTENT_TYPES, generate_json, generate_xml

__version__ = "0.1.0"
__all__ = [
    "CONTENT_TYPES",
    "ConfigurationError",
    "ConnectionError",
    "Converter",
    "DB2FileError",
    "DatabaseKind",
    "DBConnectionManager",
    "QueryError",
    "RenderError",
    "RowFetcher",
    "generate_json",
    "generate_xml",
]
