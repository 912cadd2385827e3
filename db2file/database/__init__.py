from .dialects import DatabaseKind, Dialect, DIALECTS
from .fetcher import RowFetcher
from .manager import DBConnectionManager

__all__ = ["DatabaseKind", "Dialect", "DIALECTS", "DBConnectionManager", "RowFetcher"]
