from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Optional, Union

from sqlalchemy.engine import URL

from db2file.errors import ConfigurationError


class DatabaseKind(IntEnum):
    FIREBIRD = 0
    MYSQL = 1
    ORACLE = 2
    POSTGRES = 3
    SQLITE = 4
    SQLSERVER = 5

    @classmethod
    def parse(cls: type["DatabaseKind"], kind: Union["DatabaseKind", int, str]) -> "DatabaseKind":
        """
        Resolves a kind given as a member, its integer value or its name.

        Raises:
            ConfigurationError: If `kind` does not name a supported database.
        """
        if isinstance(kind, cls):
            return kind
        if isinstance(kind, str):
            try:
                return cls[kind.strip().upper()]
            except KeyError:
                pass
        elif isinstance(kind, int) and not isinstance(kind, bool):
            try:
                return cls(kind)
            except ValueError:
                pass
        raise ConfigurationError(f"'{kind}' is not a supported database kind!")

    @property
    def dialect(self: "DatabaseKind") -> "Dialect":
        return DIALECTS[self]

    @property
    def default_port(self: "DatabaseKind") -> Optional[int]:
        return self.dialect.default_port


@dataclass(frozen=True)
class Dialect:
    """
    Knows how to reach one kind of database through SQLAlchemy.

    Attributes:
        drivername: SQLAlchemy `dialect+driver` name.
        default_port: Port used when none is configured.
        charset_param: URL query argument carrying the charset, if the
            driver accepts one.
        extra_query: Fixed URL query arguments.
    """

    drivername: str
    default_port: Optional[int] = None
    charset_param: Optional[str] = None
    extra_query: dict[str, str] = field(default_factory=dict)

    def resolve_port(self: "Dialect", port: Optional[Union[int, str]]) -> Optional[int]:
        if port is None:
            return self.default_port
        try:
            return int(port)
        except (TypeError, ValueError):
            raise ConfigurationError(f"Invalid port '{port}'!") from None

    def build_url(
        self: "Dialect",
        database: str,
        host: Optional[str] = None,
        username: Optional[str] = None,
        password: Optional[str] = None,
        charset: Optional[str] = None,
        port: Optional[int] = None,
    ) -> URL:
        query = dict(self.extra_query)
        if self.charset_param and charset:
            query[self.charset_param] = charset

        return URL.create(
            self.drivername,
            username=username,
            password=password,
            host=host,
            port=self.resolve_port(port),
            database=database,
            query=query,
        )


@dataclass(frozen=True)
class OracleDialect(Dialect):
    def build_url(
        self: "OracleDialect",
        database: str,
        host: Optional[str] = None,
        username: Optional[str] = None,
        password: Optional[str] = None,
        charset: Optional[str] = None,
        port: Optional[int] = None,
    ) -> URL:
        # Addressed by service name, not by path
        return URL.create(
            self.drivername,
            username=username,
            password=password,
            host=host,
            port=self.resolve_port(port),
            query={"service_name": database},
        )


@dataclass(frozen=True)
class SQLiteDialect(Dialect):
    def build_url(self: "SQLiteDialect", database: str, **kwargs: Any) -> URL:
        if database in ("", ":memory:"):
            return URL.create(self.drivername)
        return URL.create(self.drivername, database=database)


DIALECTS: dict[DatabaseKind, Dialect] = {
    DatabaseKind.FIREBIRD: Dialect("firebird+firebird", 3050, "charset"),
    DatabaseKind.MYSQL: Dialect("mysql+pymysql", 3306, "charset"),
    DatabaseKind.ORACLE: OracleDialect("oracle+oracledb", 1521),
    DatabaseKind.POSTGRES: Dialect("postgresql+psycopg", 5432, "client_encoding"),
    DatabaseKind.SQLITE: SQLiteDialect("sqlite"),
    DatabaseKind.SQLSERVER: Dialect("mssql+pymssql", 1433, "charset"),
}
