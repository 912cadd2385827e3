from pathlib import Path
from typing import Any, Optional, Union

from sqlalchemy.engine.base import Connection, Engine
from sqlalchemy.engine.create import create_engine
from sqlalchemy.exc import ArgumentError, DBAPIError, NoSuchModuleError, SQLAlchemyError

from db2file.database.dialects import DatabaseKind
from db2file.errors import ConfigurationError, ConnectionError
from db2file.extras import get_connection_config
from db2file.logger import get_logger


class DBConnectionManager:
    """
    Holds one database connection for the lifetime of the instance.

    The connection is opened on construction and released by `close()`
    or when leaving a `with` block. Instances must not be shared between
    threads.
    """

    kind: DatabaseKind
    charset: str
    engine: Optional[Engine]
    connection: Optional[Connection]

    def __init__(
        self: "DBConnectionManager",
        kind: Union[DatabaseKind, int, str],
        database: str,
        host: Optional[str] = None,
        username: Optional[str] = None,
        password: Optional[str] = None,
        charset: str = "utf8",
        port: Optional[int] = None,
        options: Optional[dict[str, Any]] = None,
    ):
        """
        Initializes a new DBConnectionManager object.

        Args:
            kind: Database kind, as a DatabaseKind, its value or its name.
            database: Database name, or file path for SQLite.
            host: Domain name or IP of the database host.
            username: Database user name.
            password: Database password.
            charset: Charset used for the connection and the XML encoding.
            port: Port of the database service. Defaults per kind.
            options: Driver specific options, passed as connect_args.

        Raises:
            ConfigurationError: If the kind is unsupported or its driver is
                not installed.
            ConnectionError: If the connection cannot be established.
        """
        self.logger = get_logger(__name__)
        self.engine = None
        self.connection = None

        self.kind = DatabaseKind.parse(kind)
        self.charset = charset
        self.url = self.kind.dialect.build_url(
            database,
            host=host,
            username=username,
            password=password,
            charset=charset,
            port=port,
        )

        self.engine = self._create_engine(options or {})
        self.connection = self._connect()

    @classmethod
    def from_config(
        cls: type["DBConnectionManager"],
        name: str,
        environment: Optional[str] = None,
        root: Optional[Path] = None,
        **kwargs: Any,
    ) -> "DBConnectionManager":
        """
        Builds an instance from a connection declared in config/connections.

        Args:
            name: The connection name.
            environment: Optional environment sub-table overriding the
                connection settings.
            root: Project root holding the config directory.
            **kwargs: Extra keyword arguments for the constructor.
        """
        config = get_connection_config(name, environment, root)

        if "kind" not in config or "database" not in config:
            raise ConfigurationError(
                f"Connection '{name}' must define 'kind' and 'database'!"
            )

        return cls(
            config.kind,
            config.database,
            host=config.get("host"),
            username=config.get("username"),
            password=config.get("password"),
            charset=config.get("charset", "utf8"),
            port=config.get("port"),
            options=dict(config.get("options", {})),
            **kwargs,
        )

    def _create_engine(self: "DBConnectionManager", options: dict[str, Any]) -> Engine:
        try:
            engine = create_engine(self.url, connect_args=options)
        except (NoSuchModuleError, ImportError) as e:
            raise ConfigurationError(
                f"Driver for {self.kind.name} is not available: {e}"
            ) from e
        except ArgumentError as e:
            raise ConfigurationError(f"Invalid connection settings: {e}") from e

        self.logger.info(f"Created engine for {self.url.render_as_string()}")
        return engine

    def _connect(self: "DBConnectionManager") -> Connection:
        try:
            return self.engine.connect()
        except DBAPIError as e:
            self.engine.dispose()
            self.engine = None
            detail = str(e.orig) if e.orig is not None else str(e)
            raise ConnectionError(
                f"Could not connect to {self.kind.name} database: {detail}"
            ) from e
        except SQLAlchemyError as e:
            self.engine.dispose()
            self.engine = None
            raise ConnectionError(
                f"Could not connect to {self.kind.name} database: {e}"
            ) from e

    @property
    def closed(self: "DBConnectionManager") -> bool:
        return self.connection is None

    def close(self: "DBConnectionManager"):
        """
        Closes the connection and disposes of the engine.
        """
        if self.connection is not None:
            self.connection.close()
            self.connection = None

        if self.engine is not None:
            self.engine.dispose()
            self.engine = None
            self.logger.info(f"Disposed of {self.kind.name} engine")

    def __enter__(self: "DBConnectionManager") -> "DBConnectionManager":
        return self

    def __exit__(self: "DBConnectionManager", *exc_info):
        self.close()

    def __del__(self: "DBConnectionManager"):
        # Partially built instances may lack attributes
        if getattr(self, "engine", None) is not None:
            self.close()
