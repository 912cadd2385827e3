import os
import tomllib
from pathlib import Path
from typing import Any, Optional

from db2file.errors import ConfigurationError
from db2file.types import Struct

CONFIG_FILE: str = "config/config.toml"
ROOT_MARKERS: list[str] = ["pyproject.toml"]
CONNECTION_TABLES: tuple[str, ...] = ("options",)


def find_root_dir(markers: list[str], start: Optional[Path] = None) -> Path:
    """
    Find the root directory of a project by searching for marker files.

    Walks up from `start` (the current working directory by default) and
    returns the first directory holding any of the markers.

    Args:
        markers: File or directory names that identify the project root,
            e.g. ['pyproject.toml'].
        start: Directory to start searching from.

    Returns:
        The first directory found that contains at least one marker.

    Raises:
        FileNotFoundError: If no parent directory holds any of the markers.

    Example:
        >>> find_root_dir(['pyproject.toml'])
        PosixPath('/home/user/my_project')
    """
    curr_path = Path(start or Path.cwd()).resolve()

    while True:
        if any((curr_path / marker).exists() for marker in markers):
            return curr_path
        if curr_path.parent == curr_path:
            markers_str = ", ".join(markers)
            raise FileNotFoundError(f"No marker found!\nMarkers: {markers_str}")
        curr_path = curr_path.parent


def resolve_env(value: Any) -> Any:
    """
    Recursively replaces `${VAR}` strings with environment variable values.

    Args:
        value: A configuration value, table or list.

    Raises:
        ConfigurationError: If a referenced variable is not set.
    """
    if isinstance(value, dict):
        return Struct({k: resolve_env(v) for k, v in value.items()})
    if isinstance(value, list):
        return [resolve_env(item) for item in value]
    if isinstance(value, str) and value.startswith("${") and value.endswith("}"):
        env_var = value[2:-1]
        try:
            return os.environ[env_var]
        except KeyError:
            raise ConfigurationError(
                f"Environment variable '{env_var}' is not set!"
            ) from None
    return value


def load_configuration(root: Optional[Path] = None) -> Struct:
    """
    Loads config/config.toml and makes its paths absolute.

    Args:
        root: Project root. Found from the working directory when omitted.

    Returns:
        A Struct with the configuration; `paths` entries are Path objects.
    """
    if root is None:
        try:
            root = find_root_dir(ROOT_MARKERS)
        except FileNotFoundError as e:
            raise ConfigurationError(str(e)) from e
    config_path: Path = root / CONFIG_FILE

    try:
        with open(config_path, "rb") as f:
            configurations = Struct(tomllib.load(f))
    except FileNotFoundError:
        raise ConfigurationError(f"Configuration file {config_path} not found!")
    except tomllib.TOMLDecodeError as e:
        raise ConfigurationError(f"Invalid configuration file {config_path}: {e}")

    configurations.paths = {
        name: config_path.parent / path
        for name, path in configurations.get("paths", {}).items()
    }
    configurations.setdefault("output", Struct())

    return configurations


def load_connections(configurations: Struct) -> Struct:
    """
    Reads every connection file in the configured connections directory.

    Returns:
        A Struct mapping connection names to their (unresolved) settings.
    """
    connections_path: Optional[Path] = configurations.paths.get("connections")
    if connections_path is None:
        raise ConfigurationError("No 'connections' path in configuration!")

    connections = Struct()
    for connection_path in sorted(connections_path.glob("*.toml")):
        with open(connection_path, "rb") as f:
            content = Struct(tomllib.load(f))

        connections.update(content.get("connections", {}))

    return connections


def get_connection_config(
    name: str, environment: Optional[str] = None, root: Optional[Path] = None
) -> Struct:
    """
    Returns the settings of a named connection with environment overrides
    applied and `${VAR}` references resolved.

    Raises:
        ConfigurationError: If the connection or environment is unknown.
    """
    connections = load_connections(load_configuration(root))

    if name not in connections:
        raise ConfigurationError(f"Connection '{name}' not found in configuration!")
    # Sub-tables other than options hold per-environment overrides
    config = Struct(
        {
            key: value
            for key, value in connections[name].items()
            if key in CONNECTION_TABLES or not isinstance(value, dict)
        }
    )

    if environment is not None:
        overrides = connections[name].get(environment)
        if environment in CONNECTION_TABLES or not isinstance(overrides, dict):
            raise ConfigurationError(
                f"Environment '{environment}' not configured for connection '{name}'!"
            )
        config.update(overrides)

    return resolve_env(config)


def get_available_connections(root: Optional[Path] = None) -> list[str]:
    """Return a list of available connection names from TOML files."""
    return list(load_connections(load_configuration(root)))
