import logging
import logging.config
import tomllib
from pathlib import Path
from typing import Optional

from db2file.extras import find_root_dir, ROOT_MARKERS

DEFAULT_LOGGING_CONFIG: str = "config/logging/config.toml"
LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(config_path: Optional[Path] = None, level: int = logging.WARNING):
    """
    Configures logging from a TOML dictConfig file.

    Falls back to `basicConfig` at `level` when no file can be found.

    Args:
        config_path: Logging configuration file. Defaults to
            config/logging/config.toml under the project root.
        level: Level used by the fallback configuration.
    """
    try:
        if config_path is None:
            config_path = find_root_dir(ROOT_MARKERS) / DEFAULT_LOGGING_CONFIG
        with open(config_path, "rb") as f:
            config_dict = tomllib.load(f)

        # File handlers fail on missing directories
        for config in config_dict.get("handlers", {}).values():
            if "filename" in config:
                Path(config["filename"]).parent.mkdir(parents=True, exist_ok=True)

        logging.config.dictConfig(config_dict)
        logging.getLogger("db2file").info(f"Log configuration loaded from {config_path}")

    except FileNotFoundError:
        logging.basicConfig(level=level, format=LOG_FORMAT)
        logging.getLogger("db2file").info("Logger configuration not found. Using default.")


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
