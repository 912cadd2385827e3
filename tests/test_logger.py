"""Tests for db2file/logger.py - logging setup."""

import logging

from db2file.logger import get_logger, setup_logging


def test_setup_logging_from_toml(tmp_path):
    log_file = tmp_path / "logs" / "db2file.log"
    config = tmp_path / "logging.toml"
    config.write_text(
        "version = 1\n"
        "disable_existing_loggers = false\n"
        "[handlers.file]\n"
        'class = "logging.FileHandler"\n'
        f'filename = "{log_file.as_posix()}"\n'
        "[loggers.db2file_test]\n"
        'level = "DEBUG"\n'
        'handlers = ["file"]\n'
    )

    setup_logging(config)

    logger = get_logger("db2file_test")
    assert logger.level == logging.DEBUG
    assert log_file.parent.is_dir()
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()


def test_setup_logging_falls_back_without_file(tmp_path, caplog):
    with caplog.at_level(logging.INFO, logger="db2file"):
        setup_logging(tmp_path / "missing.toml")

    assert "Using default" in caplog.text
