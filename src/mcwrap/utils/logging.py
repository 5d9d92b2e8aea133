"""
Logging utilities for the server wrapper.

Applies the levels from LoggingSettings to file logging. Console logging for
the CLI is configured separately in mcwrap.cli.utils.setup_logging.
"""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from mcwrap.config.logging import LoggingSettings

SELF_LOGGER = "mcwrap"
BRIDGE_LOGGER = "mcwrap.bridge"

FILE_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_file_handler: logging.Handler | None = None


def setup_file_logging(
    settings: LoggingSettings,
    log_file: str | Path,
    max_size_mb: int = 10,
    backup_count: int = 5,
) -> logging.Handler:
    """
    Install a rotating file handler and apply the configured levels.

    Calling this again (e.g. after a config reload) replaces the handler
    installed by the previous call.

    Args:
        settings: Logging section of the config
        log_file: Path of the log file
        max_size_mb: Size at which the log file is rotated
        backup_count: Number of rotated files to keep

    Returns:
        The installed handler
    """
    global _file_handler

    log_path = Path(log_file).expanduser()
    log_path.parent.mkdir(parents=True, exist_ok=True)

    handler = RotatingFileHandler(
        log_path,
        maxBytes=max_size_mb * 1024 * 1024,
        backupCount=backup_count,
        encoding="utf-8",
    )
    handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))

    root = logging.getLogger()
    if _file_handler is not None:
        root.removeHandler(_file_handler)
        _file_handler.close()
    root.addHandler(handler)
    _file_handler = handler

    apply_log_levels(settings)
    return handler


def apply_log_levels(settings: LoggingSettings) -> None:
    """Set logger levels for dependencies, the wrapper and the bridge."""
    logging.getLogger().setLevel(settings.dependency_level.to_logging_level())
    logging.getLogger(SELF_LOGGER).setLevel(settings.self_level.to_logging_level())
    logging.getLogger(BRIDGE_LOGGER).setLevel(settings.bridge_level.to_logging_level())
