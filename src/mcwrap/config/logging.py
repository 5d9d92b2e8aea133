"""
Logging configuration module.

Contains logging-related config types:
- LogLevel: ordered level enum, stored in config files as an integer 1-5
- LoggingSettings: file logging levels for dependencies, the wrapper and the bridge
"""

import logging
from enum import IntEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

__all__ = ["LogLevel", "LoggingSettings", "TRACE"]

# stdlib logging has no trace level; register one below DEBUG
TRACE = 5
logging.addLevelName(TRACE, "TRACE")


class LogLevel(IntEnum):
    """Log verbosity, ordered from least to most verbose.

    Config files store the integer value, not the name. Existing files depend
    on this mapping, so the values must never change.
    """

    ERROR = 1
    WARN = 2
    INFO = 3
    DEBUG = 4
    TRACE = 5

    def to_logging_level(self) -> int:
        """Return the equivalent stdlib logging level."""
        return _STDLIB_LEVELS[self]


_STDLIB_LEVELS = {
    LogLevel.ERROR: logging.ERROR,
    LogLevel.WARN: logging.WARNING,
    LogLevel.INFO: logging.INFO,
    LogLevel.DEBUG: logging.DEBUG,
    LogLevel.TRACE: TRACE,
}


class LoggingSettings(BaseModel):
    """Logging configuration.

    These levels only affect file logging.
    """

    model_config = ConfigDict(validate_assignment=True)

    dependency_level: LogLevel = Field(
        default=LogLevel.WARN,
        description="Logging level for third-party dependencies",
    )
    self_level: LogLevel = Field(
        default=LogLevel.DEBUG,
        description="Logging level for the wrapper itself",
    )
    bridge_level: LogLevel = Field(
        default=LogLevel.INFO,
        description="Logging level for the chat bridge",
    )

    @field_validator("dependency_level", "self_level", "bridge_level", mode="before")
    @classmethod
    def validate_level_integer(cls, v: Any) -> Any:
        """Only accept the integer wire values 1-5."""
        if isinstance(v, bool) or not isinstance(v, int):
            raise ValueError(f"Log level must be an integer from 1 to 5, got {v!r}")
        if v not in LogLevel._value2member_map_:
            raise ValueError(f"Log level must be an integer from 1 to 5, got {v}")
        return LogLevel(v)
