"""
Configuration error types.

Every fallible operation in the config package raises one of these instead of
exiting the process. Each carries the offending path (when there is one) so
the caller can produce an actionable diagnostic.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

__all__ = [
    "ConfigError",
    "ConfigIOError",
    "DefaultConfigSaveError",
    "DecodeError",
    "MalformedConfigError",
    "SchemaMismatchError",
    "MergeError",
    "MissingPrerequisiteError",
    "WatchSetupError",
]


class ConfigError(Exception):
    """Base exception for configuration errors."""

    def __init__(self, message: str, path: Path | str | None = None) -> None:
        self.path = Path(path) if path is not None else None
        self.reason = message
        if self.path is not None:
            message = f"{message} (config file: {self.path})"
        super().__init__(message)


class ConfigIOError(ConfigError):
    """Raised when the config file cannot be opened, read or written."""


class DefaultConfigSaveError(ConfigIOError):
    """Raised when a first-run default config could not be written.

    The unsaved default document is available as ``config`` so the caller can
    decide whether to continue with it.
    """

    def __init__(self, message: str, path: Path | str | None, config: Any) -> None:
        self.config = config
        super().__init__(message, path)


class DecodeError(ConfigError):
    """Raised when a byte stream cannot be turned into a config document."""


class MalformedConfigError(DecodeError):
    """Raised when the config text is not well-formed YAML."""


class SchemaMismatchError(DecodeError):
    """Raised when required keys are missing or values have the wrong shape."""


class MergeError(ConfigError):
    """Base exception for CLI override merge failures."""


class MissingPrerequisiteError(MergeError):
    """Raised when an override needs a config section that is absent."""

    def __init__(self, section: str, message: str) -> None:
        self.section = section
        super().__init__(message)


class WatchSetupError(ConfigError):
    """Raised when the config file watcher cannot attach to its path."""
