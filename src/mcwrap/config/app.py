"""
Configuration management for the server wrapper.

Provides the YAML-backed WrapperConfig document, async load/save with
first-run default materialization, and CLI override merging.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import aiofiles
from pydantic import BaseModel, ConfigDict, Field

from mcwrap.config.bridge import BridgeSettings
from mcwrap.config.codec import decode, encode
from mcwrap.config.errors import (
    ConfigIOError,
    DefaultConfigSaveError,
    MissingPrerequisiteError,
)
from mcwrap.config.logging import LoggingSettings
from mcwrap.config.server import ServerSettings

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "./mcwrap-config.yaml"


class WrapperConfig(BaseModel):
    """
    Main configuration for the server wrapper.

    Configuration is resolved with the following priority:
    1. CLI arguments (highest, see apply_cli_overrides)
    2. YAML file
    3. Defaults (lowest, only written on first run)
    """

    model_config = ConfigDict(validate_assignment=True)

    server: ServerSettings = Field(
        default_factory=ServerSettings,
        description="Wrapped server configuration",
    )
    bridge: BridgeSettings | None = Field(
        default_factory=BridgeSettings,
        description="Chat bridge configuration; omit the section to disable the bridge",
    )
    logging: LoggingSettings = Field(
        default_factory=LoggingSettings,
        description="Logging configuration",
    )

    @classmethod
    def default(cls) -> WrapperConfig:
        """Build the default document. Does no I/O."""
        return cls()

    def bridge_enabled(self) -> bool:
        """Check whether the bridge section exists and is switched on."""
        return self.bridge is not None and self.bridge.enabled


class CliOverrides(BaseModel):
    """Values from the command line that take precedence over the file."""

    enable_bridge: bool = Field(
        default=False,
        description="Turn the chat bridge on for this run",
    )
    server_path: Path | None = Field(
        default=None,
        description="Server jar to run instead of the configured one",
    )


def get_default_config_path() -> Path:
    """Get the config file path, respecting the MCWRAP_CONFIG env var."""
    return Path(os.environ.get("MCWRAP_CONFIG", DEFAULT_CONFIG_FILE)).expanduser()


async def load_config(config_file: str | Path | None = None) -> WrapperConfig:
    """
    Load a config file.

    If no file exists at the path, a default config is created, written to the
    path and returned. An existing file is never overwritten.

    Args:
        config_file: Path to YAML config file (default: get_default_config_path())

    Returns:
        Validated WrapperConfig instance

    Raises:
        DefaultConfigSaveError: If the default config could not be written
        ConfigIOError: If the existing file could not be read
        DecodeError: If the existing file is malformed or does not match the schema
    """
    config_path = Path(config_file).expanduser() if config_file else get_default_config_path()

    if not config_path.exists():
        default_config = WrapperConfig.default()
        try:
            await save_config(default_config, config_path)
        except ConfigIOError as e:
            raise DefaultConfigSaveError(
                f"Failed to save default config file: {e.reason}", config_path, default_config
            ) from e
        logger.info(f"Created default config file at {config_path}")
        return default_config

    try:
        async with aiofiles.open(config_path, "rb") as f:
            content = await f.read()
    except OSError as e:
        raise ConfigIOError(f"Failed to read config file: {e}", config_path) from e

    config = decode(content, config_path)
    logger.debug(f"Loaded config from {config_path}")
    return config


async def save_config(config: WrapperConfig, config_file: str | Path | None = None) -> None:
    """
    Write a config document to a YAML file.

    This overwrites whatever file is currently at the path. The file is
    truncated and then written, so a crash mid-write can leave it truncated.

    Args:
        config: WrapperConfig instance to save
        config_file: Path to YAML config file (default: get_default_config_path())

    Raises:
        ConfigIOError: If the file could not be opened or fully written
    """
    config_path = Path(config_file).expanduser() if config_file else get_default_config_path()
    content = encode(config)

    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        async with aiofiles.open(config_path, "wb") as f:
            await f.write(content)
        # The file holds the bridge credential token
        config_path.chmod(0o600)
    except OSError as e:
        raise ConfigIOError(f"Failed to write config file: {e}", config_path) from e

    logger.debug(f"Saved config to {config_path}")


def apply_cli_overrides(config: WrapperConfig, overrides: CliOverrides) -> None:
    """
    Merge CLI overrides into a config document in place.

    All prerequisites are checked before anything is changed, so a failed
    merge leaves the document untouched.

    Args:
        config: Document to update
        overrides: Values parsed from the command line

    Raises:
        MissingPrerequisiteError: If the bridge is requested but not configured
    """
    if overrides.enable_bridge and config.bridge is None:
        raise MissingPrerequisiteError(
            "bridge",
            "Chat bridge cannot be enabled if the bot token and channel ID "
            "are not specified in the config",
        )

    if overrides.enable_bridge and config.bridge is not None:
        config.bridge.enabled = True

    if overrides.server_path is not None:
        config.server.executable_path = overrides.server_path
