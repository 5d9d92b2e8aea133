"""
Shared utilities for CLI commands.
"""

import logging
from pathlib import Path

from mcwrap.config.app import CliOverrides, WrapperConfig, apply_cli_overrides, load_config

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
    """
    Configure console logging for the CLI.

    Args:
        verbose: If True, enable DEBUG level logging
    """
    log_level = logging.DEBUG if verbose else logging.INFO

    # File logging may lower logger levels later; keep the console at this level
    console = logging.StreamHandler()
    console.setLevel(log_level)
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[console],
    )

    # Silence noisy third-party loggers
    logging.getLogger("watchdog").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)


async def load_merged_config(config_path: Path, overrides: CliOverrides) -> WrapperConfig:
    """
    Load the config file and apply CLI overrides on top.

    Args:
        config_path: Config file to load (created with defaults if missing)
        overrides: Values parsed from the command line

    Returns:
        The merged config

    Raises:
        ConfigError: If loading or merging fails
    """
    config = await load_config(config_path)
    apply_cli_overrides(config, overrides)
    return config
