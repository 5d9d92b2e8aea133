"""
Live reload command.
"""

import asyncio
import logging
import sys
from collections.abc import Callable
from pathlib import Path

import click

from mcwrap.config.app import CliOverrides, WrapperConfig
from mcwrap.config.errors import ConfigError
from mcwrap.config.watcher import ChangeKind, setup_watcher
from mcwrap.utils.logging import apply_log_levels, setup_file_logging

from .utils import load_merged_config

logger = logging.getLogger(__name__)


async def run_watch_loop(
    config_path: Path,
    overrides: CliOverrides,
    log_file: Path | None = None,
    on_reload: Callable[[WrapperConfig], None] | None = None,
) -> None:
    """
    Load the config, then re-load it every time the file changes.

    A failed re-load is logged and the previous config stays in effect.
    Returns when the watcher's event stream ends.

    Args:
        config_path: Config file to load and watch
        overrides: CLI overrides applied after every load
        log_file: If set, file logging is configured from the config
        on_reload: Called with each successfully re-loaded config
    """
    config = await load_merged_config(config_path, overrides)
    if log_file is not None:
        setup_file_logging(config.logging, log_file)

    watcher, stream = setup_watcher(config_path)
    click.echo(f"Watching {watcher.path} for changes (Ctrl-C to stop)")

    try:
        async for event in stream:
            if event.kind == ChangeKind.ERROR:
                logger.error(f"Lost watch on {event.path}, live reload is no longer active")
                continue
            if not config_path.exists():
                # Removed or renamed away; re-loading now would write a fresh default file
                logger.warning(
                    f"Config file {event.path} is gone after {event.kind.value} event, "
                    "keeping current settings"
                )
                continue

            logger.info(f"Config file changed ({event.kind.value}), reloading")
            try:
                config = await load_merged_config(config_path, overrides)
            except ConfigError as e:
                logger.error(f"Failed to reload config, keeping previous settings: {e}")
                continue

            if log_file is not None:
                apply_log_levels(config.logging)
            click.echo(f"Reloaded config after {event.kind.value} event")
            if on_reload is not None:
                on_reload(config)
    finally:
        await watcher.astop()


@click.command()
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write file logs here using the levels from the config",
)
@click.pass_context
def watch(ctx: click.Context, log_file: Path | None) -> None:
    """Watch the config file and reload it whenever it changes."""
    try:
        asyncio.run(run_watch_loop(ctx.obj["config_path"], ctx.obj["overrides"], log_file))
    except KeyboardInterrupt:
        click.echo("Stopped watching")
    except ConfigError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
