"""
mcwrap CLI entry point.
"""

from pathlib import Path

import click

from mcwrap.config.app import CliOverrides, get_default_config_path

from .config import init, show
from .utils import setup_logging
from .watch import watch


@click.group()
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Path to the config file (default: $MCWRAP_CONFIG or ./mcwrap-config.yaml)",
)
@click.option(
    "--bridge-to-discord",
    is_flag=True,
    help="Enable the chat bridge for this run (token and channel must be configured)",
)
@click.option(
    "--server-path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Server jar to run instead of the configured one",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose debug output",
)
@click.pass_context
def cli(
    ctx: click.Context,
    config_path: Path | None,
    bridge_to_discord: bool,
    server_path: Path | None,
    verbose: bool,
) -> None:
    """mcwrap - Server wrapper configuration and live reload."""
    setup_logging(verbose=verbose)

    # Store shared options in context for subcommands
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path.expanduser() if config_path else get_default_config_path()
    ctx.obj["overrides"] = CliOverrides(enable_bridge=bridge_to_discord, server_path=server_path)


# Register commands
cli.add_command(init)
cli.add_command(show)
cli.add_command(watch)
