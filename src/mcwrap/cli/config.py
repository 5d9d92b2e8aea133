"""
Config file commands.
"""

import asyncio
import sys

import click

from mcwrap.config.codec import encode
from mcwrap.config.errors import ConfigError

from .utils import load_merged_config


@click.command()
@click.pass_context
def init(ctx: click.Context) -> None:
    """Create the config file with defaults if it does not exist."""
    config_path = ctx.obj["config_path"]
    existed = config_path.exists()

    try:
        asyncio.run(load_merged_config(config_path, ctx.obj["overrides"]))
    except ConfigError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if existed:
        click.echo(f"Config file already exists at {config_path}")
    else:
        click.echo(f"Created default config file at {config_path}")
        click.echo("Fill in the bridge token and channel ID before enabling the bridge")


@click.command()
@click.pass_context
def show(ctx: click.Context) -> None:
    """Print the effective config after applying CLI overrides."""
    try:
        config = asyncio.run(load_merged_config(ctx.obj["config_path"], ctx.obj["overrides"]))
    except ConfigError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(encode(config).decode("utf-8"), nl=False)
