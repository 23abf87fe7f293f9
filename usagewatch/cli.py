"""Click CLI definitions - main entry point."""

from __future__ import annotations

import logging
import sys

import click

from usagewatch.commands.config_cmd import config_group
from usagewatch.commands.status_cmd import status_command
from usagewatch.commands.token_cmd import token_group
from usagewatch.commands.watch_cmd import watch_command


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx, debug: bool) -> None:
    """usagewatch - live cost and token usage of your coding assistant."""
    level = logging.DEBUG if debug else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )
    ctx.ensure_object(dict)
    ctx.obj["debug"] = debug


cli.add_command(status_command, "status")
cli.add_command(watch_command, "watch")
cli.add_command(config_group, "config")
cli.add_command(token_group, "token")


if __name__ == "__main__":
    cli()
