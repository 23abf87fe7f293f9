"""CLI handler for launching the live usage TUI."""

from __future__ import annotations

import click


@click.command("watch")
@click.option(
    "--interval", type=int, default=None,
    help="Override refresh.interval in seconds (0 disables auto refresh)",
)
def watch_command(interval: int | None):
    """Launch the live usage monitor."""
    from usagewatch.ui.app import UsageWatchApp

    app = UsageWatchApp(interval=interval)
    app.run()
