"""CLI handler for a one-shot usage status check."""

from __future__ import annotations

import asyncio
import json
import sys

import click

from usagewatch.models.state import PresentationState, RefreshState
from usagewatch.models.usage import TimeRange
from usagewatch.services.presentation import list_placeholder, session_rows, status_line


def _run(coro):
    return asyncio.run(coro)


async def _prompt_for_token() -> str | None:
    token = await asyncio.to_thread(
        click.prompt,
        "No session token found. Paste your session token (empty to skip)",
        hide_input=True,
        default="",
        show_default=False,
    )
    return token or None


async def load_status(time_range: TimeRange | None, interactive: bool) -> PresentationState:
    """Run a single refresh cycle and return the resulting snapshot."""
    from usagewatch.context import AppContext

    ctx = AppContext(prompt=_prompt_for_token if interactive else None)
    try:
        if time_range is not None:
            ctx.scheduler.set_time_range(time_range)
        return await ctx.scheduler.refresh()
    finally:
        await ctx.close()


def _state_to_json(state: PresentationState, limit: int) -> str:
    line = status_line(state)
    return json.dumps(
        {
            "mode": state.mode.value,
            "status": line.text,
            "range": state.time_range.value,
            "events": [e.to_dict() for e in state.recent_events[:limit]],
        },
        indent=2,
        ensure_ascii=False,
    )


@click.command("status")
@click.option(
    "--range", "time_range",
    type=click.Choice([t.value for t in TimeRange]),
    default=None,
    help="Lookback window (defaults to refresh.lookback)",
)
@click.option("--limit", default=20, show_default=True, help="Number of sessions to list")
@click.option("--json", "as_json", is_flag=True, help="Print machine-readable output")
def status_command(time_range: str | None, limit: int, as_json: bool):
    """Fetch usage once and print the status line and recent sessions."""
    interactive = sys.stdin.isatty() and not as_json
    state = _run(load_status(TimeRange(time_range) if time_range else None, interactive))

    if as_json:
        click.echo(_state_to_json(state, limit))
    else:
        click.echo(status_line(state).text)
        placeholder = list_placeholder(state)
        if placeholder:
            label, description = placeholder
            click.echo(f"  {label} ({description})")
        else:
            click.echo(f"\nRecent sessions ({state.time_range.label}):")
            for row in session_rows(state)[:limit]:
                click.echo(f"  {row.title}")
                click.echo(f"      {row.description}")

    if state.mode == RefreshState.ERROR:
        raise SystemExit(1)
    if state.mode == RefreshState.NO_CREDENTIAL:
        raise SystemExit(2)
