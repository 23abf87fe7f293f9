"""Main Textual TUI application."""

from __future__ import annotations

from functools import partial

from textual.app import App

from usagewatch.ui.screens.token_prompt import prompt_token
from usagewatch.ui.screens.usage_monitor import UsageMonitorScreen


class UsageWatchApp(App):
    """usagewatch TUI application."""

    TITLE = "usagewatch"

    BINDINGS = [
        ("q", "quit", "Quit"),
    ]

    def __init__(self, interval: int | None = None) -> None:
        super().__init__()
        self.ctx = None  # AppContext, set in on_mount
        self._interval = interval

    async def on_mount(self) -> None:
        """Build the AppContext and show the usage monitor."""
        from usagewatch.context import AppContext

        try:
            self.ctx = AppContext(prompt=partial(prompt_token, self))
        except Exception as e:
            self.ctx = None
            self.notify(f"Could not load configuration\n({e})", severity="error")
        else:
            if self._interval is not None:
                self.ctx.scheduler.set_interval(self._interval)

        self.push_screen(UsageMonitorScreen())

    async def on_unmount(self) -> None:
        """Stop the scheduler and close the HTTP client on exit."""
        if self.ctx:
            await self.ctx.close()

    def action_quit(self) -> None:
        self.exit()
