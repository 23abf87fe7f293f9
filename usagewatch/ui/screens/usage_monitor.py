"""Usage monitor screen - live status line and recent sessions."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from textual.app import ComposeResult
from textual.screen import Screen
from textual.widgets import Footer, Static

from usagewatch.models.state import PresentationState
from usagewatch.models.usage import TimeRange
from usagewatch.services.presentation import status_line
from usagewatch.ui.widgets.session_list import SessionList
from usagewatch.ui.widgets.status_bar import UsageStatusBar

if TYPE_CHECKING:
    from usagewatch.context import AppContext

logger = logging.getLogger(__name__)

CONFIG_POLL_SECONDS = 2.0


class UsageMonitorScreen(Screen):
    """Shows the latest usage event and the recent sessions list."""

    BINDINGS = [
        ("r", "refresh", "Refresh"),
        ("l", "toggle_range", "Range"),
        ("q", "quit", "Quit"),
    ]

    def __init__(self) -> None:
        super().__init__()
        self._unsubscribe = None
        self._config_mtime: float | None = None

    @property
    def ctx(self) -> AppContext | None:
        """The app's context, or None if it failed to load."""
        return getattr(self.app, "ctx", None)

    def has_context(self) -> bool:
        return self.ctx is not None

    def compose(self) -> ComposeResult:
        yield UsageStatusBar(id="usage-status")
        yield Static("", id="usage-updated")
        yield SessionList(id="usage-sessions")
        yield Footer()

    def on_mount(self) -> None:
        if not self.has_context():
            return
        scheduler = self.ctx.scheduler
        self._render_state(scheduler.current)
        self._unsubscribe = scheduler.subscribe(self._render_state)
        self._config_mtime = self._read_config_mtime()
        scheduler.start()
        self.set_interval(CONFIG_POLL_SECONDS, self._check_config)

    def on_unmount(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def _render_state(self, state: PresentationState) -> None:
        try:
            self.query_one(UsageStatusBar).update_status(status_line(state))
            self.query_one(SessionList).update_from_state(state)
            updated = self.query_one("#usage-updated", Static)
            if state.updated_at is not None:
                stamp = state.updated_at.astimezone().strftime("%H:%M:%S")
                updated.update(f"Updated {stamp} | {state.event_count} events")
        except Exception:
            logger.debug("Could not render usage state", exc_info=True)

    def _read_config_mtime(self) -> float | None:
        try:
            return self.ctx.config.config_path.stat().st_mtime
        except OSError:
            return None

    def _check_config(self) -> None:
        """Apply refresh settings when the config file changes on disk."""
        mtime = self._read_config_mtime()
        if mtime is None or mtime == self._config_mtime:
            return
        self._config_mtime = mtime
        try:
            if self.ctx.reload_config():
                self.notify("Refresh settings reloaded")
        except Exception:
            logger.warning("Failed to reload config", exc_info=True)

    def action_refresh(self) -> None:
        if not self.has_context():
            return
        self.ctx.resolver.reset_prompt()
        self.ctx.scheduler.request_refresh()

    def action_toggle_range(self) -> None:
        if not self.has_context():
            return
        scheduler = self.ctx.scheduler
        if scheduler.time_range == TimeRange.LAST_24H:
            scheduler.set_time_range(TimeRange.LAST_30M)
        else:
            scheduler.set_time_range(TimeRange.LAST_24H)
        self.notify(f"Showing {scheduler.time_range.label.lower()}")
        scheduler.request_refresh()

    def action_quit(self) -> None:
        self.app.exit()
