"""Presentation: status line and session rows derived from a snapshot.

No IO - consumers (CLI, TUI) render these strings as they see fit.
"""

from __future__ import annotations

from dataclasses import dataclass

from usagewatch.models.classification import Classification, CostTier
from usagewatch.models.state import PresentationState, RefreshState, StatusLine
from usagewatch.models.usage import UsageEvent
from usagewatch.services.classifier import (
    classify,
    format_model_name,
    format_time,
    format_token_count,
    format_token_total,
)

LOADING_TEXT = "⟳ Usage: Loading..."
NO_ACTIVITY_TEXT = "Usage: No activity"
NO_TOKEN_TEXT = "Usage: No Token"
ERROR_TEXT = "Usage: Error"

REFRESH_HINT = "Press r to refresh usage data"
NO_TOKEN_TOOLTIP = (
    "No session token configured. Run 'usagewatch token set' or sign in "
    "to the editor so the token can be discovered."
)
ERROR_TOOLTIP = "Failed to load usage data. Press r to retry or configure a token."


@dataclass(frozen=True)
class SessionRow:
    """One line of the recent sessions list."""

    event: UsageEvent
    classification: Classification

    @property
    def title(self) -> str:
        return self.classification.cost_line

    @property
    def description(self) -> str:
        return " • ".join([
            format_token_total(self.event.tokens),
            format_time(self.event.timestamp_ms),
            format_model_name(self.event.model),
            self.event.kind,
        ])


def _status_cost(classification: Classification) -> str:
    # The status line is narrower than the list, so errors are just "Error"
    if classification.tier == CostTier.ERRORED:
        return "Error"
    return classification.cost_text


def status_line(state: PresentationState) -> StatusLine:
    """Single-line status summary for *state*."""
    if state.mode in (RefreshState.LOADING, RefreshState.IDLE):
        return StatusLine(text=LOADING_TEXT, tooltip=REFRESH_HINT)
    if state.mode == RefreshState.NO_CREDENTIAL:
        return StatusLine(text=NO_TOKEN_TEXT, tooltip=NO_TOKEN_TOOLTIP, severity="warning")
    if state.mode == RefreshState.ERROR:
        return StatusLine(text=ERROR_TEXT, tooltip=ERROR_TOOLTIP, severity="error")

    if not state.has_activity:
        return StatusLine(text=NO_ACTIVITY_TEXT, tooltip=REFRESH_HINT)

    event = state.latest_event

    classification = state.latest_classification or classify(event)
    text = (
        f"{classification.icon} Usage: {_status_cost(classification)} | "
        f"{format_token_count(event.tokens)}"
    )
    return StatusLine(
        text=text,
        tooltip=classification.tooltip,
        severity=classification.severity,
    )


def session_rows(state: PresentationState) -> list[SessionRow]:
    """Rows for the recent sessions list, most recent first."""
    if state.mode != RefreshState.READY:
        return []
    return [SessionRow(event=e, classification=classify(e)) for e in state.recent_events]


def list_placeholder(state: PresentationState) -> tuple[str, str] | None:
    """(label, description) shown instead of rows, or None when there are rows."""
    if state.mode in (RefreshState.LOADING, RefreshState.IDLE):
        return ("Loading...", state.time_range.label)
    if state.mode == RefreshState.NO_CREDENTIAL:
        return ("No session token", "Configure with 'usagewatch token set'")
    if state.mode == RefreshState.ERROR:
        return ("Error fetching data", "Check token/connection")
    if not state.recent_events:
        return ("No usage data", state.time_range.label)
    return None
