"""Tests for status line and session row presentation."""

from usagewatch.models.state import PresentationState, RefreshState
from usagewatch.models.usage import TimeRange, UsageEvent
from usagewatch.services.classifier import classify
from usagewatch.services.presentation import (
    ERROR_TEXT,
    LOADING_TEXT,
    NO_ACTIVITY_TEXT,
    NO_TOKEN_TEXT,
    list_placeholder,
    session_rows,
    status_line,
)


def _ready(*events, time_range=TimeRange.LAST_24H):
    latest = events[0] if events else None
    return PresentationState(
        mode=RefreshState.READY,
        latest_event=latest,
        recent_events=tuple(events),
        latest_classification=classify(latest) if latest else None,
        time_range=time_range,
    )


def _event(timestamp_ms=1000, cost=0.05, display="$0.05", tokens=1500, kind="USAGE_BASED"):
    return UsageEvent(
        timestamp_ms=timestamp_ms,
        model="gpt-4o",
        tokens=tokens,
        cost=cost,
        cost_display=display,
        kind=kind,
    )


class TestStatusLine:
    def test_loading(self):
        line = status_line(PresentationState.loading())
        assert line.text == LOADING_TEXT
        assert line.severity == "default"

    def test_idle_renders_as_loading(self):
        assert status_line(PresentationState(mode=RefreshState.IDLE)).text == LOADING_TEXT

    def test_no_credential(self):
        line = status_line(PresentationState.no_credential())
        assert line.text == NO_TOKEN_TEXT
        assert line.severity == "warning"
        assert "token" in line.tooltip

    def test_error(self):
        line = status_line(PresentationState.error())
        assert line.text == ERROR_TEXT
        assert line.severity == "error"

    def test_no_activity(self):
        assert status_line(_ready()).text == NO_ACTIVITY_TEXT

    def test_latest_event(self):
        line = status_line(_ready(_event()))
        assert line.text == "✅ Usage: $0.05 | 2k"
        assert line.tooltip.startswith("✅ Low Cost")

    def test_high_cost_severity(self):
        line = status_line(_ready(_event(cost=2.5, display="$2.50")))
        assert line.text.startswith("🚨 Usage: $2.50")
        assert line.severity == "error"

    def test_errored_is_shortened(self):
        event = _event(cost=0, display="$0.00", kind="ERRORED_NOT_CHARGED", tokens=12)
        assert status_line(_ready(event)).text == "❌ Usage: Error | 12"

    def test_included(self):
        event = _event(cost=0, display="$0.00", kind="INCLUDED_IN_PRO", tokens=2_500_000)
        assert status_line(_ready(event)).text == "💎 Usage: Included | 2.5M"


class TestSessionRows:
    def test_rows_keep_order(self):
        state = _ready(_event(timestamp_ms=300), _event(timestamp_ms=200), _event(timestamp_ms=100))
        rows = session_rows(state)
        assert [r.event.timestamp_ms for r in rows] == [300, 200, 100]

    def test_row_text(self):
        row = session_rows(_ready(_event(tokens=1234)))[0]
        assert row.title == "✅ $0.05"
        parts = row.description.split(" • ")
        assert parts[0] == "1,234 tokens"
        assert parts[2] == "🤖 GPT-4o"
        assert parts[3] == "USAGE_BASED"

    def test_no_rows_unless_ready(self):
        assert session_rows(PresentationState.error()) == []
        assert session_rows(PresentationState.loading()) == []


class TestListPlaceholder:
    def test_loading(self):
        state = PresentationState.loading(TimeRange.LAST_30M)
        assert list_placeholder(state) == ("Loading...", "Last 30 minutes")

    def test_no_credential(self):
        label, _ = list_placeholder(PresentationState.no_credential())
        assert label == "No session token"

    def test_error(self):
        assert list_placeholder(PresentationState.error()) == (
            "Error fetching data",
            "Check token/connection",
        )

    def test_empty(self):
        assert list_placeholder(_ready()) == ("No usage data", "Last 24 hours")

    def test_rows_present(self):
        assert list_placeholder(_ready(_event())) is None
