"""Tests for presentation state and cost tier models."""

from usagewatch.models.classification import CostTier
from usagewatch.models.state import PresentationState, RefreshState
from usagewatch.models.usage import TimeRange, UsageEvent


class TestCostTier:
    def test_charged(self):
        assert CostTier.LOW.is_charged
        assert CostTier.HIGH.is_charged
        assert not CostTier.FREE.is_charged
        assert not CostTier.UNKNOWN.is_charged


class TestPresentationState:
    def test_default_is_loading(self):
        state = PresentationState()
        assert state.mode == RefreshState.LOADING
        assert state.latest_event is None
        assert state.recent_events == ()
        assert state.updated_at is None

    def test_constructors(self):
        assert PresentationState.loading(TimeRange.LAST_30M).time_range == TimeRange.LAST_30M
        no_cred = PresentationState.no_credential()
        assert no_cred.mode == RefreshState.NO_CREDENTIAL
        assert no_cred.updated_at is not None
        assert PresentationState.error().mode == RefreshState.ERROR

    def test_has_activity(self):
        event = UsageEvent(timestamp_ms=1)
        ready = PresentationState(
            mode=RefreshState.READY, latest_event=event, recent_events=(event,)
        )
        assert ready.has_activity
        assert ready.event_count == 1
        assert not PresentationState(mode=RefreshState.READY).has_activity
        assert not PresentationState.error().has_activity
