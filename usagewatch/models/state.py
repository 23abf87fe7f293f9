"""Presentation state published by the refresh scheduler."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum

from usagewatch.models.classification import Classification
from usagewatch.models.usage import TimeRange, UsageEvent


class RefreshState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    NO_CREDENTIAL = "no_credential"
    ERROR = "error"


@dataclass(frozen=True)
class PresentationState:
    """Complete snapshot of what consumers render.

    Replaced wholesale at the end of every refresh cycle.
    """

    mode: RefreshState = RefreshState.LOADING
    latest_event: UsageEvent | None = None
    recent_events: tuple[UsageEvent, ...] = ()
    latest_classification: Classification | None = None
    time_range: TimeRange = TimeRange.LAST_24H
    updated_at: datetime | None = None

    @classmethod
    def loading(cls, time_range: TimeRange = TimeRange.LAST_24H) -> PresentationState:
        return cls(mode=RefreshState.LOADING, time_range=time_range)

    @classmethod
    def no_credential(cls, time_range: TimeRange = TimeRange.LAST_24H) -> PresentationState:
        return cls(
            mode=RefreshState.NO_CREDENTIAL,
            time_range=time_range,
            updated_at=datetime.now(timezone.utc),
        )

    @classmethod
    def error(cls, time_range: TimeRange = TimeRange.LAST_24H) -> PresentationState:
        return cls(
            mode=RefreshState.ERROR,
            time_range=time_range,
            updated_at=datetime.now(timezone.utc),
        )

    @property
    def has_activity(self) -> bool:
        return self.mode == RefreshState.READY and self.latest_event is not None

    @property
    def event_count(self) -> int:
        return len(self.recent_events)


@dataclass
class StatusLine:
    """Single-line status summary for a status bar style consumer."""

    text: str
    tooltip: str = ""
    severity: str = "default"
