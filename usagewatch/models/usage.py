"""Usage event domain model."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum

INCLUDED_MARKER = "INCLUDED"
ERRORED_MARKER = "ERRORED_NOT_CHARGED"
UNKNOWN = "Unknown"


class TimeRange(str, Enum):
    LAST_30M = "last30m"
    LAST_24H = "last24h"

    @property
    def milliseconds(self) -> int:
        if self is TimeRange.LAST_30M:
            return 30 * 60 * 1000
        return 24 * 60 * 60 * 1000

    @property
    def label(self) -> str:
        if self is TimeRange.LAST_30M:
            return "Last 30 minutes"
        return "Last 24 hours"


@dataclass(frozen=True)
class CostInfo:
    """Canonical cost pair resolved from a raw cost field."""

    amount: float
    display: str


@dataclass(frozen=True)
class UsageEvent:
    """One billed or billable interaction reported by the usage API."""

    timestamp_ms: int
    model: str = UNKNOWN
    tokens: int = 0
    cost: float | None = 0.0
    cost_display: str = "$0.00"
    kind: str = UNKNOWN

    @property
    def occurred_at(self) -> datetime:
        return datetime.fromtimestamp(self.timestamp_ms / 1000, tz=timezone.utc)

    @property
    def is_included(self) -> bool:
        return INCLUDED_MARKER in self.kind

    @property
    def is_errored(self) -> bool:
        return ERRORED_MARKER in self.kind

    def to_dict(self) -> dict:
        return {
            "timestamp_ms": self.timestamp_ms,
            "occurred_at": self.occurred_at.isoformat(),
            "model": self.model,
            "tokens": self.tokens,
            "cost": self.cost,
            "cost_display": self.cost_display,
            "kind": self.kind,
        }
