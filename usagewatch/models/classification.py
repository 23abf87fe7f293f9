"""Cost tier classification model."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class CostTier(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    INCLUDED = "included"
    ERRORED = "errored"
    FREE = "free"
    UNKNOWN = "unknown"

    @property
    def is_charged(self) -> bool:
        return self in (CostTier.LOW, CostTier.MEDIUM, CostTier.HIGH)


@dataclass(frozen=True)
class Classification:
    """Presentation fields derived from a single usage event."""

    tier: CostTier
    icon: str
    cost_text: str  # cost without icon: "$0.05", "Included", "Free", ...
    cost_line: str  # icon + cost text, as shown in the session list
    tooltip: str
    severity: str = "default"  # default, warning, error
