"""Event normalizer: raw usage API records -> canonical UsageEvent.

The usage API is loose about shapes. Costs arrive as a number, a currency
string, an object holding one of several cost fields, or an array of
sub-costs; token counts are split over four sub-fields. Every function here
is pure and degrades to defaults instead of raising.
"""

from __future__ import annotations

import logging
import math
import re
from collections.abc import Iterable

from usagewatch.models.usage import UNKNOWN, CostInfo, UsageEvent

logger = logging.getLogger(__name__)

ZERO_DISPLAY = "$0.00"
TOKEN_FIELDS = ("cacheWriteTokens", "cacheReadTokens", "inputTokens", "outputTokens")
COST_FIELDS = ("cost", "totalCost", "amount", "price", "value")

_LEADING_FLOAT = re.compile(r"^\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")

ZERO_COST = CostInfo(0.0, ZERO_DISPLAY)


def _is_number(value) -> bool:
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        return False


def format_currency(amount: float) -> str:
    return f"${amount:.2f}"


def parse_leading_float(text: str) -> float | None:
    """Parse the numeric prefix of *text*, like ``parseFloat`` would."""
    match = _LEADING_FLOAT.match(text)
    if not match:
        return None
    parsed = float(match.group(0))
    return parsed if math.isfinite(parsed) else None


def _cost_from_string(value: str) -> CostInfo:
    if not value:
        return ZERO_COST
    parsed = parse_leading_float(value.replace("$", "").replace(",", ""))
    # The display always keeps the upstream formatting, parsable or not
    return CostInfo(parsed if parsed is not None else 0.0, value)


def _cost_from_number(value: int | float) -> CostInfo:
    return CostInfo(float(value), format_currency(value))


def _cost_from_object(value: dict) -> CostInfo:
    for name in COST_FIELDS:
        field_value = value.get(name)
        if isinstance(field_value, str):
            return _cost_from_string(field_value)
        if _is_number(field_value):
            return _cost_from_number(field_value)
    return ZERO_COST


def _cost_from_array(values: list) -> CostInfo:
    if not values:
        return ZERO_COST

    parts = [normalize_cost(item) for item in values]
    total = sum(p.amount for p in parts)
    displays = [p.display for p in parts if p.display != ZERO_DISPLAY]
    if displays:
        return CostInfo(total, " + ".join(displays))
    return CostInfo(total, format_currency(total))


def normalize_cost(value) -> CostInfo:
    """Resolve any raw cost shape into a numeric amount and display string."""
    if value is None:
        return ZERO_COST
    if isinstance(value, str):
        return _cost_from_string(value)
    if _is_number(value):
        return _cost_from_number(value)
    if isinstance(value, dict):
        return _cost_from_object(value)
    if isinstance(value, list):
        return _cost_from_array(value)
    return ZERO_COST


def count_tokens(token_usage) -> int:
    """Sum the four token sub-counts; missing or junk values count as 0."""
    if not isinstance(token_usage, dict):
        return 0
    total = 0
    for name in TOKEN_FIELDS:
        value = token_usage.get(name)
        if _is_number(value) and value > 0:
            total += int(value)
    return total


def parse_timestamp(value) -> int:
    """Parse an epoch-milliseconds timestamp, 0 when unusable."""
    if _is_number(value):
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            pass
        try:
            return int(float(value))
        except (ValueError, OverflowError):
            return 0
    return 0


def _text_or_unknown(value) -> str:
    if isinstance(value, str) and value.strip():
        return value
    return UNKNOWN


def normalize(raw) -> UsageEvent:
    """Convert one raw usage record into a UsageEvent."""
    if not isinstance(raw, dict):
        logger.debug("Skipping fields of non-object usage record: %r", type(raw).__name__)
        return UsageEvent(timestamp_ms=0)

    cost = normalize_cost(raw.get("usageBasedCosts"))
    return UsageEvent(
        timestamp_ms=parse_timestamp(raw.get("timestamp")),
        model=_text_or_unknown(raw.get("model")),
        tokens=count_tokens(raw.get("tokenUsage")),
        cost=cost.amount,
        cost_display=cost.display,
        kind=_text_or_unknown(raw.get("kind")),
    )


def normalize_all(records: Iterable) -> list[UsageEvent]:
    """Normalize a batch of records, most recent first."""
    events = [normalize(record) for record in records]
    events.sort(key=lambda e: e.timestamp_ms, reverse=True)
    return events
