"""Classifier: cost tier, icon and display strings for a usage event."""

from __future__ import annotations

from datetime import datetime

from usagewatch.models.classification import Classification, CostTier
from usagewatch.models.usage import UsageEvent

LOW_COST_LIMIT = 0.20
HIGH_COST_LIMIT = 0.50

TIER_ICONS = {
    CostTier.LOW: "✅",
    CostTier.MEDIUM: "⚠️",
    CostTier.HIGH: "🚨",
    CostTier.INCLUDED: "💎",
    CostTier.ERRORED: "❌",
    CostTier.FREE: "🆓",
    CostTier.UNKNOWN: "❓",
}

TIER_SEVERITY = {
    CostTier.MEDIUM: "warning",
    CostTier.HIGH: "error",
}

INCLUDED_TEXT = "Included"
ERRORED_TEXT = "Error — Not Charged"
FREE_TEXT = "Free"
UNKNOWN_TEXT = "Unknown"

# (substring, icon) for the families checked after llama
_MODEL_FAMILIES = [
    ("mistral", "🌬️"),
    ("palm", "🌴"),
    ("bard", "🎭"),
    ("codex", "💻"),
]

_CLAUDE_VARIANTS = [
    (("4", "sonnet"), "Claude 4 Sonnet"),
    (("3.5", "sonnet"), "Claude 3.5 Sonnet"),
    (("3", "haiku"), "Claude 3 Haiku"),
    (("3", "opus"), "Claude 3 Opus"),
]

_GPT_VARIANTS = [
    (("4o",), "GPT-4o"),
    (("4", "turbo"), "GPT-4 Turbo"),
    (("4",), "GPT-4"),
    (("3.5",), "GPT-3.5"),
]


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def cost_tier(event: UsageEvent) -> CostTier:
    """Pick the tier; the rule order matters and is evaluated top to bottom."""
    cost = event.cost
    if _is_number(cost) and cost > 0:
        if cost < LOW_COST_LIMIT:
            return CostTier.LOW
        if cost <= HIGH_COST_LIMIT:
            return CostTier.MEDIUM
        return CostTier.HIGH
    if event.is_included:
        return CostTier.INCLUDED
    if event.is_errored:
        return CostTier.ERRORED
    if _is_number(cost) and cost == 0:
        return CostTier.FREE
    return CostTier.UNKNOWN


def cost_text(event: UsageEvent, tier: CostTier | None = None) -> str:
    tier = tier or cost_tier(event)
    if tier.is_charged:
        return event.cost_display
    return {
        CostTier.INCLUDED: INCLUDED_TEXT,
        CostTier.ERRORED: ERRORED_TEXT,
        CostTier.FREE: FREE_TEXT,
    }.get(tier, UNKNOWN_TEXT)


def _tooltip_status(event: UsageEvent, tier: CostTier) -> str:
    icon = TIER_ICONS[tier]
    if tier.is_charged:
        label = {CostTier.LOW: "Low", CostTier.MEDIUM: "Medium", CostTier.HIGH: "High"}[tier]
        return f"{icon} {label} Cost: ${event.cost:.3f}"
    if tier == CostTier.INCLUDED:
        return f"{icon} Included in Plan"
    if tier == CostTier.ERRORED:
        return f"{icon} {ERRORED_TEXT}"
    if tier == CostTier.FREE:
        return f"{icon} {FREE_TEXT}"
    return f"{icon} Unknown Cost"


def build_tooltip(event: UsageEvent, tier: CostTier | None = None) -> str:
    tier = tier or cost_tier(event)
    return "\n".join([
        _tooltip_status(event, tier),
        f"🕐 Time: {format_time(event.timestamp_ms)}",
        f"🔢 Tokens: {format_token_total(event.tokens)}",
        f"🤖 Model: {event.model}",
        f"📊 Type: {event.kind}",
    ])


def classify(event: UsageEvent) -> Classification:
    """Derive the tier and all display strings for *event*."""
    tier = cost_tier(event)
    icon = TIER_ICONS[tier]
    text = cost_text(event, tier)
    line = text if tier == CostTier.UNKNOWN else f"{icon} {text}"
    return Classification(
        tier=tier,
        icon=icon,
        cost_text=text,
        cost_line=line,
        tooltip=build_tooltip(event, tier),
        severity=TIER_SEVERITY.get(tier, "default"),
    )


def _capitalize(model: str) -> str:
    return model[:1].upper() + model[1:]


def format_model_name(model: str) -> str:
    """Pretty display name for a raw model identifier."""
    lower = model.lower()

    if lower == "auto":
        return "🎯 Auto"

    if "claude" in lower:
        for needles, name in _CLAUDE_VARIANTS:
            if all(n in lower for n in needles):
                return f"🧠 {name}"
        return f"🧠 {_capitalize(model)}"

    if "gpt" in lower:
        for needles, name in _GPT_VARIANTS:
            if all(n in lower for n in needles):
                return f"🤖 {name}"
        return f"🤖 {model.upper()}"

    if "gemini" in lower:
        return f"💎 {_capitalize(model)}"

    if "llama" in lower:
        if "code" in lower:
            return "🦙 Code Llama"
        return f"🦙 {_capitalize(model)}"

    for needle, icon in _MODEL_FAMILIES:
        if needle in lower:
            return f"{icon} {_capitalize(model)}"

    return _capitalize(model)


def format_token_count(tokens: int) -> str:
    """Compact token count: 1.2M, 15k, 999."""
    if tokens >= 1_000_000:
        return f"{tokens / 1_000_000:.1f}M"
    if tokens >= 1_000:
        return f"{int(tokens / 1_000 + 0.5)}k"
    return str(tokens)


def format_token_total(tokens: int) -> str:
    return f"{tokens:,} tokens"


def format_time(timestamp_ms: int) -> str:
    """Local 12-hour clock time, e.g. ``3:07 PM``."""
    try:
        moment = datetime.fromtimestamp(timestamp_ms / 1000)
    except (OverflowError, OSError, ValueError):
        return "--:--"
    return f"{moment.hour % 12 or 12}:{moment.minute:02d} {'AM' if moment.hour < 12 else 'PM'}"
