"""Tests for the classifier and display helpers."""

from datetime import datetime

import pytest

from usagewatch.models.classification import CostTier
from usagewatch.models.usage import UsageEvent
from usagewatch.services.classifier import (
    classify,
    cost_tier,
    format_model_name,
    format_time,
    format_token_count,
    format_token_total,
)
from usagewatch.services.normalizer import normalize


def _event(cost, kind="USAGE_BASED", display=None, tokens=0, model="claude-3-opus"):
    if display is None:
        display = f"${cost:.2f}" if cost is not None else "Unknown"
    return UsageEvent(
        timestamp_ms=1000,
        model=model,
        tokens=tokens,
        cost=cost,
        cost_display=display,
        kind=kind,
    )


class TestCostTier:
    @pytest.mark.parametrize(
        "cost, tier",
        [
            (0.01, CostTier.LOW),
            (0.1999, CostTier.LOW),
            (0.20, CostTier.MEDIUM),
            (0.35, CostTier.MEDIUM),
            (0.50, CostTier.MEDIUM),
            (0.5001, CostTier.HIGH),
            (12.0, CostTier.HIGH),
        ],
    )
    def test_charged_boundaries(self, cost, tier):
        assert cost_tier(_event(cost)) == tier

    def test_charged_cost_wins_over_included_kind(self):
        assert cost_tier(_event(0.05, kind="INCLUDED_IN_PRO")) == CostTier.LOW

    def test_included(self):
        assert cost_tier(_event(0, kind="INCLUDED_IN_PRO")) == CostTier.INCLUDED

    def test_included_with_unknown_cost(self):
        assert cost_tier(_event(None, kind="INCLUDED_IN_BUSINESS")) == CostTier.INCLUDED

    def test_errored(self):
        assert cost_tier(_event(0, kind="ERRORED_NOT_CHARGED")) == CostTier.ERRORED

    def test_free(self):
        assert cost_tier(_event(0)) == CostTier.FREE

    def test_unknown_cost_is_not_free(self):
        assert cost_tier(_event(None)) == CostTier.UNKNOWN


class TestClassify:
    def test_end_to_end_low(self):
        event = normalize({
            "timestamp": "1000",
            "model": "claude-3-opus",
            "tokenUsage": {"inputTokens": 10, "outputTokens": 5},
            "usageBasedCosts": "$0.05",
            "kind": "USAGE_BASED",
        })
        result = classify(event)
        assert result.tier == CostTier.LOW
        assert result.icon == "✅"
        assert result.cost_line == "✅ $0.05"
        assert result.severity == "default"

    def test_cost_line_uses_display_verbatim(self):
        result = classify(_event(0.3, display="$0.30 + $0.00"))
        assert result.cost_line == "⚠️ $0.30 + $0.00"
        assert result.severity == "warning"

    def test_high(self):
        result = classify(_event(1.25))
        assert result.icon == "🚨"
        assert result.severity == "error"

    def test_included_line(self):
        result = classify(_event(0, kind="INCLUDED_IN_PRO"))
        assert result.cost_text == "Included"
        assert result.cost_line == "💎 Included"

    def test_errored_line(self):
        result = classify(_event(0, kind="ERRORED_NOT_CHARGED"))
        assert result.cost_text == "Error — Not Charged"
        assert result.icon == "❌"

    def test_free_line(self):
        assert classify(_event(0)).cost_line == "🆓 Free"

    def test_unknown_line(self):
        result = classify(_event(None))
        assert result.tier == CostTier.UNKNOWN
        assert result.cost_line == "Unknown"

    def test_tooltip(self):
        tooltip = classify(_event(0.05, tokens=1234)).tooltip
        lines = tooltip.split("\n")
        assert lines[0] == "✅ Low Cost: $0.050"
        assert "🔢 Tokens: 1,234 tokens" in lines
        assert "🤖 Model: claude-3-opus" in lines
        assert "📊 Type: USAGE_BASED" in lines

    def test_tooltip_included(self):
        tooltip = classify(_event(0, kind="INCLUDED_IN_PRO")).tooltip
        assert tooltip.startswith("💎 Included in Plan")

    def test_deterministic(self):
        event = _event(0.42)
        assert classify(event) == classify(event)


class TestFormatting:
    @pytest.mark.parametrize(
        "model, expected",
        [
            ("auto", "🎯 Auto"),
            ("claude-4-sonnet", "🧠 Claude 4 Sonnet"),
            ("claude-3.5-sonnet", "🧠 Claude 3.5 Sonnet"),
            ("claude-3-haiku", "🧠 Claude 3 Haiku"),
            ("claude-3-opus", "🧠 Claude 3 Opus"),
            ("claude-instant", "🧠 Claude-instant"),
            ("gpt-4o", "🤖 GPT-4o"),
            ("gpt-4-turbo", "🤖 GPT-4 Turbo"),
            ("gpt-4", "🤖 GPT-4"),
            ("gpt-3.5-turbo", "🤖 GPT-3.5"),
            ("gpt-next", "🤖 GPT-NEXT"),
            ("Gemini-2.5-pro", "💎 Gemini-2.5-pro"),
            ("gemini-llama-distill", "💎 Gemini-llama-distill"),
            ("codellama-7b", "🦙 Code Llama"),
            ("llama-3-70b", "🦙 Llama-3-70b"),
            ("mistral-large", "🌬️ Mistral-large"),
            ("deepseek-r1", "Deepseek-r1"),
            ("", ""),
        ],
    )
    def test_format_model_name(self, model, expected):
        assert format_model_name(model) == expected

    @pytest.mark.parametrize(
        "tokens, expected",
        [
            (0, "0"),
            (999, "999"),
            (1000, "1k"),
            (1499, "1k"),
            (1500, "2k"),
            (15_000, "15k"),
            (1_000_000, "1.0M"),
            (2_345_678, "2.3M"),
        ],
    )
    def test_format_token_count(self, tokens, expected):
        assert format_token_count(tokens) == expected

    def test_format_token_total(self):
        assert format_token_total(1234) == "1,234 tokens"

    def test_format_time(self):
        afternoon = int(datetime(2024, 1, 1, 15, 7).timestamp() * 1000)
        midnight = int(datetime(2024, 1, 1, 0, 5).timestamp() * 1000)
        assert format_time(afternoon) == "3:07 PM"
        assert format_time(midnight) == "12:05 AM"
