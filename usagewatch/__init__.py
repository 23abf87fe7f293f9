"""usagewatch - live cost and token usage for an AI coding assistant."""

__version__ = "0.1.0"
