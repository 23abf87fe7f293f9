"""Status bar widget."""

from __future__ import annotations

from textual.widgets import Static

from usagewatch.models.state import StatusLine

SEVERITIES = ("default", "warning", "error")


class UsageStatusBar(Static):
    """One-line usage summary, coloured by cost severity. No IO."""

    DEFAULT_CSS = """
    UsageStatusBar {
        height: 1;
        padding: 0 1;
    }
    UsageStatusBar.-warning {
        background: $warning;
        color: $text;
    }
    UsageStatusBar.-error {
        background: $error;
        color: $text;
    }
    """

    def __init__(self, **kwargs) -> None:
        super().__init__("", **kwargs)

    def update_status(self, line: StatusLine) -> None:
        self.update(line.text)
        self.tooltip = line.tooltip or None
        for severity in SEVERITIES:
            self.set_class(line.severity == severity, f"-{severity}")
