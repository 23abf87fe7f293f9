"""Recent sessions list widget."""

from __future__ import annotations

from rich.text import Text
from textual.widgets import RichLog

from usagewatch.models.state import PresentationState
from usagewatch.services.presentation import list_placeholder, session_rows

SEVERITY_STYLES = {
    "warning": "bold yellow",
    "error": "bold red",
}


class SessionList(RichLog):
    """Renders recent usage sessions as cards, most recent first."""

    def __init__(self, **kwargs) -> None:
        super().__init__(wrap=True, markup=False, **kwargs)

    def update_from_state(self, state: PresentationState) -> None:
        self.clear()

        placeholder = list_placeholder(state)
        if placeholder:
            label, description = placeholder
            self.write(Text.assemble((label, "bold"), "  ", (description, "dim")))
            return

        self.write(Text.assemble(("📱 Recent Sessions", "bold"), "  ", (state.time_range.label, "dim")))
        self.write("")
        for row in session_rows(state):
            style = SEVERITY_STYLES.get(row.classification.severity, "")
            self.write(Text(row.title, style=style))
            self.write(Text(f"    {row.description}", style="dim"))
