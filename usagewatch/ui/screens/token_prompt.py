"""Modal prompt for a session token when none could be found."""

from __future__ import annotations

import asyncio

from textual.app import App, ComposeResult
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Input, Label, Static


class TokenPromptScreen(ModalScreen[str | None]):
    """Asks for a session token. Dismisses with the token, or None if skipped."""

    DEFAULT_CSS = """
    TokenPromptScreen {
        align: center middle;
    }
    #token-dialog {
        width: 70;
        height: auto;
        border: thick $accent;
        background: $surface;
        padding: 1 2;
    }
    #token-dialog Input {
        margin: 1 0;
    }
    .btn-row {
        height: 3;
        align: center middle;
    }
    .btn-row Button {
        margin: 0 1;
    }
    """

    BINDINGS = [
        ("escape", "cancel", "Skip"),
    ]

    def compose(self) -> ComposeResult:
        with Vertical(id="token-dialog"):
            yield Static("No session token found", classes="panel-title")
            yield Label("Paste the session cookie value from the usage dashboard")
            yield Input(placeholder="Session token...", password=True, id="token-input")
            with Horizontal(classes="btn-row"):
                yield Button("Save", variant="primary", id="token-save")
                yield Button("Skip", variant="default", id="token-skip")

    def on_mount(self) -> None:
        self.query_one("#token-input", Input).focus()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "token-skip":
            self.dismiss(None)
            return
        self._submit()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        self._submit()

    def _submit(self) -> None:
        token = self.query_one("#token-input", Input).value.strip()
        self.dismiss(token or None)

    def action_cancel(self) -> None:
        self.dismiss(None)


async def prompt_token(app: App) -> str | None:
    """Show the token prompt on *app* and wait until it is dismissed."""
    answer: asyncio.Future[str | None] = asyncio.get_running_loop().create_future()

    def _on_dismiss(token: str | None) -> None:
        if not answer.done():
            answer.set_result(token)

    app.push_screen(TokenPromptScreen(), callback=_on_dismiss)
    return await answer
