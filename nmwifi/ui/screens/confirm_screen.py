"""Confirmation dialog — disconnect, forget, and open network connect."""

from rich.markup import escape
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.widgets import Static

from nmwifi.core import events as ev
from nmwifi.core.i18n import t
from nmwifi.core.session import Session, ViewState
from nmwifi.ui.screens.base_screen import SessionScreen

PROMPTS = {
    ViewState.CONFIRM_DISCONNECT: "confirm_disconnect",
    ViewState.CONFIRM_FORGET: "confirm_forget",
    ViewState.CONFIRM_OPEN_NETWORK: "confirm_open",
}


class ConfirmScreen(SessionScreen):
    TITLE_KEY = "app_subtitle"
    FOOTER_KEY = "footer_confirm"

    BINDINGS = [
        Binding("escape", "back", "Cancel", show=False),
        Binding("n", "back", "No", show=False),
        Binding("enter", "confirm", "Confirm", show=False),
        Binding("y", "confirm", "Yes", show=False),
    ]

    def compose(self) -> ComposeResult:
        yield from self.compose_header()
        with Vertical(id="confirm-container", classes="dialog"):
            yield Static("", id="confirm-text", classes="dialog-title")
        yield from self.compose_footer()

    def refresh_view(self, session: Session) -> None:
        super().refresh_view(session)
        key = PROMPTS.get(session.state)
        if key is None:
            return
        label = escape(session.confirm_label)
        self.query_one("#confirm-text", Static).update(
            f"[bold #ffaa00]{t(key, name=label, ssid=label)}[/]"
        )

    def action_confirm(self) -> None:
        self.send(ev.Confirm())
