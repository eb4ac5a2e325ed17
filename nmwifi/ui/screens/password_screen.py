"""Text entry screens — password and hidden network SSID."""

from rich.markup import escape
from textual.app import ComposeResult
from textual.containers import Vertical
from textual.widgets import Input, Static

from nmwifi.core import events as ev
from nmwifi.core.i18n import t
from nmwifi.core.session import Session
from nmwifi.ui.screens.base_screen import SessionScreen


class PasswordScreen(SessionScreen):
    """Password prompt for a secured network (or a hidden one)."""

    TITLE_KEY = "password_placeholder"
    FOOTER_KEY = "footer_password"

    def compose(self) -> ComposeResult:
        yield from self.compose_header()
        with Vertical(id="entry-container", classes="dialog"):
            yield Static("", id="password-title", classes="dialog-title")
            yield Input(placeholder=t("password_placeholder"), password=True, id="password-input")
            yield Static("", id="password-hint", classes="dialog-hint")
        yield from self.compose_footer()

    def on_screen_resume(self) -> None:
        if not self._ready:
            return
        field = self.query_one("#password-input", Input)
        field.value = ""
        field.focus()

    def refresh_view(self, session: Session) -> None:
        super().refresh_view(session)
        self.query_one("#password-title", Static).update(
            f"[bold #00d4ff]{t('password_title', ssid=escape(session.target_ssid))}[/]"
        )
        hint = self.query_one("#password-hint", Static)
        if session.target_hidden and session.manual_ssid:
            hint.update(f"[#888]{t('password_hidden_hint')}[/]")
            hint.display = True
        else:
            hint.display = False

    def on_input_submitted(self, event: Input.Submitted) -> None:
        self.send(ev.SubmitPassword(event.value))


class HiddenSsidScreen(SessionScreen):
    """SSID prompt for a network that does not broadcast its name."""

    TITLE_KEY = "hidden_title"
    FOOTER_KEY = "footer_hidden"

    def compose(self) -> ComposeResult:
        yield from self.compose_header()
        with Vertical(id="entry-container", classes="dialog"):
            yield Static(f"[bold #00d4ff]{t('hidden_title')}[/]", classes="dialog-title")
            yield Input(placeholder=t("hidden_placeholder"), id="ssid-input")
        yield from self.compose_footer()

    def on_screen_resume(self) -> None:
        if not self._ready:
            return
        field = self.query_one("#ssid-input", Input)
        field.value = ""
        field.focus()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        self.send(ev.SubmitHiddenSsid(event.value))
