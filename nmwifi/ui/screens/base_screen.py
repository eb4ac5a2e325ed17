"""Base screen — every view is a projection of the session."""

from textual.app import ComposeResult
from textual.binding import Binding
from textual.screen import Screen
from textual.widgets import Static

from nmwifi.core import events as ev
from nmwifi.core.i18n import t
from nmwifi.core.session import Session
from nmwifi.ui.widgets.status_bar import StatusBar


class SessionScreen(Screen):
    """Screen that renders a Session and turns keys into session events."""

    TITLE_KEY = "app_title"
    FOOTER_KEY = ""

    BINDINGS = [
        Binding("escape", "back", "Back", show=False),
    ]

    def __init__(self):
        super().__init__()
        self._session: Session | None = None
        self._ready = False

    def compose_header(self) -> ComposeResult:
        yield Static(
            f"[bold #00ff41]◆ {t('app_title').upper()}[/] [#1a3a1a]//[/] "
            f"[#00d4ff]{t(self.TITLE_KEY).upper()}[/]",
            id="header",
        )

    def compose_footer(self) -> ComposeResult:
        yield StatusBar(id="status-bar")
        yield Static(f" [#3a4a3a]{t(self.FOOTER_KEY)}[/]", id="footer")

    def on_mount(self) -> None:
        self._ready = True
        if self._session is not None:
            self.refresh_view(self._session)

    def show_session(self, session: Session) -> None:
        self._session = session
        if self._ready:
            self.refresh_view(session)

    def refresh_view(self, session: Session) -> None:
        for bar in self.query(StatusBar):
            bar.update_status(session)

    def send(self, event: ev.Event) -> None:
        self.app.apply_event(event)

    def action_back(self) -> None:
        self.send(ev.Back())
