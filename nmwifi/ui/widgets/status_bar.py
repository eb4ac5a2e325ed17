"""Status line widget — transient status message plus radio state."""

from rich.markup import escape
from textual.app import ComposeResult
from textual.containers import Horizontal
from textual.widgets import Static

from nmwifi.core.i18n import t
from nmwifi.core.session import RADIO_DISABLED, RADIO_ENABLED, Session, StatusLevel

LEVEL_STYLES = {
    StatusLevel.INFO: "#00d4ff",
    StatusLevel.SUCCESS: "bold #00ff41",
    StatusLevel.ERROR: "bold #ff4444",
    StatusLevel.PROGRESS: "#ffaa00",
}


class StatusBar(Horizontal):
    """One-line status display driven by the session."""

    def compose(self) -> ComposeResult:
        yield Static("", id="status-text")
        yield Static("", id="radio-text")

    def update_status(self, session: Session) -> None:
        text = self.query_one("#status-text", Static)
        radio = self.query_one("#radio-text", Static)

        status = session.status
        if status is not None:
            style = LEVEL_STYLES.get(status.level, "")
            prefix = "⟳ " if status.level == StatusLevel.PROGRESS else ""
            text.update(f"[{style}]{prefix}{escape(status.text)}[/]")
        elif session.loading:
            text.update(f"[#ffaa00]⟳ {t('loading')}[/]")
        elif session.from_cache:
            text.update(f"[#888]{t('from_cache')}[/]")
        else:
            text.update("")

        if session.radio == RADIO_ENABLED:
            radio.update(f"[#00ff41]{t('radio_on')}[/]")
        elif session.radio == RADIO_DISABLED:
            radio.update(f"[#ff4444]{t('radio_off')}[/]")
        else:
            radio.update(f"[#888]{t('radio_unknown')}[/]")
