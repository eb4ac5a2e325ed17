"""Connection screens — progress, result, and active connection details."""

from rich.markup import escape
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.widgets import LoadingIndicator, Static

from nmwifi.core import events as ev
from nmwifi.core.i18n import t
from nmwifi.core.models import DeviceDetail
from nmwifi.core.session import Session
from nmwifi.ui.screens.base_screen import SessionScreen


class ConnectingScreen(SessionScreen):
    TITLE_KEY = "loading"
    FOOTER_KEY = "footer_connecting"

    def compose(self) -> ComposeResult:
        yield from self.compose_header()
        with Vertical(id="connecting-container", classes="dialog"):
            yield Static("", id="connecting-text", classes="dialog-title")
            yield LoadingIndicator()
        yield from self.compose_footer()

    def refresh_view(self, session: Session) -> None:
        super().refresh_view(session)
        self.query_one("#connecting-text", Static).update(
            f"[bold #ffaa00]{t('connecting_to', ssid=escape(session.target_ssid))}[/]"
        )


class ResultScreen(SessionScreen):
    TITLE_KEY = "app_subtitle"
    FOOTER_KEY = "footer_result"

    BINDINGS = [
        Binding("escape", "back", "Back", show=False),
        Binding("enter", "confirm", "OK", show=False),
    ]

    def compose(self) -> ComposeResult:
        yield from self.compose_header()
        with Vertical(id="result-container", classes="dialog"):
            yield Static("", id="result-text", classes="dialog-title")
            yield Static("", id="result-detail", classes="dialog-hint")
        yield from self.compose_footer()

    def refresh_view(self, session: Session) -> None:
        super().refresh_view(session)
        outcome = session.outcome
        text = self.query_one("#result-text", Static)
        detail = self.query_one("#result-detail", Static)
        if outcome is None:
            text.update("")
            detail.update("")
            return
        if outcome.success:
            text.update(f"[bold #00ff41]✓ {escape(outcome.message)}[/]")
        else:
            text.update(f"[bold #ff4444]✗ {escape(outcome.message)}[/]")
        detail.update(f"[#888]{escape(outcome.detail)}[/]" if outcome.detail else "")

    def action_confirm(self) -> None:
        self.send(ev.Confirm())


def format_detail(detail: DeviceDetail) -> str:
    na = t("not_available")
    rows = [
        ("info_device", detail.device),
        ("info_type", detail.type),
        ("info_state", detail.state),
        ("info_connection", detail.connection),
        ("info_mac", detail.mac),
        ("info_ipv4", detail.net_v4),
        ("info_gateway4", detail.gateway_v4),
        ("info_dns", ", ".join(detail.dns)),
        ("info_ipv6", detail.net_v6),
        ("info_gateway6", detail.gateway_v6),
    ]
    width = max(len(t(key)) for key, _ in rows)
    return "\n".join(
        f"[#00d4ff]{t(key):<{width}}[/]  {escape(value) if value else na}"
        for key, value in rows
    )


class InfoScreen(SessionScreen):
    TITLE_KEY = "info_title"
    FOOTER_KEY = "footer_info"

    BINDINGS = [
        Binding("escape", "back", "Back", show=False),
        Binding("enter", "confirm", "OK", show=False),
    ]

    def compose(self) -> ComposeResult:
        yield from self.compose_header()
        with Vertical(id="info-container", classes="dialog"):
            yield Static("", id="info-text")
            yield LoadingIndicator(id="info-loading")
        yield from self.compose_footer()

    def refresh_view(self, session: Session) -> None:
        super().refresh_view(session)
        text = self.query_one("#info-text", Static)
        loading = self.query_one("#info-loading", LoadingIndicator)
        if session.detail_error:
            text.update(f"[#ff4444]{escape(session.detail_error)}[/]")
            loading.display = False
        elif session.device_detail is not None:
            text.update(format_detail(session.device_detail))
            loading.display = False
        else:
            text.update("")
            loading.display = True

    def action_confirm(self) -> None:
        self.send(ev.Confirm())
