"""nmwifi TUI Application — owns the session and routes events to screens."""

import logging
from pathlib import Path

from textual.app import App
from textual.binding import Binding
from textual.message import Message

from nmwifi.core import events as ev
from nmwifi.core.cache import load_cached_access_points, save_cached_access_points
from nmwifi.core.config import Settings, save_setting
from nmwifi.core.coordinator import Coordinator
from nmwifi.core.i18n import t
from nmwifi.core.session import Session, ViewState, reduce
from nmwifi.ui.screens.confirm_screen import ConfirmScreen
from nmwifi.ui.screens.connection_screens import ConnectingScreen, InfoScreen, ResultScreen
from nmwifi.ui.screens.networks_screen import NetworksScreen
from nmwifi.ui.screens.password_screen import HiddenSsidScreen, PasswordScreen
from nmwifi.ui.screens.profiles_screen import ProfilesScreen

logger = logging.getLogger("nmwifi.app")

CSS_PATH = Path(__file__).parent / "styles.tcss"

SCREEN_FOR_STATE = {
    ViewState.NETWORKS_LIST: "networks",
    ViewState.KNOWN_PROFILES_LIST: "profiles",
    ViewState.PASSWORD_INPUT: "password",
    ViewState.HIDDEN_SSID_INPUT: "hidden_ssid",
    ViewState.CONNECTING: "connecting",
    ViewState.CONNECTION_RESULT: "result",
    ViewState.ACTIVE_CONNECTION_INFO: "info",
    ViewState.CONFIRM_DISCONNECT: "confirm",
    ViewState.CONFIRM_FORGET: "confirm",
    ViewState.CONFIRM_OPEN_NETWORK: "confirm",
}


class WifiApp(App):
    """Wi-Fi manager TUI."""

    TITLE = "nmwifi"
    SUB_TITLE = "Wi-Fi Manager"
    CSS_PATH = CSS_PATH

    SCREENS = {
        "networks": NetworksScreen,
        "profiles": ProfilesScreen,
        "password": PasswordScreen,
        "hidden_ssid": HiddenSsidScreen,
        "connecting": ConnectingScreen,
        "result": ResultScreen,
        "info": InfoScreen,
        "confirm": ConfirmScreen,
    }

    BINDINGS = [
        Binding("q", "quit", "Quit", show=True),
        Binding("ctrl+c", "quit", "Quit", show=False, priority=True),
        Binding("question_mark", "help", "Help", show=True),
    ]

    class Delivered(Message):
        """A background result, routed through the message queue."""
        def __init__(self, event: ev.Event) -> None:
            super().__init__()
            self.event = event

    def __init__(self, gateway, settings: Settings | None = None,
                 cache_loader=load_cached_access_points,
                 cache_saver=save_cached_access_points,
                 setting_saver=save_setting):
        super().__init__()
        settings = settings or Settings()
        self.session = Session(show_hidden=settings.show_hidden)
        self.coordinator = Coordinator(
            gateway,
            self._deliver,
            connect_timeout=settings.connect_timeout,
            status_clear_delay=settings.status_clear_delay,
            cache_saver=cache_saver,
            setting_saver=setting_saver,
        )
        self._cache_loader = cache_loader

    def on_mount(self) -> None:
        """Show the network list, paint the cache, then start loading."""
        self.push_screen("networks")
        if self._cache_loader is not None:
            cached = self._cache_loader()
            if cached:
                self.apply_event(ev.CacheLoaded(tuple(cached)))
        self.apply_event(ev.Started())

    def _deliver(self, event: ev.Event) -> None:
        self.post_message(self.Delivered(event))

    def on_wifi_app_delivered(self, message: Delivered) -> None:
        self.apply_event(message.event)

    # ═══ Session ═══

    def apply_event(self, event: ev.Event) -> None:
        """Feed one event through the reducer, run its effects and re-render."""
        self.session, effects = reduce(self.session, event)
        if effects:
            logger.debug(f"{type(event).__name__} -> {[type(e).__name__ for e in effects]}")
        self.coordinator.run(effects)
        self._render_session()

    def _render_session(self) -> None:
        name = SCREEN_FOR_STATE[self.session.state]
        screen = self.get_screen(name)
        if self.screen is not screen:
            self.switch_screen(name)
        screen.show_session(self.session)

    # ═══ Actions ═══

    def action_help(self) -> None:
        self.notify(
            t("help_text"),
            title=t("help_title"),
            timeout=10,
        )

    async def action_quit(self) -> None:
        self.coordinator.shutdown()
        self.exit()
