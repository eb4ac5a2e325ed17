"""Network table widget — the merged access point list."""

from rich.markup import escape
from textual.binding import Binding
from textual.widgets import DataTable

from nmwifi.core.i18n import t
from nmwifi.core.models import AccessPoint, Security

SIGNAL_BARS = " ▂▄▆█"


def signal_bars(signal: int) -> str:
    if signal <= 0:
        return "-"
    level = min(4, 1 + signal // 25)
    return f"{SIGNAL_BARS[1:level + 1]:<4} {signal:>3}%"


def security_label(ap: AccessPoint) -> str:
    if ap.security == Security.OPEN:
        return t("security_open")
    if ap.security == Security.SECURED:
        return ap.raw_security or t("security_secured")
    return ap.raw_security or ap.security.value.upper()


def status_label(ap: AccessPoint) -> str:
    if ap.is_active:
        return f"[bold #00ff41]● {t('mark_connected')}[/]"
    if ap.is_known and not ap.in_range:
        return f"[#888]{t('mark_out_of_range')}[/]"
    if ap.is_known:
        return f"[#00d4ff]{t('mark_saved')}[/]"
    return ""


def row_keys(networks: list[AccessPoint]) -> list[str]:
    """Stable identity per row. Hidden networks without a BSSID are told apart by position."""
    keys = []
    unnamed = 0
    for ap in networks:
        if not ap.is_hidden:
            keys.append(ap.ssid)
        elif ap.bssid:
            keys.append(f"\0{ap.bssid}")
        else:
            keys.append(f"\0#{unnamed}")
            unnamed += 1
    return keys


class NetworkTable(DataTable):
    """Data table showing the merged network list. Rows are rebuilt from the session."""

    BINDINGS = [
        Binding("j", "cursor_down", "Down", show=False),
        Binding("k", "cursor_up", "Up", show=False),
    ]

    COLUMNS = [
        ("col_ssid", "ssid"),
        ("col_signal", "signal"),
        ("col_security", "security"),
        ("col_status", "status"),
        ("col_channel", "channel"),
        ("col_bssid", "bssid"),
    ]

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.cursor_type = "row"
        self.zebra_stripes = True
        self._networks: list[AccessPoint] = []

    def on_mount(self) -> None:
        self._ensure_columns()

    def _ensure_columns(self) -> None:
        if not self.columns:
            for i18n_key, key in self.COLUMNS:
                self.add_column(t(i18n_key), key=key)

    def load_networks(self, networks: list[AccessPoint]) -> None:
        """Replace rows, keeping the cursor on the same network when it is still listed."""
        if networks == self._networks:
            return
        self._ensure_columns()
        old_keys = row_keys(self._networks)
        row = self.cursor_row
        selected = old_keys[row] if row is not None and 0 <= row < len(old_keys) else None
        self.clear()
        self._networks = list(networks)

        for ap in self._networks:
            ssid = escape(ap.display_ssid)
            if ap.is_hidden:
                ssid = f"[italic #888]{ssid}[/]"
            elif ap.is_active:
                ssid = f"[bold #00ff41]{ssid}[/]"
            self.add_row(
                ssid,
                signal_bars(ap.signal),
                security_label(ap),
                status_label(ap),
                str(ap.channel) if ap.channel else "-",
                ap.bssid or "-",
            )

        if selected is not None:
            keys = row_keys(self._networks)
            if selected in keys:
                self.move_cursor(row=keys.index(selected))

    def get_selected_network(self) -> AccessPoint | None:
        """Get the network under the cursor."""
        row = self.cursor_row
        if row is not None and 0 <= row < len(self._networks):
            return self._networks[row]
        return None

    @property
    def networks(self) -> list[AccessPoint]:
        return self._networks
