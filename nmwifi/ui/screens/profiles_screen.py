"""Known profiles screen — saved Wi-Fi connection profiles."""

from rich.markup import escape
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.widgets import DataTable, Static

from nmwifi.core import events as ev
from nmwifi.core.i18n import t
from nmwifi.core.models import ConnectionProfile
from nmwifi.core.session import Session
from nmwifi.ui.screens.base_screen import SessionScreen


class ProfileTable(DataTable):
    BINDINGS = [
        Binding("j", "cursor_down", "Down", show=False),
        Binding("k", "cursor_up", "Up", show=False),
    ]

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.cursor_type = "row"
        self.zebra_stripes = True
        self._profiles: tuple[ConnectionProfile, ...] = ()

    def load_profiles(self, profiles: tuple[ConnectionProfile, ...], active_uuid: str) -> None:
        if not self.columns:
            self.add_columns(t("col_name"), t("col_ssid"), t("col_device"), t("col_uuid"))
        if profiles == self._profiles:
            return
        row = self.cursor_row
        self.clear()
        self._profiles = profiles
        for profile in profiles:
            name = escape(profile.name)
            if active_uuid and profile.uuid == active_uuid:
                name = f"[bold #00ff41]● {name}[/]"
            self.add_row(name, escape(profile.ssid or "-"), profile.device or "-", profile.uuid)
        if profiles:
            self.move_cursor(row=min(row, len(profiles) - 1))

    def get_selected_profile(self) -> ConnectionProfile | None:
        row = self.cursor_row
        if row is not None and 0 <= row < len(self._profiles):
            return self._profiles[row]
        return None


class ProfilesScreen(SessionScreen):
    TITLE_KEY = "profiles_title"
    FOOTER_KEY = "footer_profiles"

    BINDINGS = [
        Binding("escape", "back", "Back", show=False),
        Binding("f", "forget", "Forget"),
        Binding("r", "refresh", "Refresh"),
    ]

    def compose(self) -> ComposeResult:
        yield from self.compose_header()
        with Vertical(id="profiles-container"):
            yield ProfileTable(id="profile-table")
            yield Static("", id="profiles-empty", classes="empty-hint")
        yield from self.compose_footer()

    def refresh_view(self, session: Session) -> None:
        super().refresh_view(session)
        table = self.query_one(ProfileTable)
        active_uuid = session.active.profile.uuid if session.active else ""
        table.load_profiles(session.known_profiles, active_uuid)
        table.focus()

        empty = self.query_one("#profiles-empty", Static)
        empty.update(f"[#888]{t('profiles_empty')}[/]")
        empty.display = not session.known_profiles

    def on_data_table_row_selected(self, event: DataTable.RowSelected) -> None:
        profile = self.query_one(ProfileTable).get_selected_profile()
        if profile is not None:
            self.send(ev.SelectProfile(profile))

    def action_forget(self) -> None:
        profile = self.query_one(ProfileTable).get_selected_profile()
        if profile is not None:
            self.send(ev.ForgetProfileRequested(profile))

    def action_refresh(self) -> None:
        self.send(ev.RefreshRequested())
