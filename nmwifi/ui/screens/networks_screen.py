"""Networks screen — merged network list with filter, connect and manage keys."""

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.widgets import DataTable, Static

from nmwifi.core import events as ev
from nmwifi.core.i18n import t
from nmwifi.core.session import RADIO_DISABLED, Session
from nmwifi.ui.screens.base_screen import SessionScreen
from nmwifi.ui.widgets.filter_bar import FilterBar
from nmwifi.ui.widgets.network_table import NetworkTable


class NetworksScreen(SessionScreen):
    """The main list of scanned and remembered networks."""

    TITLE_KEY = "networks_title"
    FOOTER_KEY = "footer_networks"

    BINDINGS = [
        Binding("escape", "back", "Back", show=False),
        Binding("slash", "filter", "Filter"),
        Binding("r", "refresh", "Rescan"),
        Binding("d", "disconnect", "Disconnect"),
        Binding("f", "forget", "Forget"),
        Binding("i", "info", "Info"),
        Binding("p", "profiles", "Profiles"),
        Binding("n", "hidden_network", "Hidden"),
        Binding("t", "toggle_radio", "Radio"),
        Binding("u", "toggle_hidden", "Unnamed"),
    ]

    def compose(self) -> ComposeResult:
        yield from self.compose_header()
        with Vertical(id="networks-container"):
            yield FilterBar()
            yield NetworkTable(id="network-table")
            yield Static("", id="networks-empty", classes="empty-hint")
        yield from self.compose_footer()

    def refresh_view(self, session: Session) -> None:
        super().refresh_view(session)
        table = self.query_one(NetworkTable)
        networks = session.networks
        table.load_networks(networks)

        self.query_one(FilterBar).show_filter(
            session.filtering, session.filter_draft, session.filter_query
        )
        if not session.filtering and not table.has_focus:
            table.focus()

        empty = self.query_one("#networks-empty", Static)
        if session.radio == RADIO_DISABLED:
            empty.update(f"[#ffaa00]{t('radio_disabled_hint')}[/]")
            empty.display = True
        elif not networks and not session.loading:
            empty.update(f"[#888]{t('networks_empty')}[/]")
            empty.display = True
        else:
            empty.display = False

    def _selected(self):
        return self.query_one(NetworkTable).get_selected_network()

    # ═══ Events from widgets ═══

    def on_data_table_row_selected(self, event: DataTable.RowSelected) -> None:
        ap = self._selected()
        if ap is not None:
            self.send(ev.SelectNetwork(ap))

    def on_filter_bar_filter_changed(self, event: FilterBar.FilterChanged) -> None:
        if self._session is not None and self._session.filtering:
            self.send(ev.FilterEdited(event.text))

    def on_filter_bar_filter_submitted(self, event: FilterBar.FilterSubmitted) -> None:
        self.send(ev.FilterCommitted())

    # ═══ Key actions ═══

    def action_back(self) -> None:
        session = self._session
        if session is not None and (session.filtering or session.filter_query):
            self.send(ev.FilterCancelled())
        else:
            self.send(ev.Back())

    def action_filter(self) -> None:
        self.send(ev.FilterStarted())

    def action_refresh(self) -> None:
        self.send(ev.RefreshRequested())

    def action_disconnect(self) -> None:
        self.send(ev.DisconnectRequested())

    def action_forget(self) -> None:
        self.send(ev.ForgetRequested(self._selected()))

    def action_info(self) -> None:
        self.send(ev.InfoRequested())

    def action_profiles(self) -> None:
        self.send(ev.ShowProfilesRequested())

    def action_hidden_network(self) -> None:
        self.send(ev.HiddenNetworkRequested())

    def action_toggle_radio(self) -> None:
        self.send(ev.ToggleRadioRequested())

    def action_toggle_hidden(self) -> None:
        self.send(ev.ToggleHiddenRequested())
