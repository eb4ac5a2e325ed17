import pytest

from nmwifi.core import events as ev
from nmwifi.core.config import Settings
from nmwifi.core.models import AccessPoint, ConnectionProfile
from nmwifi.core.session import ViewState
from nmwifi.ui.app import WifiApp
from nmwifi.ui.screens.confirm_screen import ConfirmScreen
from nmwifi.ui.screens.networks_screen import NetworksScreen
from nmwifi.ui.screens.profiles_screen import ProfilesScreen, ProfileTable
from nmwifi.ui.widgets.network_table import NetworkTable


class FakeGateway:
    def __init__(self):
        self.calls = []

    async def list_access_points(self, rescan=False):
        return [
            AccessPoint.scanned("Home", bssid="aa", signal=80, security="WPA2"),
            AccessPoint.scanned("Cafe", bssid="bb", signal=40, security="--"),
        ]

    async def list_connection_profiles(self, active_only=False):
        if active_only:
            return []
        return [ConnectionProfile(name="Home", uuid="u-1", type="wifi", ssid="Home")]

    async def radio_status(self):
        return "enabled"

    async def connect_robustly(self, ssid, password="", hidden=False, recreate_profile=False):
        self.calls.append(("connect", ssid))
        return ""


def _app(gateway=None) -> WifiApp:
    return WifiApp(
        gateway or FakeGateway(),
        settings=Settings(status_clear_delay=60.0),
        cache_loader=lambda: None,
        cache_saver=lambda aps: None,
        setting_saver=lambda key, value: None,
    )


async def _wait(pilot, times: int = 5) -> None:
    for _ in range(times):
        await pilot.pause()


@pytest.mark.asyncio
async def test_startup_shows_merged_networks() -> None:
    app = _app()
    async with app.run_test() as pilot:
        await _wait(pilot)

        assert isinstance(app.screen, NetworksScreen)
        table = app.screen.query_one(NetworkTable)
        assert [ap.ssid for ap in table.networks] == ["Home", "Cafe"]
        assert table.networks[0].is_known
        assert not app.session.loading


@pytest.mark.asyncio
async def test_profiles_view_and_back() -> None:
    app = _app()
    async with app.run_test() as pilot:
        await _wait(pilot)

        await pilot.press("p")
        await _wait(pilot)
        assert isinstance(app.screen, ProfilesScreen)
        assert app.screen.query_one(ProfileTable).row_count == 1

        await pilot.press("escape")
        await _wait(pilot)
        assert isinstance(app.screen, NetworksScreen)
        assert app.session.state == ViewState.NETWORKS_LIST


@pytest.mark.asyncio
async def test_open_network_asks_for_confirmation() -> None:
    gateway = FakeGateway()
    app = _app(gateway)
    async with app.run_test() as pilot:
        await _wait(pilot)
        cafe = next(ap for ap in app.session.networks if ap.ssid == "Cafe")

        app.apply_event(ev.SelectNetwork(cafe))
        await _wait(pilot)
        assert isinstance(app.screen, ConfirmScreen)

        await pilot.press("n")
        await _wait(pilot)
        assert isinstance(app.screen, NetworksScreen)
        assert gateway.calls == []


@pytest.mark.asyncio
async def test_confirmed_open_network_connects() -> None:
    gateway = FakeGateway()
    app = _app(gateway)
    async with app.run_test() as pilot:
        await _wait(pilot)
        cafe = next(ap for ap in app.session.networks if ap.ssid == "Cafe")

        app.apply_event(ev.SelectNetwork(cafe))
        await _wait(pilot)
        await pilot.press("y")
        await _wait(pilot, 10)

        assert gateway.calls == [("connect", "Cafe")]
        assert app.session.state == ViewState.CONNECTION_RESULT
        assert app.session.outcome.success
