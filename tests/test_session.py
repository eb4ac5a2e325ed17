from nmwifi.core import events as ev
from nmwifi.core.errors import ErrorKind, GatewayError
from nmwifi.core.models import AccessPoint, ConnectionProfile
from nmwifi.core.session import (
    RADIO_DISABLED,
    RADIO_ENABLED,
    Session,
    StatusLevel,
    ViewState,
    initial_effects,
    reduce,
)

SECRETS_ERROR = (
    "nmcli 'device wifi connect Home' failed: Error: Connection activation failed: "
    "Secrets were required, but not provided."
)

HOME = ConnectionProfile(name="Home", uuid="u-home", type="wifi", ssid="Home")
OFFICE = ConnectionProfile(name="Office", uuid="u-office", type="wifi", ssid="Office")


def _ap(ssid: str, signal: int = 50, security: str = "WPA2", bssid: str = "") -> AccessPoint:
    return AccessPoint.scanned(ssid, bssid=bssid, signal=signal, security=security)


def _session(scanned=(), profiles=(HOME, OFFICE), active=()) -> Session:
    s = Session(next_request_id=100)
    s, _ = reduce(s, ev.ProfilesLoaded(request_id=1, profiles=tuple(profiles),
                                       active=tuple(active)))
    s, _ = reduce(s, ev.ScanLoaded(request_id=2, access_points=tuple(scanned)))
    return s


def _find(session: Session, ssid: str) -> AccessPoint:
    return next(ap for ap in session.networks if ap.ssid == ssid)


def _only(effects, kind):
    found = [e for e in effects if isinstance(e, kind)]
    assert len(found) == 1, effects
    return found[0]


def _connected_session() -> Session:
    active = ConnectionProfile(name="Home", uuid="u-home", type="wifi", device="wlan0")
    return _session([_ap("Home", 70), _ap("Cafe", 40, "")], active=[active])


# ═══ Selection from the network list ═══

def test_open_unknown_network_asks_for_confirmation_then_connects() -> None:
    s = _session([_ap("Cafe", 60, security="--")])

    s, effects = reduce(s, ev.SelectNetwork(_find(s, "Cafe")))
    assert s.state == ViewState.CONFIRM_OPEN_NETWORK
    assert effects == []

    s, effects = reduce(s, ev.Confirm())
    assert s.state == ViewState.CONNECTING
    connect = _only(effects, ev.Connect)
    assert connect.ssid == "Cafe"
    assert connect.password == ""
    assert not connect.known_no_psk


def test_secured_unknown_network_goes_straight_to_password() -> None:
    s = _session([_ap("Neighbour", 60, security="WPA2")])

    s, effects = reduce(s, ev.SelectNetwork(_find(s, "Neighbour")))

    assert s.state == ViewState.PASSWORD_INPUT
    assert s.target_ssid == "Neighbour"
    assert effects == []


def test_password_submit_dispatches_connect() -> None:
    s = _session([_ap("Neighbour", 60)])
    s, _ = reduce(s, ev.SelectNetwork(_find(s, "Neighbour")))

    s, effects = reduce(s, ev.SubmitPassword("hunter22"))

    assert s.state == ViewState.CONNECTING
    connect = _only(effects, ev.Connect)
    assert connect.password == "hunter22"
    assert not connect.known_no_psk
    assert not connect.recreate_profile


def test_empty_password_is_rejected_for_visible_network() -> None:
    s = _session([_ap("Neighbour", 60)])
    s, _ = reduce(s, ev.SelectNetwork(_find(s, "Neighbour")))

    s, effects = reduce(s, ev.SubmitPassword(""))

    assert s.state == ViewState.PASSWORD_INPUT
    assert s.status.level == StatusLevel.ERROR
    assert not any(isinstance(e, ev.Connect) for e in effects)


def test_known_network_connects_without_password() -> None:
    s = _session([_ap("Home", 60)])

    s, effects = reduce(s, ev.SelectNetwork(_find(s, "Home")))

    assert s.state == ViewState.CONNECTING
    connect = _only(effects, ev.Connect)
    assert connect.ssid == "Home"
    assert connect.password == ""
    assert connect.known_no_psk
    assert s.pending_connect.request_id == connect.request_id


def test_active_network_asks_to_disconnect() -> None:
    s = _connected_session()

    s, _ = reduce(s, ev.SelectNetwork(_find(s, "Home")))

    assert s.state == ViewState.CONFIRM_DISCONNECT
    assert s.confirm_identifier == "Home"


def test_hidden_network_flow_allows_empty_password() -> None:
    s = _session([_ap("", 40, bssid="aa:bb")])
    s, _ = reduce(s, ev.ToggleHiddenRequested())
    hidden = next(ap for ap in s.networks if ap.is_hidden)

    s, _ = reduce(s, ev.SelectNetwork(hidden))
    assert s.state == ViewState.HIDDEN_SSID_INPUT

    s, _ = reduce(s, ev.SubmitHiddenSsid("   "))
    assert s.state == ViewState.HIDDEN_SSID_INPUT

    s, _ = reduce(s, ev.SubmitHiddenSsid("Secret Lab"))
    assert s.state == ViewState.PASSWORD_INPUT
    assert s.target_ssid == "Secret Lab"

    s, effects = reduce(s, ev.SubmitPassword(""))
    connect = _only(effects, ev.Connect)
    assert connect.ssid == "Secret Lab"
    assert connect.hidden
    assert connect.password == ""


def test_reduce_does_not_mutate_input() -> None:
    s = _session([_ap("Home", 60)])

    new, _ = reduce(s, ev.SelectNetwork(_find(s, "Home")))

    assert s.state == ViewState.NETWORKS_LIST
    assert s.pending_connect is None
    assert new is not s


# ═══ Connect results ═══

def test_connect_success_shows_result_and_refreshes() -> None:
    s = _session([_ap("Home", 60)])
    s, effects = reduce(s, ev.SelectNetwork(_find(s, "Home")))
    connect = _only(effects, ev.Connect)

    s, effects = reduce(s, ev.ConnectFinished(connect.request_id, "Home"))

    assert s.state == ViewState.CONNECTION_RESULT
    assert s.outcome.success
    assert s.pending_connect is None
    _only(effects, ev.LoadProfiles)
    _only(effects, ev.ScanNetworks)

    s, _ = reduce(s, ev.Confirm())
    assert s.state == ViewState.NETWORKS_LIST
    assert s.status is None


def test_secrets_required_escalates_to_password_once() -> None:
    s = _session([_ap("Home", 60)])
    s, effects = reduce(s, ev.SelectNetwork(_find(s, "Home")))
    first = _only(effects, ev.Connect)

    s, _ = reduce(s, ev.ConnectFinished(first.request_id, "Home", GatewayError(SECRETS_ERROR)))

    assert s.state == ViewState.PASSWORD_INPUT
    assert s.escalated
    assert s.status.level == StatusLevel.ERROR
    assert "Home" in s.status.text

    s, effects = reduce(s, ev.SubmitPassword("new-password"))
    second = _only(effects, ev.Connect)
    assert second.recreate_profile
    assert not second.known_no_psk

    s, _ = reduce(s, ev.ConnectFinished(second.request_id, "Home", GatewayError(SECRETS_ERROR)))

    assert s.state == ViewState.CONNECTION_RESULT
    assert not s.outcome.success


def test_other_failure_of_known_network_goes_to_result() -> None:
    s = _session([_ap("Home", 60)])
    s, effects = reduce(s, ev.SelectNetwork(_find(s, "Home")))
    connect = _only(effects, ev.Connect)

    error = GatewayError("Error: No network with SSID 'Home' found.")
    s, _ = reduce(s, ev.ConnectFinished(connect.request_id, "Home", error))

    assert s.state == ViewState.CONNECTION_RESULT
    assert "No network" in s.outcome.detail


def test_stale_timeout_after_result_is_noop() -> None:
    s = _session([_ap("X", 60)], profiles=[ConnectionProfile(name="X", uuid="u-x", type="wifi", ssid="X")])
    s, effects = reduce(s, ev.SelectNetwork(_find(s, "X")))
    connect = _only(effects, ev.Connect)
    s, _ = reduce(s, ev.ConnectFinished(connect.request_id, "X"))
    assert s.state == ViewState.CONNECTION_RESULT

    after, effects = reduce(s, ev.ConnectTimedOut(connect.request_id, "X"))

    assert after.state == ViewState.CONNECTION_RESULT
    assert after.outcome == s.outcome
    assert effects == []


def test_timeout_of_abandoned_attempt_does_not_cancel_new_attempt() -> None:
    s = _session([_ap("X", 60)], profiles=[ConnectionProfile(name="X", uuid="u-x", type="wifi", ssid="X")])
    s, effects = reduce(s, ev.SelectNetwork(_find(s, "X")))
    old = _only(effects, ev.Connect)
    s, _ = reduce(s, ev.Back())
    assert s.state == ViewState.NETWORKS_LIST

    s, effects = reduce(s, ev.SelectNetwork(_find(s, "X")))
    new = _only(effects, ev.Connect)
    assert new.request_id != old.request_id

    s, _ = reduce(s, ev.ConnectTimedOut(old.request_id, "X"))
    assert s.state == ViewState.CONNECTING
    assert s.pending_connect.request_id == new.request_id

    s, effects = reduce(s, ev.ConnectFinished(old.request_id, "X", GatewayError("boom")))
    assert s.state == ViewState.CONNECTING
    _only(effects, ev.LoadProfiles)


def test_timeout_fails_current_attempt() -> None:
    s = _session([_ap("Neighbour", 60)])
    s, _ = reduce(s, ev.SelectNetwork(_find(s, "Neighbour")))
    s, effects = reduce(s, ev.SubmitPassword("pw"))
    connect = _only(effects, ev.Connect)

    s, _ = reduce(s, ev.ConnectTimedOut(connect.request_id, "Neighbour"))

    assert s.state == ViewState.CONNECTION_RESULT
    assert not s.outcome.success
    assert s.outcome.detail == ErrorKind.TIMEOUT.value
    assert s.pending_connect is None


# ═══ Forget and disconnect ═══

def test_forget_from_network_list_returns_there() -> None:
    s = _session([_ap("Home", 60)])

    s, _ = reduce(s, ev.ForgetRequested(_find(s, "Home")))
    assert s.state == ViewState.CONFIRM_FORGET
    assert s.previous_state == ViewState.NETWORKS_LIST

    s, effects = reduce(s, ev.Confirm())
    forget = _only(effects, ev.Forget)
    assert forget.identifier == "Home"
    assert s.state == ViewState.CONFIRM_FORGET

    s, effects = reduce(s, ev.ForgetFinished(forget.request_id, "Home"))
    assert s.state == ViewState.NETWORKS_LIST
    assert s.status.level == StatusLevel.SUCCESS
    _only(effects, ev.LoadProfiles)
    _only(effects, ev.ScanNetworks)


def test_forget_unknown_network_is_refused() -> None:
    s = _session([_ap("Stranger", 60)])

    s, _ = reduce(s, ev.ForgetRequested(_find(s, "Stranger")))

    assert s.state == ViewState.NETWORKS_LIST
    assert s.status.level == StatusLevel.INFO


def test_forget_from_profiles_list_returns_to_profiles() -> None:
    s = _session()
    s, effects = reduce(s, ev.ShowProfilesRequested())
    assert s.state == ViewState.KNOWN_PROFILES_LIST
    _only(effects, ev.LoadProfiles)

    s, _ = reduce(s, ev.ForgetProfileRequested(OFFICE))
    assert s.state == ViewState.CONFIRM_FORGET

    s, _ = reduce(s, ev.Back())
    assert s.state == ViewState.KNOWN_PROFILES_LIST

    s, _ = reduce(s, ev.ForgetProfileRequested(OFFICE))
    s, effects = reduce(s, ev.Confirm())
    forget = _only(effects, ev.Forget)
    s, _ = reduce(s, ev.ForgetFinished(forget.request_id, "Office", GatewayError("denied")))

    assert s.state == ViewState.KNOWN_PROFILES_LIST
    assert s.status.level == StatusLevel.ERROR


def test_unresolvable_identifier_returns_to_list_with_error() -> None:
    s = _session()
    s, _ = reduce(s, ev.ShowProfilesRequested())
    s, _ = reduce(s, ev.ForgetProfileRequested(ConnectionProfile(type="wifi")))

    s, effects = reduce(s, ev.Confirm())

    assert s.state == ViewState.NETWORKS_LIST
    assert s.status.level == StatusLevel.ERROR
    assert not any(isinstance(e, ev.Forget) for e in effects)


def test_disconnect_clears_active_connection() -> None:
    s = _connected_session()
    assert s.active is not None

    s, _ = reduce(s, ev.DisconnectRequested())
    assert s.state == ViewState.CONFIRM_DISCONNECT

    s, effects = reduce(s, ev.Confirm())
    disconnect = _only(effects, ev.Disconnect)
    assert disconnect.identifier == "Home"

    s, effects = reduce(s, ev.DisconnectFinished(disconnect.request_id, "Home"))

    assert s.state == ViewState.NETWORKS_LIST
    assert s.active is None
    assert not any(ap.is_active for ap in s.networks)
    _only(effects, ev.ScanNetworks)


def test_disconnect_without_active_connection() -> None:
    s = _session([_ap("Home", 60)])

    s, effects = reduce(s, ev.DisconnectRequested())

    assert s.state == ViewState.NETWORKS_LIST
    assert s.status.level == StatusLevel.INFO


# ═══ Info, radio, refresh ═══

def test_info_loads_device_detail() -> None:
    s = _connected_session()

    s, effects = reduce(s, ev.InfoRequested())

    assert s.state == ViewState.ACTIVE_CONNECTION_INFO
    load = _only(effects, ev.LoadDeviceDetail)
    assert load.device == "wlan0"

    s, _ = reduce(s, ev.DeviceDetailLoaded(load.request_id, "wlan0", error=GatewayError("gone")))
    assert "gone" in s.detail_error

    s, _ = reduce(s, ev.Back())
    assert s.state == ViewState.NETWORKS_LIST


def test_radio_toggle_off_clears_list() -> None:
    s = _session([_ap("Home", 60), _ap("Cafe", 40)])
    s, _ = reduce(s, ev.RadioStatusLoaded(request_id=3, status=RADIO_ENABLED))

    s, effects = reduce(s, ev.ToggleRadioRequested())
    set_radio = _only(effects, ev.SetRadio)
    assert not set_radio.enabled

    s, _ = reduce(s, ev.RadioStatusLoaded(set_radio.request_id, RADIO_DISABLED, toggled=True))

    assert s.radio == RADIO_DISABLED
    assert s.scanned == ()
    assert all(not ap.in_range for ap in s.networks)


def test_started_requests_radio_profiles_and_rescan() -> None:
    s, effects = initial_effects(Session())

    _only(effects, ev.LoadRadioStatus)
    _only(effects, ev.LoadProfiles)
    scan = _only(effects, ev.ScanNetworks)
    assert scan.rescan
    assert s.loading
    assert s.status.level == StatusLevel.PROGRESS


def test_stale_scan_result_is_discarded() -> None:
    s = _session([_ap("Old", 60)])
    s, first = reduce(s, ev.RefreshRequested())
    s, second = reduce(s, ev.RefreshRequested())
    older = _only(first, ev.ScanNetworks)
    newer = _only(second, ev.ScanNetworks)

    s, effects = reduce(s, ev.ScanLoaded(newer.request_id, (_ap("New", 60),)))
    _only(effects, ev.SaveCache)
    s, effects = reduce(s, ev.ScanLoaded(older.request_id, (_ap("Older", 60),)))

    assert [ap.ssid for ap in s.scanned] == ["New"]
    assert effects == []
    assert not s.loading


def test_scan_clears_only_progress_status() -> None:
    s = _session()
    s, effects = reduce(s, ev.RefreshRequested())
    scan = _only(effects, ev.ScanNetworks)
    s, _ = reduce(s, ev.ProfilesLoaded(_only(effects, ev.LoadProfiles).request_id,
                                       profiles=(HOME,)))
    s, _ = reduce(s, ev.ScanLoaded(scan.request_id, (_ap("Home", 60),)))
    assert s.status is None

    s, effects = reduce(s, ev.RefreshRequested())
    s, _ = reduce(s, ev.ToggleHiddenRequested())
    s, _ = reduce(s, ev.ScanLoaded(_only(effects, ev.ScanNetworks).request_id, ()))
    assert s.status is not None
    assert s.status.level == StatusLevel.INFO


def test_cache_only_fills_before_first_scan() -> None:
    cached = (_ap("Cached", 30),)

    s, _ = reduce(Session(), ev.CacheLoaded(cached))
    assert [ap.ssid for ap in s.scanned] == ["Cached"]
    assert s.from_cache

    s = _session([_ap("Live", 60)])
    s, _ = reduce(s, ev.CacheLoaded(cached))
    assert [ap.ssid for ap in s.scanned] == ["Live"]


# ═══ Status line and filtering ═══

def test_status_expiry_matches_sequence_and_state() -> None:
    s = _session([_ap("Home", 60)])
    s, effects = reduce(s, ev.ToggleHiddenRequested())
    first = _only(effects, ev.ClearStatusLater)
    _only(effects, ev.SaveSetting)

    s, effects = reduce(s, ev.ToggleHiddenRequested())
    second = _only(effects, ev.ClearStatusLater)

    s, _ = reduce(s, ev.StatusExpired(first.seq, first.state))
    assert s.status is not None

    s, _ = reduce(s, ev.StatusExpired(second.seq, "profiles"))
    assert s.status is not None

    s, _ = reduce(s, ev.StatusExpired(second.seq, second.state))
    assert s.status is None


def test_filter_sub_mode() -> None:
    s = _session([_ap("Cafe", 60), _ap("Cabin", 50), _ap("Home", 70)], profiles=())

    s, _ = reduce(s, ev.FilterStarted())
    assert s.filtering
    s, _ = reduce(s, ev.FilterEdited("ca"))
    assert [ap.ssid for ap in s.networks] == ["Cafe", "Cabin"]

    s, _ = reduce(s, ev.FilterCommitted())
    assert not s.filtering
    assert s.filter_query == "ca"
    assert s.state == ViewState.NETWORKS_LIST
    assert len(s.networks) == 2

    s, _ = reduce(s, ev.FilterCancelled())
    assert s.filter_query == ""
    assert len(s.networks) == 3


# ═══ Overlapping actions and follow-up reloads ═══

def test_confirm_while_forget_pending_is_refused_and_reported() -> None:
    s = _session([_ap("Home", 60), _ap("Office", 50)])

    s, _ = reduce(s, ev.ForgetRequested(_find(s, "Office")))
    s, effects = reduce(s, ev.Confirm())
    first = _only(effects, ev.Forget)
    s, _ = reduce(s, ev.Back())

    s, _ = reduce(s, ev.ForgetRequested(_find(s, "Home")))
    s, effects = reduce(s, ev.Confirm())
    assert not any(isinstance(e, ev.Forget) for e in effects)
    assert s.state == ViewState.CONFIRM_FORGET
    assert s.status.level == StatusLevel.ERROR
    assert "Office" in s.status.text

    s, _ = reduce(s, ev.ForgetFinished(first.request_id, "Office"))
    assert "Office" in s.status.text
    assert "Home" not in s.status.text
    assert s.state == ViewState.CONFIRM_FORGET
    assert s.confirm_identifier == "Home"

    s, effects = reduce(s, ev.Confirm())
    assert _only(effects, ev.Forget).identifier == "Home"


def test_disconnect_result_names_the_disconnected_network() -> None:
    s = _connected_session()
    s, _ = reduce(s, ev.DisconnectRequested())
    s, effects = reduce(s, ev.Confirm())
    disconnect = _only(effects, ev.Disconnect)
    s, _ = reduce(s, ev.Back())

    s, _ = reduce(s, ev.ForgetRequested(_find(s, "Home")))
    s, effects = reduce(s, ev.Confirm())
    assert not any(isinstance(e, ev.Forget) for e in effects)

    s, _ = reduce(s, ev.DisconnectFinished(disconnect.request_id, "Home"))
    assert s.status.text.startswith("Disconnected from Home")


def test_active_duplicate_profile_marks_network_connected() -> None:
    home_again = ConnectionProfile(name="Home 1", uuid="u-home-1", type="wifi", ssid="Home")
    active = ConnectionProfile(name="Home 1", uuid="u-home-1", type="wifi", device="wlan0")
    s = _session([_ap("Home", 70)], profiles=(HOME, home_again), active=[active])

    home = _find(s, "Home")
    assert home.is_active

    s, effects = reduce(s, ev.SelectNetwork(home))
    assert s.state == ViewState.CONFIRM_DISCONNECT
    assert s.confirm_identifier == "Home 1"
    assert effects == []


def test_profiles_and_scan_in_either_order_give_same_list() -> None:
    active = ConnectionProfile(name="Home", uuid="u-home", type="wifi", device="wlan0")
    scanned = (_ap("Home", 70), _ap("Cafe", 40, "--"), _ap("Lab", 55))
    profiles = ev.ProfilesLoaded(request_id=1, profiles=(HOME, OFFICE), active=(active,))
    scan = ev.ScanLoaded(request_id=2, access_points=scanned)

    profiles_first, _ = reduce(Session(), profiles)
    profiles_first, _ = reduce(profiles_first, scan)
    scan_first, _ = reduce(Session(), scan)
    scan_first, _ = reduce(scan_first, profiles)

    assert profiles_first.networks == scan_first.networks
    assert [ap.ssid for ap in scan_first.networks] == ["Home", "Office", "Lab", "Cafe"]


def test_failed_reload_keeps_disconnect_outcome() -> None:
    s = _connected_session()
    s, _ = reduce(s, ev.DisconnectRequested())
    s, effects = reduce(s, ev.Confirm())
    s, effects = reduce(s, ev.DisconnectFinished(_only(effects, ev.Disconnect).request_id, "Home"))
    reload_profiles = _only(effects, ev.LoadProfiles)
    rescan = _only(effects, ev.ScanNetworks)

    s, _ = reduce(s, ev.ProfilesLoaded(reload_profiles.request_id, error=GatewayError("busy")))
    s, _ = reduce(s, ev.ScanLoaded(rescan.request_id, error=GatewayError("radio busy")))

    assert s.active is None
    assert s.status.level == StatusLevel.SUCCESS
    assert s.status.text.startswith("Disconnected from Home")
    assert "radio busy" in s.status.text


def test_failed_reload_keeps_forget_outcome() -> None:
    s = _session([_ap("Office", 60)])
    s, _ = reduce(s, ev.ForgetRequested(_find(s, "Office")))
    s, effects = reduce(s, ev.Confirm())
    s, effects = reduce(s, ev.ForgetFinished(_only(effects, ev.Forget).request_id, "Office"))

    s, _ = reduce(s, ev.ScanLoaded(_only(effects, ev.ScanNetworks).request_id,
                                   error=GatewayError("scan failed")))

    assert s.status.level == StatusLevel.SUCCESS
    assert s.status.text.startswith("Forgot Office")


def test_failed_reload_without_outcome_reports_error() -> None:
    s = _session([_ap("Home", 60)])
    s, effects = reduce(s, ev.RefreshRequested())

    s, _ = reduce(s, ev.ScanLoaded(_only(effects, ev.ScanNetworks).request_id,
                                   error=GatewayError("radio busy")))

    assert s.status.level == StatusLevel.ERROR
    assert "radio busy" in s.status.text
