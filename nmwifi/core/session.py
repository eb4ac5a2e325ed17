"""Session state machine — view state plus the pure `reduce` transition function.

`reduce(session, event)` never touches its input: it copies the session,
lets one handler update the copy, and returns it with the effects that the
coordinator should run. All gateway I/O lives behind those effects.
"""

import logging
from dataclasses import dataclass, replace
from enum import Enum

from nmwifi.core import events as ev
from nmwifi.core.errors import ErrorKind, GatewayError
from nmwifi.core.i18n import t
from nmwifi.core.merge import ProfileIndex, index_profiles, merge
from nmwifi.core.models import AccessPoint, ActiveConnection, ConnectionProfile, DeviceDetail

logger = logging.getLogger("nmwifi.session")


class ViewState(str, Enum):
    NETWORKS_LIST = "networks"
    KNOWN_PROFILES_LIST = "profiles"
    PASSWORD_INPUT = "password"
    HIDDEN_SSID_INPUT = "hidden_ssid"
    CONNECTING = "connecting"
    CONNECTION_RESULT = "result"
    ACTIVE_CONNECTION_INFO = "info"
    CONFIRM_DISCONNECT = "confirm_disconnect"
    CONFIRM_FORGET = "confirm_forget"
    CONFIRM_OPEN_NETWORK = "confirm_open"

    @property
    def is_confirm(self) -> bool:
        return self in (
            ViewState.CONFIRM_DISCONNECT,
            ViewState.CONFIRM_FORGET,
            ViewState.CONFIRM_OPEN_NETWORK,
        )


class OperationKind(str, Enum):
    CONNECT = "connect"
    DISCONNECT = "disconnect"
    FORGET = "forget"


class StatusLevel(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    ERROR = "error"
    PROGRESS = "progress"


@dataclass(frozen=True)
class StatusMessage:
    text: str
    level: StatusLevel
    seq: int


@dataclass(frozen=True)
class PendingOperation:
    """An in-flight user action and what it targets."""
    request_id: int
    kind: OperationKind
    target: str
    label: str = ""
    known_no_psk: bool = False
    hidden: bool = False


@dataclass(frozen=True)
class Outcome:
    """What the ConnectionResult view shows."""
    ssid: str
    success: bool
    message: str
    detail: str = ""


RADIO_ENABLED = "enabled"
RADIO_DISABLED = "disabled"
RADIO_UNKNOWN = "unknown"


@dataclass
class Session:
    state: ViewState = ViewState.NETWORKS_LIST
    previous_state: ViewState = ViewState.NETWORKS_LIST

    # ─── Authoritative data ───
    scanned: tuple[AccessPoint, ...] = ()
    profiles: ProfileIndex = ProfileIndex()
    radio: str = RADIO_UNKNOWN
    show_hidden: bool = False
    from_cache: bool = False

    # ─── Filter sub-mode ───
    filtering: bool = False
    filter_query: str = ""
    filter_draft: str = ""

    # ─── Dialog bindings ───
    selected: AccessPoint | None = None
    target_ssid: str = ""
    target_hidden: bool = False
    manual_ssid: bool = False
    escalated: bool = False
    confirm_identifier: str = ""
    confirm_label: str = ""
    outcome: Outcome | None = None
    device_detail: DeviceDetail | None = None
    detail_error: str = ""

    # ─── Correlation ───
    next_request_id: int = 1
    pending_connect: PendingOperation | None = None
    pending_action: PendingOperation | None = None
    scan_request_id: int = 0
    scan_settled_id: int = 0
    scan_applied_id: int = 0
    profiles_applied_id: int = 0
    radio_applied_id: int = 0
    detail_request_id: int = 0

    # ─── Status line ───
    status: StatusMessage | None = None
    status_seq: int = 0

    @property
    def loading(self) -> bool:
        return self.scan_settled_id < self.scan_request_id

    @property
    def active(self) -> ActiveConnection | None:
        return self.profiles.active

    @property
    def known_profiles(self) -> tuple[ConnectionProfile, ...]:
        return self.profiles.profiles

    @property
    def active_query(self) -> str:
        return self.filter_draft if self.filtering else self.filter_query

    @property
    def all_networks(self) -> list[AccessPoint]:
        return merge(list(self.scanned), self.profiles.known, self.profiles.active,
                     self.show_hidden)

    @property
    def networks(self) -> list[AccessPoint]:
        """The list as displayed: merged, sorted and filtered."""
        return merge(list(self.scanned), self.profiles.known, self.profiles.active,
                     self.show_hidden, self.active_query)

    def allocate_request_id(self) -> int:
        request_id = self.next_request_id
        self.next_request_id += 1
        return request_id


Effects = list[ev.Effect]


# ═══════════════════════════════════════════════════════════════
# Helpers
# ═══════════════════════════════════════════════════════════════

def _set_status(s: Session, effects: Effects, text: str, level: StatusLevel) -> None:
    """Set the status line. Everything except progress clears itself later."""
    s.status_seq += 1
    s.status = StatusMessage(text=text, level=level, seq=s.status_seq)
    if level != StatusLevel.PROGRESS:
        effects.append(ev.ClearStatusLater(seq=s.status_seq, state=s.state.value))


def _clear_dialog(s: Session) -> None:
    s.selected = None
    s.target_ssid = ""
    s.target_hidden = False
    s.manual_ssid = False
    s.escalated = False
    s.confirm_identifier = ""
    s.confirm_label = ""


def _go_home(s: Session) -> None:
    s.state = ViewState.NETWORKS_LIST
    _clear_dialog(s)


def _request_scan(s: Session, effects: Effects, rescan: bool) -> None:
    request_id = s.allocate_request_id()
    s.scan_request_id = request_id
    effects.append(ev.ScanNetworks(request_id=request_id, rescan=rescan))


def _request_profiles(s: Session, effects: Effects) -> None:
    effects.append(ev.LoadProfiles(request_id=s.allocate_request_id()))


def _refresh(s: Session, effects: Effects, rescan: bool = False) -> None:
    """Reload profiles and the scan after a state-changing operation."""
    _request_profiles(s, effects)
    _request_scan(s, effects, rescan)


def _error_text(error: GatewayError) -> str:
    return error.message or error.kind.value


def _unresolved(s: Session, effects: Effects) -> None:
    logger.error(f"Unresolved identifier in state {s.state.value}; returning to list")
    _go_home(s)
    _set_status(s, effects, t("unresolved"), StatusLevel.ERROR)


def _dispatch_connect(s: Session, effects: Effects, ssid: str, password: str = "",
                      hidden: bool = False, known_no_psk: bool = False,
                      recreate_profile: bool = False) -> None:
    request_id = s.allocate_request_id()
    s.pending_connect = PendingOperation(
        request_id=request_id,
        kind=OperationKind.CONNECT,
        target=ssid,
        known_no_psk=known_no_psk,
        hidden=hidden,
    )
    s.state = ViewState.CONNECTING
    s.target_ssid = ssid
    s.outcome = None
    effects.append(ev.Connect(
        request_id=request_id,
        ssid=ssid,
        password=password,
        hidden=hidden,
        known_no_psk=known_no_psk,
        recreate_profile=recreate_profile,
    ))
    logger.info(
        f"Connect #{request_id} to '{ssid}' (known_no_psk={known_no_psk}, "
        f"hidden={hidden}, recreate={recreate_profile})"
    )


def _finish_connect(s: Session, effects: Effects, outcome: Outcome) -> None:
    s.pending_connect = None
    s.state = ViewState.CONNECTION_RESULT
    s.outcome = outcome
    s.escalated = False
    s.status = None
    _refresh(s, effects)


def _begin_action(s: Session, kind: OperationKind, target: str, label: str) -> int:
    request_id = s.allocate_request_id()
    s.pending_action = PendingOperation(
        request_id=request_id, kind=kind, target=target, label=label or target,
    )
    return request_id


def _action_busy(s: Session, effects: Effects) -> bool:
    """A disconnect or forget is still running; only one runs at a time."""
    pending = s.pending_action
    if pending is None:
        return False
    _set_status(s, effects, t("action_pending", name=pending.label), StatusLevel.ERROR)
    return True


def _report_refresh_error(s: Session, effects: Effects, text: str) -> None:
    """Show a reload failure without hiding the outcome of the last operation."""
    current = s.status
    if current is not None and current.level in (StatusLevel.SUCCESS, StatusLevel.ERROR):
        if text not in current.text:
            _set_status(s, effects, f"{current.text} ({text})", current.level)
        return
    _set_status(s, effects, text, StatusLevel.ERROR)


def _take_action(s: Session, kind: OperationKind, request_id: int) -> PendingOperation | None:
    pending = s.pending_action
    if pending is None or pending.kind != kind or pending.request_id != request_id:
        logger.info(f"Discarding stale {kind.value} result #{request_id}")
        return None
    s.pending_action = None
    return pending


# ═══════════════════════════════════════════════════════════════
# Lifecycle
# ═══════════════════════════════════════════════════════════════

def _on_started(s: Session, event: ev.Started, effects: Effects) -> None:
    effects.append(ev.LoadRadioStatus(request_id=s.allocate_request_id()))
    _refresh(s, effects, rescan=True)
    _set_status(s, effects, t("status_scanning"), StatusLevel.PROGRESS)


def _on_cache_loaded(s: Session, event: ev.CacheLoaded, effects: Effects) -> None:
    if s.scan_applied_id or not event.access_points:
        return
    s.scanned = tuple(event.access_points)
    s.from_cache = True


# ═══════════════════════════════════════════════════════════════
# Networks list
# ═══════════════════════════════════════════════════════════════

def _on_select_network(s: Session, event: ev.SelectNetwork, effects: Effects) -> None:
    if s.state != ViewState.NETWORKS_LIST:
        return
    ap = event.ap
    s.selected = ap

    if ap.is_active:
        active = s.profiles.active
        s.confirm_identifier = active.profile.identifier if active else ""
        s.confirm_label = ap.ssid
        s.state = ViewState.CONFIRM_DISCONNECT
    elif ap.is_hidden:
        s.target_hidden = True
        s.state = ViewState.HIDDEN_SSID_INPUT
    elif ap.is_open and not ap.is_known:
        s.confirm_label = ap.ssid
        s.state = ViewState.CONFIRM_OPEN_NETWORK
    elif ap.is_known or ap.is_open:
        _dispatch_connect(s, effects, ap.ssid, known_no_psk=ap.is_known)
    else:
        s.target_ssid = ap.ssid
        s.target_hidden = False
        s.manual_ssid = False
        s.escalated = False
        s.state = ViewState.PASSWORD_INPUT


def _on_forget_requested(s: Session, event: ev.ForgetRequested, effects: Effects) -> None:
    if s.state != ViewState.NETWORKS_LIST:
        return
    ap = event.ap
    if ap is None or not ap.is_known:
        if ap is not None:
            _set_status(s, effects, t("not_saved", ssid=ap.display_ssid), StatusLevel.INFO)
        return
    profile = s.profiles.known.get(ap.ssid)
    s.selected = ap
    s.confirm_identifier = profile.identifier if profile else ""
    s.confirm_label = ap.ssid
    s.previous_state = ViewState.NETWORKS_LIST
    s.state = ViewState.CONFIRM_FORGET


def _on_disconnect_requested(s: Session, event: ev.DisconnectRequested, effects: Effects) -> None:
    if s.state != ViewState.NETWORKS_LIST:
        return
    active = s.profiles.active
    if active is None:
        _set_status(s, effects, t("not_connected"), StatusLevel.INFO)
        return
    s.selected = next((ap for ap in s.all_networks if ap.is_active), None)
    s.confirm_identifier = active.profile.identifier
    s.confirm_label = active.ssid
    s.state = ViewState.CONFIRM_DISCONNECT


def _on_info_requested(s: Session, event: ev.InfoRequested, effects: Effects) -> None:
    if s.state != ViewState.NETWORKS_LIST:
        return
    active = s.profiles.active
    if active is None:
        _set_status(s, effects, t("not_connected"), StatusLevel.INFO)
        return
    if not active.device:
        _set_status(s, effects, t("no_device"), StatusLevel.ERROR)
        return
    request_id = s.allocate_request_id()
    s.detail_request_id = request_id
    s.device_detail = None
    s.detail_error = ""
    s.state = ViewState.ACTIVE_CONNECTION_INFO
    effects.append(ev.LoadDeviceDetail(request_id=request_id, device=active.device))


def _on_refresh_requested(s: Session, event: ev.RefreshRequested, effects: Effects) -> None:
    if s.state not in (ViewState.NETWORKS_LIST, ViewState.KNOWN_PROFILES_LIST):
        return
    _refresh(s, effects, rescan=True)
    _set_status(s, effects, t("status_scanning"), StatusLevel.PROGRESS)


def _on_toggle_radio(s: Session, event: ev.ToggleRadioRequested, effects: Effects) -> None:
    if s.state != ViewState.NETWORKS_LIST:
        return
    enable = s.radio != RADIO_ENABLED
    effects.append(ev.SetRadio(request_id=s.allocate_request_id(), enabled=enable))
    _set_status(s, effects, t("radio_enabling" if enable else "radio_disabling"),
                StatusLevel.PROGRESS)


def _on_toggle_hidden(s: Session, event: ev.ToggleHiddenRequested, effects: Effects) -> None:
    if s.state != ViewState.NETWORKS_LIST:
        return
    s.show_hidden = not s.show_hidden
    effects.append(ev.SaveSetting(key="show_hidden", value=s.show_hidden))
    _set_status(s, effects, t("hidden_shown" if s.show_hidden else "hidden_suppressed"),
                StatusLevel.INFO)


def _on_show_profiles(s: Session, event: ev.ShowProfilesRequested, effects: Effects) -> None:
    if s.state != ViewState.NETWORKS_LIST:
        return
    s.state = ViewState.KNOWN_PROFILES_LIST
    _request_profiles(s, effects)


def _on_hidden_network(s: Session, event: ev.HiddenNetworkRequested, effects: Effects) -> None:
    if s.state != ViewState.NETWORKS_LIST:
        return
    _clear_dialog(s)
    s.target_hidden = True
    s.state = ViewState.HIDDEN_SSID_INPUT


# ─── Filter sub-mode ───

def _on_filter_started(s: Session, event: ev.FilterStarted, effects: Effects) -> None:
    if s.state != ViewState.NETWORKS_LIST:
        return
    s.filtering = True
    s.filter_draft = s.filter_query


def _on_filter_edited(s: Session, event: ev.FilterEdited, effects: Effects) -> None:
    if s.filtering:
        s.filter_draft = event.text


def _on_filter_committed(s: Session, event: ev.FilterCommitted, effects: Effects) -> None:
    if s.filtering:
        s.filter_query = s.filter_draft
        s.filtering = False


def _on_filter_cancelled(s: Session, event: ev.FilterCancelled, effects: Effects) -> None:
    s.filtering = False
    s.filter_draft = ""
    s.filter_query = ""


# ═══════════════════════════════════════════════════════════════
# Known profiles, dialogs
# ═══════════════════════════════════════════════════════════════

def _on_select_profile(s: Session, event: ev.SelectProfile, effects: Effects) -> None:
    if s.state != ViewState.KNOWN_PROFILES_LIST:
        return
    profile = event.profile
    if not profile.key:
        _unresolved(s, effects)
        return
    s.selected = next(
        (ap for ap in s.all_networks if ap.ssid == profile.key),
        AccessPoint.known_only(profile),
    )
    _dispatch_connect(s, effects, profile.key, known_no_psk=True)


def _on_forget_profile(s: Session, event: ev.ForgetProfileRequested, effects: Effects) -> None:
    if s.state != ViewState.KNOWN_PROFILES_LIST:
        return
    s.confirm_identifier = event.profile.identifier
    s.confirm_label = event.profile.key or event.profile.identifier
    s.previous_state = ViewState.KNOWN_PROFILES_LIST
    s.state = ViewState.CONFIRM_FORGET


def _on_submit_hidden_ssid(s: Session, event: ev.SubmitHiddenSsid, effects: Effects) -> None:
    if s.state != ViewState.HIDDEN_SSID_INPUT:
        return
    if not event.ssid.strip():
        _set_status(s, effects, t("ssid_required"), StatusLevel.ERROR)
        return
    s.target_ssid = event.ssid
    s.target_hidden = True
    s.manual_ssid = True
    s.escalated = False
    s.state = ViewState.PASSWORD_INPUT


def _on_submit_password(s: Session, event: ev.SubmitPassword, effects: Effects) -> None:
    if s.state != ViewState.PASSWORD_INPUT:
        return
    if not s.target_ssid:
        _unresolved(s, effects)
        return
    if not event.password and not (s.target_hidden and s.manual_ssid):
        _set_status(s, effects, t("password_required", ssid=s.target_ssid), StatusLevel.ERROR)
        return
    _dispatch_connect(
        s, effects, s.target_ssid,
        password=event.password,
        hidden=s.target_hidden,
        known_no_psk=False,
        recreate_profile=s.escalated and bool(event.password),
    )


def _on_confirm(s: Session, event: ev.Confirm, effects: Effects) -> None:
    if s.state == ViewState.CONFIRM_OPEN_NETWORK:
        if s.selected is None or not s.selected.ssid:
            _unresolved(s, effects)
            return
        _dispatch_connect(s, effects, s.selected.ssid, known_no_psk=False)

    elif s.state == ViewState.CONFIRM_DISCONNECT:
        if _action_busy(s, effects):
            return
        if not s.confirm_identifier:
            _unresolved(s, effects)
            return
        request_id = _begin_action(s, OperationKind.DISCONNECT, s.confirm_identifier,
                                   s.confirm_label)
        effects.append(ev.Disconnect(request_id=request_id, identifier=s.confirm_identifier))
        _set_status(s, effects, t("disconnecting", name=s.confirm_label), StatusLevel.PROGRESS)

    elif s.state == ViewState.CONFIRM_FORGET:
        if _action_busy(s, effects):
            return
        if not s.confirm_identifier:
            _unresolved(s, effects)
            return
        request_id = _begin_action(s, OperationKind.FORGET, s.confirm_identifier,
                                   s.confirm_label)
        effects.append(ev.Forget(request_id=request_id, identifier=s.confirm_identifier))
        _set_status(s, effects, t("forgetting", name=s.confirm_label), StatusLevel.PROGRESS)

    elif s.state in (ViewState.CONNECTION_RESULT, ViewState.ACTIVE_CONNECTION_INFO):
        s.outcome = None
        s.status = None
        _go_home(s)


def _on_back(s: Session, event: ev.Back, effects: Effects) -> None:
    if s.state == ViewState.NETWORKS_LIST:
        return
    if s.state == ViewState.CONFIRM_FORGET:
        s.state = s.previous_state
        _clear_dialog(s)
        return
    if s.state == ViewState.CONNECTING:
        pending = s.pending_connect
        s.pending_connect = None
        _go_home(s)
        if pending is not None:
            logger.info(f"Abandoned connect #{pending.request_id} to '{pending.target}'")
            _set_status(s, effects, t("connect_abandoned", ssid=pending.target),
                        StatusLevel.INFO)
        return
    if s.state == ViewState.CONNECTION_RESULT:
        s.outcome = None
        s.status = None
    _go_home(s)


# ═══════════════════════════════════════════════════════════════
# Background results
# ═══════════════════════════════════════════════════════════════

def _on_scan_loaded(s: Session, event: ev.ScanLoaded, effects: Effects) -> None:
    s.scan_settled_id = max(s.scan_settled_id, event.request_id)
    if event.request_id <= s.scan_applied_id:
        logger.debug(f"Discarding stale scan #{event.request_id}")
        return
    if event.error is not None:
        logger.warning(f"Scan #{event.request_id} failed: {event.error.message}")
        _report_refresh_error(s, effects, t("scan_failed", error=_error_text(event.error)))
        return

    s.scanned = tuple(event.access_points)
    s.scan_applied_id = event.request_id
    s.from_cache = False
    effects.append(ev.SaveCache(access_points=s.scanned))
    if (s.status is not None and s.status.level == StatusLevel.PROGRESS
            and not s.loading and s.pending_action is None):
        s.status = None


def _on_profiles_loaded(s: Session, event: ev.ProfilesLoaded, effects: Effects) -> None:
    if event.request_id <= s.profiles_applied_id:
        logger.debug(f"Discarding stale profile list #{event.request_id}")
        return
    if event.error is not None:
        logger.warning(f"Profile list #{event.request_id} failed: {event.error.message}")
        _report_refresh_error(s, effects, t("profiles_failed", error=_error_text(event.error)))
        return
    s.profiles = index_profiles(list(event.profiles), list(event.active))
    s.profiles_applied_id = event.request_id


def _on_radio_status(s: Session, event: ev.RadioStatusLoaded, effects: Effects) -> None:
    if event.request_id < s.radio_applied_id:
        return
    if event.error is not None:
        key = "radio_failed" if event.toggled else "radio_status_failed"
        _set_status(s, effects, t(key, error=_error_text(event.error)), StatusLevel.ERROR)
        return
    s.radio_applied_id = event.request_id
    s.radio = event.status
    if not event.toggled:
        return
    if s.radio == RADIO_ENABLED:
        _set_status(s, effects, t("radio_enabled"), StatusLevel.SUCCESS)
        _refresh(s, effects, rescan=True)
    else:
        s.scanned = ()
        _set_status(s, effects, t("radio_disabled"), StatusLevel.SUCCESS)
        _refresh(s, effects)


def _on_connect_finished(s: Session, event: ev.ConnectFinished, effects: Effects) -> None:
    pending = s.pending_connect
    if (pending is None or pending.request_id != event.request_id
            or s.state != ViewState.CONNECTING):
        logger.info(f"Discarding stale connect result #{event.request_id} for '{event.ssid}'")
        _refresh(s, effects)
        return

    error = event.error
    if error is None:
        logger.info(f"Connected to '{pending.target}'")
        _finish_connect(s, effects, Outcome(
            ssid=pending.target, success=True,
            message=t("result_success", ssid=pending.target),
        ))
        return

    if (pending.known_no_psk and error.kind == ErrorKind.SECRETS_REQUIRED
            and s.selected is not None and s.selected.ssid == pending.target):
        logger.info(f"Stored credentials for '{pending.target}' rejected; asking for password")
        s.pending_connect = None
        s.state = ViewState.PASSWORD_INPUT
        s.target_ssid = pending.target
        s.target_hidden = pending.hidden
        s.manual_ssid = False
        s.escalated = True
        _set_status(s, effects, t("stored_credentials_failed", ssid=pending.target),
                    StatusLevel.ERROR)
        _refresh(s, effects)
        return

    logger.info(f"Connect to '{pending.target}' failed: {error.message}")
    _finish_connect(s, effects, Outcome(
        ssid=pending.target, success=False,
        message=t("result_failed", ssid=pending.target),
        detail=_error_text(error),
    ))


def _on_connect_timed_out(s: Session, event: ev.ConnectTimedOut, effects: Effects) -> None:
    pending = s.pending_connect
    if (pending is None or pending.request_id != event.request_id
            or s.state != ViewState.CONNECTING):
        logger.debug(f"Ignoring stale timeout #{event.request_id} for '{event.ssid}'")
        return
    logger.warning(f"Connect #{event.request_id} to '{pending.target}' timed out")
    _finish_connect(s, effects, Outcome(
        ssid=pending.target, success=False,
        message=t("result_timeout", ssid=pending.target),
        detail=ErrorKind.TIMEOUT.value,
    ))


def _on_disconnect_finished(s: Session, event: ev.DisconnectFinished, effects: Effects) -> None:
    pending = _take_action(s, OperationKind.DISCONNECT, event.request_id)
    if pending is None:
        _refresh(s, effects)
        return
    label = pending.label or pending.target
    if s.state == ViewState.CONFIRM_DISCONNECT and s.confirm_identifier == pending.target:
        _go_home(s)
    if event.error is None:
        s.profiles = replace(s.profiles, active=None)
        _set_status(s, effects, t("disconnected", name=label), StatusLevel.SUCCESS)
    else:
        _set_status(s, effects, t("disconnect_failed", name=label,
                                  error=_error_text(event.error)), StatusLevel.ERROR)
    _refresh(s, effects)


def _on_forget_finished(s: Session, event: ev.ForgetFinished, effects: Effects) -> None:
    pending = _take_action(s, OperationKind.FORGET, event.request_id)
    if pending is None:
        _refresh(s, effects)
        return
    label = pending.label or pending.target
    if s.state == ViewState.CONFIRM_FORGET and s.confirm_identifier == pending.target:
        s.state = s.previous_state
        _clear_dialog(s)
    if event.error is None:
        _set_status(s, effects, t("forgotten", name=label), StatusLevel.SUCCESS)
    else:
        _set_status(s, effects, t("forget_failed", name=label,
                                  error=_error_text(event.error)), StatusLevel.ERROR)
    _refresh(s, effects)


def _on_device_detail(s: Session, event: ev.DeviceDetailLoaded, effects: Effects) -> None:
    if (event.request_id != s.detail_request_id
            or s.state != ViewState.ACTIVE_CONNECTION_INFO):
        logger.debug(f"Discarding stale device detail #{event.request_id}")
        return
    if event.error is not None:
        s.detail_error = t("info_failed", error=_error_text(event.error))
    else:
        s.device_detail = event.detail


def _on_status_expired(s: Session, event: ev.StatusExpired, effects: Effects) -> None:
    if s.status is not None and s.status.seq == event.seq and s.state.value == event.state:
        s.status = None


_HANDLERS = {
    ev.Started: _on_started,
    ev.CacheLoaded: _on_cache_loaded,
    ev.SelectNetwork: _on_select_network,
    ev.SelectProfile: _on_select_profile,
    ev.Confirm: _on_confirm,
    ev.Back: _on_back,
    ev.SubmitPassword: _on_submit_password,
    ev.SubmitHiddenSsid: _on_submit_hidden_ssid,
    ev.ForgetRequested: _on_forget_requested,
    ev.ForgetProfileRequested: _on_forget_profile,
    ev.DisconnectRequested: _on_disconnect_requested,
    ev.InfoRequested: _on_info_requested,
    ev.RefreshRequested: _on_refresh_requested,
    ev.ToggleRadioRequested: _on_toggle_radio,
    ev.ToggleHiddenRequested: _on_toggle_hidden,
    ev.ShowProfilesRequested: _on_show_profiles,
    ev.HiddenNetworkRequested: _on_hidden_network,
    ev.FilterStarted: _on_filter_started,
    ev.FilterEdited: _on_filter_edited,
    ev.FilterCommitted: _on_filter_committed,
    ev.FilterCancelled: _on_filter_cancelled,
    ev.ScanLoaded: _on_scan_loaded,
    ev.ProfilesLoaded: _on_profiles_loaded,
    ev.RadioStatusLoaded: _on_radio_status,
    ev.ConnectFinished: _on_connect_finished,
    ev.ConnectTimedOut: _on_connect_timed_out,
    ev.DisconnectFinished: _on_disconnect_finished,
    ev.ForgetFinished: _on_forget_finished,
    ev.DeviceDetailLoaded: _on_device_detail,
    ev.StatusExpired: _on_status_expired,
}


def reduce(session: Session, event: ev.Event) -> tuple[Session, list[ev.Effect]]:
    """Apply one event. Returns the new session and the effects to run."""
    handler = _HANDLERS.get(type(event))
    if handler is None:
        logger.warning(f"No handler for event {type(event).__name__}")
        return session, []
    new = replace(session)
    effects: list[ev.Effect] = []
    handler(new, event, effects)
    return new, effects


def initial_effects(session: Session) -> tuple[Session, list[ev.Effect]]:
    """Startup: radio state, profiles and a fresh scan."""
    return reduce(session, ev.Started())
