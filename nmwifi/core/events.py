"""Events fed into the session reducer and effects it asks to be executed."""

from dataclasses import dataclass, field

from nmwifi.core.errors import GatewayError
from nmwifi.core.models import AccessPoint, ConnectionProfile, DeviceDetail


class Event:
    """Base class for everything `session.reduce` accepts."""


class Effect:
    """Base class for side-effect descriptions returned by `session.reduce`."""


# ═══════════════════════════════════════════════════════════════
# User and lifecycle events
# ═══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class Started(Event):
    pass


@dataclass(frozen=True)
class CacheLoaded(Event):
    access_points: tuple[AccessPoint, ...] = ()


@dataclass(frozen=True)
class SelectNetwork(Event):
    ap: AccessPoint


@dataclass(frozen=True)
class SelectProfile(Event):
    profile: ConnectionProfile


@dataclass(frozen=True)
class Confirm(Event):
    pass


@dataclass(frozen=True)
class Back(Event):
    pass


@dataclass(frozen=True)
class SubmitPassword(Event):
    password: str = field(default="", repr=False)


@dataclass(frozen=True)
class SubmitHiddenSsid(Event):
    ssid: str = ""


@dataclass(frozen=True)
class ForgetRequested(Event):
    ap: AccessPoint | None = None


@dataclass(frozen=True)
class ForgetProfileRequested(Event):
    profile: ConnectionProfile


@dataclass(frozen=True)
class DisconnectRequested(Event):
    pass


@dataclass(frozen=True)
class InfoRequested(Event):
    pass


@dataclass(frozen=True)
class RefreshRequested(Event):
    pass


@dataclass(frozen=True)
class ToggleRadioRequested(Event):
    pass


@dataclass(frozen=True)
class ToggleHiddenRequested(Event):
    pass


@dataclass(frozen=True)
class ShowProfilesRequested(Event):
    pass


@dataclass(frozen=True)
class HiddenNetworkRequested(Event):
    pass


# ─── Filter sub-mode ───

@dataclass(frozen=True)
class FilterStarted(Event):
    pass


@dataclass(frozen=True)
class FilterEdited(Event):
    text: str = ""


@dataclass(frozen=True)
class FilterCommitted(Event):
    pass


@dataclass(frozen=True)
class FilterCancelled(Event):
    pass


# ═══════════════════════════════════════════════════════════════
# Background results
# ═══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class ScanLoaded(Event):
    request_id: int
    access_points: tuple[AccessPoint, ...] = ()
    error: GatewayError | None = None


@dataclass(frozen=True)
class ProfilesLoaded(Event):
    request_id: int
    profiles: tuple[ConnectionProfile, ...] = ()
    active: tuple[ConnectionProfile, ...] = ()
    error: GatewayError | None = None


@dataclass(frozen=True)
class RadioStatusLoaded(Event):
    request_id: int
    status: str = ""
    toggled: bool = False
    error: GatewayError | None = None


@dataclass(frozen=True)
class ConnectFinished(Event):
    request_id: int
    ssid: str
    error: GatewayError | None = None


@dataclass(frozen=True)
class ConnectTimedOut(Event):
    request_id: int
    ssid: str


@dataclass(frozen=True)
class DisconnectFinished(Event):
    request_id: int
    identifier: str
    error: GatewayError | None = None


@dataclass(frozen=True)
class ForgetFinished(Event):
    request_id: int
    identifier: str
    error: GatewayError | None = None


@dataclass(frozen=True)
class DeviceDetailLoaded(Event):
    request_id: int
    device: str
    detail: DeviceDetail | None = None
    error: GatewayError | None = None


@dataclass(frozen=True)
class StatusExpired(Event):
    seq: int
    state: str


# ═══════════════════════════════════════════════════════════════
# Effects
# ═══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class ScanNetworks(Effect):
    request_id: int
    rescan: bool = True


@dataclass(frozen=True)
class LoadProfiles(Effect):
    request_id: int


@dataclass(frozen=True)
class LoadRadioStatus(Effect):
    request_id: int


@dataclass(frozen=True)
class SetRadio(Effect):
    request_id: int
    enabled: bool


@dataclass(frozen=True)
class Connect(Effect):
    request_id: int
    ssid: str
    password: str = field(default="", repr=False)
    hidden: bool = False
    known_no_psk: bool = False
    recreate_profile: bool = False


@dataclass(frozen=True)
class Disconnect(Effect):
    request_id: int
    identifier: str


@dataclass(frozen=True)
class Forget(Effect):
    request_id: int
    identifier: str


@dataclass(frozen=True)
class LoadDeviceDetail(Effect):
    request_id: int
    device: str


@dataclass(frozen=True)
class ClearStatusLater(Effect):
    seq: int
    state: str


@dataclass(frozen=True)
class SaveCache(Effect):
    access_points: tuple[AccessPoint, ...] = ()


@dataclass(frozen=True)
class SaveSetting(Effect):
    key: str
    value: object = None
