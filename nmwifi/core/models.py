"""Domain model — access points, connection profiles, active connection."""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any

HIDDEN_PLACEHOLDERS = ("", "--")
HIDDEN_LABEL = "<Hidden Network>"

WIFI_TYPES = ("wifi", "802-11-wireless")


def is_placeholder_ssid(ssid: str | None) -> bool:
    return ssid is None or ssid.strip() in HIDDEN_PLACEHOLDERS


class Security(str, Enum):
    OPEN = "open"
    WEP = "wep"
    WPA_PSK = "wpa-psk"
    SAE = "sae"              # WPA3 personal
    ENTERPRISE = "802.1x"
    SECURED = "secured"      # secured, scheme not reported

    @classmethod
    def from_nmcli(cls, raw: str | None) -> "Security":
        """Map the nmcli SECURITY column (e.g. "WPA1 WPA2", "--") to a Security."""
        text = (raw or "").strip().upper()
        if text in ("", "--", "NONE", "OPEN"):
            return cls.OPEN
        if "802.1X" in text:
            return cls.ENTERPRISE
        if "WPA3" in text or "SAE" in text:
            return cls.SAE
        if "WPA" in text:
            return cls.WPA_PSK
        if "WEP" in text:
            return cls.WEP
        return cls.SECURED


class Origin(str, Enum):
    """Which data source an AccessPoint was built from."""
    SCANNED = "scanned"
    KNOWN = "known"
    SCANNED_AND_KNOWN = "scanned+known"


@dataclass(frozen=True)
class ConnectionProfile:
    name: str = ""
    uuid: str = ""
    type: str = ""
    device: str = ""
    ssid: str = ""

    @property
    def is_wifi(self) -> bool:
        return self.type in WIFI_TYPES

    @property
    def key(self) -> str:
        """Index key: SSID, or the profile name when the SSID is unknown."""
        return self.ssid or self.name

    @property
    def identifier(self) -> str:
        """Identifier passed to nmcli: name, then UUID, then SSID."""
        return self.name or self.uuid or self.ssid


@dataclass(frozen=True)
class ActiveConnection:
    profile: ConnectionProfile
    device: str = ""

    @property
    def ssid(self) -> str:
        return self.profile.key


@dataclass(frozen=True)
class AccessPoint:
    ssid: str = ""
    bssid: str = ""
    signal: int = 0
    security: Security = Security.OPEN
    origin: Origin = Origin.SCANNED
    is_active: bool = False
    interface: str = ""
    channel: int = 0
    raw_security: str = ""

    # ─── Variant constructors ───

    @classmethod
    def scanned(cls, ssid: str, bssid: str = "", signal: int = 0,
                security: str = "", channel: int = 0) -> "AccessPoint":
        ssid = "" if is_placeholder_ssid(ssid) else ssid
        return cls(
            ssid=ssid,
            bssid=bssid.strip().upper(),
            signal=max(0, min(100, signal)),
            security=Security.from_nmcli(security),
            origin=Origin.SCANNED,
            channel=channel,
            raw_security=security or "",
        )

    @classmethod
    def known_only(cls, profile: ConnectionProfile) -> "AccessPoint":
        """Remembered network that the current scan did not report."""
        return cls(
            ssid=profile.key,
            signal=0,
            security=Security.SECURED,
            origin=Origin.KNOWN,
        )

    def with_profile(self, active_device: str | None = None) -> "AccessPoint":
        """Mark a scanned AP as matching a known profile (optionally active)."""
        origin = Origin.KNOWN if self.origin == Origin.KNOWN else Origin.SCANNED_AND_KNOWN
        return replace(
            self,
            origin=origin,
            is_active=active_device is not None,
            interface=active_device or "",
        )

    def as_scanned(self) -> "AccessPoint":
        """Strip enrichment so the AP can be re-merged from scratch."""
        if self.origin == Origin.KNOWN:
            return self
        return replace(self, origin=Origin.SCANNED, is_active=False, interface="")

    # ─── Derived properties ───

    @property
    def is_hidden(self) -> bool:
        return is_placeholder_ssid(self.ssid)

    @property
    def is_known(self) -> bool:
        return self.origin in (Origin.KNOWN, Origin.SCANNED_AND_KNOWN)

    @property
    def is_open(self) -> bool:
        return self.security == Security.OPEN

    @property
    def in_range(self) -> bool:
        return self.signal > 0

    @property
    def display_ssid(self) -> str:
        return HIDDEN_LABEL if self.is_hidden else self.ssid

    def to_dict(self) -> dict[str, Any]:
        return {
            "ssid": self.ssid,
            "bssid": self.bssid,
            "signal": self.signal,
            "security": self.security.value,
            "channel": self.channel,
            "raw_security": self.raw_security,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AccessPoint":
        return cls(
            ssid=str(data.get("ssid", "")),
            bssid=str(data.get("bssid", "")),
            signal=int(data.get("signal", 0)),
            security=Security(data.get("security", Security.OPEN.value)),
            channel=int(data.get("channel", 0)),
            raw_security=str(data.get("raw_security", "")),
        )


@dataclass(frozen=True)
class DeviceDetail:
    device: str = ""
    type: str = ""
    state: str = ""
    connection: str = ""
    mac: str = ""
    ipv4: str = ""
    net_v4: str = ""
    gateway_v4: str = ""
    dns: tuple[str, ...] = field(default_factory=tuple)
    ipv6: str = ""
    net_v6: str = ""
    gateway_v6: str = ""
