"""nmcli gateway — the only place that talks to NetworkManager."""

import asyncio
import logging
import re
import shutil

from nmwifi.core.errors import ErrorKind, GatewayError
from nmwifi.core.models import AccessPoint, ConnectionProfile, DeviceDetail

logger = logging.getLogger("nmwifi.nmcli")

NMCLI = "nmcli"

# ─── nmcli field names ───
FIELD_SSID = "SSID"
FIELD_BSSID = "BSSID"
FIELD_SIGNAL = "SIGNAL"
FIELD_SECURITY = "SECURITY"
FIELD_CHAN = "CHAN"
FIELD_NAME = "NAME"
FIELD_UUID = "UUID"
FIELD_TYPE = "TYPE"
FIELD_DEVICE = "DEVICE"
FIELD_GENERAL_DEVICE = "GENERAL.DEVICE"
FIELD_GENERAL_TYPE = "GENERAL.TYPE"
FIELD_GENERAL_STATE = "GENERAL.STATE"
FIELD_GENERAL_CONNECTION = "GENERAL.CONNECTION"
FIELD_GENERAL_HWADDR = "GENERAL.HWADDR"
FIELD_IP4_ADDRESS = "IP4.ADDRESS[1]"
FIELD_IP4_GATEWAY = "IP4.GATEWAY"
FIELD_DNS1 = "IP4.DNS[1]"
FIELD_DNS2 = "IP4.DNS[2]"
FIELD_IP6_ADDRESS = "IP6.ADDRESS[1]"
FIELD_IP6_GATEWAY = "IP6.GATEWAY"
SETTING_SSID = "802-11-wireless.ssid"

KEY_MGMT_WPA_PSK = "wpa-psk"

# Arguments that follow these words are secrets and never logged.
_SECRET_ARGS = ("password", "wifi-sec.psk")


# ═══════════════════════════════════════════════════════════════
# Helpers
# ═══════════════════════════════════════════════════════════════

_ANSI_RE = re.compile(
    r"\x1b"
    r"(?:"
    r"\[[0-9;?<>=]*[A-Za-z~]"            # CSI
    r"|\][^\x07\x1b]*(?:\x07|\x1b\\)"    # OSC
    r"|\([A-Za-z]"                       # character set
    r"|[=>NOM78DHE]"                     # single-char sequences
    r")"
)


def _strip_ansi(text: str) -> str:
    return _ANSI_RE.sub("", text)


def _masked(args: list[str]) -> str:
    shown = []
    hide_next = False
    for arg in args:
        shown.append("****" if hide_next else arg)
        hide_next = arg in _SECRET_ARGS
    return " ".join(shown)


def parse_multiline(output: str) -> list[dict[str, str]]:
    """Parse `nmcli -m multiline` output into a list of records.

    A new record starts when the first key of the current record repeats.
    Values only lose leading whitespace, so SSIDs with trailing spaces survive.
    """
    records: list[dict[str, str]] = []
    current: dict[str, str] | None = None
    first_key = ""

    lines = [line for line in output.splitlines() if line.strip()]
    for index, line in enumerate(lines):
        if ":" not in line:
            if index == 0:
                continue
            raise GatewayError(f"Malformed line in nmcli output: {line.strip()!r}")
        key, value = line.split(":", 1)
        key = key.strip()
        value = value.lstrip(" \t")
        if not key:
            raise GatewayError(f"Empty key for value {value!r} in nmcli output")
        if current is None:
            current = {}
            first_key = key
        elif key == first_key and current:
            records.append(current)
            current = {}
        current[key] = value

    if current:
        records.append(current)
    return records


def parse_device_state(raw: str) -> str:
    """'100 (connected)' -> 'connected'."""
    m = re.search(r"\(([^)]*)\)", raw or "")
    if m:
        return m.group(1).strip()
    return (raw or "").strip()


def _to_int(value: str | None) -> int:
    try:
        return int((value or "").strip())
    except ValueError:
        return 0


def is_available(binary: str = NMCLI) -> bool:
    """True if the nmcli executable is on PATH."""
    return shutil.which(binary) is not None


# ═══════════════════════════════════════════════════════════════
# Gateway
# ═══════════════════════════════════════════════════════════════

class NmcliGateway:
    """Async wrapper around the nmcli command-line tool."""

    def __init__(self, binary: str = NMCLI, timeout: int = 45, scan_timeout: int = 60):
        self._binary = binary
        self._timeout = timeout
        self._scan_timeout = scan_timeout

    async def _run(self, cmd: list[str], timeout: int = 30) -> tuple[str, str, int]:
        """Run command and return (stdout, stderr, returncode).

        stdin is /dev/null so nmcli never prompts inside the TUI.
        """
        try:
            proc = await asyncio.create_subprocess_exec(
                *cmd,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except FileNotFoundError:
            raise GatewayError(f"Command not found: {cmd[0]}", ErrorKind.UNAVAILABLE)
        except PermissionError as e:
            raise GatewayError(f"Cannot execute {cmd[0]}: {e}", ErrorKind.UNAVAILABLE)

        try:
            stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=timeout)
        except asyncio.TimeoutError:
            try:
                proc.kill()
            except ProcessLookupError:
                pass
            raise GatewayError(
                f"{cmd[0]} did not finish within {timeout}s", ErrorKind.TIMEOUT
            )
        return (
            _strip_ansi(stdout.decode("utf-8", errors="replace")),
            _strip_ansi(stderr.decode("utf-8", errors="replace")),
            proc.returncode or 0,
        )

    async def _nmcli(self, *args: str, timeout: int | None = None) -> str:
        """Run nmcli with args, raise GatewayError on failure, return stdout."""
        cmd = [self._binary, *args]
        logger.debug(f"Executing: {_masked(cmd)}")
        stdout, stderr, rc = await self._run(cmd, timeout=timeout or self._timeout)
        stdout, stderr = stdout.strip(), stderr.strip()
        command = _masked(list(args))
        if rc != 0:
            detail = stderr or stdout or f"exit status {rc}"
            logger.info(f"nmcli '{command}' failed: {detail}")
            raise GatewayError(f"nmcli '{command}' failed: {detail}")
        if stderr:
            logger.warning(f"nmcli '{command}' succeeded with stderr: {stderr}")
        return stdout

    async def _nmcli_records(self, *args: str, timeout: int | None = None) -> list[dict[str, str]]:
        return parse_multiline(await self._nmcli(*args, timeout=timeout))

    # ─── Wi-Fi scan ───

    async def list_access_points(self, rescan: bool = False) -> list[AccessPoint]:
        records = await self._nmcli_records(
            "-m", "multiline", "device", "wifi", "list",
            "--rescan", "yes" if rescan else "no",
            timeout=self._scan_timeout,
        )
        aps = []
        for record in records:
            aps.append(AccessPoint.scanned(
                ssid=record.get(FIELD_SSID, ""),
                bssid=record.get(FIELD_BSSID, ""),
                signal=_to_int(record.get(FIELD_SIGNAL)),
                security=record.get(FIELD_SECURITY, ""),
                channel=_to_int(record.get(FIELD_CHAN)),
            ))
        logger.debug(f"Scan returned {len(aps)} access points (rescan={rescan})")
        return aps

    # ─── Connection profiles ───

    async def list_connection_profiles(self, active_only: bool = False) -> list[ConnectionProfile]:
        args = ["-m", "multiline", "connection", "show", "--order", "name"]
        if active_only:
            args.append("--active")
        records = await self._nmcli_records(*args)

        profiles = []
        for record in records:
            device = record.get(FIELD_DEVICE, "")
            profiles.append(ConnectionProfile(
                name=record.get(FIELD_NAME, ""),
                uuid=record.get(FIELD_UUID, ""),
                type=record.get(FIELD_TYPE, ""),
                device="" if device == "--" else device,
                ssid=record.get(FIELD_SSID) or record.get(SETTING_SSID, ""),
            ))

        # The list view has no SSID column; read it per wifi profile.
        missing = [p for p in profiles if p.is_wifi and not p.ssid and p.uuid]
        if missing:
            ssids = await asyncio.gather(
                *(self._profile_ssid(p.uuid) for p in missing)
            )
            found = {p.uuid: ssid for p, ssid in zip(missing, ssids) if ssid}
            profiles = [
                ConnectionProfile(p.name, p.uuid, p.type, p.device, found[p.uuid])
                if p.uuid in found else p
                for p in profiles
            ]
        return profiles

    async def _profile_ssid(self, uuid: str) -> str:
        try:
            return await self._nmcli("-g", SETTING_SSID, "connection", "show", "uuid", uuid)
        except GatewayError as e:
            logger.warning(f"Could not read SSID of profile {uuid}: {e.message}")
            return ""

    async def connect(self, ssid: str, password: str = "", hidden: bool = False) -> str:
        if not ssid.strip():
            raise GatewayError("SSID empty for Wi-Fi connect")
        args = ["device", "wifi", "connect", ssid]
        if password:
            args += ["password", password]
        if hidden:
            args += ["hidden", "yes"]
        return await self._nmcli(*args)

    async def add_psk_profile(self, name: str, interface: str, ssid: str, password: str) -> str:
        """Add a WPA-PSK profile, deleting any profile with the same name or SSID first."""
        if not name.strip():
            raise GatewayError("Profile name empty")
        if not ssid.strip():
            raise GatewayError("SSID empty")
        if not password.strip():
            raise GatewayError("Password empty for WPA-PSK profile")

        for profile in await self.list_connection_profiles():
            if profile.name == name or (profile.is_wifi and profile.ssid == ssid):
                identifier = profile.name or profile.uuid
                logger.info(f"Replacing existing profile '{identifier}' for SSID '{ssid}'")
                try:
                    await self.connection_delete(identifier)
                except GatewayError as e:
                    logger.warning(f"Could not delete profile '{identifier}': {e.message}")
                break

        return await self._nmcli(
            "connection", "add", "type", "wifi",
            "con-name", name,
            "ifname", interface,
            "ssid", ssid,
            "wifi-sec.key-mgmt", KEY_MGMT_WPA_PSK,
            "wifi-sec.psk", password,
        )

    async def connection_up(self, identifier: str) -> str:
        _require_identifier(identifier)
        return await self._nmcli("connection", "up", identifier)

    async def connection_down(self, identifier: str) -> str:
        _require_identifier(identifier)
        return await self._nmcli("connection", "down", identifier)

    async def connection_delete(self, identifier: str) -> str:
        _require_identifier(identifier)
        return await self._nmcli("connection", "delete", identifier)

    async def connect_robustly(self, ssid: str, password: str = "", hidden: bool = False,
                               recreate_profile: bool = False) -> str:
        """Connect to ssid, falling back to an explicit PSK profile.

        With recreate_profile the plain connect is skipped and the stored
        profile is replaced with one built from the given password.
        """
        if recreate_profile and password:
            logger.info(f"Recreating profile for '{ssid}' with new credentials")
            await self.add_psk_profile(ssid, "*", ssid, password)
            return await self.connection_up(ssid)

        try:
            return await self.connect(ssid, password, hidden)
        except GatewayError as e:
            if not (password and e.secrets_required):
                raise
            logger.info(f"Plain connect to '{ssid}' needs secrets; adding explicit profile")
            first_error = e

        try:
            await self.add_psk_profile(ssid, "*", ssid, password)
        except GatewayError as e:
            raise GatewayError(
                f"{first_error.message}; creating profile also failed: {e.message}",
                first_error.kind,
            )
        return await self.connection_up(ssid)

    # ─── Radio ───

    async def radio_on(self) -> str:
        await self._nmcli("radio", "wifi", "on")
        return "enabled"

    async def radio_off(self) -> str:
        await self._nmcli("radio", "wifi", "off")
        return "disabled"

    async def radio_status(self) -> str:
        status = (await self._nmcli("radio", "wifi")).strip().lower()
        return "enabled" if status == "enabled" else "disabled"

    # ─── Device detail ───

    async def device_ip_detail(self, device: str) -> DeviceDetail | None:
        if not device.strip():
            raise GatewayError("Device name cannot be empty", ErrorKind.UNRESOLVED_IDENTIFIER)
        records = await self._nmcli_records("-m", "multiline", "device", "show", device)
        if not records:
            return None
        item = records[0]

        dns = []
        for field_name in (FIELD_DNS1, FIELD_DNS2):
            value = item.get(field_name, "").strip()
            if value:
                dns.append(value.split()[0])

        connection = item.get(FIELD_GENERAL_CONNECTION, "")
        net_v4 = item.get(FIELD_IP4_ADDRESS, "")
        net_v6 = item.get(FIELD_IP6_ADDRESS, "")
        return DeviceDetail(
            device=item.get(FIELD_GENERAL_DEVICE, ""),
            type=item.get(FIELD_GENERAL_TYPE, ""),
            state=parse_device_state(item.get(FIELD_GENERAL_STATE, "")),
            connection="" if connection == "--" else connection,
            mac=item.get(FIELD_GENERAL_HWADDR, ""),
            ipv4=net_v4.split("/", 1)[0] if net_v4 else "",
            net_v4=net_v4,
            gateway_v4=item.get(FIELD_IP4_GATEWAY, ""),
            dns=tuple(dns),
            ipv6=net_v6.split("/", 1)[0] if net_v6 else "",
            net_v6=net_v6,
            gateway_v6=item.get(FIELD_IP6_GATEWAY, ""),
        )


def _require_identifier(identifier: str) -> None:
    if not (identifier or "").strip():
        raise GatewayError(
            "Profile identifier cannot be empty", ErrorKind.UNRESOLVED_IDENTIFIER
        )
