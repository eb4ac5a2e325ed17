"""Access point merge engine — dedupe, reconcile with profiles, sort, filter."""

import logging
from dataclasses import dataclass, field

from nmwifi.core.models import AccessPoint, ActiveConnection, ConnectionProfile

logger = logging.getLogger("nmwifi.merge")


@dataclass(frozen=True)
class ProfileIndex:
    """Known wifi profiles keyed by SSID plus the active connection, if any."""
    known: dict[str, ConnectionProfile] = field(default_factory=dict)
    profiles: tuple[ConnectionProfile, ...] = ()
    active: ActiveConnection | None = None


def index_profiles(profiles: list[ConnectionProfile],
                   active_profiles: list[ConnectionProfile] | None = None) -> ProfileIndex:
    """Build a ProfileIndex from `connection show` and `connection show --active`."""
    wifi = [p for p in profiles if p.is_wifi]
    known: dict[str, ConnectionProfile] = {}
    for profile in wifi:
        if profile.key and profile.key not in known:
            known[profile.key] = profile

    active = None
    for record in active_profiles or []:
        if not record.is_wifi:
            continue
        match = next((p for p in wifi if record.uuid and p.uuid == record.uuid), None)
        if match is None:
            # The full listing may lag behind the active one
            match = record
        active = ActiveConnection(profile=match, device=record.device or match.device)
        if match.key:
            # Several profiles may share an SSID; the active one represents it
            known[match.key] = match
        break

    return ProfileIndex(known=known, profiles=tuple(wifi), active=active)


def sort_key(ap: AccessPoint) -> tuple:
    """Total display order: active, known, in range, signal, named, SSID."""
    return (
        not ap.is_active,
        not ap.is_known,
        ap.is_known and not ap.in_range,
        -ap.signal,
        ap.is_hidden,
        ap.ssid.casefold(),
        ap.ssid,
        ap.bssid,
    )


def apply_filter(aps: list[AccessPoint], query: str | None) -> list[AccessPoint]:
    if not query:
        return list(aps)
    needle = query.casefold()
    return [ap for ap in aps if needle in ap.display_ssid.casefold()]


def _dedupe(scanned: list[AccessPoint]) -> dict[str, AccessPoint]:
    best: dict[str, AccessPoint] = {}
    hidden_ordinal = 0
    for ap in scanned:
        ap = ap.as_scanned()
        if ap.is_hidden:
            if ap.bssid:
                key = f"\0bssid:{ap.bssid}"
            else:
                key = f"\0hidden:{hidden_ordinal}"
                hidden_ordinal += 1
        else:
            key = ap.ssid
        current = best.get(key)
        if current is None or ap.signal > current.signal:
            best[key] = ap
    return best


def _profile_matches(profile: ConnectionProfile, active: ActiveConnection) -> bool:
    if profile.uuid and active.profile.uuid:
        return profile.uuid == active.profile.uuid
    return profile.identifier == active.profile.identifier


def merge(scanned: list[AccessPoint],
          known: dict[str, ConnectionProfile],
          active: ActiveConnection | None = None,
          show_hidden: bool = False,
          filter_query: str | None = None) -> list[AccessPoint]:
    """Merge a scan with known profiles into the ordered list shown to the user."""
    by_key = _dedupe(scanned)

    # Known profiles out of radio range
    for key in sorted(known):
        if key in by_key:
            continue
        synthetic = AccessPoint.known_only(known[key])
        if synthetic.is_hidden and not show_hidden:
            continue
        by_key[key] = synthetic

    if active is not None and active.ssid not in by_key:
        logger.warning(
            f"Active connection '{active.profile.identifier}' not in scan or profiles; ignoring"
        )
        active = None

    result = []
    for ap in by_key.values():
        if ap.is_hidden and not show_hidden:
            continue
        profile = known.get(ap.ssid) if not ap.is_hidden else None
        if profile is not None:
            device = None
            if active is not None and _profile_matches(profile, active):
                device = active.device
            ap = ap.with_profile(device)
        result.append(ap)

    result.sort(key=sort_key)
    return apply_filter(result, filter_query)
