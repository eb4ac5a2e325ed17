"""Error taxonomy for gateway and session failures."""

from enum import Enum


class ErrorKind(str, Enum):
    UNAVAILABLE = "unavailable"              # nmcli missing / not executable
    COMMAND_FAILED = "command_failed"
    SECRETS_REQUIRED = "secrets_required"
    TIMEOUT = "timeout"
    UNRESOLVED_IDENTIFIER = "unresolved_identifier"


# nmcli reports missing credentials with these (English-only) messages.
_SECRETS_SIGNATURES = (
    "secrets were required",
    "802-11-wireless-security.key-mgmt: property is missing",
)


def classify_error(message: str) -> ErrorKind:
    """Best-effort classification of an nmcli error message."""
    lowered = (message or "").lower()
    for signature in _SECRETS_SIGNATURES:
        if signature in lowered:
            return ErrorKind.SECRETS_REQUIRED
    return ErrorKind.COMMAND_FAILED


class GatewayError(Exception):
    """A network-manager call failed. Always recoverable at the UI level."""

    def __init__(self, message: str, kind: ErrorKind | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.kind = kind if kind is not None else classify_error(message)

    @property
    def secrets_required(self) -> bool:
        return self.kind == ErrorKind.SECRETS_REQUIRED


class UnresolvedIdentifier(Exception):
    """A confirm action could not determine which profile to act on."""
