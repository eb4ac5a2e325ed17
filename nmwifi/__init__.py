"""nmwifi — terminal Wi-Fi manager for NetworkManager."""

__version__ = "1.0.0"
