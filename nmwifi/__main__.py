"""
nmwifi — Wi-Fi manager for the terminal
=======================================
Browse, connect to and forget Wi-Fi networks through NetworkManager (nmcli).

Usage:
    nmwifi                      Launch TUI
    nmwifi --check-deps         Check dependencies
    nmwifi --lang ru            Set language (en/ru)
    nmwifi --version            Show version

Set NMWIFI_DEBUG=1 to write a debug log to ./nmwifi-debug.log.
"""

import argparse
import logging
import os
import sys

from nmwifi import __version__

DEBUG_ENV = "NMWIFI_DEBUG"
DEBUG_LOG = "nmwifi-debug.log"
LOG_FORMAT = "%(asctime)s [%(name)s] %(levelname)s: %(message)s"


def setup_logging():
    """Configure logging. Nothing may be written to the terminal the TUI owns."""
    if os.environ.get(DEBUG_ENV):
        handler = logging.FileHandler(DEBUG_LOG, encoding="utf-8")
        level = logging.DEBUG
    else:
        from textual.logging import TextualHandler
        handler = TextualHandler()
        level = logging.INFO
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt="%H:%M:%S",
        handlers=[handler],
        force=True,
    )


def cmd_check_deps() -> int:
    """Check and display dependency status."""
    from nmwifi.core.dep_manager import print_status
    return 0 if print_status() else 1


def cmd_launch_tui() -> int:
    """Launch the TUI application."""
    from rich.console import Console

    from nmwifi.core.config import load_settings
    from nmwifi.core.i18n import t
    from nmwifi.core.nmcli import NmcliGateway, is_available

    if not is_available():
        Console(stderr=True).print(f"[red][!] {t('nmcli_missing')}[/]")
        logging.getLogger("nmwifi").error("nmcli not found on PATH")
        return 1

    from nmwifi.ui.app import WifiApp

    app = WifiApp(NmcliGateway(), settings=load_settings())
    app.run()
    return app.return_code or 0


def main():
    parser = argparse.ArgumentParser(
        prog="nmwifi",
        description="nmwifi — Wi-Fi manager for the terminal (nmcli front-end)",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  nmwifi                  Launch TUI interface
  nmwifi --check-deps     Check installed tools
  nmwifi --lang ru        Set language to Russian
  NMWIFI_DEBUG=1 nmwifi   Write a debug log to ./nmwifi-debug.log
        """,
    )
    parser.add_argument("--check-deps", action="store_true",
                        help="Check and display dependency status")
    parser.add_argument("--lang", metavar="LANG", choices=["en", "ru"],
                        help="Set interface language (en/ru)")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    args = parser.parse_args()
    setup_logging()

    from nmwifi.core.i18n import load_language, set_lang
    load_language()
    if args.lang:
        set_lang(args.lang)

    if args.check_deps:
        sys.exit(cmd_check_deps())
    sys.exit(cmd_launch_tui())


if __name__ == "__main__":
    main()
